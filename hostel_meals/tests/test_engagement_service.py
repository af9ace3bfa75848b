"""
互动服务测试
点赞去重、计数与记录一致以及评价的增删
"""

import pytest

from ..core.exceptions import MealNotFoundError, ReviewNotFoundError, UpcomingMealNotFoundError, ValidationError
from ..services.base import parse_id
from ..services.engagement_service import EngagementService


def meal_counters(db, meal_id):
    row = db.fetch_one("SELECT likes, reviews_count FROM meals WHERE id = ?", [meal_id])
    return row["likes"], row["reviews_count"]


class TestLikes:
    """点赞测试"""
    
    def test_first_like_increments_counter(self, test_db, sample_meal):
        service = EngagementService(test_db)
        
        result = service.like_meal(sample_meal["id"], "a@hostel.test")
        
        assert result.liked is True
        assert result.modified == 1
        assert meal_counters(test_db, sample_meal["id"])[0] == 1
        assert service.check_liked(sample_meal["id"], "a@hostel.test") is True
    
    def test_repeated_like_is_idempotent(self, test_db, sample_meal):
        service = EngagementService(test_db)
        
        service.like_meal(sample_meal["id"], "a@hostel.test")
        second = service.like_meal(sample_meal["id"], "a@hostel.test")
        
        assert second.modified == 0
        assert meal_counters(test_db, sample_meal["id"])[0] == 1
        assert test_db.fetch_value("SELECT COUNT(*) FROM likes WHERE meal_id = ?", [sample_meal["id"]]) == 1
    
    def test_likes_counter_matches_distinct_likers(self, test_db, sample_meal):
        service = EngagementService(test_db)
        
        for email in ["a@hostel.test", "b@hostel.test", "a@hostel.test", "c@hostel.test", "b@hostel.test"]:
            service.like_meal(sample_meal["id"], email)
        
        assert meal_counters(test_db, sample_meal["id"])[0] == 3
    
    def test_like_requires_email(self, test_db, sample_meal):
        service = EngagementService(test_db)
        
        with pytest.raises(ValidationError) as exc_info:
            service.like_meal(sample_meal["id"], None)
        assert exc_info.value.message == "User email is required in body"
        assert meal_counters(test_db, sample_meal["id"])[0] == 0
    
    def test_like_missing_meal(self, test_db):
        with pytest.raises(MealNotFoundError):
            EngagementService(test_db).like_meal(999, "a@hostel.test")
    
    def test_like_malformed_id(self, test_db):
        with pytest.raises(ValidationError):
            EngagementService(test_db).like_meal("not-an-id", "a@hostel.test")
    
    def test_check_liked_without_email(self, test_db, sample_meal):
        assert EngagementService(test_db).check_liked(sample_meal["id"], None) is False
    
    def test_like_writes_audit_log(self, test_db, sample_meal):
        EngagementService(test_db).like_meal(sample_meal["id"], "a@hostel.test")
        
        row = test_db.fetch_one("SELECT user_email, action FROM logs WHERE action = 'like_meal'")
        assert row["user_email"] == "a@hostel.test"


class TestUpcomingLikes:
    
    def test_like_upcoming_meal_deduplicates(self, test_db, upcoming_meal):
        service = EngagementService(test_db)
        
        assert service.like_upcoming_meal(upcoming_meal["id"], "a@hostel.test").modified == 1
        assert service.like_upcoming_meal(upcoming_meal["id"], "a@hostel.test").modified == 0
        
        likes = test_db.fetch_value("SELECT likes FROM upcoming_meals WHERE id = ?", [upcoming_meal["id"]])
        assert likes == 1
    
    def test_like_missing_upcoming_meal(self, test_db):
        with pytest.raises(UpcomingMealNotFoundError):
            EngagementService(test_db).like_upcoming_meal(42, "a@hostel.test")


class TestReviews:
    """评价测试"""
    
    def test_add_review_increments_counter(self, test_db, sample_meal):
        service = EngagementService(test_db)
        
        review = service.add_review(sample_meal["id"], "a@hostel.test", "Tasty", user_name="A", rating=4)
        
        assert review.id is not None
        assert review.meal_id == sample_meal["id"]
        assert review.review == "Tasty"
        assert meal_counters(test_db, sample_meal["id"])[1] == 1
    
    def test_reviews_are_not_deduplicated(self, test_db, sample_meal):
        service = EngagementService(test_db)
        
        service.add_review(sample_meal["id"], "a@hostel.test", "First")
        service.add_review(sample_meal["id"], "a@hostel.test", "Second")
        
        assert meal_counters(test_db, sample_meal["id"])[1] == 2
        reviews = service.list_reviews_for_meal(sample_meal["id"])
        assert [r.review for r in reviews] == ["Second", "First"]
    
    def test_add_review_missing_meal(self, test_db):
        with pytest.raises(MealNotFoundError):
            EngagementService(test_db).add_review(404, "a@hostel.test", "Ghost")
        assert test_db.fetch_value("SELECT COUNT(*) FROM reviews") == 0
    
    def test_remove_review_decrements_counter(self, test_db, sample_meal):
        service = EngagementService(test_db)
        review = service.add_review(sample_meal["id"], "a@hostel.test", "Tasty")
        
        result = service.remove_review(review.id)
        
        assert result == {"deletedCount": 1}
        assert meal_counters(test_db, sample_meal["id"])[1] == 0
    
    def test_remove_missing_review(self, test_db):
        with pytest.raises(ReviewNotFoundError):
            EngagementService(test_db).remove_review(77)
    
    def test_edit_review(self, test_db, sample_meal):
        service = EngagementService(test_db)
        review = service.add_review(sample_meal["id"], "a@hostel.test", "Tasty")
        
        assert service.edit_review(review.id, "Very tasty") == {"modifiedCount": 1}
        assert service.list_reviews_by_author("a@hostel.test")[0].review == "Very tasty"
        assert meal_counters(test_db, sample_meal["id"])[1] == 1


@pytest.mark.parametrize("bad_id", ["²", "１２", "1.5", "", None, True])
def test_parse_id_rejects_non_ascii_digits(bad_id):
    with pytest.raises(ValidationError):
        parse_id(bad_id, "meal id")


class TestUniqueIndexFallback:
    """预检查漏掉重复点赞时，由唯一索引拦截且计数不变"""
    
    def test_duplicate_like_rejected_by_index(self, test_db, sample_meal, monkeypatch):
        service = EngagementService(test_db)
        service.like_meal(sample_meal["id"], "a@hostel.test")
        monkeypatch.setattr(service, "_has_liked", lambda conn, meal_id, email: False)
        
        result = service.like_meal(sample_meal["id"], "a@hostel.test")
        
        assert result.modified == 0
        assert meal_counters(test_db, sample_meal["id"])[0] == 1
        assert test_db.fetch_value("SELECT COUNT(*) FROM logs WHERE action = 'like_meal'") == 1
    
    def test_duplicate_upcoming_like_rejected_by_index(self, test_db, upcoming_meal, monkeypatch):
        service = EngagementService(test_db)
        service.like_upcoming_meal(upcoming_meal["id"], "a@hostel.test")
        monkeypatch.setattr(service, "_has_liked_upcoming", lambda conn, meal_id, email: False)
        
        result = service.like_upcoming_meal(upcoming_meal["id"], "a@hostel.test")
        
        assert result.modified == 0
        likes = test_db.fetch_value("SELECT likes FROM upcoming_meals WHERE id = ?", [upcoming_meal["id"]])
        assert likes == 1
