"""
计数一致性检查测试
"""

from ..services.consistency_service import ConsistencyService
from ..services.engagement_service import EngagementService


def test_healthy_store_has_no_issues(test_db, sample_meal):
    EngagementService(test_db).like_meal(sample_meal["id"], "a@hostel.test")
    
    report = ConsistencyService(test_db).check_counters()
    
    assert report["summary"]["status"] == "healthy"
    assert report["statistics"]["likes"] == 1


def test_repair_restores_counters(test_db, sample_meal):
    EngagementService(test_db).like_meal(sample_meal["id"], "a@hostel.test")
    test_db.connection.execute("UPDATE meals SET likes = 10, reviews_count = 4 WHERE id = ?", [sample_meal["id"]])
    service = ConsistencyService(test_db)
    
    report = service.check_counters()
    assert report["summary"]["total_issues"] == 2
    assert {issue["type"] for issue in report["issues"]} == {"likes_mismatch", "reviews_count_mismatch"}
    
    result = service.repair_counters("admin@hostel.test")
    
    assert result == {"repaired": 1, "meal_ids": [sample_meal["id"]]}
    row = test_db.fetch_one("SELECT likes, reviews_count FROM meals WHERE id = ?", [sample_meal["id"]])
    assert (row["likes"], row["reviews_count"]) == (1, 0)
    assert service.check_counters()["summary"]["status"] == "healthy"
