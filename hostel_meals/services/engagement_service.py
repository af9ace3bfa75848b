"""
互动服务（点赞和评价）
点赞和评价记录是权威数据，meals 上的 likes / reviews_count 是随记录同事务维护的冗余计数

业务规则：
- 同一用户对同一餐品只能点赞一次，重复点赞不报错、不改计数
- 评价不去重，每条评价使评价数+1，删除评价使评价数-1
- 待上架餐品的点赞用户集合随餐品保存
"""

import logging
from typing import Any, Dict, List, Optional

from ..core.database import fetch_dicts, utcnow
from ..core.exceptions import (
    DuplicateRecordError,
    MealNotFoundError,
    ReviewNotFoundError,
    UpcomingMealNotFoundError,
    ValidationError,
)
from ..models.engagement import LikeResult, Review
from .base import BaseService, parse_id

logger = logging.getLogger(__name__)

REVIEW_COLUMNS = "id, meal_id, email, user_name, review, rating, time"


class EngagementService(BaseService):
    """互动服务类"""

    def like_meal(self, meal_id: Any, user_email: Optional[str]) -> LikeResult:
        """
        点赞餐品（幂等）

        Args:
            meal_id: 餐品ID
            user_email: 点赞用户邮箱

        Returns:
            LikeResult: 首次点赞 modified=1，重复点赞 modified=0

        Raises:
            ValidationError: 邮箱缺失或ID格式错误
            MealNotFoundError: 餐品不存在
        """
        if not user_email:
            raise ValidationError("User email is required in body")
        meal_id = parse_id(meal_id, "meal id")

        try:
            with self.db.transaction() as conn:
                if not conn.execute("SELECT 1 FROM meals WHERE id = ?", [meal_id]).fetchone():
                    raise MealNotFoundError()

                if self._has_liked(conn, meal_id, user_email):
                    return LikeResult(liked=True, modified=0)

                conn.execute(
                    "INSERT INTO likes(meal_id, user_email, time) VALUES (?,?,?)",
                    [meal_id, user_email, utcnow()]
                )
                conn.execute("UPDATE meals SET likes = likes + 1 WHERE id = ?", [meal_id])
                self.db.write_log(conn, "like_meal", user_email, user_email, {"meal_id": meal_id})
        except DuplicateRecordError:
            # 预检查之外的重复写入（如其他进程）由唯一索引拦截，整笔事务已回滚
            logger.info("Concurrent duplicate like: meal=%s email=%s", meal_id, user_email)
            return LikeResult(liked=True, modified=0)

        return LikeResult(liked=True, modified=1)

    def check_liked(self, meal_id: Any, user_email: Optional[str]) -> bool:
        """查询用户是否已点赞，邮箱缺失时返回 False"""
        if not user_email:
            return False
        meal_id = parse_id(meal_id, "meal id")
        row = self.db.fetch_one(
            "SELECT 1 AS liked FROM likes WHERE meal_id = ? AND user_email = ?",
            [meal_id, user_email]
        )
        return row is not None

    def like_upcoming_meal(self, upcoming_meal_id: Any, user_email: Optional[str]) -> LikeResult:
        """点赞待上架餐品，去重规则与上架餐品一致"""
        if not user_email:
            raise ValidationError("User email is required in body")
        upcoming_meal_id = parse_id(upcoming_meal_id, "upcoming meal id")

        try:
            with self.db.transaction() as conn:
                if not conn.execute("SELECT 1 FROM upcoming_meals WHERE id = ?", [upcoming_meal_id]).fetchone():
                    raise UpcomingMealNotFoundError()

                if self._has_liked_upcoming(conn, upcoming_meal_id, user_email):
                    return LikeResult(liked=True, modified=0)

                conn.execute(
                    "INSERT INTO upcoming_likes(upcoming_meal_id, user_email, time) VALUES (?,?,?)",
                    [upcoming_meal_id, user_email, utcnow()]
                )
                conn.execute("UPDATE upcoming_meals SET likes = likes + 1 WHERE id = ?", [upcoming_meal_id])
        except DuplicateRecordError:
            return LikeResult(liked=True, modified=0)

        return LikeResult(liked=True, modified=1)

    def add_review(self, meal_id: Any, email: str, text: str,
                   user_name: Optional[str] = None, rating: Optional[float] = None) -> Review:
        """
        添加评价并使餐品评价数+1

        Raises:
            ValidationError: ID格式错误
            MealNotFoundError: 餐品不存在
        """
        meal_id = parse_id(meal_id, "meal id")

        with self.db.transaction() as conn:
            if not conn.execute("SELECT 1 FROM meals WHERE id = ?", [meal_id]).fetchone():
                raise MealNotFoundError()

            row = fetch_dicts(
                conn,
                f"INSERT INTO reviews(meal_id, email, user_name, review, rating, time) "
                f"VALUES (?,?,?,?,?,?) RETURNING {REVIEW_COLUMNS}",
                [meal_id, email, user_name, text, rating, utcnow()]
            )[0]
            conn.execute("UPDATE meals SET reviews_count = reviews_count + 1 WHERE id = ?", [meal_id])
            self.db.write_log(conn, "add_review", email, email, {"meal_id": meal_id, "review_id": row["id"]})

        return Review(**row)

    def list_reviews_for_meal(self, meal_id: Any) -> List[Review]:
        """某餐品的评价，最新在前"""
        meal_id = parse_id(meal_id, "meal id")
        rows = self.db.fetch_all(
            f"SELECT {REVIEW_COLUMNS} FROM reviews WHERE meal_id = ? ORDER BY time DESC, id DESC",
            [meal_id]
        )
        return [Review(**row) for row in rows]

    def list_reviews_by_author(self, email: str) -> List[Review]:
        """某用户写的评价，最新在前"""
        rows = self.db.fetch_all(
            f"SELECT {REVIEW_COLUMNS} FROM reviews WHERE email = ? ORDER BY time DESC, id DESC",
            [email]
        )
        return [Review(**row) for row in rows]

    def list_all_reviews(self) -> List[Review]:
        rows = self.db.fetch_all(f"SELECT {REVIEW_COLUMNS} FROM reviews ORDER BY time DESC, id DESC")
        return [Review(**row) for row in rows]

    def remove_review(self, review_id: Any) -> Dict[str, int]:
        """删除评价，同事务内使餐品评价数-1（不低于0）"""
        review_id = parse_id(review_id, "review id")

        with self.db.transaction() as conn:
            row = conn.execute("SELECT meal_id, email FROM reviews WHERE id = ?", [review_id]).fetchone()
            if not row:
                raise ReviewNotFoundError()
            meal_id, email = row

            conn.execute("DELETE FROM reviews WHERE id = ?", [review_id])
            conn.execute(
                "UPDATE meals SET reviews_count = GREATEST(reviews_count - 1, 0) WHERE id = ?",
                [meal_id]
            )
            self.db.write_log(conn, "remove_review", email, None, {"meal_id": meal_id, "review_id": review_id})

        return {"deletedCount": 1}

    def edit_review(self, review_id: Any, text: str) -> Dict[str, int]:
        """修改评价内容"""
        review_id = parse_id(review_id, "review id")

        with self.db.transaction() as conn:
            updated = conn.execute(
                "UPDATE reviews SET review = ? WHERE id = ? RETURNING id",
                [text, review_id]
            ).fetchall()

        if not updated:
            raise ReviewNotFoundError()
        return {"modifiedCount": len(updated)}

    def _has_liked(self, conn, meal_id: int, user_email: str) -> bool:
        existing = conn.execute(
            "SELECT 1 FROM likes WHERE meal_id = ? AND user_email = ?",
            [meal_id, user_email]
        ).fetchone()
        return existing is not None
    
    def _has_liked_upcoming(self, conn, upcoming_meal_id: int, user_email: str) -> bool:
        existing = conn.execute(
            "SELECT 1 FROM upcoming_likes WHERE upcoming_meal_id = ? AND user_email = ?",
            [upcoming_meal_id, user_email]
        ).fetchone()
        return existing is not None
