"""
餐品申请服务
申请的创建、去重、状态流转和查询

业务规则：
- 只有付费会员（badge 不为 bronze）可以申请
- 同一用户对同一餐品只能申请一次，与已有申请的状态无关
- 状态流转 pending -> delivered，取消即删除
"""

import logging
from typing import Any, Dict, List, Optional

from ..core.database import fetch_dicts, utcnow
from ..core.exceptions import (
    DuplicateMealRequestError,
    DuplicateRecordError,
    MealNotFoundError,
    MealRequestNotFoundError,
)
from ..models.meal_request import (
    AdminMealRequestView,
    MealRequest,
    MealRequestStatus,
    UserMealRequestView,
)
from .authorization_service import AuthorizationPolicy
from .base import BaseService, parse_id

logger = logging.getLogger(__name__)

REQUEST_COLUMNS = "id, meal_id, user_email, user_name, meal_title, status, requested_at"


class MealRequestService(BaseService):
    """餐品申请服务类"""

    def __init__(self, db, policy: Optional[AuthorizationPolicy] = None):
        super().__init__(db)
        self.policy = policy or AuthorizationPolicy(db)

    def create_request(self, meal_id: Any, user_email: str,
                       user_name: Optional[str] = None,
                       meal_title: Optional[str] = None) -> MealRequest:
        """
        创建餐品申请

        Returns:
            MealRequest: 新建的 pending 申请

        Raises:
            PremiumRequiredError: 用户不存在或为 bronze 等级
            DuplicateMealRequestError: 已申请过该餐品
            ValidationError: ID格式错误
            MealNotFoundError: 餐品不存在
        """
        self.policy.require_tier(user_email)
        meal_id = parse_id(meal_id, "meal id")

        try:
            with self.db.transaction() as conn:
                if self._has_request(conn, meal_id, user_email):
                    raise DuplicateMealRequestError()

                meal = conn.execute("SELECT title FROM meals WHERE id = ?", [meal_id]).fetchone()
                if not meal:
                    raise MealNotFoundError()

                row = fetch_dicts(
                    conn,
                    f"INSERT INTO meal_requests(meal_id, user_email, user_name, meal_title, status, requested_at) "
                    f"VALUES (?,?,?,?,?,?) RETURNING {REQUEST_COLUMNS}",
                    [meal_id, user_email, user_name, meal_title or meal[0],
                     MealRequestStatus.PENDING.value, utcnow()]
                )[0]
                self.db.write_log(conn, "meal_request_create", user_email, user_email,
                                  {"meal_id": meal_id, "request_id": row["id"]})
        except DuplicateRecordError:
            raise DuplicateMealRequestError()

        logger.info("Meal request created: id=%s meal=%s email=%s", row["id"], meal_id, user_email)
        return MealRequest(**row)

    def deliver(self, request_id: Any, actor_email: Optional[str] = None) -> MealRequest:
        """标记为已送达，不检查当前状态（重复送达无副作用）"""
        request_id = parse_id(request_id, "request id")

        with self.db.transaction() as conn:
            rows = fetch_dicts(
                conn,
                f"UPDATE meal_requests SET status = ? WHERE id = ? RETURNING {REQUEST_COLUMNS}",
                [MealRequestStatus.DELIVERED.value, request_id]
            )
            if not rows:
                raise MealRequestNotFoundError()
            self.db.write_log(conn, "meal_request_deliver", rows[0]["user_email"], actor_email,
                              {"request_id": request_id})

        return MealRequest(**rows[0])

    def cancel(self, request_id: Any, actor_email: Optional[str] = None) -> Dict[str, int]:
        """取消申请（删除），任何状态均可取消"""
        request_id = parse_id(request_id, "request id")

        with self.db.transaction() as conn:
            rows = conn.execute(
                "DELETE FROM meal_requests WHERE id = ? RETURNING user_email, meal_id",
                [request_id]
            ).fetchall()
            if not rows:
                raise MealRequestNotFoundError()
            user_email, meal_id = rows[0]
            self.db.write_log(conn, "meal_request_cancel", user_email, actor_email,
                              {"request_id": request_id, "meal_id": meal_id})

        return {"deletedCount": len(rows)}

    def get_request(self, request_id: Any) -> MealRequest:
        request_id = parse_id(request_id, "request id")
        row = self.db.fetch_one(f"SELECT {REQUEST_COLUMNS} FROM meal_requests WHERE id = ?", [request_id])
        if not row:
            raise MealRequestNotFoundError()
        return MealRequest(**row)

    def list_for_user(self, user_email: str) -> List[UserMealRequestView]:
        """
        用户的申请列表，内连接餐品取标题和计数

        餐品已删除的申请不会出现在结果中。
        """
        rows = self.db.fetch_all(
            """
            SELECT r.id, r.status, r.requested_at,
                   m.title AS meal_title, m.likes, m.reviews_count
            FROM meal_requests r
            JOIN meals m ON m.id = r.meal_id
            WHERE r.user_email = ?
            ORDER BY r.requested_at DESC, r.id DESC
            """,
            [user_email]
        )
        return [UserMealRequestView(**row) for row in rows]

    def list_all(self) -> List[AdminMealRequestView]:
        """全部申请（管理端），同样只返回餐品仍存在的申请"""
        rows = self.db.fetch_all(
            """
            SELECT r.id, r.meal_id, r.user_email, r.user_name,
                   m.title AS meal_title, m.category AS meal_category,
                   r.status, r.requested_at
            FROM meal_requests r
            JOIN meals m ON m.id = r.meal_id
            ORDER BY r.requested_at DESC, r.id DESC
            """
        )
        return [AdminMealRequestView(**row) for row in rows]

    def _has_request(self, conn, meal_id: int, user_email: str) -> bool:
        """检查是否已有申请（不区分状态）"""
        existing = conn.execute(
            "SELECT 1 FROM meal_requests WHERE meal_id = ? AND user_email = ?",
            [meal_id, user_email]
        ).fetchone()
        return existing is not None
