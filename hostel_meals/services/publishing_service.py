"""
上架服务
待上架餐品的创建、查询以及发布到正式餐品目录
"""

import logging
from typing import Any, Dict, List, Optional

from ..core.database import fetch_dicts, utcnow
from ..core.exceptions import UpcomingMealNotFoundError
from ..models.meal import MealCreate, UpcomingMeal
from .base import BaseService, parse_id
from .meal_service import MEAL_COLUMNS, MEAL_INSERT_COLUMNS, meal_insert_params, row_to_meal

logger = logging.getLogger(__name__)

# 发布时原样复制到 meals 的字段
COPIED_COLUMNS = (
    "title, category, price, description, image, ingredients_json, "
    "email, distributor_name, rating, post_time"
)


class PublishingService(BaseService):
    """上架服务"""

    def create_upcoming_meal(self, meal_data: MealCreate, operator_email: str) -> UpcomingMeal:
        """创建待上架餐品"""
        with self.db.transaction() as conn:
            row = fetch_dicts(
                conn,
                f"INSERT INTO upcoming_meals ({MEAL_INSERT_COLUMNS}) VALUES (?,?,?,?,?,?,?,?,?,?,?,?) "
                f"RETURNING {MEAL_COLUMNS}",
                meal_insert_params(meal_data)
            )[0]
            self.db.write_log(conn, "upcoming_meal_create", meal_data.email, operator_email,
                              {"upcoming_meal_id": row["id"]})
        return row_to_meal({**row, "liked_users": []}, UpcomingMeal)

    def list_upcoming_meals(self) -> List[UpcomingMeal]:
        """待上架餐品列表，点赞多的在前"""
        rows = self.db.fetch_all(
            f"SELECT {MEAL_COLUMNS} FROM upcoming_meals ORDER BY likes DESC, id DESC"
        )
        liked = self._liked_users_by_meal()
        return [
            row_to_meal({**row, "liked_users": liked.get(row["id"], [])}, UpcomingMeal)
            for row in rows
        ]

    def get_upcoming_meal(self, upcoming_meal_id: Any) -> UpcomingMeal:
        upcoming_meal_id = parse_id(upcoming_meal_id, "upcoming meal id")
        row = self.db.fetch_one(f"SELECT {MEAL_COLUMNS} FROM upcoming_meals WHERE id = ?", [upcoming_meal_id])
        if not row:
            raise UpcomingMealNotFoundError()
        liked = self._liked_users_by_meal(upcoming_meal_id)
        return row_to_meal({**row, "liked_users": liked.get(upcoming_meal_id, [])}, UpcomingMeal)

    def publish(self, upcoming_meal_id: Any, operator_email: Optional[str] = None) -> Dict[str, Any]:
        """
        发布待上架餐品

        新餐品获得新的ID；待上架阶段的点赞用户转成正式点赞记录，
        likes 由这些记录计得。插入、转移点赞和删除待上架记录在同一事务中完成。

        Returns:
            dict: message 和新餐品ID

        Raises:
            UpcomingMealNotFoundError: 待上架餐品不存在（含已发布）
        """
        upcoming_meal_id = parse_id(upcoming_meal_id, "upcoming meal id")

        with self.db.transaction() as conn:
            if not conn.execute("SELECT 1 FROM upcoming_meals WHERE id = ?", [upcoming_meal_id]).fetchone():
                raise UpcomingMealNotFoundError()

            liked_users = [
                r[0] for r in conn.execute(
                    "SELECT user_email FROM upcoming_likes WHERE upcoming_meal_id = ? ORDER BY time",
                    [upcoming_meal_id]
                ).fetchall()
            ]

            meal_id = conn.execute(
                f"INSERT INTO meals ({COPIED_COLUMNS}, likes, reviews_count) "
                f"SELECT {COPIED_COLUMNS}, CAST(? AS INTEGER), 0 FROM upcoming_meals WHERE id = ? RETURNING id",
                [len(liked_users), upcoming_meal_id]
            ).fetchone()[0]

            now = utcnow()
            for email in liked_users:
                conn.execute(
                    "INSERT INTO likes(meal_id, user_email, time) VALUES (?,?,?)",
                    [meal_id, email, now]
                )

            conn.execute("DELETE FROM upcoming_likes WHERE upcoming_meal_id = ?", [upcoming_meal_id])
            conn.execute("DELETE FROM upcoming_meals WHERE id = ?", [upcoming_meal_id])
            self.db.write_log(conn, "publish_meal", None, operator_email,
                              {"upcoming_meal_id": upcoming_meal_id, "meal_id": meal_id,
                               "likes": len(liked_users)})

        logger.info("Upcoming meal %s published as meal %s", upcoming_meal_id, meal_id)
        return {"message": "Meal published successfully", "insertedId": meal_id}

    def _liked_users_by_meal(self, upcoming_meal_id: Optional[int] = None) -> Dict[int, List[str]]:
        query = "SELECT upcoming_meal_id, user_email FROM upcoming_likes"
        params = []
        if upcoming_meal_id is not None:
            query += " WHERE upcoming_meal_id = ?"
            params.append(upcoming_meal_id)
        query += " ORDER BY time"

        liked: Dict[int, List[str]] = {}
        for row in self.db.fetch_all(query, params):
            liked.setdefault(row["upcoming_meal_id"], []).append(row["user_email"])
        return liked
