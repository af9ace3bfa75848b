"""
餐品服务
处理上架餐品的创建和查询，计数字段只由互动服务维护
"""

import json
import logging
from typing import Any, Dict, List, Type, TypeVar

from ..core.database import fetch_dicts, utcnow
from ..core.exceptions import MealNotFoundError
from ..models.meal import Meal, MealCreate
from .base import BaseService, parse_id

logger = logging.getLogger(__name__)

MEAL_COLUMNS = (
    "id, title, category, price, description, image, ingredients_json, "
    "email, distributor_name, rating, likes, reviews_count, post_time"
)

M = TypeVar("M", bound=Meal)


def row_to_meal(row: Dict[str, Any], model: Type[M] = Meal) -> M:
    """数据库行转换为餐品模型，解析配料JSON"""
    data = dict(row)
    ingredients = data.pop("ingredients_json", None)
    if isinstance(ingredients, str):
        try:
            ingredients = json.loads(ingredients)
        except json.JSONDecodeError:
            ingredients = []
    data["ingredients"] = ingredients or []
    return model(**data)


def meal_insert_params(meal_data: MealCreate) -> List[Any]:
    """餐品写入参数，顺序与 INSERT 列一致；rating / likes / reviews_count 固定为0"""
    return [
        meal_data.title,
        meal_data.category,
        meal_data.price,
        meal_data.description,
        meal_data.image,
        json.dumps(meal_data.ingredients),
        meal_data.email,
        meal_data.distributor_name,
        0,
        0,
        0,
        utcnow(),
    ]


MEAL_INSERT_COLUMNS = (
    "title, category, price, description, image, ingredients_json, "
    "email, distributor_name, rating, likes, reviews_count, post_time"
)


class MealService(BaseService):
    """餐品服务"""

    def create_meal(self, meal_data: MealCreate, operator_email: str) -> Meal:
        """创建餐品，计数从0开始"""
        with self.db.transaction() as conn:
            row = fetch_dicts(
                conn,
                f"INSERT INTO meals ({MEAL_INSERT_COLUMNS}) VALUES (?,?,?,?,?,?,?,?,?,?,?,?) "
                f"RETURNING {MEAL_COLUMNS}",
                meal_insert_params(meal_data)
            )[0]
            self.db.write_log(conn, "meal_create", meal_data.email, operator_email, {"meal_id": row["id"]})

        logger.info("Meal created: id=%s title=%s", row["id"], row["title"])
        return row_to_meal(row)

    def get_meal(self, meal_id: Any) -> Meal:
        """获取单个餐品"""
        meal_id = parse_id(meal_id, "meal id")
        row = self.db.fetch_one(f"SELECT {MEAL_COLUMNS} FROM meals WHERE id = ?", [meal_id])
        if not row:
            raise MealNotFoundError()
        return row_to_meal(row)

    def list_meals_by_distributor(self, email: str) -> List[Meal]:
        """某发布者的餐品"""
        rows = self.db.fetch_all(
            f"SELECT {MEAL_COLUMNS} FROM meals WHERE email = ? ORDER BY post_time DESC, id DESC",
            [email]
        )
        return [row_to_meal(row) for row in rows]
