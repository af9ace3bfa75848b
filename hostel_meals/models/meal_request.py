"""
餐品申请数据模型
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from enum import Enum
from .base import BaseEntity


class MealRequestStatus(str, Enum):
    """申请状态：pending -> delivered"""
    PENDING = "pending"
    DELIVERED = "delivered"


class MealRequest(BaseEntity):
    """餐品申请"""
    id: int
    meal_id: int = Field(..., alias="mealId")
    user_email: str = Field(..., alias="userEmail")
    user_name: Optional[str] = Field(None, alias="userName")
    meal_title: Optional[str] = Field(None, alias="mealTitle")
    status: MealRequestStatus = MealRequestStatus.PENDING
    requested_at: Optional[datetime] = Field(None, alias="requestedAt")


class UserMealRequestView(BaseEntity):
    """用户申请列表（关联餐品后的投影）"""
    id: int
    status: MealRequestStatus
    requested_at: Optional[datetime] = Field(None, alias="requestedAt")
    meal_title: Optional[str] = Field(None, alias="mealTitle")
    likes: int = 0
    reviews_count: int = 0


class AdminMealRequestView(MealRequest):
    """管理端申请列表"""
    meal_category: Optional[str] = Field(None, alias="mealCategory")
