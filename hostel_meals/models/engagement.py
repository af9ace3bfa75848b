"""
点赞和评价数据模型
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from .base import BaseEntity


class LikeResult(BaseModel):
    """点赞结果，modified 为0表示此前已点赞"""
    liked: bool = True
    modified: int = 0


class Review(BaseEntity):
    """评价记录"""
    id: int
    meal_id: int = Field(..., alias="mealId")
    email: str
    user_name: Optional[str] = Field(None, alias="userName")
    review: Optional[str] = None
    rating: Optional[float] = None
    time: Optional[datetime] = None
