"""
餐品相关数据模型
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import List, Optional
from .base import BaseEntity


class MealBase(BaseModel):
    """餐品基础字段"""
    title: str = Field(..., min_length=1, max_length=200, description="餐品标题")
    category: Optional[str] = Field(None, max_length=50, description="分类")
    price: float = Field(0, ge=0, description="价格")
    description: Optional[str] = Field(None, max_length=2000, description="描述")
    image: Optional[str] = Field(None, description="图片URL")
    ingredients: List[str] = Field(default_factory=list, description="配料")
    email: Optional[str] = Field(None, description="发布者邮箱")
    distributor_name: Optional[str] = Field(None, alias="distributorName", description="发布者名称")
    
    model_config = {"populate_by_name": True}


class MealCreate(MealBase):
    """餐品创建模型，计数字段不接受客户端传值"""
    pass


class Meal(MealBase, BaseEntity):
    """餐品完整模型"""
    id: int = Field(..., description="餐品ID")
    rating: float = Field(0, description="评分")
    likes: int = Field(0, ge=0, description="点赞数")
    reviews_count: int = Field(0, ge=0, description="评价数")
    post_time: Optional[datetime] = Field(None, alias="postTime")


class UpcomingMeal(Meal):
    """待上架餐品"""
    liked_users: List[str] = Field(default_factory=list, alias="likedUsers", description="点赞用户邮箱集合")
