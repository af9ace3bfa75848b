"""
看板统计响应模式
"""

from pydantic import BaseModel, Field
from typing import Optional


class AdminDashboardResponse(BaseModel):
    """管理员看板"""
    total_meals: int = Field(alias="totalMeals")
    total_reviews: int = Field(alias="totalReviews")
    total_likes: int = Field(alias="totalLikes")
    total_requests: int = Field(alias="totalRequests")
    
    model_config = {"populate_by_name": True}


class UserDashboardResponse(BaseModel):
    """用户看板"""
    requested_meals: int = Field(alias="requestedMeals")
    reviews: int
    payments: int
    badge: Optional[str] = None
    
    model_config = {"populate_by_name": True}
