"""
点赞和评价相关的请求/响应模式
"""

from pydantic import BaseModel, Field
from typing import Optional, Union


class LikeRequest(BaseModel):
    """点赞请求，email 缺失由服务层返回400"""
    email: Optional[str] = Field(None, description="用户邮箱")


class LikeResponse(BaseModel):
    liked: bool
    modified: int


class LikeCheckResponse(BaseModel):
    liked: bool


class ReviewCreateRequest(BaseModel):
    """评价创建请求"""
    meal_id: Union[int, str] = Field(..., alias="mealId", description="餐品ID")
    email: str = Field(..., min_length=1, description="评价者邮箱")
    review: str = Field(..., description="评价内容")
    user_name: Optional[str] = Field(None, alias="userName", description="评价者名称")
    rating: Optional[float] = Field(None, ge=0, le=5, description="评分")
    
    model_config = {"populate_by_name": True}


class ReviewUpdateRequest(BaseModel):
    """评价修改请求"""
    review: str = Field(..., description="评价内容")
