"""
餐品申请相关的请求模式
"""

from pydantic import BaseModel, Field
from typing import Optional, Union


class MealRequestCreateRequest(BaseModel):
    """餐品申请创建请求"""
    meal_id: Union[int, str] = Field(..., alias="mealId", description="餐品ID")
    user_email: str = Field(..., alias="userEmail", min_length=1, description="申请人邮箱")
    user_name: Optional[str] = Field(None, alias="userName", description="申请人名称")
    meal_title: Optional[str] = Field(None, alias="mealTitle", description="餐品标题")
    
    model_config = {"populate_by_name": True}
