"""
用户相关的请求/响应模式
"""

from pydantic import BaseModel, Field
from ..models.user import UserRole


class RoleResponse(BaseModel):
    role: UserRole


class RoleUpdateRequest(BaseModel):
    """角色修改请求"""
    role: UserRole = Field(..., description="新角色")


class BadgeUpdateRequest(BaseModel):
    """会员等级修改请求"""
    badge: str = Field(..., min_length=1, max_length=30, description="新会员等级")
