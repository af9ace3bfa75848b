"""
用户相关数据模型
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
from enum import Enum
from .base import BaseEntity


class UserRole(str, Enum):
    """用户角色枚举"""
    USER = "user"
    ADMIN = "admin"


class Badge(str, Enum):
    """会员等级枚举，bronze 为免费等级"""
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"


LOWEST_BADGE = Badge.BRONZE.value


def is_premium_badge(badge: Optional[str]) -> bool:
    """会员等级是否高于免费等级（大小写不敏感）"""
    return bool(badge) and badge.strip().lower() != LOWEST_BADGE


class User(BaseEntity):
    """用户完整模型"""
    id: int = Field(..., description="用户ID")
    email: str = Field(..., description="邮箱，唯一")
    name: Optional[str] = Field(None, description="用户名")
    photo: Optional[str] = Field(None, description="头像URL")
    role: UserRole = Field(UserRole.USER, description="角色")
    badge: str = Field(LOWEST_BADGE, description="会员等级")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    
    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value
    
    @property
    def is_premium(self) -> bool:
        return is_premium_badge(self.badge)


class UserCreate(BaseModel):
    """用户注册模型"""
    email: str = Field(..., min_length=3, description="邮箱")
    name: Optional[str] = Field(None, max_length=100, description="用户名")
    photo: Optional[str] = Field(None, description="头像URL")
