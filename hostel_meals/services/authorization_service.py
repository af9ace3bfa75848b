"""
授权策略
角色（admin）和会员等级（非 bronze）两类检查，所有受限操作复用同一套查询
"""

import logging
from typing import Optional

from ..core.exceptions import AdminRequiredError, PermissionDeniedError, PremiumRequiredError
from ..core.security import VerifiedPrincipal
from ..models.user import User, UserRole
from .base import BaseService

logger = logging.getLogger(__name__)


class AuthorizationPolicy(BaseService):
    """授权策略"""
    
    def get_user(self, email: Optional[str]) -> Optional[User]:
        """按邮箱查询用户"""
        if not email:
            return None
        row = self.db.fetch_one(
            "SELECT id, email, name, photo, role, badge, created_at FROM users WHERE email = ?",
            [email]
        )
        return User(**row) if row else None
    
    def require_role(self, principal: VerifiedPrincipal, role: str = UserRole.ADMIN.value) -> User:
        """要求调用方具有指定角色，用户不存在同样拒绝"""
        user = self.get_user(principal.email)
        if user is None or user.role != role:
            logger.info("Role check failed: email=%s required=%s", principal.email, role)
            raise AdminRequiredError() if role == UserRole.ADMIN.value else PermissionDeniedError()
        return user
    
    def require_tier(self, email: Optional[str]) -> User:
        """要求用户为付费会员（badge 不为 bronze，大小写不敏感）"""
        user = self.get_user(email)
        if user is None or not user.is_premium:
            logger.info("Tier check failed: email=%s", email)
            raise PremiumRequiredError()
        return user
    
    def require_self_or_admin(self, principal: VerifiedPrincipal, email: str) -> Optional[User]:
        """
        调用方只能访问自己邮箱范围的数据，管理员不受限

        Returns:
            管理员访问他人数据时返回管理员用户，本人访问时返回 None
        """
        if principal.email == email:
            return None
        user = self.get_user(principal.email)
        if user is None or not user.is_admin:
            raise PermissionDeniedError("Forbidden access")
        return user
