"""
路由依赖
数据库句柄、配置和安全管理器都挂在 app.state 上，由 create_app 注入
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..core.database import DatabaseManager
from ..core.exceptions import AuthenticationError
from ..core.security import SecurityManager, VerifiedPrincipal
from ..models.user import User
from ..services.audit_service import AuditLogService
from ..services.authorization_service import AuthorizationPolicy
from ..services.consistency_service import ConsistencyService
from ..services.dashboard_service import DashboardService
from ..services.engagement_service import EngagementService
from ..services.meal_request_service import MealRequestService
from ..services.meal_service import MealService
from ..services.payment_service import PaymentService
from ..services.publishing_service import PublishingService
from ..services.user_service import UserService

# 缺少 Authorization 头时返回401
bearer_scheme = HTTPBearer(auto_error=False)


def get_db(request: Request) -> DatabaseManager:
    return request.app.state.db


def get_security_manager(request: Request) -> SecurityManager:
    return request.app.state.security


def get_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    security: SecurityManager = Depends(get_security_manager),
) -> VerifiedPrincipal:
    """从 Authorization header 中提取并验证调用方身份"""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationError("Unauthorized access")
    return security.verify(credentials.credentials)


def get_policy(db: DatabaseManager = Depends(get_db)) -> AuthorizationPolicy:
    return AuthorizationPolicy(db)


def require_admin(
    principal: VerifiedPrincipal = Depends(get_principal),
    policy: AuthorizationPolicy = Depends(get_policy),
) -> User:
    """要求调用方为管理员"""
    return policy.require_role(principal)


def get_meal_service(db: DatabaseManager = Depends(get_db)) -> MealService:
    return MealService(db)


def get_engagement_service(db: DatabaseManager = Depends(get_db)) -> EngagementService:
    return EngagementService(db)


def get_meal_request_service(
    db: DatabaseManager = Depends(get_db),
    policy: AuthorizationPolicy = Depends(get_policy),
) -> MealRequestService:
    return MealRequestService(db, policy)


def get_publishing_service(db: DatabaseManager = Depends(get_db)) -> PublishingService:
    return PublishingService(db)


def get_dashboard_service(db: DatabaseManager = Depends(get_db)) -> DashboardService:
    return DashboardService(db)


def get_user_service(db: DatabaseManager = Depends(get_db)) -> UserService:
    return UserService(db)


def get_consistency_service(db: DatabaseManager = Depends(get_db)) -> ConsistencyService:
    return ConsistencyService(db)


def get_payment_service(request: Request, db: DatabaseManager = Depends(get_db)) -> PaymentService:
    return PaymentService(db, request.app.state.payment_gateway)


def get_audit_log_service(db: DatabaseManager = Depends(get_db)) -> AuditLogService:
    return AuditLogService(db)
