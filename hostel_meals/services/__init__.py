"""
Business logic services.
"""

from .audit_service import AuditLogService
from .authorization_service import AuthorizationPolicy
from .base import BaseService, parse_id
from .consistency_service import ConsistencyService
from .dashboard_service import DashboardService
from .engagement_service import EngagementService
from .meal_request_service import MealRequestService
from .meal_service import MealService
from .payment_service import PaymentGateway, PaymentService
from .publishing_service import PublishingService
from .user_service import UserService

__all__ = [
    "AuditLogService", "AuthorizationPolicy", "BaseService", "parse_id",
    "ConsistencyService", "DashboardService", "EngagementService",
    "MealRequestService", "MealService", "PaymentGateway", "PaymentService",
    "PublishingService", "UserService",
]
