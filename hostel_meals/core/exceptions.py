"""
自定义异常类
提供更精确的错误处理和异常信息，错误码在 error_handler 中映射为HTTP状态码
"""

from typing import Any, Dict, Optional


class BaseApplicationError(Exception):
    """应用基础异常类"""

    default_code = "INTERNAL_ERROR"
    default_message = "系统内部错误"

    def __init__(
        self,
        message: Optional[str] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message or self.default_message
        self.error_code = error_code or self.default_code
        self.details = details or {}
        super().__init__(self.message)


class DatabaseError(BaseApplicationError):
    """数据库相关异常"""
    default_code = "STORE_ERROR"
    default_message = "Database operation failed"


class DuplicateRecordError(DatabaseError):
    """唯一约束冲突"""
    default_code = "DUPLICATE_RESOURCE"
    default_message = "Record already exists"


class AuthenticationError(BaseApplicationError):
    """认证相关异常"""
    default_code = "AUTHENTICATION_REQUIRED"
    default_message = "Unauthorized access"


class PermissionDeniedError(BaseApplicationError):
    """权限拒绝错误"""
    default_code = "PERMISSION_DENIED"
    default_message = "Forbidden access"


class AdminRequiredError(PermissionDeniedError):
    """需要管理员角色"""
    default_code = "ADMIN_REQUIRED"
    default_message = "Admin access required"


class PremiumRequiredError(PermissionDeniedError):
    """需要付费会员等级"""
    default_code = "PREMIUM_REQUIRED"
    default_message = "Only premium users can request meals."


class ValidationError(BaseApplicationError):
    """数据验证异常"""
    default_code = "VALIDATION_ERROR"
    default_message = "Invalid request"


class NotFoundError(BaseApplicationError):
    """资源不存在"""
    default_code = "RESOURCE_NOT_FOUND"
    default_message = "Resource not found"


class MealNotFoundError(NotFoundError):
    default_code = "MEAL_NOT_FOUND"
    default_message = "Meal not found"


class UpcomingMealNotFoundError(NotFoundError):
    default_code = "UPCOMING_MEAL_NOT_FOUND"
    default_message = "Upcoming meal not found"


class MealRequestNotFoundError(NotFoundError):
    default_code = "MEAL_REQUEST_NOT_FOUND"
    default_message = "Meal request not found"


class ReviewNotFoundError(NotFoundError):
    default_code = "REVIEW_NOT_FOUND"
    default_message = "Review not found"


class UserNotFoundError(NotFoundError):
    default_code = "USER_NOT_FOUND"
    default_message = "User not found"


class ConflictError(BaseApplicationError):
    """重复资源"""
    default_code = "DUPLICATE_RESOURCE"
    default_message = "Resource already exists"


class DuplicateMealRequestError(ConflictError):
    """同一用户对同一餐品只能申请一次"""
    default_code = "DUPLICATE_MEAL_REQUEST"
    default_message = "You have already requested this meal."


class PaymentProviderError(BaseApplicationError):
    """支付服务调用失败"""
    default_code = "PAYMENT_PROVIDER_ERROR"
    default_message = "Payment provider request failed"
