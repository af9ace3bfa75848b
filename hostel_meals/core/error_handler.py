"""
统一错误处理模块
提供标准化的错误响应格式和错误处理中间件

主要功能：
- 统一的错误响应格式 {success, error_code, message, details}
- HTTP状态码映射
- 未知异常记录到日志和 logs 表
"""

import logging
import traceback
from typing import Any, Dict, Optional

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from .database import DatabaseManager
from .exceptions import BaseApplicationError

logger = logging.getLogger(__name__)


class ErrorResponse:
    """标准错误响应格式"""

    def __init__(self, error_code: str, message: str,
                 details: Optional[Dict[str, Any]] = None,
                 http_status: int = 400):
        self.error_code = error_code
        self.message = message
        self.details = details or {}
        self.http_status = http_status

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典格式"""
        return {
            "success": False,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }

    def to_json_response(self) -> JSONResponse:
        """转换为FastAPI JSONResponse"""
        return JSONResponse(
            status_code=self.http_status,
            content=self.to_dict()
        )


class ErrorHandler:
    """全局错误处理器"""

    # 错误代码到HTTP状态码的映射
    ERROR_CODE_STATUS_MAP = {
        "VALIDATION_ERROR": 400,
        "AUTHENTICATION_REQUIRED": 401,
        "PERMISSION_DENIED": 403,
        "RESOURCE_NOT_FOUND": 404,
        "DUPLICATE_RESOURCE": 409,
        "INTERNAL_ERROR": 500,
        "STORE_ERROR": 500,
        "PAYMENT_PROVIDER_ERROR": 502,

        # 权限相关错误
        "ADMIN_REQUIRED": 403,
        "PREMIUM_REQUIRED": 403,

        # 资源相关错误
        "MEAL_NOT_FOUND": 404,
        "UPCOMING_MEAL_NOT_FOUND": 404,
        "MEAL_REQUEST_NOT_FOUND": 404,
        "REVIEW_NOT_FOUND": 404,
        "USER_NOT_FOUND": 404,

        # 客户端沿用400判断重复申请
        "DUPLICATE_MEAL_REQUEST": 400,
    }

    @classmethod
    def handle_application_error(cls, error: BaseApplicationError) -> ErrorResponse:
        """处理应用业务异常"""
        http_status = cls.ERROR_CODE_STATUS_MAP.get(error.error_code, 400)

        return ErrorResponse(
            error_code=error.error_code,
            message=error.message,
            details=error.details,
            http_status=http_status
        )

    @classmethod
    def handle_http_exception(cls, error: HTTPException) -> ErrorResponse:
        """处理FastAPI HTTP异常"""
        return ErrorResponse(
            error_code="HTTP_ERROR",
            message=str(error.detail),
            details={"status_code": error.status_code},
            http_status=error.status_code
        )

    @classmethod
    def handle_validation_error(cls, error: Exception) -> ErrorResponse:
        """处理Pydantic验证错误"""
        return ErrorResponse(
            error_code="VALIDATION_ERROR",
            message="Request validation failed",
            details={"validation_errors": str(error)},
            http_status=422
        )

    @classmethod
    def handle_unknown_error(cls, error: Exception,
                             db: Optional[DatabaseManager] = None) -> ErrorResponse:
        """处理未知异常，不向客户端暴露内部信息"""
        error_details = {
            "type": type(error).__name__,
            "message": str(error),
            "traceback": traceback.format_exc()
        }
        logger.error("Unhandled error: %s", error, exc_info=error)
        cls._log_system_error(db, error_details)

        return ErrorResponse(
            error_code="INTERNAL_ERROR",
            message="Internal Server Error",
            details={"error_type": type(error).__name__},
            http_status=500
        )

    @classmethod
    def _log_system_error(cls, db: Optional[DatabaseManager], error_details: Dict[str, Any]):
        """记录系统错误到数据库"""
        if db is None:
            return
        try:
            with db.transaction() as conn:
                db.write_log(conn, "system_error", detail=error_details)
        except BaseApplicationError:
            # 数据库本身不可用时只保留进程日志
            logger.exception("Failed to write system_error log")


async def application_error_handler(request: Request, exc: BaseApplicationError) -> JSONResponse:
    """应用异常处理中间件"""
    if exc.error_code == "STORE_ERROR":
        logger.error("Store failure on %s %s: %s", request.method, request.url.path, exc.message)
        exc = BaseApplicationError("Internal Server Error", "STORE_ERROR")
    return ErrorHandler.handle_application_error(exc).to_json_response()


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """HTTP异常处理中间件"""
    return ErrorHandler.handle_http_exception(exc).to_json_response()


async def validation_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """验证异常处理中间件"""
    return ErrorHandler.handle_validation_error(exc).to_json_response()


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """通用异常处理中间件"""
    db = getattr(request.app.state, "db", None)
    return ErrorHandler.handle_unknown_error(exc, db).to_json_response()
