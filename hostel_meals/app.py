"""
宿舍餐品后端服务 - 主应用入口
提供餐品目录、点赞评价、会员申请和上架流程的后端API服务

主要功能模块：
- Bearer token 身份校验
- 餐品和待上架餐品管理
- 点赞和评价（计数与记录同事务维护）
- 付费会员的餐品申请
- 看板统计、支付和操作日志

技术栈：FastAPI + DuckDB + JWT认证
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from .api import api_router
from .config.settings import Settings, settings as default_settings
from .core.database import DatabaseManager
from .core.error_handler import (
    application_error_handler,
    general_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from .core.exceptions import BaseApplicationError
from .core.security import SecurityManager
from .services.payment_service import PaymentGateway

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings):
    """进程级日志配置，只在启动入口调用"""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    db: DatabaseManager = app.state.db
    db.open()
    logger.info("Application started")
    
    yield
    
    db.close()


def create_app(settings: Optional[Settings] = None, db: Optional[DatabaseManager] = None) -> FastAPI:
    """创建FastAPI应用，测试时可传入配置和数据库"""
    settings = settings or default_settings
    
    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description="宿舍餐品系统API",
        debug=settings.debug,
        lifespan=lifespan
    )
    
    app.state.settings = settings
    app.state.db = db or DatabaseManager(settings.database_url)
    app.state.security = SecurityManager(settings)
    app.state.payment_gateway = PaymentGateway(settings)
    
    # 添加中间件
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    
    # 注册异常处理器
    app.add_exception_handler(BaseApplicationError, application_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
    
    # 注册路由
    app.include_router(api_router, prefix=settings.api_prefix)
    
    # 健康检查
    @app.get("/health")
    def health_check():
        try:
            app.state.db.fetch_value("SELECT 1")
            return {
                "status": "healthy",
                "version": settings.api_version,
                "database": "connected"
            }
        except BaseApplicationError as e:
            return {
                "status": "unhealthy",
                "version": settings.api_version,
                "database": f"error: {e.message}"
            }
    
    @app.get("/")
    def root():
        return {
            "name": settings.api_title,
            "version": settings.api_version,
            "description": "宿舍餐品系统API"
        }
    
    return app


# 应用实例
app = create_app()
