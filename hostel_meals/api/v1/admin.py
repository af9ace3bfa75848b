"""
看板和管理路由模块
统计看板、计数一致性检查和操作日志
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...core.security import VerifiedPrincipal
from ...models.user import User
from ...schemas.dashboard import AdminDashboardResponse, UserDashboardResponse
from ...services.audit_service import AuditLogService
from ...services.authorization_service import AuthorizationPolicy
from ...services.consistency_service import ConsistencyService
from ...services.dashboard_service import DashboardService
from ..deps import (
    get_audit_log_service,
    get_consistency_service,
    get_dashboard_service,
    get_policy,
    get_principal,
    require_admin,
)

router = APIRouter()


@router.get("/admin/dashboard-stats", response_model=AdminDashboardResponse)
def admin_dashboard_stats(
    admin: User = Depends(require_admin),
    service: DashboardService = Depends(get_dashboard_service),
):
    """管理员看板"""
    return service.admin_dashboard()


@router.get("/user/dashboard-stats", response_model=UserDashboardResponse)
def user_dashboard_stats(
    email: str = Query(..., min_length=1),
    principal: VerifiedPrincipal = Depends(get_principal),
    policy: AuthorizationPolicy = Depends(get_policy),
    service: DashboardService = Depends(get_dashboard_service),
):
    """个人看板（本人或管理员）"""
    policy.require_self_or_admin(principal, email)
    return service.user_dashboard(email)


@router.get("/admin/consistency")
def check_consistency(
    admin: User = Depends(require_admin),
    service: ConsistencyService = Depends(get_consistency_service),
):
    return service.check_counters()


@router.post("/admin/consistency/repair")
def repair_consistency(
    admin: User = Depends(require_admin),
    service: ConsistencyService = Depends(get_consistency_service),
):
    """按点赞和评价记录重算餐品计数"""
    return service.repair_counters(operator_email=admin.email)


@router.get("/admin/logs")
def list_logs(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=200),
    action: Optional[str] = None,
    admin: User = Depends(require_admin),
    service: AuditLogService = Depends(get_audit_log_service),
):
    """操作日志（管理员）"""
    return service.list_logs(page=page, size=size, action=action)
