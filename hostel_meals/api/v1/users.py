"""
用户路由模块
"""

from typing import Optional

from fastapi import APIRouter, Depends

from ...core.security import VerifiedPrincipal
from ...models.user import User, UserCreate
from ...schemas.common import MessageResponse
from ...schemas.user import BadgeUpdateRequest, RoleResponse, RoleUpdateRequest
from ...services.authorization_service import AuthorizationPolicy
from ...services.user_service import UserService
from ..deps import get_policy, get_principal, get_user_service, require_admin

router = APIRouter()


@router.post("/users", response_model=MessageResponse)
def create_user(req: UserCreate, service: UserService = Depends(get_user_service)):
    """注册用户，已存在时返回 insertedId=null"""
    return service.create_user(req)


@router.get("/users/search")
def search_users(
    query: Optional[str] = None,
    admin: User = Depends(require_admin),
    service: UserService = Depends(get_user_service),
):
    """按邮箱或用户名搜索用户（管理员），query 为空返回400"""
    return [user.to_document() for user in service.search_users(query)]


@router.get("/users/{email}")
def get_user(email: str, service: UserService = Depends(get_user_service)):
    return service.get_user(email).to_document()


@router.get("/users/{email}/role", response_model=RoleResponse)
def get_user_role(email: str, service: UserService = Depends(get_user_service)):
    return {"role": service.get_role(email)}


# 放在 /users/{user_id}/role 之前，避免 badge 被当作用户ID
@router.patch("/users/badge/{email}")
def update_user_badge(
    email: str,
    req: BadgeUpdateRequest,
    principal: VerifiedPrincipal = Depends(get_principal),
    policy: AuthorizationPolicy = Depends(get_policy),
    service: UserService = Depends(get_user_service),
):
    """修改会员等级（本人或管理员）"""
    policy.require_self_or_admin(principal, email)
    user = service.update_badge(email, req.badge, actor_email=principal.email)
    return user.to_document()


@router.patch("/users/{user_id}/role")
def update_user_role(
    user_id: str,
    req: RoleUpdateRequest,
    admin: User = Depends(require_admin),
    service: UserService = Depends(get_user_service),
):
    """修改角色（管理员）"""
    return service.update_role(user_id, req.role, actor_email=admin.email).to_document()
