"""
餐品申请路由模块
"""

from fastapi import APIRouter, Depends

from ...core.security import VerifiedPrincipal
from ...models.user import User
from ...schemas.common import DeletedResponse, InsertedResponse
from ...schemas.meal_request import MealRequestCreateRequest
from ...services.authorization_service import AuthorizationPolicy
from ...services.meal_request_service import MealRequestService
from ..deps import get_meal_request_service, get_policy, get_principal, require_admin

router = APIRouter()


@router.post("/meal-requests", response_model=InsertedResponse)
def create_meal_request(req: MealRequestCreateRequest,
                        service: MealRequestService = Depends(get_meal_request_service)):
    """
    创建餐品申请

    非付费会员返回403，重复申请返回400
    """
    request = service.create_request(req.meal_id, req.user_email,
                                     user_name=req.user_name, meal_title=req.meal_title)
    return {"insertedId": request.id}


@router.get("/admin/meal-requests")
def list_all_meal_requests(admin: User = Depends(require_admin),
                           service: MealRequestService = Depends(get_meal_request_service)):
    """全部申请（管理员）"""
    return [item.to_document() for item in service.list_all()]


@router.get("/meal-requests/{email}")
def list_meal_requests_for_user(
    email: str,
    principal: VerifiedPrincipal = Depends(get_principal),
    policy: AuthorizationPolicy = Depends(get_policy),
    service: MealRequestService = Depends(get_meal_request_service),
):
    """用户自己的申请列表，管理员可查看任意用户"""
    policy.require_self_or_admin(principal, email)
    return [item.to_document() for item in service.list_for_user(email)]


@router.patch("/meal-requests/{request_id}/deliver")
def deliver_meal_request(request_id: str,
                         service: MealRequestService = Depends(get_meal_request_service)):
    return service.deliver(request_id).to_document()


@router.delete("/meal-requests/{request_id}", response_model=DeletedResponse)
def cancel_meal_request(request_id: str,
                        service: MealRequestService = Depends(get_meal_request_service)):
    """取消申请，任何状态均可"""
    return service.cancel(request_id)
