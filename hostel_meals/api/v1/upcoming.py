"""
待上架餐品路由模块
"""

from typing import Optional

from fastapi import APIRouter, Depends

from ...models.meal import MealCreate
from ...models.user import User
from ...schemas.common import MessageResponse
from ...schemas.engagement import LikeRequest, LikeResponse
from ...services.engagement_service import EngagementService
from ...services.publishing_service import PublishingService
from ..deps import get_engagement_service, get_publishing_service, require_admin

router = APIRouter()


@router.post("/upcoming-meals")
def create_upcoming_meal(
    req: MealCreate,
    admin: User = Depends(require_admin),
    service: PublishingService = Depends(get_publishing_service),
):
    """创建待上架餐品（管理员）"""
    meal = service.create_upcoming_meal(req, operator_email=admin.email)
    return {"insertedId": meal.id, "meal": meal.to_document()}


@router.get("/upcoming-meals")
def list_upcoming_meals(service: PublishingService = Depends(get_publishing_service)):
    return [meal.to_document() for meal in service.list_upcoming_meals()]


@router.patch("/upcoming-meals/like/{upcoming_meal_id}", response_model=LikeResponse)
def like_upcoming_meal(
    upcoming_meal_id: str,
    req: Optional[LikeRequest] = None,
    service: EngagementService = Depends(get_engagement_service),
):
    result = service.like_upcoming_meal(upcoming_meal_id, req.email if req else None)
    return result.model_dump()


@router.post("/publish-meal/{upcoming_meal_id}", response_model=MessageResponse)
def publish_meal(upcoming_meal_id: str, service: PublishingService = Depends(get_publishing_service)):
    """发布待上架餐品，点赞用户转为正式点赞"""
    return service.publish(upcoming_meal_id)
