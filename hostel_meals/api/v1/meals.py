"""
餐品路由模块
餐品的创建、查询以及点赞
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from ...models.meal import MealCreate
from ...models.user import User
from ...schemas.engagement import LikeCheckResponse, LikeRequest, LikeResponse
from ...services.engagement_service import EngagementService
from ...services.meal_service import MealService
from ..deps import get_engagement_service, get_meal_service, require_admin

router = APIRouter()


@router.post("/meals")
def create_meal(
    req: MealCreate,
    admin: User = Depends(require_admin),
    service: MealService = Depends(get_meal_service),
):
    """创建餐品（管理员）"""
    meal = service.create_meal(req, operator_email=admin.email)
    return {"insertedId": meal.id, "meal": meal.to_document()}


@router.get("/meals/{meal_id}")
def get_meal(meal_id: str, service: MealService = Depends(get_meal_service)):
    """获取餐品详情"""
    return service.get_meal(meal_id).to_document()


@router.get("/admin_meals")
def list_admin_meals(
    email: str = Query(..., min_length=1),
    admin: User = Depends(require_admin),
    service: MealService = Depends(get_meal_service),
):
    """某发布者的餐品"""
    return [meal.to_document() for meal in service.list_meals_by_distributor(email)]


@router.patch("/meals/like/{meal_id}", response_model=LikeResponse)
def like_meal(
    meal_id: str,
    req: Optional[LikeRequest] = None,
    service: EngagementService = Depends(get_engagement_service),
):
    """点赞餐品，重复点赞返回 modified=0"""
    result = service.like_meal(meal_id, req.email if req else None)
    return result.model_dump()


@router.get("/likes/check/{meal_id}", response_model=LikeCheckResponse)
def check_liked(
    meal_id: str,
    email: Optional[str] = None,
    service: EngagementService = Depends(get_engagement_service),
):
    return {"liked": service.check_liked(meal_id, email)}
