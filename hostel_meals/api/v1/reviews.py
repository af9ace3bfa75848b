"""
评价路由模块
"""

from fastapi import APIRouter, Depends

from ...schemas.common import DeletedResponse
from ...schemas.engagement import ReviewCreateRequest, ReviewUpdateRequest
from ...services.engagement_service import EngagementService
from ..deps import get_engagement_service

router = APIRouter()


@router.post("/reviews")
def add_review(req: ReviewCreateRequest, service: EngagementService = Depends(get_engagement_service)):
    """添加评价，餐品评价数+1"""
    review = service.add_review(req.meal_id, req.email, req.review,
                                user_name=req.user_name, rating=req.rating)
    return {"insertedId": review.id, "review": review.to_document()}


@router.get("/reviews")
def list_all_reviews(service: EngagementService = Depends(get_engagement_service)):
    return [review.to_document() for review in service.list_all_reviews()]


@router.get("/reviews/{meal_id}")
def list_reviews_for_meal(meal_id: str, service: EngagementService = Depends(get_engagement_service)):
    """某餐品的评价，最新在前"""
    return [review.to_document() for review in service.list_reviews_for_meal(meal_id)]


@router.patch("/reviews/{review_id}")
def edit_review(review_id: str, req: ReviewUpdateRequest,
                service: EngagementService = Depends(get_engagement_service)):
    return service.edit_review(review_id, req.review)


@router.delete("/reviews/{review_id}", response_model=DeletedResponse)
def remove_review(review_id: str, service: EngagementService = Depends(get_engagement_service)):
    """删除评价，餐品评价数-1"""
    return service.remove_review(review_id)


@router.get("/my-reviews/{email}")
def list_my_reviews(email: str, service: EngagementService = Depends(get_engagement_service)):
    return [review.to_document() for review in service.list_reviews_by_author(email)]
