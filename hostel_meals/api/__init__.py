"""
API routes and endpoints.
"""

from fastapi import APIRouter
from .v1 import admin, meal_requests, meals, payments, reviews, upcoming, users

api_router = APIRouter()

api_router.include_router(meals.router, tags=["餐品"])
api_router.include_router(reviews.router, tags=["评价"])
api_router.include_router(meal_requests.router, tags=["餐品申请"])
api_router.include_router(upcoming.router, tags=["待上架"])
api_router.include_router(users.router, tags=["用户"])
api_router.include_router(payments.router, tags=["支付"])
api_router.include_router(admin.router, tags=["看板"])
