"""
Domain models.
"""

from .user import User, UserCreate, UserRole, Badge, is_premium_badge
from .meal import Meal, MealCreate, UpcomingMeal
from .engagement import LikeResult, Review
from .meal_request import MealRequest, MealRequestStatus, UserMealRequestView, AdminMealRequestView
from .payment import Payment

__all__ = [
    "User", "UserCreate", "UserRole", "Badge", "is_premium_badge",
    "Meal", "MealCreate", "UpcomingMeal",
    "LikeResult", "Review",
    "MealRequest", "MealRequestStatus", "UserMealRequestView", "AdminMealRequestView",
    "Payment",
]
