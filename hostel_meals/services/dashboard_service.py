"""
看板统计服务
只读汇总，每次调用实时计算
"""

from typing import Any, Dict

from .base import BaseService


class DashboardService(BaseService):
    """看板统计服务"""
    
    def admin_dashboard(self) -> Dict[str, Any]:
        """全站统计：餐品数、评价数、点赞总数、申请数"""
        row = self.db.fetch_one(
            """
            SELECT
                (SELECT COUNT(*) FROM meals) AS total_meals,
                (SELECT COUNT(*) FROM reviews) AS total_reviews,
                (SELECT COALESCE(SUM(likes), 0) FROM meals) AS total_likes,
                (SELECT COUNT(*) FROM meal_requests) AS total_requests
            """
        )
        return {
            "totalMeals": int(row["total_meals"]),
            "totalReviews": int(row["total_reviews"]),
            "totalLikes": int(row["total_likes"]),
            "totalRequests": int(row["total_requests"]),
        }
    
    def user_dashboard(self, email: str) -> Dict[str, Any]:
        """个人统计：申请数、评价数、支付次数和会员等级"""
        row = self.db.fetch_one(
            """
            SELECT
                (SELECT COUNT(*) FROM meal_requests WHERE user_email = ?) AS requested_meals,
                (SELECT COUNT(*) FROM reviews WHERE email = ?) AS reviews,
                (SELECT COUNT(*) FROM payments WHERE email = ?) AS payments,
                (SELECT badge FROM users WHERE email = ?) AS badge
            """,
            [email, email, email, email]
        )
        return {
            "requestedMeals": int(row["requested_meals"]),
            "reviews": int(row["reviews"]),
            "payments": int(row["payments"]),
            "badge": row["badge"],
        }
