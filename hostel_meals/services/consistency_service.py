"""
数据一致性检查和修复服务
meals 上的 likes / reviews_count 是冗余计数，可随时按点赞和评价记录重新计算
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from .base import BaseService

logger = logging.getLogger(__name__)

COUNTER_DRIFT_SQL = """
SELECT m.id AS meal_id, m.title,
       m.likes AS stored_likes, COALESCE(l.cnt, 0) AS actual_likes,
       m.reviews_count AS stored_reviews, COALESCE(r.cnt, 0) AS actual_reviews
FROM meals m
LEFT JOIN (SELECT meal_id, COUNT(*) AS cnt FROM likes GROUP BY meal_id) l ON l.meal_id = m.id
LEFT JOIN (SELECT meal_id, COUNT(*) AS cnt FROM reviews GROUP BY meal_id) r ON r.meal_id = m.id
WHERE m.likes != COALESCE(l.cnt, 0) OR m.reviews_count != COALESCE(r.cnt, 0)
ORDER BY m.id
"""


class ConsistencyCheckResult:
    """一致性检查结果"""
    
    def __init__(self):
        self.issues: List[Dict[str, Any]] = []
        self.statistics: Dict[str, Any] = {}
    
    def add_issue(self, issue_type: str, description: str, details: Dict[str, Any] = None):
        """添加问题"""
        self.issues.append({
            'type': issue_type,
            'description': description,
            'details': details or {},
            'severity': 'error',
        })
    
    def to_dict(self) -> Dict[str, Any]:
        """转换为字典"""
        return {
            'issues': self.issues,
            'statistics': self.statistics,
            'summary': {
                'total_issues': len(self.issues),
                'status': 'healthy' if len(self.issues) == 0 else 'issues_found',
                'checked_at': datetime.now().isoformat()
            }
        }


class ConsistencyService(BaseService):
    """数据一致性服务"""
    
    def check_counters(self) -> Dict[str, Any]:
        """比较餐品计数与点赞/评价记录数"""
        result = ConsistencyCheckResult()
        
        for row in self.db.fetch_all(COUNTER_DRIFT_SQL):
            if row['stored_likes'] != row['actual_likes']:
                result.add_issue(
                    'likes_mismatch',
                    f"餐品 {row['meal_id']} 点赞数不一致",
                    {'meal_id': row['meal_id'], 'stored': row['stored_likes'], 'actual': int(row['actual_likes'])}
                )
            if row['stored_reviews'] != row['actual_reviews']:
                result.add_issue(
                    'reviews_count_mismatch',
                    f"餐品 {row['meal_id']} 评价数不一致",
                    {'meal_id': row['meal_id'], 'stored': row['stored_reviews'], 'actual': int(row['actual_reviews'])}
                )
        
        result.statistics = {
            'meals': int(self.db.fetch_value("SELECT COUNT(*) FROM meals")),
            'likes': int(self.db.fetch_value("SELECT COUNT(*) FROM likes")),
            'reviews': int(self.db.fetch_value("SELECT COUNT(*) FROM reviews")),
        }
        return result.to_dict()
    
    def repair_counters(self, operator_email: Optional[str] = None) -> Dict[str, Any]:
        """按点赞和评价记录重算计数"""
        with self.db.transaction() as conn:
            drifted = conn.execute(COUNTER_DRIFT_SQL).fetchall()
            conn.execute(
                """
                UPDATE meals SET
                    likes = (SELECT COUNT(*) FROM likes l WHERE l.meal_id = meals.id),
                    reviews_count = (SELECT COUNT(*) FROM reviews r WHERE r.meal_id = meals.id)
                """
            )
            repaired_ids = [row[0] for row in drifted]
            self.db.write_log(conn, "counter_repair", None, operator_email, {"meal_ids": repaired_ids})
        
        if repaired_ids:
            logger.warning("Repaired counters for meals %s", repaired_ids)
        return {"repaired": len(repaired_ids), "meal_ids": repaired_ids}
