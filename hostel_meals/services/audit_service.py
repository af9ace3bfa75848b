"""
操作日志查询服务
"""

import json
from typing import Any, Dict, Optional

from .base import BaseService


class AuditLogService(BaseService):
    """操作日志查询"""
    
    def list_logs(self, page: int = 1, size: int = 20, action: Optional[str] = None) -> Dict[str, Any]:
        """分页查询日志，最新在前，可按 action 过滤"""
        where, params = "", []
        if action:
            where, params = "WHERE action = ?", [action]
        
        total = int(self.db.fetch_value(f"SELECT COUNT(*) FROM logs {where}", params))
        rows = self.db.fetch_all(
            f"""
            SELECT id, user_email, actor_email, action, detail_json, created_at
            FROM logs {where}
            ORDER BY created_at DESC, id DESC
            LIMIT ? OFFSET ?
            """,
            params + [size, (page - 1) * size]
        )
        
        logs = []
        for row in rows:
            detail = json.loads(row.pop("detail_json") or "{}")
            logs.append({**row, "detail": detail, "created_at": str(row["created_at"])})
        
        return {
            "logs": logs,
            "total": total,
            "page": page,
            "size": size,
            "pages": (total + size - 1) // size,
        }
