"""
用户服务
注册、查询以及角色和会员等级的修改
"""

import logging
from typing import Any, Dict, List, Optional

from ..core.database import fetch_dicts, utcnow
from ..core.exceptions import DuplicateRecordError, UserNotFoundError, ValidationError
from ..models.user import LOWEST_BADGE, User, UserCreate, UserRole
from .base import BaseService, parse_id

logger = logging.getLogger(__name__)

USER_COLUMNS = "id, email, name, photo, role, badge, created_at"


class UserService(BaseService):
    """用户服务"""
    
    def create_user(self, user_data: UserCreate) -> Dict[str, Any]:
        """注册用户，邮箱已存在时不重复创建"""
        try:
            with self.db.transaction() as conn:
                if conn.execute("SELECT 1 FROM users WHERE email = ?", [user_data.email]).fetchone():
                    return {"message": "User already exists", "insertedId": None}
                
                user_id = conn.execute(
                    "INSERT INTO users(email, name, photo, role, badge, created_at) VALUES (?,?,?,?,?,?) RETURNING id",
                    [user_data.email, user_data.name, user_data.photo,
                     UserRole.USER.value, LOWEST_BADGE, utcnow()]
                ).fetchone()[0]
        except DuplicateRecordError:
            return {"message": "User already exists", "insertedId": None}
        
        logger.info("User created: id=%s email=%s", user_id, user_data.email)
        return {"message": "User created", "insertedId": user_id}
    
    def get_user(self, email: str) -> User:
        """按邮箱获取用户"""
        row = self.db.fetch_one(f"SELECT {USER_COLUMNS} FROM users WHERE email = ?", [email])
        if not row:
            raise UserNotFoundError()
        return User(**row)
    
    def search_users(self, query: Optional[str]) -> List[User]:
        """按邮箱或用户名模糊搜索（大小写不敏感）"""
        query = (query or "").strip()
        if not query:
            raise ValidationError("Search query required")
        
        pattern = f"%{query}%"
        rows = self.db.fetch_all(
            f"SELECT {USER_COLUMNS} FROM users WHERE email ILIKE ? OR name ILIKE ? ORDER BY email",
            [pattern, pattern]
        )
        return [User(**row) for row in rows]
    
    def get_role(self, email: str) -> str:
        """用户角色，未注册用户视为普通用户"""
        role = self.db.fetch_value("SELECT role FROM users WHERE email = ?", [email])
        return role or UserRole.USER.value
    
    def update_role(self, user_id: Any, role: UserRole, actor_email: str) -> User:
        """修改角色（管理员操作）"""
        user_id = parse_id(user_id, "user id")
        role_value = role.value if isinstance(role, UserRole) else str(role)
        
        with self.db.transaction() as conn:
            rows = fetch_dicts(
                conn,
                f"UPDATE users SET role = ? WHERE id = ? RETURNING {USER_COLUMNS}",
                [role_value, user_id]
            )
            if not rows:
                raise UserNotFoundError()
            user = User(**rows[0])
            self.db.write_log(conn, "role_update", user.email, actor_email, {"role": role_value})
        
        return user
    
    def update_badge(self, email: str, badge: str, actor_email: Optional[str] = None) -> User:
        """修改会员等级（支付成功后由本人或管理员调用）"""
        badge = badge.strip().lower()
        
        with self.db.transaction() as conn:
            rows = fetch_dicts(
                conn,
                f"UPDATE users SET badge = ? WHERE email = ? RETURNING {USER_COLUMNS}",
                [badge, email]
            )
            if not rows:
                raise UserNotFoundError()
            self.db.write_log(conn, "badge_update", email, actor_email, {"badge": badge})
        
        return User(**rows[0])
