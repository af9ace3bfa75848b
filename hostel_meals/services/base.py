"""
服务基类和通用工具
"""

from typing import Any

from ..core.database import DatabaseManager
from ..core.exceptions import ValidationError


def parse_id(value: Any, label: str = "id") -> int:
    """把路径/请求体中的ID解析为整数，格式不合法时返回400"""
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {label}")
    if isinstance(value, int):
        if value <= 0:
            raise ValidationError(f"Invalid {label}")
        return value
    text = str(value).strip() if value is not None else ""
    # 只接受ASCII数字（"²" 满足 isdigit 但 int() 无法解析）
    if not (text.isascii() and text.isdecimal()) or int(text) <= 0:
        raise ValidationError(f"Invalid {label}")
    return int(text)


class BaseService:
    """持有显式注入的数据库句柄"""
    
    def __init__(self, db: DatabaseManager):
        self.db = db
