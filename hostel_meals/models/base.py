"""
基础数据模型
对外字段沿用客户端的 camelCase 命名，内部使用 snake_case
"""

from pydantic import BaseModel
from typing import Any, Dict


class BaseEntity(BaseModel):
    """基础实体模型"""
    
    model_config = {"from_attributes": True, "populate_by_name": True, "use_enum_values": True}
    
    def to_document(self) -> Dict[str, Any]:
        """转换为API返回的文档格式"""
        return self.model_dump(by_alias=True, mode="json")
