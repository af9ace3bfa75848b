from typing import Optional
from pydantic import BaseModel, Field


class InsertedResponse(BaseModel):
    """写入结果"""
    inserted_id: Optional[int] = Field(None, alias="insertedId", description="新记录ID")
    
    model_config = {"populate_by_name": True}


class MessageResponse(InsertedResponse):
    """带消息的写入结果"""
    message: str = Field(description="响应消息")


class DeletedResponse(BaseModel):
    """删除结果"""
    deleted_count: int = Field(alias="deletedCount", description="删除条数")
    
    model_config = {"populate_by_name": True}
