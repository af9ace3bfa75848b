"""
支付记录数据模型
"""

from pydantic import Field
from datetime import datetime
from typing import Optional
from .base import BaseEntity


class Payment(BaseEntity):
    """支付记录"""
    id: int
    email: str
    amount: float
    transaction_id: Optional[str] = Field(None, alias="transactionId")
    badge: Optional[str] = None
    date: Optional[datetime] = None
