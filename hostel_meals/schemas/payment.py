"""
支付相关的请求模式
"""

from pydantic import BaseModel, Field
from typing import Optional


class PaymentIntentRequest(BaseModel):
    """支付意向请求，price 以货币单位计"""
    price: float = Field(..., gt=0, description="金额")


class PaymentIntentResponse(BaseModel):
    client_secret: str = Field(alias="clientSecret")
    
    model_config = {"populate_by_name": True}


class PaymentCreateRequest(BaseModel):
    """支付记录写入请求"""
    email: str = Field(..., min_length=1, description="付款人邮箱")
    amount: float = Field(..., gt=0, description="金额")
    transaction_id: Optional[str] = Field(None, alias="transactionId", description="支付流水号")
    badge: Optional[str] = Field(None, description="购买的会员等级")
    
    model_config = {"populate_by_name": True}
