"""
支付路由模块
"""

from fastapi import APIRouter, Depends

from ...core.security import VerifiedPrincipal
from ...schemas.common import InsertedResponse
from ...schemas.payment import PaymentCreateRequest, PaymentIntentRequest, PaymentIntentResponse
from ...services.authorization_service import AuthorizationPolicy
from ...services.payment_service import PaymentService
from ..deps import get_payment_service, get_policy, get_principal

router = APIRouter()


@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
def create_payment_intent(
    req: PaymentIntentRequest,
    principal: VerifiedPrincipal = Depends(get_principal),
    service: PaymentService = Depends(get_payment_service),
):
    """创建支付意向，返回 clientSecret"""
    return service.create_intent(req.price)


@router.post("/payments", response_model=InsertedResponse)
def record_payment(
    req: PaymentCreateRequest,
    principal: VerifiedPrincipal = Depends(get_principal),
    policy: AuthorizationPolicy = Depends(get_policy),
    service: PaymentService = Depends(get_payment_service),
):
    """记录支付结果（本人或管理员）"""
    policy.require_self_or_admin(principal, req.email)
    payment = service.record_payment(req.email, req.amount, req.transaction_id, req.badge,
                                     actor_email=principal.email)
    return {"insertedId": payment.id}


@router.get("/payments/{email}")
def list_payments(
    email: str,
    principal: VerifiedPrincipal = Depends(get_principal),
    policy: AuthorizationPolicy = Depends(get_policy),
    service: PaymentService = Depends(get_payment_service),
):
    policy.require_self_or_admin(principal, email)
    return [payment.to_document() for payment in service.history(email)]
