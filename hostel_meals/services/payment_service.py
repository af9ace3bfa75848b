"""
支付服务
创建支付意向（调用支付服务商REST接口）和支付记录的读写
"""

import logging
from typing import Any, Dict, List, Optional

import requests

from ..config.settings import Settings
from ..core.database import fetch_dicts, utcnow
from ..core.exceptions import PaymentProviderError, ValidationError
from ..models.payment import Payment
from .base import BaseService

logger = logging.getLogger(__name__)

PAYMENT_COLUMNS = "id, email, amount, transaction_id, badge, date"


class PaymentGateway:
    """支付服务商客户端，只负责按金额创建支付意向"""
    
    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        self.settings = settings
        self.session = session or requests.Session()
    
    def create_intent(self, amount_cents: int) -> str:
        """创建支付意向并返回 client secret"""
        if not self.settings.stripe_secret_key:
            raise PaymentProviderError("Payment provider is not configured")
        
        url = f"{self.settings.stripe_api_base.rstrip('/')}/payment_intents"
        try:
            response = self.session.post(
                url,
                auth=(self.settings.stripe_secret_key, ""),
                data={
                    "amount": amount_cents,
                    "currency": self.settings.payment_currency,
                    "payment_method_types[]": "card",
                },
                timeout=self.settings.payment_timeout_seconds,
            )
        except requests.RequestException as e:
            logger.error("Payment provider unreachable: %s", e)
            raise PaymentProviderError(f"Payment provider request failed: {e}")
        
        try:
            data = response.json() if response.content else {}
        except ValueError:
            data = {}
        if response.status_code >= 400 or "client_secret" not in data:
            message = (data.get("error") or {}).get("message") or f"HTTP {response.status_code}"
            logger.error("Payment intent rejected: %s", message)
            raise PaymentProviderError(f"Payment intent failed: {message}")
        return data["client_secret"]


class PaymentService(BaseService):
    """支付服务"""
    
    def __init__(self, db, gateway: PaymentGateway):
        super().__init__(db)
        self.gateway = gateway
    
    def create_intent(self, price: float) -> Dict[str, str]:
        """按金额（货币单位）创建支付意向"""
        amount_cents = int(round(price * 100))
        if amount_cents <= 0:
            raise ValidationError("Price must be positive")
        return {"clientSecret": self.gateway.create_intent(amount_cents)}
    
    def record_payment(self, email: str, amount: float, transaction_id: Optional[str] = None,
                       badge: Optional[str] = None, actor_email: Optional[str] = None) -> Payment:
        """写入支付记录"""
        with self.db.transaction() as conn:
            row = fetch_dicts(
                conn,
                f"INSERT INTO payments(email, amount, transaction_id, badge, date) VALUES (?,?,?,?,?) "
                f"RETURNING {PAYMENT_COLUMNS}",
                [email, amount, transaction_id, badge, utcnow()]
            )[0]
            self.db.write_log(conn, "payment_record", email, actor_email or email,
                              {"payment_id": row["id"], "amount": amount, "badge": badge})
        return Payment(**row)
    
    def history(self, email: str) -> List[Payment]:
        """支付历史，最新在前"""
        rows = self.db.fetch_all(
            f"SELECT {PAYMENT_COLUMNS} FROM payments WHERE email = ? ORDER BY date DESC, id DESC",
            [email]
        )
        return [Payment(**row) for row in rows]
