"""
支付服务测试，支付服务商的HTTP调用全部打桩
"""

from unittest.mock import MagicMock

import pytest
import requests

from ..core.exceptions import PaymentProviderError
from ..services.payment_service import PaymentGateway, PaymentService


def fake_response(status_code, payload):
    response = MagicMock()
    response.status_code = status_code
    response.content = b"{}"
    response.json.return_value = payload
    return response


@pytest.fixture
def session():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def payment_service(test_db, test_settings, session):
    return PaymentService(test_db, PaymentGateway(test_settings, session=session))


class TestPaymentService:
    
    def test_create_intent_converts_to_cents(self, payment_service, session):
        session.post.return_value = fake_response(200, {"client_secret": "pi_123_secret_abc"})
        
        result = payment_service.create_intent(19.99)
        
        assert result == {"clientSecret": "pi_123_secret_abc"}
        _, kwargs = session.post.call_args
        assert kwargs["data"]["amount"] == 1999
        assert kwargs["data"]["currency"] == "usd"
        assert kwargs["auth"] == ("sk_test_123", "")
    
    def test_provider_rejection(self, payment_service, session):
        session.post.return_value = fake_response(402, {"error": {"message": "Card declined"}})
        
        with pytest.raises(PaymentProviderError) as exc_info:
            payment_service.create_intent(5)
        assert "Card declined" in exc_info.value.message
    
    def test_provider_unreachable(self, payment_service, session):
        session.post.side_effect = requests.ConnectionError("boom")
        
        with pytest.raises(PaymentProviderError):
            payment_service.create_intent(5)
    
    def test_missing_secret_key(self, test_db, test_settings, session):
        settings = test_settings.model_copy(update={"stripe_secret_key": None})
        service = PaymentService(test_db, PaymentGateway(settings, session=session))
        
        with pytest.raises(PaymentProviderError):
            service.create_intent(5)
        session.post.assert_not_called()
    
    def test_record_and_history(self, payment_service, test_db):
        first = payment_service.record_payment("a@hostel.test", 10, "tx_1", "silver")
        second = payment_service.record_payment("a@hostel.test", 20, "tx_2", "gold")
        payment_service.record_payment("b@hostel.test", 30, "tx_3", "gold")
        
        history = payment_service.history("a@hostel.test")
        
        assert [p.id for p in history] == [second.id, first.id]
        assert history[0].to_document()["transactionId"] == "tx_2"
        assert test_db.fetch_value("SELECT COUNT(*) FROM logs WHERE action = 'payment_record'") == 3
