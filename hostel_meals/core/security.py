"""
安全相关功能
Bearer token 校验：共享密钥（HS256）或身份提供方的 JWKS 公钥
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from ..config.settings import Settings
from .exceptions import AuthenticationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerifiedPrincipal:
    """已验证的调用方身份，下游只接触邮箱和声明，不接触原始token"""
    email: str
    claims: Dict[str, Any] = field(default_factory=dict)


class SecurityManager:
    """安全管理器"""

    def __init__(self, settings: Settings):
        self.settings = settings
        self._jwks_client: Optional[jwt.PyJWKClient] = None
        if settings.jwks_url:
            self._jwks_client = jwt.PyJWKClient(settings.jwks_url)

    def create_jwt_token(self, email: str, additional_claims: Dict[str, Any] = None) -> str:
        """创建JWT token（共享密钥模式）"""
        now = datetime.now(timezone.utc)
        payload = {
            "email": email,
            "iat": now,
            "exp": now + timedelta(hours=self.settings.jwt_expire_hours),
        }
        if self.settings.jwt_issuer:
            payload["iss"] = self.settings.jwt_issuer
        if self.settings.jwt_audience:
            payload["aud"] = self.settings.jwt_audience
        if additional_claims:
            payload.update(additional_claims)
        return jwt.encode(payload, self.settings.jwt_secret_key, algorithm=self.settings.jwt_algorithm)

    def decode_jwt_token(self, token: str) -> Dict[str, Any]:
        """解码并校验JWT token"""
        options = {"verify_aud": self.settings.jwt_audience is not None}
        try:
            if self._jwks_client is not None:
                signing_key = self._jwks_client.get_signing_key_from_jwt(token)
                key, algorithms = signing_key.key, ["RS256"]
            else:
                key, algorithms = self.settings.jwt_secret_key, [self.settings.jwt_algorithm]
            return jwt.decode(
                token,
                key,
                algorithms=algorithms,
                audience=self.settings.jwt_audience,
                issuer=self.settings.jwt_issuer,
                options=options,
            )
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token has expired")
        except jwt.PyJWKClientError as e:
            logger.warning("JWKS lookup failed: %s", e)
            raise AuthenticationError("Invalid token")
        except jwt.InvalidTokenError as e:
            raise AuthenticationError(f"Invalid token: {e}")

    def verify(self, token: Optional[str]) -> VerifiedPrincipal:
        """校验 bearer token 并解析出调用方邮箱"""
        if not token:
            raise AuthenticationError("Unauthorized access")
        claims = self.decode_jwt_token(token)
        email = claims.get("email")
        if not email or not isinstance(email, str):
            raise AuthenticationError("Token missing email")
        return VerifiedPrincipal(email=email, claims=claims)
