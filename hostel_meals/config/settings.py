from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    # 数据库配置
    database_url: str = "duckdb://./data/hostel_meals.duckdb"
    
    # JWT配置
    jwt_secret_key: str = "your-secret-key"
    jwt_algorithm: str = "HS256"
    jwt_expire_hours: int = 24 * 7  # 7天
    jwt_issuer: Optional[str] = None
    jwt_audience: Optional[str] = None
    # 配置后改用身份提供方的公钥（RS256）校验token
    jwks_url: Optional[str] = None
    
    # 支付配置
    stripe_secret_key: Optional[str] = None
    stripe_api_base: str = "https://api.stripe.com/v1"
    payment_currency: str = "usd"
    payment_timeout_seconds: float = 10.0
    
    # API配置
    api_title: str = "Hostel Meals API"
    api_version: str = "1.0.0"
    api_prefix: str = ""
    cors_origins: List[str] = ["http://localhost:5173"]
    
    # 开发模式
    debug: bool = False
    log_level: str = "INFO"
    
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

# 全局设置实例
settings = Settings()
