from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str = Field(..., alias="DATABASE_URL")

    jwt_secret_key: str = Field(..., alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(15, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    # Simulated card processing time before the payment is recorded.
    payment_processing_delay_seconds: float = Field(2.0, alias="PAYMENT_PROCESSING_DELAY_SECONDS", ge=0)
    default_payment_method: str = Field("card", alias="DEFAULT_PAYMENT_METHOD")
    # Result-set cap for the admin dashboard's recent transactions list.
    recent_transactions_limit: int = Field(50, alias="RECENT_TRANSACTIONS_LIMIT", gt=0)

    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_format: Optional[str] = Field(None, alias="LOG_FORMAT")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


settings = Settings()
