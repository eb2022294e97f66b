"""
Payment-related settings using pydantic-settings v2 with nested env keys.

This module is isolated so core.config.Settings stays focused on the app shell.
Example env: PAYSTACK__SECRET_KEY, PAYSTACK__PUBLIC_KEY, PAYSTACK__WEBHOOK_SECRET, RETRY__MAX
(there is no env prefix; only default_provider reads PAYMENT__DEFAULT_PROVIDER).
"""
from __future__ import annotations

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import BaseModel, Field


class PaymentTimeouts(BaseModel):
    connect: float = 2.0
    read: float = 10.0
    write: float = 10.0
    total: float = 15.0


class PaymentRetry(BaseModel):
    # 0 = no automatic retry; only connection failures are ever retried
    max: int = 0
    base_backoff: float = 0.2


class PaystackSettings(BaseModel):
    secret_key: Optional[str] = None
    public_key: Optional[str] = None
    webhook_secret: Optional[str] = None
    base_url: str = "https://api.paystack.co"
    callback_url: Optional[str] = None
    default_currency: str = "NGN"
    reference_prefix: str = "host"

    def provider_options(self) -> dict:
        return self.model_dump()


class PaymentSettings(BaseSettings):
    default_provider: str = Field(default="paystack", validation_alias="PAYMENT__DEFAULT_PROVIDER")
    timeouts: PaymentTimeouts = Field(default_factory=PaymentTimeouts)
    retry: PaymentRetry = Field(default_factory=PaymentRetry)

    paystack: PaystackSettings = Field(default_factory=PaystackSettings)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="allow",
        env_nested_delimiter="__",
        populate_by_name=True,
    )


payment_settings = PaymentSettings()
