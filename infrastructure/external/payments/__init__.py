"""
Factory for payment gateway clients.
"""
from __future__ import annotations

from typing import Any, Optional

from core.settings import payment_settings
from application.ports.payment_gateway import PaystackGateway


def get_payment_gateway(provider: Optional[str] = None, **options: Any) -> PaystackGateway:
    name = (provider or payment_settings.default_provider).lower()
    if name == "paystack":
        from .paystack_client import PaystackClient
        return PaystackClient(**options)
    raise ValueError(f"Unsupported payment provider: {name}")
