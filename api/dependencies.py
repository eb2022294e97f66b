"""
API依赖项 - 支付提供方组装（composition root）
"""
from typing import AsyncIterator

from application.ports.payment_provider import PaymentProvider
from application.providers import create_payment_provider
from core.logging_config import get_logger
from core.settings import payment_settings
from infrastructure.external.payments import get_payment_gateway


async def get_payment_provider() -> AsyncIterator[PaymentProvider]:
    """按配置构建 provider；请求结束后关闭底层 HTTP 客户端"""
    provider_name = payment_settings.default_provider
    cfg = payment_settings.paystack
    gateway = get_payment_gateway(
        provider_name,
        secret_key=cfg.secret_key,
        base_url=cfg.base_url,
        log=get_logger("payments.gateway"),
    )
    try:
        yield create_payment_provider(
            provider_name,
            cfg.provider_options(),
            logger=get_logger("payments.provider"),
            gateway=gateway,
        )
    finally:
        await gateway.aclose()
