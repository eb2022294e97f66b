"""
Provider module export.

A host module registry loads `services` and instantiates the class whose
`identifier` matches its configuration; `create_payment_provider` does the
same for in-process composition (see api.dependencies).
"""
from __future__ import annotations

from typing import Any, Mapping

from application.ports.payment_gateway import PaystackGateway
from application.ports.payment_provider import PaymentProvider
from application.services.paystack_provider import PaystackPaymentProvider


services = [PaystackPaymentProvider]

PROVIDERS = {service.identifier: service for service in services}


def create_payment_provider(
    identifier: str,
    options: Mapping[str, Any],
    *,
    logger: Any,
    gateway: PaystackGateway,
) -> PaymentProvider:
    try:
        provider_cls = PROVIDERS[identifier.lower()]
    except KeyError:
        raise ValueError(f"Unsupported payment provider: {identifier}") from None
    return provider_cls(options, logger=logger, gateway=gateway)


__all__ = ["services", "PROVIDERS", "create_payment_provider"]
