"""
Payment provider port: the capability set a host e-commerce platform calls.

The host persists session data between calls and passes it back in; a
provider keeps no state of its own across calls.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional, Protocol, Union, runtime_checkable

from application.dtos.payments import (
    PaymentContext,
    PaymentSessionResult,
    ProviderResult,
    RefundInput,
    WebhookActionResult,
    WebhookPayload,
)
from domain.payment.session import PaymentSessionStatus


SessionData = dict[str, Any]


@runtime_checkable
class PaymentProvider(Protocol):
    identifier: str
    options: dict[str, Any]

    async def initiate(
        self,
        currency_code: Optional[str],
        amount: Union[Decimal, int, float, str, None],
        data: Optional[SessionData] = None,
        context: Optional[PaymentContext] = None,
    ) -> PaymentSessionResult: ...

    async def update(
        self,
        currency_code: Optional[str],
        amount: Union[Decimal, int, float, str, None],
        data: Optional[SessionData] = None,
        context: Optional[PaymentContext] = None,
    ) -> PaymentSessionResult: ...

    async def authorize(self, data: SessionData, context: Optional[dict[str, Any]] = None) -> ProviderResult: ...

    async def capture(self, data: SessionData) -> ProviderResult: ...

    async def refund(self, input: RefundInput) -> ProviderResult: ...

    async def cancel(self, data: SessionData) -> ProviderResult: ...

    async def retrieve(self, data: SessionData) -> ProviderResult: ...

    async def delete(self, data: SessionData) -> SessionData: ...

    async def get_status(self, data: SessionData) -> PaymentSessionStatus: ...

    async def get_webhook_action_and_data(self, payload: WebhookPayload) -> WebhookActionResult: ...
