"""
Payment gateway port (application/ports) exposing a replaceable protocol.

Application depends on this Protocol; infrastructure implements adapters.
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from application.dtos.payments import (
    CreateRefund,
    GatewayResult,
    InitializeTransaction,
    RefundCreated,
    Transaction,
    TransactionInit,
)


@runtime_checkable
class PaystackGateway(Protocol):
    """Outbound calls against the Paystack REST API.

    Implementations never raise for gateway or transport failures: every call
    returns a GatewayResult tagged ok/failed.
    """

    provider: str

    async def initialize_transaction(self, req: InitializeTransaction) -> GatewayResult[TransactionInit]: ...

    async def verify_transaction(self, reference: str) -> GatewayResult[Transaction]: ...

    async def create_refund(self, req: CreateRefund) -> GatewayResult[RefundCreated]: ...

    async def aclose(self) -> None: ...
