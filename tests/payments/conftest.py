"""Shared fixtures for the payment tests: a stub gateway implementing the port."""
from typing import Any, Optional

import pytest
import structlog

from application.dtos.payments import (
    CreateRefund,
    GatewayResult,
    InitializeTransaction,
    RefundCreated,
    Transaction,
    TransactionInit,
)
from application.services.paystack_provider import PaystackPaymentProvider


OPTIONS = {"secret_key": "sk_test_secret", "public_key": "pk_test_public"}


class StubGateway:
    provider = "paystack"

    def __init__(
        self,
        *,
        init: Optional[GatewayResult] = None,
        verify: Optional[GatewayResult] = None,
        refund: Optional[GatewayResult] = None,
    ) -> None:
        self.init_result = init or GatewayResult.success(
            TransactionInit(
                authorization_url="https://checkout.paystack.com/abc",
                access_code="abc",
                reference="ref_1",
            )
        )
        self.verify_result = verify or GatewayResult.success(
            Transaction(id=42, status="success", reference="ref_1", amount=2550, gateway_response="Approved")
        )
        self.refund_result = refund or GatewayResult.success(RefundCreated(id=7, status="pending"))
        self.calls: list[tuple[str, Any]] = []

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    async def initialize_transaction(self, req: InitializeTransaction) -> GatewayResult:
        self.calls.append(("initialize", req))
        return self.init_result

    async def verify_transaction(self, reference: str) -> GatewayResult:
        self.calls.append(("verify", reference))
        return self.verify_result

    async def create_refund(self, req: CreateRefund) -> GatewayResult:
        self.calls.append(("refund", req))
        return self.refund_result

    async def aclose(self) -> None:
        self.calls.append(("aclose", None))


@pytest.fixture
def gateway_factory():
    return StubGateway


@pytest.fixture
def provider_factory():
    def _make(gateway: Optional[StubGateway] = None, **options: Any) -> PaystackPaymentProvider:
        return PaystackPaymentProvider(
            {**OPTIONS, **options},
            logger=structlog.get_logger("tests"),
            gateway=gateway or StubGateway(),
        )

    return _make
