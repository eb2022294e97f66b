"""
Paystack REST adapter using httpx directly (no vendor SDK).

Endpoints used:
  POST /transaction/initialize          -- start a transaction, get checkout URL
  GET  /transaction/verify/{reference}  -- fetch current transaction facts
  POST /refund                          -- refund a transaction (id or reference)

Every Paystack response is an envelope {status, message, data}. A non-2xx
HTTP status or `status: false` is a gateway failure; both, as well as
transport errors, come back as a failed GatewayResult rather than an
exception, with the gateway message and raw payload attached.
"""
from __future__ import annotations

from typing import Any, Optional
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from application.dtos.payments import (
    CreateRefund,
    GatewayResult,
    InitializeTransaction,
    RefundCreated,
    Transaction,
    TransactionInit,
)
from infrastructure.external.payments.base import BasePaymentClient
from infrastructure.external.payments.exceptions import PaymentConfigurationError
from core.settings import payment_settings


DEFAULT_BASE_URL = "https://api.paystack.co"


class PaystackClient(BasePaymentClient):
    provider = "paystack"

    def __init__(
        self,
        *,
        secret_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeouts: Optional[dict[str, float]] = None,
        retry: Optional[dict[str, Any]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        log: Optional[Any] = None,
    ):
        super().__init__(
            timeouts=timeouts or payment_settings.timeouts.model_dump(),
            retry=retry or {"max": payment_settings.retry.max, "base": payment_settings.retry.base_backoff},
            transport=transport,
            log=log,
        )
        self.secret_key = secret_key or payment_settings.paystack.secret_key
        if not self.secret_key:
            raise PaymentConfigurationError(
                "PAYSTACK__SECRET_KEY not configured", provider=self.provider, missing=["secret_key"]
            )
        self.base_url = (base_url or payment_settings.paystack.base_url or DEFAULT_BASE_URL).rstrip("/")

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.secret_key}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    async def _send(self, method: str, path: str, *, json: Optional[dict[str, Any]] = None) -> GatewayResult[Any]:
        url = f"{self.base_url}/{path.lstrip('/')}"

        async def _once() -> httpx.Response:
            async with self.client() as http:
                return await http.request(method, url, json=json, headers=self._headers())

        try:
            response = await self._retry(_once)
        except httpx.HTTPError as exc:
            self._log("paystack_transport_error", level="error", method=method, path=path, error=str(exc))
            return GatewayResult.failure(f"Paystack request failed: {exc}")

        try:
            body = response.json()
        except ValueError:
            body = None

        if not isinstance(body, dict):
            self._log(
                "paystack_unexpected_response",
                level="error",
                method=method,
                path=path,
                status_code=response.status_code,
            )
            return GatewayResult.failure(
                f"Unexpected Paystack response (HTTP {response.status_code})",
                raw=response.text,
                status_code=response.status_code,
            )

        message = str(body.get("message") or "")
        if response.is_error or body.get("status") is not True:
            self._log(
                "paystack_request_failed",
                level="warning",
                method=method,
                path=path,
                status_code=response.status_code,
                message=message,
            )
            return GatewayResult.failure(
                message or f"Paystack request failed with status {response.status_code}",
                raw=body,
                status_code=response.status_code,
            )

        return GatewayResult.success(body.get("data"), message=message, raw=body, status_code=response.status_code)

    @staticmethod
    def _parse(result: GatewayResult[Any], model: type[BaseModel]) -> GatewayResult[Any]:
        if not result.ok:
            return result
        try:
            data = model.model_validate(result.data or {})
        except ValidationError as exc:
            return GatewayResult.failure(
                f"Malformed Paystack response: {exc.errors()[0].get('msg', 'invalid')}",
                raw=result.raw,
                status_code=result.status_code,
            )
        return GatewayResult.success(data, message=result.message, raw=result.raw, status_code=result.status_code)

    async def initialize_transaction(self, req: InitializeTransaction) -> GatewayResult[TransactionInit]:
        payload = req.model_dump(exclude_none=True)
        self._log(
            "paystack_initialize_request",
            reference=req.reference,
            amount=req.amount,
            currency=req.currency,
        )
        result = self._parse(await self._send("POST", "/transaction/initialize", json=payload), TransactionInit)
        if result.ok:
            self._log("paystack_initialize_response", reference=result.data.reference)
        return result

    async def verify_transaction(self, reference: str) -> GatewayResult[Transaction]:
        self._log("paystack_verify_request", reference=reference)
        result = self._parse(
            await self._send("GET", f"/transaction/verify/{quote(reference, safe='')}"),
            Transaction,
        )
        if result.ok:
            self._log("paystack_verify_response", reference=reference, status=result.data.status)
        return result

    async def create_refund(self, req: CreateRefund) -> GatewayResult[RefundCreated]:
        self._log("paystack_refund_request", transaction=req.transaction, amount=req.amount, currency=req.currency)
        result = self._parse(
            await self._send("POST", "/refund", json=req.model_dump(exclude_none=True)),
            RefundCreated,
        )
        if result.ok:
            self._log("paystack_refund_response", transaction=req.transaction, refund_id=result.data.id)
        return result
