"""
Paystack webhook routes (store-facing).

Paystack posts `{event, data}` with an `x-paystack-signature` header. The
signature is checked over the raw body before anything is parsed; the event is
then handed to the provider, which maps it to a host action.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request

from api.dependencies import get_payment_provider
from application.dtos.payments import WebhookPayload
from application.ports.payment_provider import PaymentProvider
from application.services.webhook_service import get_signature_header, parse_envelope, verify_signature
from core.logging_config import get_logger
from core.response import success_response
from infrastructure.external.payments.exceptions import PaymentSignatureError


router = APIRouter(prefix="/store/paystack", tags=["Paystack"])
logger = get_logger(__name__)


def _envelope_for_logging(raw_body: bytes) -> tuple[Optional[str], dict[str, Any]]:
    try:
        return parse_envelope(raw_body)
    except ValueError:
        return None, {}


def _log_event(event: Optional[str], data: dict[str, Any]) -> None:
    customer = data.get("customer") if isinstance(data.get("customer"), dict) else {}
    fields = {"webhook_event": event, "reference": data.get("reference"), "amount": data.get("amount")}
    if event == "charge.success":
        logger.info("paystack_charge_succeeded", email=customer.get("email"), **fields)
    elif event == "charge.failed":
        logger.info("paystack_charge_failed", email=customer.get("email"), **fields)
    elif event == "transfer.success":
        logger.info("paystack_transfer_succeeded", **fields)
    elif event == "transfer.failed":
        logger.info("paystack_transfer_failed", **fields)
    else:
        logger.info("paystack_webhook_unhandled", **fields)


@router.get("/webhook", summary="Webhook liveness")
async def paystack_webhook_status():
    return success_response(
        data={"timestamp": datetime.now(timezone.utc).isoformat()},
        message="Paystack plugin is running",
    )


@router.post("/webhook", summary="Receive Paystack webhook")
async def paystack_webhook(request: Request, provider: PaymentProvider = Depends(get_payment_provider)):
    raw_body = await request.body()
    headers = {k: v for k, v in request.headers.items()}

    secret = provider.options.get("webhook_secret")
    if not verify_signature(raw_body, get_signature_header(headers), secret):
        logger.error("paystack_webhook_signature_invalid")
        raise PaymentSignatureError("Invalid signature", provider=provider.identifier)

    event, data = _envelope_for_logging(raw_body)
    _log_event(event, data)

    result = await provider.get_webhook_action_and_data(WebhookPayload(raw_data=raw_body, headers=headers))

    # 200 for every processed delivery, unsupported events included, so Paystack stops retrying
    return success_response(
        data={"event": event, **result.model_dump(mode="json")},
        message="Webhook processed successfully",
    )
