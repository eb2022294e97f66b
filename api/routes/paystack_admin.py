"""
Paystack admin routes: look up a transaction, or trigger verify/refund.
"""
from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from api.dependencies import get_payment_provider
from application.dtos.payments import ProviderResult, RefundInput
from application.ports.payment_provider import PaymentProvider
from core.logging_config import get_logger
from core.response import success_response
from domain.common.exceptions import BusinessException, MissingParameterException
from infrastructure.external.payments.exceptions import PaymentProviderError, PaymentRecoverableError
from shared.codes import BusinessCode


router = APIRouter(prefix="/admin/paystack", tags=["Paystack Admin"])
logger = get_logger(__name__)

ADMIN_ACTIONS = {"verify", "refund"}


class AdminActionRequest(BaseModel):
    action: str
    reference: Optional[str] = None
    amount: Optional[Decimal] = None
    currency: Optional[str] = None


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _raise_on_error(result: ProviderResult, provider: PaymentProvider) -> None:
    if not result.is_error:
        return
    detail = result.error.detail
    # No raw payload: the request never reached Paystack, safe to retry later
    if isinstance(detail, dict) and "raw" in detail and detail["raw"] is None:
        raise PaymentRecoverableError(
            result.error.error,
            provider=provider.identifier,
            details={"detail": detail},
        )
    raise PaymentProviderError(
        result.error.error,
        provider=provider.identifier,
        details={"detail": detail},
    )


async def _verify(reference: str, provider: PaymentProvider) -> dict:
    data = {"reference": reference}
    result = await provider.retrieve(data)
    _raise_on_error(result, provider)
    status = await provider.get_status(data)
    return {
        "reference": reference,
        "status": status.value,
        "transaction": result.model_dump(mode="json")["data"],
        "timestamp": _now(),
    }


@router.get("", summary="Verify a Paystack payment")
async def verify_payment(
    reference: Optional[str] = Query(default=None),
    provider: PaymentProvider = Depends(get_payment_provider),
):
    if not reference:
        raise MissingParameterException("reference", "Payment reference is required")
    logger.info("paystack_admin_verify", reference=reference)
    return success_response(data=await _verify(reference, provider), message="Payment verified")


@router.post("", summary="Run an admin action")
async def admin_action(payload: AdminActionRequest, provider: PaymentProvider = Depends(get_payment_provider)):
    logger.info("paystack_admin_action", action=payload.action, reference=payload.reference)

    if payload.action not in ADMIN_ACTIONS:
        raise BusinessException(
            code=BusinessCode.PARAM_ERROR,
            message="Invalid action",
            error_type="InvalidAction",
            details={"action": payload.action, "allowed": sorted(ADMIN_ACTIONS)},
            field="action",
        )
    if not payload.reference:
        raise MissingParameterException("reference", "Payment reference is required")

    if payload.action == "verify":
        return success_response(data=await _verify(payload.reference, provider), message="Payment verified")

    if payload.amount is None:
        raise MissingParameterException("amount", "Refund amount is required")
    if payload.amount <= 0:
        raise BusinessException(
            code=BusinessCode.PARAM_ERROR,
            message="Refund amount must be greater than zero",
            error_type="InvalidAmount",
            details={"amount": str(payload.amount)},
            field="amount",
        )

    # Paystack's refund endpoint takes either the transaction id or its reference
    result = await provider.refund(
        RefundInput(transaction_id=payload.reference, amount=payload.amount, currency=payload.currency)
    )
    _raise_on_error(result, provider)
    return success_response(
        data={"reference": payload.reference, "amount": str(payload.amount), **result.model_dump(mode="json")["data"]},
        message="Refund initiated",
    )
