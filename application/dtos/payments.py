"""
Payment DTOs (Pydantic v2) used at application boundaries.

Two families live here: gateway-facing models (what the Paystack adapter
sends and receives) and host-facing models (what the provider hands back to
the e-commerce host for each lifecycle call).
"""
from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Any, Generic, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from domain.payment.session import PaymentSessionStatus
from shared.codes.payment_codes import PAYSTACK_ERROR_CODE


T = TypeVar("T")


# ---------------------------------------------------------------------------
# Gateway-facing models
# ---------------------------------------------------------------------------


class InitializeTransaction(BaseModel):
    email: str
    amount: int = Field(ge=0, description="Amount in currency subunits")
    currency: str
    reference: str
    callback_url: Optional[str] = None
    metadata: Optional[dict[str, Any]] = None

    @field_validator("currency")
    @classmethod
    def _upper_currency(cls, v: str) -> str:
        return (v or "").upper()


class TransactionInit(BaseModel):
    authorization_url: Optional[str] = None
    access_code: Optional[str] = None
    reference: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class TransactionCustomer(BaseModel):
    id: Optional[int] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    customer_code: Optional[str] = None
    phone: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class TransactionAuthorization(BaseModel):
    authorization_code: Optional[str] = None
    bin: Optional[str] = None
    last4: Optional[str] = None
    exp_month: Optional[str] = None
    exp_year: Optional[str] = None
    channel: Optional[str] = None
    card_type: Optional[str] = None
    bank: Optional[str] = None
    country_code: Optional[str] = None
    brand: Optional[str] = None
    reusable: Optional[bool] = None

    model_config = ConfigDict(extra="allow")


class Transaction(BaseModel):
    """A verified Paystack transaction (amount is in subunits, as returned)."""

    id: Optional[int] = None
    status: str
    reference: Optional[str] = None
    amount: Optional[int] = None
    currency: Optional[str] = None
    gateway_response: Optional[str] = None
    paid_at: Optional[str] = None
    created_at: Optional[str] = None
    channel: Optional[str] = None
    customer: Optional[TransactionCustomer] = None
    authorization: Optional[TransactionAuthorization] = None
    metadata: Optional[Any] = None

    model_config = ConfigDict(extra="allow")


class CreateRefund(BaseModel):
    transaction: str = Field(description="Transaction id or reference")
    amount: int = Field(ge=0, description="Amount in currency subunits")
    currency: str
    customer_note: Optional[str] = None
    merchant_note: Optional[str] = None


class RefundCreated(BaseModel):
    id: Optional[Union[int, str]] = None
    status: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class GatewayResult(BaseModel, Generic[T]):
    """Tagged outcome of one gateway call.

    `ok` tells the variant apart. Failures keep the gateway's own message and
    the raw payload it returned (or None when the request never completed).
    """

    ok: bool
    message: str = ""
    data: Optional[T] = None
    raw: Optional[Any] = None
    status_code: Optional[int] = None

    @classmethod
    def success(cls, data: T, *, message: str = "", raw: Any = None, status_code: Optional[int] = None):
        return cls(ok=True, message=message, data=data, raw=raw, status_code=status_code)

    @classmethod
    def failure(cls, message: str, *, raw: Any = None, status_code: Optional[int] = None):
        return cls(ok=False, message=message, data=None, raw=raw, status_code=status_code)


# ---------------------------------------------------------------------------
# Host-facing models
# ---------------------------------------------------------------------------


class CustomerContext(BaseModel):
    id: Optional[str] = None
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class PaymentContext(BaseModel):
    customer: Optional[CustomerContext] = None

    model_config = ConfigDict(extra="allow")


class ProviderError(BaseModel):
    error: str
    code: str = PAYSTACK_ERROR_CODE
    detail: Optional[Any] = None


class ProviderResult(BaseModel):
    """Outcome of a lifecycle call: session data and/or status, or an error."""

    data: dict[str, Any] = Field(default_factory=dict)
    status: Optional[PaymentSessionStatus] = None
    error: Optional[ProviderError] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @classmethod
    def failure(cls, message: str, detail: Any = None) -> "ProviderResult":
        return cls(error=ProviderError(error=message, detail=detail))


class PaymentSessionResult(ProviderResult):
    """Returned by initiate/update; `id` is the session id the host stores."""

    id: Optional[str] = None


class RefundInput(BaseModel):
    transaction_id: Optional[Union[str, int]] = None
    amount: Optional[Decimal] = None
    currency: Optional[str] = None
    payment_session_data: Optional[dict[str, Any]] = None


class WebhookPayload(BaseModel):
    """What the host passes to the provider for an inbound webhook."""

    data: dict[str, Any] = Field(default_factory=dict)
    raw_data: Union[bytes, str] = b""
    headers: dict[str, Any] = Field(default_factory=dict)


class WebhookAction(str, Enum):
    AUTHORIZED = "authorized"
    FAILED = "failed"
    NOT_SUPPORTED = "not_supported"


class WebhookActionResult(BaseModel):
    action: WebhookAction
    data: Optional[dict[str, Any]] = None
