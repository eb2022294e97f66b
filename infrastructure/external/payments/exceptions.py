"""
Gateway-facing exceptions, raised at the HTTP edge when a provider result
carries an error. Each maps to a PaymentCode, which core.exceptions turns
into an HTTP status.
"""
from __future__ import annotations

from typing import Any, Optional

from domain.common.exceptions import BusinessException, PaymentConfigurationError
from shared.codes.payment_codes import PaymentCode


class PaymentError(BusinessException):
    code: int = PaymentCode.PROVIDER_ERROR

    def __init__(self, message: str, *, provider: str, details: Optional[dict[str, Any]] = None):
        self.provider = provider
        super().__init__(
            code=self.code,
            message=message,
            error_type=type(self).__name__,
            details={"provider": provider, **(details or {})},
        )


class PaymentProviderError(PaymentError):
    """Paystack answered and rejected the request."""

    code = PaymentCode.PROVIDER_ERROR


class PaymentRecoverableError(PaymentError):
    """The request never reached Paystack; retrying later may succeed."""

    code = PaymentCode.PROVIDER_RECOVERABLE


class PaymentSignatureError(PaymentError):
    code = PaymentCode.SIGNATURE_ERROR


__all__ = [
    "PaymentError",
    "PaymentProviderError",
    "PaymentRecoverableError",
    "PaymentSignatureError",
    "PaymentConfigurationError",
]
