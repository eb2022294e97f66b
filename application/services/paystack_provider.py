"""
Paystack payment provider: reconciles host payment sessions with Paystack.

The host calls one method per lifecycle step and persists whatever `data`
comes back; nothing is kept on the instance between calls. Paystack has no
separate capture, cancel or delete operations, so those steps are either
re-verifications or local stamps on the session data.

Amount convention: the host hands over major-unit amounts (e.g. 25.50 NGN);
they are converted to subunits (2550 kobo) only when sent to Paystack.
Amounts that come back from Paystack are stored as returned (subunits).

Every public method converts failures into a tagged result; none raises past
this class. The logger is injected by the composition root.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel

from application.dtos.payments import (
    CreateRefund,
    InitializeTransaction,
    PaymentContext,
    PaymentSessionResult,
    ProviderError,
    ProviderResult,
    RefundInput,
    WebhookAction,
    WebhookActionResult,
    WebhookPayload,
)
from application.ports.payment_gateway import PaystackGateway
from application.services.webhook_service import (
    dispatch_event,
    get_signature_header,
    parse_envelope,
    verify_signature,
)
from domain.common.exceptions import (
    DomainValidationException,
    PaymentConfigurationError,
    UnsupportedCurrencyException,
)
from domain.payment.currency import (
    is_supported_currency,
    normalize_currency,
    supported_currency_codes,
    to_subunit,
)
from domain.payment.session import PaymentSessionStatus, generate_reference, utc_now_iso
from domain.payment.status import GATEWAY_SUCCESS_STATUS, map_gateway_status
from shared.codes.payment_codes import PAYSTACK_ERROR_CODE


Amount = Union[Decimal, int, float, str, None]
SessionData = dict[str, Any]

REQUIRED_OPTIONS = ("secret_key", "public_key")


def _gateway_detail(result) -> dict[str, Any]:
    return {"message": result.message, "raw": result.raw}


class PaystackPaymentProvider:
    identifier = "paystack"

    def __init__(
        self,
        options: Union[Mapping[str, Any], BaseModel],
        *,
        logger: Any,
        gateway: PaystackGateway,
    ) -> None:
        opts = options.model_dump() if isinstance(options, BaseModel) else dict(options or {})
        missing = [key for key in REQUIRED_OPTIONS if not opts.get(key)]
        if missing:
            raise PaymentConfigurationError(
                "Paystack secret_key and public_key are required",
                provider=self.identifier,
                missing=missing,
            )
        self.options = opts
        self.logger = logger
        self.gateway = gateway

    # -----------------------------------------------------------------------
    # Helpers
    # -----------------------------------------------------------------------

    @property
    def public_key(self) -> str:
        return self.options["public_key"]

    @property
    def default_currency(self) -> str:
        return normalize_currency(self.options.get("default_currency")) or "NGN"

    def _log(self, operation: str, **context: Any):
        return self.logger.bind(provider=self.identifier, operation=operation, **context)

    @staticmethod
    def _resolve_email(data: Mapping[str, Any], context: Optional[PaymentContext]) -> Optional[str]:
        if context is not None and context.customer is not None and context.customer.email:
            return context.customer.email
        email = data.get("email")
        return email if isinstance(email, str) and email else None

    @staticmethod
    def _reference(data: Mapping[str, Any]) -> Optional[str]:
        reference = data.get("reference") or data.get("paystack_reference")
        if not reference and isinstance(data.get("data"), Mapping):
            reference = data["data"].get("reference")
        return str(reference) if reference else None

    @staticmethod
    def _context(context: Union[PaymentContext, Mapping[str, Any], None]) -> Optional[PaymentContext]:
        if context is None or isinstance(context, PaymentContext):
            return context
        return PaymentContext.model_validate(context)

    def _initiate_error(self, session_id: Optional[str], message: str, detail: Any = None) -> PaymentSessionResult:
        return PaymentSessionResult(
            id=None,
            data={
                "session_id": session_id,
                "error": message,
                "code": PAYSTACK_ERROR_CODE,
                "status": PaymentSessionStatus.ERROR.value,
            },
            status=PaymentSessionStatus.ERROR,
            error=ProviderError(error=message, detail=detail),
        )

    # -----------------------------------------------------------------------
    # Session lifecycle
    # -----------------------------------------------------------------------

    async def initiate(
        self,
        currency_code: Optional[str],
        amount: Amount,
        data: Optional[SessionData] = None,
        context: Union[PaymentContext, Mapping[str, Any], None] = None,
    ) -> PaymentSessionResult:
        data = dict(data or {})
        session_id = data.get("session_id")
        log = self._log("initiate", session_id=session_id)

        try:
            context = self._context(context)
            email = self._resolve_email(data, context)

            # Paystack needs an email; defer until the host has one
            if not email:
                log.info("paystack_initiate_deferred", reason="no_customer_email")
                return PaymentSessionResult(
                    id=session_id or generate_reference("pending"),
                    data={
                        "session_id": session_id,
                        "status": PaymentSessionStatus.PENDING.value,
                        "amount": None if amount is None else str(amount),
                        "currency": currency_code,
                        "public_key": self.public_key,
                    },
                    status=PaymentSessionStatus.PENDING,
                )

            currency = normalize_currency(currency_code) or self.default_currency
            if not is_supported_currency(currency):
                raise UnsupportedCurrencyException(currency_code, supported_currency_codes())
            if amount is None:
                raise DomainValidationException("amount is required", field="amount")

            amount_subunit = to_subunit(amount, currency, logger=log)
            reference = (
                data.get("reference")
                or session_id
                or generate_reference(self.options.get("reference_prefix") or "host")
            )

            result = await self.gateway.initialize_transaction(
                InitializeTransaction(
                    email=email,
                    amount=amount_subunit,
                    currency=currency,
                    reference=str(reference),
                    callback_url=self.options.get("callback_url"),
                    metadata={"session_id": session_id, "host_payment": True},
                )
            )
            if not result.ok:
                log.error("paystack_initiate_failed", reference=reference, message=result.message)
                return self._initiate_error(
                    session_id,
                    f"Paystack initialization failed: {result.message}",
                    detail=_gateway_detail(result),
                )

            init = result.data
            paystack_reference = init.reference or str(reference)
            # A checkout URL means the customer still has to act on Paystack's side
            status = (
                PaymentSessionStatus.REQUIRES_MORE if init.authorization_url else PaymentSessionStatus.PENDING
            )
            log.info("paystack_initiate_succeeded", reference=paystack_reference, status=status.value)

            return PaymentSessionResult(
                id=paystack_reference,
                data={
                    "session_id": session_id,
                    "reference": paystack_reference,
                    "paystack_reference": paystack_reference,
                    "access_code": init.access_code,
                    "authorization_url": init.authorization_url,
                    "amount": amount_subunit,
                    "currency": currency,
                    "email": email,
                    "public_key": self.public_key,
                    "status": status.value,
                    "created_at": utc_now_iso(),
                },
                status=status,
            )
        except Exception as exc:
            log.error("paystack_initiate_error", error=str(exc), exc_info=True)
            return self._initiate_error(session_id, str(exc))

    async def update(
        self,
        currency_code: Optional[str],
        amount: Amount,
        data: Optional[SessionData] = None,
        context: Union[PaymentContext, Mapping[str, Any], None] = None,
    ) -> PaymentSessionResult:
        """Refresh a session against Paystack, or hand back the stored one.

        A new initialize call is made when the stored session is pending, never
        got a checkout URL, or is flagged completed/expired. Otherwise Paystack
        has nothing to update and the stored data is returned as-is. Without a
        customer email the stored data comes back as pending, reference intact.
        """
        data = dict(data or {})
        log = self._log("update", session_id=data.get("session_id"))

        try:
            context = self._context(context)
            email = self._resolve_email(data, context)

            # Still no email: keep the stored session (and its reference) as pending
            if not email:
                log.info("paystack_update_deferred", reason="no_customer_email")
                return PaymentSessionResult(
                    id=self._reference(data) or data.get("session_id"),
                    data={
                        **data,
                        "status": PaymentSessionStatus.PENDING.value,
                        "amount": None if amount is None else str(amount),
                        "currency": currency_code,
                    },
                    status=PaymentSessionStatus.PENDING,
                )

            reasons = [
                reason
                for reason, hit in (
                    ("pending", data.get("status") == PaymentSessionStatus.PENDING.value),
                    ("no_authorization_url", not data.get("authorization_url")),
                    ("payment_completed", data.get("payment_completed") is True),
                    ("session_expired", data.get("session_expired") is True),
                )
                if hit
            ]

            if reasons:
                log.info("paystack_update_reinitialize", reasons=reasons)
                fresh: SessionData = {"session_id": data.get("session_id"), "email": email}
                superseded = data.get("payment_completed") is True or data.get("session_expired") is True
                if superseded:
                    # The old reference is spent on Paystack's side
                    fresh["reference"] = generate_reference(self.options.get("reference_prefix") or "host")
                elif self._reference(data):
                    fresh["reference"] = self._reference(data)
                return await self.initiate(currency_code, amount, fresh, context)

            status = PaymentSessionStatus.coerce(data.get("status"))
            log.info("paystack_update_passthrough", status=status.value)
            return PaymentSessionResult(
                id=self._reference(data) or data.get("session_id"),
                data={**data, "updated_at": utc_now_iso()},
                status=status,
            )
        except Exception as exc:
            log.error("paystack_update_error", error=str(exc), exc_info=True)
            return PaymentSessionResult(
                id=data.get("session_id"),
                data={**data, "error": str(exc), "status": PaymentSessionStatus.ERROR.value},
                status=PaymentSessionStatus.ERROR,
                error=ProviderError(error=str(exc)),
            )

    async def authorize(self, data: SessionData, context: Optional[dict[str, Any]] = None) -> ProviderResult:
        data = dict(data or {})
        reference = self._reference(data)
        log = self._log("authorize", reference=reference)
        if not reference:
            return ProviderResult.failure("Payment reference is required for authorization")

        try:
            verification = await self.gateway.verify_transaction(reference)
            if not verification.ok:
                log.warning("paystack_authorize_verify_failed", message=verification.message)
                return ProviderResult.failure("Payment verification failed", _gateway_detail(verification))

            transaction = verification.data
            if transaction.status != GATEWAY_SUCCESS_STATUS:
                log.info("paystack_authorize_not_successful", status=transaction.status)
                return ProviderResult.failure(
                    f"Payment not successful. Status: {transaction.status}",
                    {"status": transaction.status},
                )

            log.info("paystack_authorize_succeeded", transaction_id=transaction.id, amount=transaction.amount)
            return ProviderResult(
                status=PaymentSessionStatus.AUTHORIZED,
                data={
                    **data,
                    "amount": transaction.amount,
                    "authorized_amount": transaction.amount,
                    "transaction_id": transaction.id,
                    "gateway_response": transaction.gateway_response,
                    "paid_at": transaction.paid_at,
                    "authorization": (
                        transaction.authorization.model_dump() if transaction.authorization else None
                    ),
                    "status": PaymentSessionStatus.AUTHORIZED.value,
                },
            )
        except Exception as exc:
            log.error("paystack_authorize_error", error=str(exc), exc_info=True)
            return ProviderResult.failure("Failed to authorize payment", str(exc))

    async def capture(self, data: SessionData) -> ProviderResult:
        # Paystack captures on authorization; capture re-verifies and stamps
        data = dict(data or {})
        reference = self._reference(data)
        log = self._log("capture", reference=reference)
        if not reference:
            return ProviderResult.failure("Payment reference is required for capture")

        try:
            verification = await self.gateway.verify_transaction(reference)
            if not verification.ok or verification.data.status != GATEWAY_SUCCESS_STATUS:
                detail = (
                    _gateway_detail(verification) if not verification.ok else {"status": verification.data.status}
                )
                log.warning("paystack_capture_not_successful", detail=detail)
                return ProviderResult.failure("Payment capture failed - transaction not successful", detail)

            transaction = verification.data
            log.info("paystack_capture_succeeded", amount=transaction.amount)
            return ProviderResult(
                status=PaymentSessionStatus.AUTHORIZED,
                data={
                    **data,
                    "captured_amount": transaction.amount,
                    "captured_at": transaction.paid_at or utc_now_iso(),
                },
            )
        except Exception as exc:
            log.error("paystack_capture_error", error=str(exc), exc_info=True)
            return ProviderResult.failure("Failed to capture payment", str(exc))

    async def refund(self, input: Union[RefundInput, Mapping[str, Any]]) -> ProviderResult:
        log = self._log("refund")
        try:
            if not isinstance(input, RefundInput):
                input = RefundInput.model_validate(dict(input))
            transaction_id = input.transaction_id or (input.payment_session_data or {}).get("transaction_id")
            if not transaction_id:
                return ProviderResult.failure("Transaction ID is required for refund")
            if input.amount is None:
                return ProviderResult.failure("Refund amount is required")
            if input.amount <= 0:
                return ProviderResult.failure("Refund amount must be greater than zero", {"amount": str(input.amount)})

            currency = normalize_currency(input.currency) or self.default_currency
            amount_subunit = to_subunit(input.amount, currency, logger=log)
            result = await self.gateway.create_refund(
                CreateRefund(
                    transaction=str(transaction_id),
                    amount=amount_subunit,
                    currency=currency,
                    customer_note="Refund processed by the store",
                    merchant_note="Payment provider refund",
                )
            )
            if not result.ok:
                log.warning("paystack_refund_failed", transaction_id=transaction_id, message=result.message)
                return ProviderResult.failure(f"Refund failed: {result.message}", _gateway_detail(result))

            log.info("paystack_refund_succeeded", transaction_id=transaction_id, refund_id=result.data.id)
            return ProviderResult(
                data={
                    "refund_id": result.data.id,
                    "refunded_amount": input.amount,
                    "refunded_at": utc_now_iso(),
                }
            )
        except Exception as exc:
            log.error("paystack_refund_error", error=str(exc), exc_info=True)
            return ProviderResult.failure("Failed to refund payment", str(exc))

    async def cancel(self, data: SessionData) -> ProviderResult:
        # Local stamp only: the transaction may still be payable on Paystack
        data = dict(data or {})
        self._log("cancel", reference=self._reference(data)).info("paystack_cancel_local_only")
        return ProviderResult(
            status=PaymentSessionStatus.CANCELED,
            data={**data, "cancelled_at": utc_now_iso()},
        )

    async def retrieve(self, data: SessionData) -> ProviderResult:
        data = dict(data or {})
        reference = self._reference(data)
        log = self._log("retrieve", reference=reference)
        if not reference:
            return ProviderResult.failure("Payment reference is required")

        try:
            verification = await self.gateway.verify_transaction(reference)
            if not verification.ok:
                log.warning("paystack_retrieve_failed", message=verification.message)
                return ProviderResult.failure("Failed to retrieve payment", _gateway_detail(verification))

            transaction = verification.data
            return ProviderResult(
                status=map_gateway_status(transaction.status),
                data={
                    **data,
                    "amount": transaction.amount,
                    "transaction_id": transaction.id,
                    "gateway_response": transaction.gateway_response,
                    "paid_at": transaction.paid_at,
                },
            )
        except Exception as exc:
            log.error("paystack_retrieve_error", error=str(exc), exc_info=True)
            return ProviderResult.failure("Failed to retrieve payment", str(exc))

    async def delete(self, data: SessionData) -> SessionData:
        # Paystack has no delete; the session data is handed back untouched
        return data

    async def get_status(self, data: SessionData) -> PaymentSessionStatus:
        reference = self._reference(data or {})
        log = self._log("get_status", reference=reference)
        if not reference:
            return PaymentSessionStatus.ERROR

        try:
            verification = await self.gateway.verify_transaction(reference)
            if not verification.ok:
                log.warning("paystack_status_verify_failed", message=verification.message)
                return PaymentSessionStatus.ERROR
            return map_gateway_status(verification.data.status)
        except Exception as exc:
            log.error("paystack_status_error", error=str(exc), exc_info=True)
            return PaymentSessionStatus.ERROR

    async def get_webhook_action_and_data(
        self, payload: Union[WebhookPayload, Mapping[str, Any]]
    ) -> WebhookActionResult:
        log = self._log("webhook")
        try:
            if not isinstance(payload, WebhookPayload):
                payload = WebhookPayload.model_validate(dict(payload))

            secret = self.options.get("webhook_secret")
            if not verify_signature(payload.raw_data, get_signature_header(payload.headers), secret):
                log.warning("paystack_webhook_signature_invalid")
                return WebhookActionResult(action=WebhookAction.FAILED)

            event, event_data = parse_envelope(payload.raw_data)
            result = dispatch_event(event, event_data)
            log.info(
                "paystack_webhook_dispatched",
                webhook_event=event,
                action=result.action.value,
                reference=event_data.get("reference"),
            )
            return result
        except Exception as exc:
            log.error("paystack_webhook_error", error=str(exc))
            return WebhookActionResult(action=WebhookAction.FAILED)
