"""
Paystack webhook verification and event dispatch.

Paystack signs every webhook with HMAC-SHA512 over the raw request body,
keyed with the account secret, and sends the hex digest in the
`x-paystack-signature` header. Verification must run on the exact bytes
received; re-serializing parsed JSON changes key order and whitespace.
"""
from __future__ import annotations

import hashlib
import hmac
import json
from typing import Any, Mapping, Optional, Union

from application.dtos.payments import WebhookAction, WebhookActionResult


SIGNATURE_HEADER = "x-paystack-signature"


def _as_bytes(raw: Union[bytes, bytearray, str]) -> bytes:
    if isinstance(raw, str):
        return raw.encode("utf-8")
    return bytes(raw)


def compute_signature(raw_body: Union[bytes, str], secret: str) -> str:
    return hmac.new(_as_bytes(secret), _as_bytes(raw_body), hashlib.sha512).hexdigest()


def verify_signature(raw_body: Union[bytes, str], signature: Optional[str], secret: Optional[str]) -> bool:
    """Check a webhook signature.

    Without a configured secret verification is skipped and every body is
    accepted. That mode exists for local development only.
    """
    if not secret:
        return True
    if not signature:
        return False
    expected = compute_signature(raw_body, secret).encode("ascii")
    # headers arrive latin-1 decoded; compare as bytes so non-ASCII input is a mismatch
    received = signature.strip().lower().encode("latin-1", "replace")
    return hmac.compare_digest(expected, received)


def get_signature_header(headers: Mapping[str, Any]) -> Optional[str]:
    for key, value in headers.items():
        if str(key).lower() == SIGNATURE_HEADER:
            return None if value is None else str(value)
    return None


def parse_envelope(raw_body: Union[bytes, str]) -> tuple[str, dict[str, Any]]:
    """Decode `{event, data}`; raises ValueError on anything malformed."""
    envelope = json.loads(_as_bytes(raw_body).decode("utf-8"))
    if not isinstance(envelope, dict):
        raise ValueError("webhook body must be a JSON object")
    event = envelope.get("event")
    if not isinstance(event, str):
        raise ValueError("webhook body has no event name")
    data = envelope.get("data", {})
    if not isinstance(data, dict):
        raise ValueError("webhook data must be a JSON object")
    return event, data


_EVENT_ACTIONS = {
    "charge.success": WebhookAction.AUTHORIZED,
    "charge.failed": WebhookAction.FAILED,
}


def dispatch_event(event: str, event_data: Mapping[str, Any]) -> WebhookActionResult:
    action = _EVENT_ACTIONS.get(event)
    if action is None:
        return WebhookActionResult(action=WebhookAction.NOT_SUPPORTED)
    return WebhookActionResult(
        action=action,
        data={
            "session_id": event_data.get("reference"),
            "amount": event_data.get("amount"),
        },
    )
