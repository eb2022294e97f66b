import hashlib
import hmac
import json

import pytest

from application.dtos.payments import WebhookAction
from application.services.webhook_service import (
    compute_signature,
    dispatch_event,
    get_signature_header,
    parse_envelope,
    verify_signature,
)


SECRET = "sk_test_secret"
BODY = b'{"event":"charge.success","data":{"reference":"ref_1","amount":2550}}'


def _sign(body: bytes, secret: str = SECRET) -> str:
    return hmac.new(secret.encode(), body, hashlib.sha512).hexdigest()


def test_compute_signature_is_hmac_sha512_hex():
    sig = compute_signature(BODY, SECRET)
    assert sig == _sign(BODY)
    assert len(sig) == 128


def test_verify_accepts_matching_signature():
    assert verify_signature(BODY, _sign(BODY), SECRET)
    assert verify_signature(BODY.decode(), _sign(BODY).upper(), SECRET)


def test_verify_rejects_any_mutated_byte():
    sig = _sign(BODY)
    mutated = BODY.replace(b"2550", b"2551")
    assert not verify_signature(mutated, sig, SECRET)


def test_verify_runs_on_raw_bytes_not_reserialized_json():
    # Same JSON content, different whitespace: the signature no longer matches
    reserialized = json.dumps(json.loads(BODY)).encode()
    assert reserialized != BODY
    assert not verify_signature(reserialized, _sign(BODY), SECRET)


def test_verify_rejects_missing_signature_when_secret_configured():
    assert not verify_signature(BODY, None, SECRET)
    assert not verify_signature(BODY, "", SECRET)


def test_verify_is_skipped_without_secret():
    assert verify_signature(BODY, None, None)
    assert verify_signature(BODY, "garbage", "")


def test_signature_header_lookup_is_case_insensitive():
    assert get_signature_header({"X-Paystack-Signature": "abc"}) == "abc"
    assert get_signature_header({"x-paystack-signature": "def"}) == "def"
    assert get_signature_header({"content-type": "application/json"}) is None


def test_parse_envelope():
    event, data = parse_envelope(BODY)
    assert event == "charge.success"
    assert data == {"reference": "ref_1", "amount": 2550}


@pytest.mark.parametrize("body", [b"not json", b"[]", b'{"data":{}}', b'{"event":"x","data":[]}'])
def test_parse_envelope_rejects_malformed(body):
    with pytest.raises(ValueError):
        parse_envelope(body)


def test_dispatch_charge_success():
    result = dispatch_event("charge.success", {"reference": "ref_1", "amount": 2550})
    assert result.action is WebhookAction.AUTHORIZED
    assert result.data == {"session_id": "ref_1", "amount": 2550}


def test_dispatch_charge_failed():
    result = dispatch_event("charge.failed", {"reference": "ref_2", "amount": 100})
    assert result.action is WebhookAction.FAILED
    assert result.data == {"session_id": "ref_2", "amount": 100}


@pytest.mark.parametrize("event", ["transfer.success", "transfer.failed", "subscription.create", ""])
def test_dispatch_other_events_not_supported(event):
    result = dispatch_event(event, {"reference": "ref_3"})
    assert result.action is WebhookAction.NOT_SUPPORTED
    assert result.data is None


def test_verify_rejects_non_ascii_signature_without_raising():
    # Starlette decodes header bytes as latin-1, so any character can arrive
    assert not verify_signature(BODY, "é" * 128, SECRET)
    assert not verify_signature(BODY, "éé", SECRET)


def test_parse_envelope_without_data_defaults_to_empty():
    event, data = parse_envelope(b'{"event":"charge.success"}')
    assert event == "charge.success"
    assert data == {}
