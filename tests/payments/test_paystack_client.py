import json

import httpx
import pytest

from application.dtos.payments import CreateRefund, InitializeTransaction
from application.ports.payment_gateway import PaystackGateway
from domain.common.exceptions import PaymentConfigurationError
from infrastructure.external.payments import get_payment_gateway
from infrastructure.external.payments.paystack_client import PaystackClient


def _client(handler) -> PaystackClient:
    return PaystackClient(
        secret_key="sk_test_secret",
        base_url="https://api.paystack.test",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_initialize_transaction_success():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={
                "status": True,
                "message": "Authorization URL created",
                "data": {
                    "authorization_url": "https://checkout.paystack.com/abc",
                    "access_code": "abc",
                    "reference": "ref_1",
                },
            },
        )

    client = _client(handler)
    result = await client.initialize_transaction(
        InitializeTransaction(email="a@b.co", amount=2550, currency="ngn", reference="ref_1")
    )
    await client.aclose()

    assert result.ok
    assert result.data.authorization_url == "https://checkout.paystack.com/abc"
    assert seen["method"] == "POST"
    assert seen["url"] == "https://api.paystack.test/transaction/initialize"
    assert seen["auth"] == "Bearer sk_test_secret"
    assert seen["body"] == {"email": "a@b.co", "amount": 2550, "currency": "NGN", "reference": "ref_1"}


@pytest.mark.asyncio
async def test_verify_transaction_parses_transaction():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        assert request.url.path == "/transaction/verify/ref_1"
        return httpx.Response(
            200,
            json={
                "status": True,
                "message": "Verification successful",
                "data": {
                    "id": 42,
                    "status": "success",
                    "reference": "ref_1",
                    "amount": 2550,
                    "gateway_response": "Approved",
                    "paid_at": "2024-01-01T00:00:00Z",
                    "authorization": {"last4": "4081", "channel": "card"},
                },
            },
        )

    client = _client(handler)
    result = await client.verify_transaction("ref_1")
    assert result.ok
    assert result.data.id == 42
    assert result.data.status == "success"
    assert result.data.authorization.last4 == "4081"


@pytest.mark.asyncio
async def test_envelope_status_false_is_failure():
    body = {"status": False, "message": "Transaction reference not found"}

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=body)

    result = await _client(handler).verify_transaction("missing")
    assert not result.ok
    assert result.message == "Transaction reference not found"
    assert result.raw == body


@pytest.mark.asyncio
async def test_http_error_is_failure_with_gateway_message():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, json={"status": False, "message": "Invalid key"})

    result = await _client(handler).create_refund(CreateRefund(transaction="42", amount=100, currency="NGN"))
    assert not result.ok
    assert result.message == "Invalid key"
    assert result.status_code == 400


@pytest.mark.asyncio
async def test_non_json_body_is_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="Bad Gateway")

    result = await _client(handler).verify_transaction("ref_1")
    assert not result.ok
    assert result.raw == "Bad Gateway"
    assert result.status_code == 502


@pytest.mark.asyncio
async def test_transport_error_is_failure_not_exception():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    result = await _client(handler).verify_transaction("ref_1")
    assert not result.ok
    assert "connection refused" in result.message
    assert result.raw is None


@pytest.mark.asyncio
async def test_malformed_data_is_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"status": True, "message": "ok", "data": {"id": 1}})

    result = await _client(handler).verify_transaction("ref_1")
    assert not result.ok
    assert result.message.startswith("Malformed Paystack response")


@pytest.mark.asyncio
async def test_connect_errors_are_retried_when_configured():
    attempts = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        attempts["n"] += 1
        if attempts["n"] < 3:
            raise httpx.ConnectError("down", request=request)
        return httpx.Response(200, json={"status": True, "message": "ok", "data": {"id": 9, "status": "pending"}})

    client = PaystackClient(
        secret_key="sk_test_secret",
        retry={"max": 2, "base": 0.0},
        transport=httpx.MockTransport(handler),
    )
    result = await client.create_refund(CreateRefund(transaction="ref_1", amount=100, currency="NGN"))
    assert result.ok
    assert attempts["n"] == 3


@pytest.mark.asyncio
async def test_no_retry_by_default():
    attempts = {"n": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        attempts["n"] += 1
        raise httpx.ConnectError("down", request=request)

    result = await _client(handler).verify_transaction("ref_1")
    assert not result.ok
    assert attempts["n"] == 1


def test_factory_returns_paystack_client():
    gw = get_payment_gateway("paystack", secret_key="sk_test_secret")
    assert isinstance(gw, PaystackClient)
    assert isinstance(gw, PaystackGateway)
    with pytest.raises(ValueError):
        get_payment_gateway("stripe")


def test_missing_secret_key_raises_configuration_error(monkeypatch):
    from core.settings import payment_settings

    monkeypatch.setattr(payment_settings.paystack, "secret_key", None)
    with pytest.raises(PaymentConfigurationError):
        PaystackClient()
