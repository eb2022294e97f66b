import pytest

from domain.payment.session import PaymentSessionStatus, generate_reference
from domain.payment.status import map_gateway_status


@pytest.mark.parametrize(
    "gateway_status,expected",
    [
        ("success", PaymentSessionStatus.AUTHORIZED),
        ("failed", PaymentSessionStatus.ERROR),
        ("abandoned", PaymentSessionStatus.CANCELED),
        ("ongoing", PaymentSessionStatus.PENDING),
        ("reversed", PaymentSessionStatus.PENDING),
        ("", PaymentSessionStatus.PENDING),
        (None, PaymentSessionStatus.PENDING),
        (123, PaymentSessionStatus.PENDING),
        ("SUCCESS", PaymentSessionStatus.PENDING),
    ],
)
def test_map_gateway_status_is_total(gateway_status, expected):
    assert map_gateway_status(gateway_status) is expected


def test_coerce_falls_back_to_pending():
    assert PaymentSessionStatus.coerce("requires_more") is PaymentSessionStatus.REQUIRES_MORE
    assert PaymentSessionStatus.coerce("bogus") is PaymentSessionStatus.PENDING
    assert PaymentSessionStatus.coerce(None, PaymentSessionStatus.ERROR) is PaymentSessionStatus.ERROR


def test_generate_reference_is_unique_and_prefixed():
    refs = {generate_reference("host") for _ in range(100)}
    assert len(refs) == 100
    assert all(ref.startswith("host_") for ref in refs)
