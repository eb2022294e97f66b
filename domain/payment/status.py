"""
网关交易状态 -> 支付会话状态映射
"""
from __future__ import annotations

from typing import Any

from domain.payment.session import PaymentSessionStatus
from shared.codes.payment_codes import PROVIDER_STATUS_TO_SESSION


GATEWAY_SUCCESS_STATUS = "success"


def map_gateway_status(gateway_status: Any, provider: str = "paystack") -> PaymentSessionStatus:
    """映射是全函数：任何输入都会得到一个状态，未知值一律视为 PENDING"""
    mapping = PROVIDER_STATUS_TO_SESSION.get(provider, {})
    if not isinstance(gateway_status, str):
        return PaymentSessionStatus.PENDING
    mapped = mapping.get(gateway_status)
    if mapped is None:
        return PaymentSessionStatus.PENDING
    return PaymentSessionStatus(mapped)
