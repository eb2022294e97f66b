"""
币种与金额换算 - 主单位（宿主金额）与网关最小货币单位之间的转换
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional, Union

from shared.codes.payment_codes import DEFAULT_SUBUNIT_MULTIPLIER, PAYSTACK_CURRENCIES


Amount = Union[Decimal, int, float, str]


@dataclass(frozen=True)
class Currency:
    code: str
    name: str
    subunit: int
    subunit_name: str


SUPPORTED_CURRENCIES: dict[str, Currency] = {
    code: Currency(code=code, name=info["name"], subunit=info["subunit"], subunit_name=info["subunit_name"])
    for code, info in PAYSTACK_CURRENCIES.items()
}


def normalize_currency(currency: Optional[str]) -> str:
    return (currency or "").strip().upper()


def supported_currency_codes() -> list[str]:
    return list(SUPPORTED_CURRENCIES)


def is_supported_currency(currency: Optional[str]) -> bool:
    return normalize_currency(currency) in SUPPORTED_CURRENCIES


def to_decimal(amount: Amount) -> Decimal:
    """转换为 Decimal；float 先转字符串，避免二进制误差被放大"""
    if isinstance(amount, Decimal):
        return amount
    if isinstance(amount, float):
        return Decimal(repr(amount))
    return Decimal(str(amount))


def to_subunit(amount: Amount, currency: Optional[str], logger: Optional[Any] = None) -> int:
    """主单位金额 -> 网关最小单位（整数）

    规则：
    1. 按币种倍数相乘，四舍五入（远离零方向）到整数
    2. 不支持的币种不报错，按 100 倍处理并记录告警
    """
    info = SUPPORTED_CURRENCIES.get(normalize_currency(currency))
    if info is None:
        if logger is not None:
            logger.warning(
                "paystack_currency_unsupported",
                currency=currency,
                fallback_multiplier=DEFAULT_SUBUNIT_MULTIPLIER,
            )
        multiplier = DEFAULT_SUBUNIT_MULTIPLIER
    else:
        multiplier = info.subunit
    scaled = to_decimal(amount) * multiplier
    return int(scaled.quantize(Decimal(1), rounding=ROUND_HALF_UP))
