from .currency import (
    Currency,
    SUPPORTED_CURRENCIES,
    is_supported_currency,
    normalize_currency,
    supported_currency_codes,
    to_subunit,
)
from .session import PaymentSessionStatus, generate_reference, utc_now_iso
from .status import GATEWAY_SUCCESS_STATUS, map_gateway_status

__all__ = [
    "Currency",
    "SUPPORTED_CURRENCIES",
    "is_supported_currency",
    "normalize_currency",
    "supported_currency_codes",
    "to_subunit",
    "PaymentSessionStatus",
    "generate_reference",
    "utc_now_iso",
    "GATEWAY_SUCCESS_STATUS",
    "map_gateway_status",
]
