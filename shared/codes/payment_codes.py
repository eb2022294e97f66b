"""
Payment specific codes and provider status mapping.
"""
from __future__ import annotations

from enum import IntEnum


class PaymentCode(IntEnum):
    PROVIDER_ERROR = 60000        # Paystack rejected the request
    PROVIDER_RECOVERABLE = 60001  # request never reached Paystack
    SIGNATURE_ERROR = 60002       # webhook signature mismatch
    CONFIGURATION_ERROR = 60005   # missing keys


# Error code attached to every tagged provider error result
PAYSTACK_ERROR_CODE = "PAYSTACK_ERROR"

# Gateway transaction status -> host payment-session status.
# Anything not listed maps to "pending" (ongoing, queued, processing, ...).
PROVIDER_STATUS_TO_SESSION = {
    "paystack": {
        "success": "authorized",
        "failed": "error",
        "abandoned": "canceled",
    },
}

# Currencies Paystack settles in, with their subunit multiplier
PAYSTACK_CURRENCIES = {
    "NGN": {"subunit": 100, "name": "Naira", "subunit_name": "kobo"},
    "GHS": {"subunit": 100, "name": "Cedi", "subunit_name": "pesewas"},
    "USD": {"subunit": 100, "name": "Dollar", "subunit_name": "cents"},
    "ZAR": {"subunit": 100, "name": "Rand", "subunit_name": "cents"},
}

DEFAULT_SUBUNIT_MULTIPLIER = 100
