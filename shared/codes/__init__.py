"""
Business codes returned in the `code` field of every response envelope.

`BusinessCode` covers request and platform errors; Paystack-specific
failures live in `shared.codes.payment_codes.PaymentCode` (6xxxx).
"""
from enum import IntEnum


class BusinessCode(IntEnum):
    SUCCESS = 0

    # Request errors (1xxxx)
    PARAM_ERROR = 10000        # unknown admin action, malformed request
    PARAM_MISSING = 10001      # reference / amount absent
    PARAM_VALIDATION_ERROR = 10003

    # Lookup (2xxxx)
    NOT_FOUND = 20006

    # Access (3xxxx)
    UNAUTHORIZED = 30001
    FORBIDDEN = 30002

    # Platform (4xxxx)
    SYSTEM_ERROR = 40000
    SERVICE_UNAVAILABLE = 40003

    # Throttling (5xxxx)
    TOO_MANY_REQUESTS = 50001


__all__ = ["BusinessCode"]
