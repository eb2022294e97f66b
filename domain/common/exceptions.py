"""领域层业务异常定义，供领域与基础设施使用。

核心（core）层仅负责全局映射与异常处理，尽量避免领域层反向依赖核心层。
"""
from __future__ import annotations

from typing import Optional
from shared.codes import BusinessCode
from shared.codes.payment_codes import PaymentCode


class BusinessException(Exception):
    """业务异常基类"""

    def __init__(
        self,
        code: int,
        message: str,
        error_type: str = "BusinessError",
        details: Optional[dict] = None,
        field: Optional[str] = None,
    ) -> None:
        self.code = code
        self.message = message
        self.error_type = error_type
        self.details = details
        self.field = field
        super().__init__(self.message)


class DomainValidationException(BusinessException):
    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(
            code=BusinessCode.PARAM_VALIDATION_ERROR,
            message=message,
            error_type="DomainValidationError",
            details=details,
            field=field,
        )


class MissingParameterException(BusinessException):
    def __init__(self, field: str, message: str | None = None):
        super().__init__(
            code=BusinessCode.PARAM_MISSING,
            message=message or f"{field} is required",
            error_type="MissingParameter",
            details={"field": field},
            field=field,
        )


class UnsupportedCurrencyException(DomainValidationException):
    def __init__(self, currency: str | None, supported: list[str]):
        super().__init__(
            f"Unsupported currency: {currency}. Supported currencies: {', '.join(supported)}",
            field="currency",
            details={"currency": currency, "supported": supported},
        )


class PaymentConfigurationError(BusinessException):
    """支付提供方配置缺失（构造时即失败）"""

    def __init__(self, message: str, *, provider: str, missing: Optional[list[str]] = None):
        super().__init__(
            code=PaymentCode.CONFIGURATION_ERROR,
            message=message,
            error_type="PaymentConfigurationError",
            details={"provider": provider, "missing": missing or []},
        )
