"""
支付会话领域值对象 - 会话状态与交易参考号
"""
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class PaymentSessionStatus(str, Enum):
    """宿主平台的支付会话状态（提供方只会产出这五种）"""
    PENDING = "pending"               # 等待中（缺少邮箱或交易未完成）
    REQUIRES_MORE = "requires_more"   # 需要用户在网关侧完成操作
    AUTHORIZED = "authorized"         # 已授权（网关交易成功）
    CANCELED = "canceled"             # 已取消
    ERROR = "error"                   # 出错

    @classmethod
    def coerce(cls, value: Any, default: "PaymentSessionStatus | None" = None) -> "PaymentSessionStatus":
        """将存储的任意值转换为合法状态，无法识别时回退到 default（默认 PENDING）"""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return default or cls.PENDING


def generate_reference(prefix: str = "host") -> str:
    """生成全局唯一的交易参考号

    网关侧的 reference 不允许重复，因此使用 uuid4 而不是时间戳。
    """
    return f"{prefix}_{uuid.uuid4().hex}"


def utc_now_iso() -> str:
    """当前 UTC 时间（ISO8601，Z 结尾）"""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
