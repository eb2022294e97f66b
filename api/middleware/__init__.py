from .request_id import RequestIDMiddleware
from .logging import AccessLogMiddleware

__all__ = ["RequestIDMiddleware", "AccessLogMiddleware"]
