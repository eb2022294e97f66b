"""
访问日志中间件（纯 ASGI 实现）
只记录方法、路径、状态码与耗时，不读取请求体，webhook 的原始字节保持不变
"""
import time

from starlette.types import ASGIApp, Receive, Scope, Send, Message

from core.config import settings
from core.logging_config import get_logger


logger = get_logger(__name__)


class AccessLogMiddleware:
    """
    访问日志中间件（轻量级）

    功能：
    1. 记录请求方法、路径、状态码、耗时
    2. 按状态码选择日志级别
    3. 在响应头中添加处理时间
    """

    # 跳过日志的路径
    SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http" or scope["path"] in self.SKIP_PATHS:
            await self.app(scope, receive, send)
            return

        start_time = time.time()

        async def send_wrapper(message: Message):
            if message["type"] == "http.response.start":
                duration = time.time() - start_time
                status_code = message["status"]
                headers = list(message.get("headers", []))
                headers.append((b"x-process-time", f"{duration:.3f}".encode("latin-1")))
                message["headers"] = headers

                log_data = {
                    "method": scope["method"],
                    "path": scope["path"],
                    "status_code": status_code,
                    "duration": duration,
                }
                if settings.LOG_QUERY_PARAMS and scope.get("query_string"):
                    log_data["query"] = scope["query_string"].decode("latin-1")

                if status_code < 400:
                    logger.info("request_completed", **log_data)
                elif status_code < 500:
                    logger.warning("request_client_error", **log_data)
                else:
                    logger.error("request_server_error", **log_data)

            await send(message)

        await self.app(scope, receive, send_wrapper)
