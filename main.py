"""
FastAPI应用主入口
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.middleware import AccessLogMiddleware, RequestIDMiddleware
from api.routes import paystack_admin, paystack_webhook
from core.config import settings
from core.exceptions import register_exception_handlers
from core.logging_config import configure_logging, get_logger
from core.response import success_response
from core.settings import payment_settings


# 初始化日志：在入口处显式配置，避免模块导入时的副作用
configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    cfg = payment_settings.paystack
    if not cfg.secret_key or not cfg.public_key:
        logger.warning(
            "paystack_credentials_missing",
            message="PAYSTACK__SECRET_KEY / PAYSTACK__PUBLIC_KEY not set; payment routes will fail",
        )
    if not cfg.webhook_secret:
        logger.warning(
            "paystack_webhook_secret_missing",
            message="Webhook signature verification is disabled",
        )
    logger.info(
        "application_startup",
        provider=payment_settings.default_provider,
        environment=settings.ENVIRONMENT,
    )
    yield
    logger.info("application_shutdown", message="Application shutdown")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan,
    description="Paystack 支付插件（发起、授权、退款与 webhook）",
)

# 添加中间件（注意顺序：从下往上执行）
# 1. 访问日志（依赖 request_id）
app.add_middleware(AccessLogMiddleware)

# 2. Request ID中间件（最外层，为后续中间件提供request_id）
app.add_middleware(RequestIDMiddleware)

# 3. CORS中间件
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 注册全局异常处理器
register_exception_handlers(app)


# 注册路由
app.include_router(paystack_webhook.router)
app.include_router(paystack_admin.router)


# 健康检查
@app.get("/health", tags=["Health"])
async def health_check():
    """健康检查端点"""
    return success_response(
        data={"status": "healthy", "provider": payment_settings.default_provider},
        message="OK",
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info"
    )
