"""
FastAPI 应用入口

功能：
1. 路由注册（看板、球队、football-data 代理）
2. 中间件：CORS、请求追踪（X-Request-ID / X-Process-Time-Ms）
3. 数据源异常 → 统一 JSON 错误响应
4. 健康检查与就绪检查
"""
import logging
import time
import uuid
from contextvars import ContextVar

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from matchday.services.api.dependencies import get_data_source, get_proxy_http_client
from matchday.services.api.routers import dashboard, proxy, teams
from matchday.shared.config import get_settings
from matchday.shared.exceptions import (
    ConfigurationError,
    FootballDataError,
    UpstreamHTTPError,
    UpstreamNetworkError,
)
from matchday.shared.logging_config import setup_logging

settings = get_settings()
setup_logging(settings.api.log_level)
logger = logging.getLogger(__name__)

# 当前请求的追踪 ID，异常处理与日志中使用
request_id_ctx: ContextVar[str] = ContextVar("request_id", default="-")


def get_request_id() -> str:
    return request_id_ctx.get()


docs_enabled = settings.api.enable_docs
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="英超看板 API：积分榜、射手榜、球队详情与状态走势",
    docs_url="/docs" if docs_enabled else None,
    redoc_url="/redoc" if docs_enabled else None,
)


# ============ 中间件 ============

@app.middleware("http")
async def request_tracing(request: Request, call_next) -> Response:
    """
    请求追踪中间件

    - 沿用客户端传入的 X-Request-ID，否则生成新的
    - 响应头回写 X-Request-ID 与 X-Process-Time-Ms
    - 未处理的异常记录完整堆栈后继续抛出
    """
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    ctx_token = request_id_ctx.set(request_id)
    started = time.perf_counter()
    route = f"{request.method} {request.url.path}"

    try:
        response = await call_next(request)
    except Exception:
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        logger.exception(
            f"[{request_id}] {route} 处理异常 ({elapsed_ms}ms)",
            extra={"request_id": request_id, "duration_ms": elapsed_ms},
        )
        raise
    else:
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time-Ms"] = str(elapsed_ms)
        logger.info(
            f"[{request_id}] {route} -> {response.status_code} ({elapsed_ms}ms)",
            extra={
                "request_id": request_id,
                "status_code": response.status_code,
                "duration_ms": elapsed_ms,
            },
        )
        return response
    finally:
        request_id_ctx.reset(ctx_token)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.api.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============ 异常处理 ============

def error_status(exc: FootballDataError) -> int:
    """数据源异常 → HTTP 状态码"""
    if isinstance(exc, ConfigurationError):
        return 500
    if isinstance(exc, UpstreamHTTPError):
        return 404 if exc.status_code == 404 else 502
    if isinstance(exc, UpstreamNetworkError):
        return 503
    return 502


@app.exception_handler(FootballDataError)
async def football_data_error_handler(request: Request, exc: FootballDataError) -> JSONResponse:
    status_code = error_status(exc)
    logger.warning(f"[{get_request_id()}] {exc.error_type}: {exc.message} -> {status_code}")
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.error_type, "message": exc.message},
    )


# ============ 路由 ============

for router in (dashboard.router, teams.router, proxy.router):
    app.include_router(router)


# ============ 健康检查 ============

@app.get("/health")
async def health_check():
    """存活检查：进程可响应即可"""
    return {"status": "ok", "service": "matchday-hub-api", "version": settings.app_version}


@app.get("/ready")
async def readiness_check():
    """就绪检查：真实数据源缺少 Token 时返回 503"""
    source = get_data_source()
    token_ok = source.has_token
    return JSONResponse(
        status_code=200 if token_ok else 503,
        content={
            "status": "ready" if token_ok else "not_ready",
            "version": settings.app_version,
            "checks": {
                "data_source": settings.dashboard.data_source,
                "token": "ok" if token_ok else "missing",
            },
        },
    )


# ============ 生命周期 ============

@app.on_event("startup")
async def on_startup():
    logger.info(
        f"{settings.app_name} v{settings.app_version} 启动 "
        f"(环境: {settings.environment}, 数据源: {settings.dashboard.data_source})"
    )


@app.on_event("shutdown")
async def on_shutdown():
    """关闭上游连接池"""
    await get_data_source().aclose()
    await get_proxy_http_client().aclose()
    logger.info(f"{settings.app_name} 已关闭")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.api.host, port=settings.api.port)
