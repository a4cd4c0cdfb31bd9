"""Lifestack Backend - 仪表盘艺术作品轮换服务入口。"""

import sentry_sdk
from fastapi import FastAPI
from fastapi.concurrency import asynccontextmanager
from fastapi.routing import APIRoute
from loguru import logger
from starlette.middleware.cors import CORSMiddleware

from lifestack.core.config import settings
from lifestack.core.domain.exceptions import DomainException
from lifestack.core.infrastructure.cache import get_cache
from lifestack.core.infrastructure.health import HealthStatus
from lifestack.core.infrastructure.logging import setup_logging
from lifestack.core.infrastructure.redis import redis_client
from lifestack.core.interfaces.http.exceptions import (
    domain_exception_handler,
    global_exception_handler,
)
from lifestack.core.interfaces.http.routers import api_router
from lifestack.modules.art.application import dependencies as art_app_deps
from lifestack.modules.art.infrastructure import dependencies as art_infra_deps

VERSION = "0.1.0"


def custom_generate_unique_id(route: APIRoute) -> str:
    """Generate unique operation IDs for OpenAPI."""
    if route.tags:
        return f"{route.tags[0]}-{route.name}"
    return route.name


# Initialize Sentry if configured
if settings.SENTRY_DSN and settings.ENVIRONMENT != "local":
    sentry_sdk.init(
        dsn=str(settings.SENTRY_DSN),
        enable_tracing=True,
        environment=settings.ENVIRONMENT,
    )


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Application lifespan manager."""
    setup_logging()
    logger.info("Starting Lifestack backend...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Cache backend: {settings.CACHE_BACKEND}")
    logger.info(f"Enabled art sources: {settings.art_source_weights}")

    yield

    if settings.CACHE_BACKEND == "redis":
        await redis_client.close()
    logger.info("Shutting down Lifestack backend...")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description=(
        "仪表盘艺术作品服务 - 从 ARTIC / Met / Cleveland 拉取作品，"
        "按面板方向定时轮换"
    ),
    version=VERSION,
    openapi_url=f"{settings.API_PREFIX}/openapi.json",
    docs_url=f"{settings.API_PREFIX}/docs",
    redoc_url=f"{settings.API_PREFIX}/redoc",
    root_path=settings.ROOTPATH,
    generate_unique_id_function=custom_generate_unique_id,
    lifespan=lifespan,
)

# Dependency overrides (application -> infrastructure)
app.dependency_overrides[art_app_deps.get_art_cache] = art_infra_deps.get_art_cache
app.dependency_overrides[art_app_deps.get_art_sources] = art_infra_deps.get_art_sources
app.dependency_overrides[art_app_deps.get_art_rng] = art_infra_deps.get_art_rng

# Exception handlers
app.add_exception_handler(DomainException, domain_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# CORS middleware
if settings.all_cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.all_cors_origins,
        allow_credentials=True,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
    )

# Include API router
app.include_router(api_router, prefix=settings.API_PREFIX)


@app.get("/health", tags=["health"])
async def health_check():
    """Health check endpoint.

    检查缓存后端：
    - redis: PING + 版本
    - memory: 无外部依赖，状态为 skipped

    缓存不可用时服务仍可降级运行（每次请求重新构建作品池）。
    """
    cache_health = await get_cache().health_check()
    cache_ok = cache_health.status in (HealthStatus.OK, HealthStatus.SKIPPED)

    return {
        "status": "healthy" if cache_ok else "degraded",
        "environment": settings.ENVIRONMENT,
        "version": VERSION,
        "components": {
            "cache": cache_health.to_dict(),
        },
    }


@app.get("/", tags=["root"])
async def root():
    """Root endpoint."""
    return {
        "message": "Welcome to Lifestack API",
        "docs": f"{settings.API_PREFIX}/docs",
        "endpoints": {
            "current": f"{settings.API_PREFIX}/art/current",
            "orientation": f"{settings.API_PREFIX}/art/orientation/{{orientation}}",
            "refresh": f"{settings.API_PREFIX}/art/refresh",
            "cacheClear": f"{settings.API_PREFIX}/art/cache/clear",
            "cacheStats": f"{settings.API_PREFIX}/art/cache/stats",
            "health": f"{settings.API_PREFIX}/art/health",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.SERVER_PORT,
        reload=settings.ENVIRONMENT == "local",
    )
