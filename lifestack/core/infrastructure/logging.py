"""Logging configuration with structlog integration.

提供两种日志记录方式：
1. loguru: 用于一般调试日志
2. structlog: 用于关键业务事件的结构化日志
"""

import sys
from typing import Any

import structlog
from loguru import logger

from lifestack.core.config import settings


def setup_logging() -> None:
    """Configure application logging with structlog and loguru."""
    _configure_structlog()
    _configure_loguru()

    logger.info(f"Logging configured with level: {settings.LOG_LEVEL}")


def _configure_structlog() -> None:
    """配置 structlog 处理器链。"""
    if settings.ENVIRONMENT == "local":
        # 本地开发使用人类可读格式
        renderer = structlog.dev.ConsoleRenderer(colors=True)
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.CallsiteParameterAdder(
                [
                    structlog.processors.CallsiteParameter.MODULE,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                    structlog.processors.CallsiteParameter.LINENO,
                ]
            ),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            _get_log_level_number(settings.LOG_LEVEL)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


def _configure_loguru() -> None:
    """配置 loguru。"""
    logger.remove()

    logger.add(
        sys.stderr,
        level=settings.LOG_LEVEL,
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
    )

    if settings.ENVIRONMENT != "local":
        logger.add(
            "logs/lifestack_{time:YYYY-MM-DD}.log",
            rotation="00:00",
            retention="30 days",
            level="INFO",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        )


def _get_log_level_number(level: str) -> int:
    """将日志级别字符串转换为数字。"""
    levels = {
        "DEBUG": 10,
        "INFO": 20,
        "WARNING": 30,
        "ERROR": 40,
        "CRITICAL": 50,
    }
    return levels.get(level.upper(), 20)


# ============================================================================
# 业务事件日志记录器
# ============================================================================


class BusinessEvents:
    """业务事件日志助手类。

    提供统一的业务事件日志记录接口，确保事件格式一致。

    Usage:
        from lifestack.core.infrastructure.logging import BusinessEvents

        BusinessEvents.art_pool_built(orientation="portrait", pool_size=12, attempts=14)
    """

    _log = structlog.get_logger("business.events")

    @classmethod
    def art_pool_built(
        cls,
        orientation: str | None,
        pool_size: int,
        attempts: int,
        duration_ms: int | None = None,
        **extra: Any,
    ) -> None:
        """记录作品池构建完成事件。"""
        cls._log.info(
            "art_pool_built",
            event_type="art_pool",
            orientation=orientation or "any",
            pool_size=pool_size,
            attempts=attempts,
            duration_ms=duration_ms,
            **extra,
        )

    @classmethod
    def art_source_fetch_failed(
        cls,
        source: str,
        orientation: str | None,
        error: str,
        attempt: int,
        **extra: Any,
    ) -> None:
        """记录单次源抓取失败事件。"""
        cls._log.warning(
            "art_source_fetch_failed",
            event_type="art_fetch_error",
            source=source,
            orientation=orientation or "any",
            error=error,
            attempt=attempt,
            **extra,
        )

    @classmethod
    def art_rotation_served(
        cls,
        orientation: str,
        slot: int,
        cache_hit: bool,
        pool_index: int | None = None,
        **extra: Any,
    ) -> None:
        """记录轮换作品下发事件。"""
        cls._log.info(
            "art_rotation_served",
            event_type="art_rotation",
            orientation=orientation,
            slot=slot,
            cache_hit=cache_hit,
            pool_index=pool_index,
            **extra,
        )

    @classmethod
    def art_cache_cleared(cls, keys_cleared: int, **extra: Any) -> None:
        """记录缓存清理事件。"""
        cls._log.info(
            "art_cache_cleared",
            event_type="art_cache",
            keys_cleared=keys_cleared,
            **extra,
        )

    @classmethod
    def feature_degraded(
        cls,
        feature: str,
        reason: str,
        **extra: Any,
    ) -> None:
        """记录功能降级事件。"""
        cls._log.warning(
            "feature_degraded",
            event_type="degradation",
            feature=feature,
            reason=reason,
            **extra,
        )
