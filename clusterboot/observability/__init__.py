"""Observability for clusterboot: loguru-based logging setup."""

from .logging import (
    LINE_FORMAT,
    LogConfig,
    LogLevel,
    _setup_logging,
    _teardown_logging,
)

__all__ = [
    "LINE_FORMAT",
    "LogConfig",
    "LogLevel",
    "_setup_logging",
    "_teardown_logging",
]
