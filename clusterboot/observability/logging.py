"""Logging for a bootstrap run.

clusterboot logs through loguru and stays disabled as a library. The
command-line entry point turns it on for one run: human-readable lines on
stderr, and optionally a plain copy in a file for cloud-init log collection.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from loguru import logger

type LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "TRACE"]

# bound extras shown after the location, in this order
_CONTEXT_KEYS = ("component", "instance_id", "region", "group", "role")


def _context_suffix(record: Any) -> str:
    extra = record["extra"]
    bound = " ".join(f"{key}={extra[key]}" for key in _CONTEXT_KEYS if key in extra)
    return f" [{bound}]" if bound else ""


LINE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <7}</level> | "
    "<cyan>{name}</cyan>{extra[_ctx]} - "
    "<level>{message}</level>"
)


@dataclass(frozen=True, slots=True)
class LogConfig:
    """Logging options for one run.

    Attributes:
        level: Minimum level on stderr.
        file: Optional file that receives every record at DEBUG.
    """

    level: LogLevel = "INFO"
    file: str | None = None


def _setup_logging(config: LogConfig) -> list[int]:
    """Install the run's sinks and return their ids for ``_teardown_logging``."""
    logger.remove()
    logger.enable("clusterboot")
    logger.configure(patcher=lambda r: r["extra"].update(_ctx=_context_suffix(r)))

    handler_ids = [
        logger.add(sys.stderr, level=config.level, format=LINE_FORMAT, filter="clusterboot"),
    ]
    if config.file:
        Path(config.file).parent.mkdir(parents=True, exist_ok=True)
        handler_ids.append(
            logger.add(
                config.file,
                level="DEBUG",
                format=LINE_FORMAT,
                colorize=False,
                filter="clusterboot",
                diagnose=False,
            )
        )
    return handler_ids


def _teardown_logging(handler_ids: list[int]) -> None:
    for hid in handler_ids:
        logger.remove(hid)
    logger.disable("clusterboot")
