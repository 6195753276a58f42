"""Runtime logging helpers."""

from __future__ import annotations

import sys

from loguru import logger

from core.config import AppSettings

_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<7} | {name}:{function}:{line} | {message}"
_PACKAGES = ("core", "adapters", "cli")
_CONFIGURED_LEVEL: str | None = None


def silence_library_logging() -> None:
    """Disable linkwalk's loggers; used when imported as a library."""

    for name in _PACKAGES:
        logger.disable(name)


def configure_logging(*, level: str | None = None, settings: AppSettings | None = None) -> None:
    """Configure process-level logging once per level.

    The library never calls this on import; entry points (CLI) do.
    """

    global _CONFIGURED_LEVEL
    level = (level or (settings or AppSettings()).log_level).upper()
    for name in _PACKAGES:
        logger.enable(name)
    if level == _CONFIGURED_LEVEL:
        return

    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format=_FORMAT,
        backtrace=False,
        diagnose=False,
    )
    _CONFIGURED_LEVEL = level
