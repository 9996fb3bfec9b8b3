"""Runtime logging helpers."""

from __future__ import annotations

import os
import sys
from enum import StrEnum
from logging import Handler

from loguru import logger
from rich.console import Console
from rich.logging import RichHandler


class LogProfile(StrEnum):
    # chat: rich handler beside the prompt; default: plain lines on stderr
    CHAT = "chat"
    DEFAULT = "default"


_PROFILE_FORMATS: dict[LogProfile, str] = {
    LogProfile.CHAT: "{message}",
    LogProfile.DEFAULT: "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<7} | {name}:{function}:{line} | {message}",
}
_CONFIGURED_PROFILE: LogProfile | None = None


def _build_chat_handler() -> Handler:
    return RichHandler(
        console=Console(stderr=True),
        show_level=True,
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=False,
    )


def configure_logging(*, profile: LogProfile = LogProfile.DEFAULT, level: str | None = None) -> None:
    """Configure process-level logging once per profile."""

    global _CONFIGURED_PROFILE
    profile = LogProfile(profile)
    if profile == _CONFIGURED_PROFILE:
        return

    level = (level or os.getenv("ALMOND_LOG_LEVEL", "WARNING")).upper()
    logger.remove()
    sink = _build_chat_handler() if profile is LogProfile.CHAT else sys.stderr
    logger.add(
        sink,
        level=level,
        format=_PROFILE_FORMATS[profile],
        backtrace=False,
        diagnose=False,
    )
    _CONFIGURED_PROFILE = profile
