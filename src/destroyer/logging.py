from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum, unique
from logging import (
    Formatter,
    Handler,
    Logger,
    StreamHandler,
    getLevelNamesMapping,
    getLogger,
)
from typing import TYPE_CHECKING

from typing_extensions import override

if TYPE_CHECKING:
    from typing import TextIO

_HANDLER_NAME = "destroyer"


def basic_config(
    *,
    format: str = "{asctime} | {name} | {levelname:8} | {message}",  # noqa: A002
    level: LogLevel | str = "INFO",
    stream: TextIO | None = None,
) -> Handler:
    """Send the package's log records to a stream.

    The `destroyer` logger gets one stream handler; calling this again replaces
    it rather than adding another.
    """
    logger = get_package_logger()
    for existing in list(logger.handlers):
        if existing.get_name() == _HANDLER_NAME:
            logger.removeHandler(existing)
    handler = StreamHandler(stream)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        Formatter(fmt=format, datefmt="%Y-%m-%d %H:%M:%S", style="{")
    )
    logger.addHandler(handler)
    logger.setLevel(get_logging_level_number(level))
    return handler


def get_package_logger() -> Logger:
    """Get the logger all `destroyer` modules log under."""
    return getLogger(__name__.split(".")[0])


def get_logging_level_number(level: LogLevel | str, /) -> int:
    """Get the logging level number."""
    mapping = getLevelNamesMapping()
    try:
        return mapping[level]
    except KeyError:
        raise GetLoggingLevelNumberError(level=level) from None


@dataclass(kw_only=True, slots=True)
class GetLoggingLevelNumberError(Exception):
    level: str

    @override
    def __str__(self) -> str:
        return f"Invalid logging level: {self.level!r}"


@unique
class LogLevel(StrEnum):
    """An enumeration of the logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


__all__ = [
    "GetLoggingLevelNumberError",
    "LogLevel",
    "basic_config",
    "get_logging_level_number",
    "get_package_logger",
]
