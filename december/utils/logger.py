"""
Logger Utility
==============

Leveled, context-aware logging for every December component.

Each module owns a module-level logger named after its component:

    from december.utils.logger import Logger

    logger = Logger("Classifier")
    logger.debug("Extracted items", {"count": 4})

Child loggers narrow the context for a sub-operation:

    repair_logger = Logger("Agent").child("Repair")
    # Logs show [Agent:Repair]

Output format:
    [TIMESTAMP] [LEVEL] [context] message

Colors are used only when the stream is a terminal and NO_COLOR is unset.
"""

import json
import os
import sys
from datetime import datetime
from enum import IntEnum
from typing import Any, TextIO


class LogLevel(IntEnum):
    """Numeric log levels; higher is more severe."""
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40


class Colors:
    """ANSI escape codes for colored terminal output."""
    RESET = "\033[0m"
    DEBUG = "\033[36m"    # Cyan
    INFO = "\033[32m"     # Green
    WARNING = "\033[33m"  # Yellow
    ERROR = "\033[31m"    # Red
    DIM = "\033[2m"


_LEVEL_NAMES = {
    "DEBUG": LogLevel.DEBUG,
    "INFO": LogLevel.INFO,
    "WARNING": LogLevel.WARNING,
    "WARN": LogLevel.WARNING,
    "ERROR": LogLevel.ERROR,
}


def parse_level(value: str | None) -> LogLevel:
    """
    Parse a level name such as "debug" or "WARN".

    Unknown or empty values fall back to INFO.
    """
    if not value:
        return LogLevel.INFO
    return _LEVEL_NAMES.get(value.strip().upper(), LogLevel.INFO)


def _use_color(stream: TextIO) -> bool:
    if os.getenv("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


class Logger:
    """
    A context-aware logger with optional structured data.

    The minimum level is read from LOG_LEVEL when the logger is created,
    unless one is passed explicitly.

    Example:
        logger = Logger("Agent")
        logger.info("Routing request", {"disposition": "clarify"})

        child = logger.child("Examples")
        child.warning("Example file missing", {"file": "forms.md"})
    """

    def __init__(self, context: str = "", level: LogLevel | None = None):
        """
        Initialize a logger.

        Args:
            context: Prefix for all messages (e.g., "Agent", "Validator")
            level: Minimum level; defaults to LOG_LEVEL from the environment
        """
        self.context = context
        self._min_level = level if level is not None else parse_level(os.getenv("LOG_LEVEL"))

    def child(self, child_context: str) -> "Logger":
        """Create a logger whose context is nested under this one."""
        new_context = f"{self.context}:{child_context}" if self.context else child_context
        return Logger(new_context, self._min_level)

    def set_level(self, level: LogLevel) -> None:
        self._min_level = level

    def is_enabled_for(self, level: LogLevel) -> bool:
        return level >= self._min_level

    def _format_message(self, level_name: str, message: str, color: str, colored: bool) -> str:
        timestamp = datetime.now().isoformat(timespec="seconds")
        context_str = f"[{self.context}] " if self.context else ""

        if not colored:
            return f"[{timestamp}] [{level_name}] {context_str}{message}"

        return (
            f"{Colors.DIM}[{timestamp}]{Colors.RESET} "
            f"{color}[{level_name}]{Colors.RESET} "
            f"{context_str}{message}"
        )

    def _log(
        self,
        level: LogLevel,
        level_name: str,
        color: str,
        message: str,
        data: dict[str, Any] | None = None
    ) -> None:
        if level < self._min_level:
            return

        stream = sys.stderr if level >= LogLevel.ERROR else sys.stdout
        colored = _use_color(stream)
        print(self._format_message(level_name, message, color, colored), file=stream)

        if data:
            data_str = json.dumps(data, indent=2, default=str)
            if colored:
                data_str = f"{Colors.DIM}{data_str}{Colors.RESET}"
            print(data_str, file=stream)

    def debug(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Log details useful while developing; shown only at LOG_LEVEL=debug."""
        self._log(LogLevel.DEBUG, "DEBUG", Colors.DEBUG, message, data)

    def info(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Log general operational information."""
        self._log(LogLevel.INFO, "INFO", Colors.INFO, message, data)

    def warning(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Log a problem that does not stop the current operation."""
        self._log(LogLevel.WARNING, "WARN", Colors.WARNING, message, data)

    def error(
        self,
        message: str,
        error: Exception | None = None,
        data: dict[str, Any] | None = None
    ) -> None:
        """
        Log an error.

        Args:
            message: The error message
            error: Optional exception whose type and text are included
            data: Optional extra structured data
        """
        payload = dict(data or {})
        if error:
            payload["error_type"] = type(error).__name__
            payload["error_message"] = str(error)
        self._log(LogLevel.ERROR, "ERROR", Colors.ERROR, message, payload or None)


# Default logger for code that has no component of its own
logger = Logger("December")
