"""
Logger Utility
==============

Context-aware logging for the review agent.

Every line carries a timestamp, a level and a context prefix such as
``[Agent]`` or ``[Agent:Round]``. Optional structured data is printed as
indented JSON below the message.

All output goes to stderr. The review itself is printed to stdout by the
CLI, so keeping logs off stdout lets callers pipe the review into a file or
a commit message.

Usage:
    from aicr.utils.logger import Logger

    logger = Logger("ToolExecutor")
    logger.info("Executing tool: read_file", {"file_path": "main.go"})
"""

import json
import os
import sys
from datetime import datetime
from enum import IntEnum
from typing import Any, TextIO


class LogLevel(IntEnum):
    """Log levels, higher is more severe."""
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


def parse_log_level(value: str | None) -> LogLevel:
    """
    Parse a level name such as "debug" or "WARN".

    Unknown or empty values fall back to INFO.
    """
    if not value:
        return LogLevel.INFO
    return _LEVEL_NAMES.get(value.strip().upper(), LogLevel.INFO)


class Logger:
    """
    A context-aware logger with colored output.

    Example:
        logger = Logger("Agent")
        logger.info("Starting review")

        round_logger = logger.child("Round")
        round_logger.debug("Model replied", {"finish_reason": "tool_calls"})
    """

    def __init__(self, context: str = "", stream: TextIO | None = None):
        """
        Initialize a logger.

        Args:
            context: Prefix for all messages (e.g. "Agent", "ModelClient")
            stream: Output stream, stderr when omitted
        """
        self.context = context
        self._stream = stream
        self._level: LogLevel | None = None

    @property
    def stream(self) -> TextIO:
        # sys.stderr may be swapped after construction
        return self._stream or sys.stderr

    def set_level(self, level: LogLevel | str) -> None:
        """Pin the minimum level for this logger instead of following LOG_LEVEL."""
        if isinstance(level, str):
            level = parse_log_level(level)
        self._level = level

    @property
    def min_level(self) -> LogLevel:
        # LOG_LEVEL is read per call, .env is loaded after module import
        if self._level is not None:
            return self._level
        return parse_log_level(os.getenv("LOG_LEVEL"))

    def is_enabled_for(self, level: LogLevel) -> bool:
        return level >= self.min_level

    def child(self, child_context: str) -> "Logger":
        """
        Create a child logger with additional context.

        Logs from ``Logger("Agent").child("Round")`` show ``[Agent:Round]``.
        """
        new_context = f"{self.context}:{child_context}" if self.context else child_context
        child = Logger(new_context, self._stream)
        child._level = self._level
        return child

    def _format_message(self, level: str, message: str, color: str) -> str:
        """Format as: [TIMESTAMP] [LEVEL] [context] message"""
        timestamp = datetime.now().isoformat(timespec="seconds")
        context_str = f"[{self.context}] " if self.context else ""

        return (
            f"{Colors.DIM}[{timestamp}]{Colors.RESET} "
            f"{color}[{level}]{Colors.RESET} "
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
        if not self.is_enabled_for(level):
            return

        stream = self.stream
        print(self._format_message(level_name, message, color), file=stream)

        if data:
            data_str = json.dumps(data, indent=2, default=str, ensure_ascii=False)
            print(f"{Colors.DIM}{data_str}{Colors.RESET}", file=stream)

    def debug(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Log detailed information, shown only when LOG_LEVEL=debug."""
        self._log(LogLevel.DEBUG, "DEBUG", Colors.DEBUG, message, data)

    def info(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Log general progress. This is the default level."""
        self._log(LogLevel.INFO, "INFO", Colors.INFO, message, data)

    def warning(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Log a recoverable problem, such as a failed tool call."""
        self._log(LogLevel.WARNING, "WARN", Colors.WARNING, message, data)

    def error(self, message: str, error: BaseException | None = None) -> None:
        """
        Log an error, optionally with the exception that caused it.

        Args:
            message: The error message
            error: Exception whose type and message are included
        """
        data = None
        if error:
            data = {
                "error_type": type(error).__name__,
                "error_message": str(error),
            }
        self._log(LogLevel.ERROR, "ERROR", Colors.ERROR, message, data)


# Default logger instance for general use
logger = Logger("aicr")
