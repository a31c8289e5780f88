"""
Logging Configuration

Provides centralized logging configuration for the chat core.
"""

import json
import logging
import logging.handlers
import os
import sys
from enum import Enum
from typing import Optional

from .constants import LOG_FORMAT, LOG_DATE_FORMAT
from .exceptions import ConfigurationError


class LogLevel(Enum):
    """Enumeration of logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ColoredFormatter(logging.Formatter):
    """Custom formatter that adds colors to log levels."""

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
        'RESET': '\033[0m'        # Reset
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with colors."""
        level_color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
        original_levelname = record.levelname
        record.levelname = f"{level_color}{record.levelname}{self.COLORS['RESET']}"
        try:
            return super().format(record)
        finally:
            record.levelname = original_levelname


class JsonFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    _RESERVED = frozenset((
        'name', 'msg', 'args', 'levelname', 'levelno', 'pathname',
        'filename', 'module', 'lineno', 'funcName', 'created',
        'msecs', 'relativeCreated', 'thread', 'threadName',
        'processName', 'process', 'getMessage', 'exc_info',
        'exc_text', 'stack_info', 'taskName', 'message'
    ))

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as JSON."""
        log_entry = {
            'timestamp': self.formatTime(record, self.datefmt or LOG_DATE_FORMAT),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
            'thread_name': record.threadName,
        }

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        if record.stack_info:
            log_entry['stack_info'] = record.stack_info

        # Extra fields passed via ``extra=``
        for key, value in record.__dict__.items():
            if key not in self._RESERVED:
                log_entry[key] = value

        return json.dumps(log_entry, default=str, ensure_ascii=False)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    enable_colors: bool = True,
    json_format: bool = False,
    max_file_size: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5
) -> logging.Logger:
    """
    Set up logging configuration for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Path to log file. If None, logs only to console.
        enable_colors: Whether to enable colored output for console logging.
        json_format: Whether to use JSON format for structured logging.
        max_file_size: Maximum size of log file before rotation.
        backup_count: Number of backup files to keep.

    Returns:
        Configured root logger.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger()
    logger.setLevel(numeric_level)
    logger.handlers.clear()

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)

    if json_format:
        console_formatter: logging.Formatter = JsonFormatter()
    elif enable_colors and sys.stdout.isatty():
        console_formatter = ColoredFormatter(LOG_FORMAT, LOG_DATE_FORMAT)
    else:
        console_formatter = logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT)

    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)

        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=max_file_size,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(numeric_level)

        if json_format:
            file_formatter: logging.Formatter = JsonFormatter()
        else:
            file_formatter = logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT)

        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    return logger


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(
            f"{name} must be an integer, got {value!r}",
            details={"variable": name, "value": value}
        )


def configure_from_env(level: Optional[str] = None,
                       log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure logging from CHAT_CORE_LOG_* environment variables.

    Explicit arguments take precedence over the environment, which in turn
    takes precedence over the setup_logging defaults.

    Environment variables:
        CHAT_CORE_LOG_LEVEL: Logging level (default: INFO)
        CHAT_CORE_LOG_FILE: Log file path (optional)
        CHAT_CORE_LOG_COLORS: Enable colors (default: true)
        CHAT_CORE_LOG_JSON: Use JSON format (default: false)
        CHAT_CORE_LOG_MAX_SIZE: Max file size in bytes (default: 10MB)
        CHAT_CORE_LOG_BACKUP_COUNT: Number of backup files (default: 5)

    Args:
        level: Logging level overriding CHAT_CORE_LOG_LEVEL.
        log_file: Log file path overriding CHAT_CORE_LOG_FILE.

    Returns:
        Configured root logger.

    Raises:
        ConfigurationError: If a numeric variable is not an integer.
    """
    return setup_logging(
        level=level or os.getenv("CHAT_CORE_LOG_LEVEL", "INFO"),
        log_file=log_file or os.getenv("CHAT_CORE_LOG_FILE") or None,
        enable_colors=_env_flag("CHAT_CORE_LOG_COLORS", True),
        json_format=_env_flag("CHAT_CORE_LOG_JSON", False),
        max_file_size=_env_int("CHAT_CORE_LOG_MAX_SIZE", 10 * 1024 * 1024),
        backup_count=_env_int("CHAT_CORE_LOG_BACKUP_COUNT", 5)
    )
