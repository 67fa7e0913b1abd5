"""Core module initialization."""

from .config import LogFormat, LoggingConfig, LogLevel, resolve_connection_string
from .logging_config import setup_logging, log_with_context

__all__ = [
    "LogFormat",
    "LoggingConfig",
    "LogLevel",
    "resolve_connection_string",
    "setup_logging",
    "log_with_context",
]
