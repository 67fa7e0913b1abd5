"""
Configuration for asb-transport.

Handles logging settings and connection-string resolution.
"""

import os
from enum import Enum
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict

from asb_transport.provisioning.constants import CONNECTION_STRING_ENV_VAR


class LogLevel(str, Enum):
    """Valid log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Supported log output formats."""
    TEXT = "text"
    JSON = "json"


class LoggingConfig(BaseModel):
    """Logging configuration."""
    model_config = ConfigDict(frozen=True, extra='forbid', use_enum_values=True)

    level: LogLevel = LogLevel.WARNING
    format: LogFormat = LogFormat.TEXT


def resolve_connection_string(
    flag_value: Optional[str],
    environ: Optional[Mapping[str, str]] = None,
) -> Optional[str]:
    """
    Resolve the Service Bus connection string.

    Precedence (highest to lowest):
    1. --connection-string flag
    2. AzureServiceBus_ConnectionString environment variable

    Returns None when neither is set; the management client reports the
    missing value on its first call.
    """
    if flag_value:
        return flag_value
    environ = os.environ if environ is None else environ
    return environ.get(CONNECTION_STRING_ENV_VAR) or None
