"""Configuration loading and models for covrelay."""

from .loader import ConfigLoader, ConfigurationError
from .models import (
    CovRelayConfig,
    LoggingConfig,
    ReportConfig,
    SendConfig,
    SubprocessConfig,
)

__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "CovRelayConfig",
    "LoggingConfig",
    "ReportConfig",
    "SendConfig",
    "SubprocessConfig",
]
