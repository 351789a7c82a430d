"""
Infrastructure module - shared services for every Bard command.

- Logging configuration
- Working directory paths
- Startup initialization
- Text file storage
- Error types
"""

from .bootstrap import Readiness, initialize
from .errors import (
    BardError,
    CompletionError,
    ConfigurationError,
    ConversionError,
    ProviderError,
    StorageError,
    UnsupportedModelError,
)
from .logging_config import DailyRotatingFileHandler, setup_logging

__all__ = [
    # bootstrap
    "Readiness",
    "initialize",
    # errors
    "BardError",
    "CompletionError",
    "ConfigurationError",
    "ConversionError",
    "ProviderError",
    "StorageError",
    "UnsupportedModelError",
    # logging_config
    "DailyRotatingFileHandler",
    "setup_logging",
]
