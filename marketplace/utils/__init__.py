from .helpers import (
    serialize_payload,
    success_response,
    error_response,
)
from .logger import Logger
from .exceptions import (
    MarketplaceError,
    ConfigurationError,
    ConversionError,
    PermissionDeniedError,
)

__all__ = [
    "serialize_payload",
    "success_response",
    "error_response",
    "Logger",
    "MarketplaceError",
    "ConfigurationError",
    "ConversionError",
    "PermissionDeniedError",
]
