"""
Marketplace exceptions.

Authorization denial is never an exception: evaluators return ``False``.
These classes cover broken configuration, impossible conversions and the
explicit guards that turn a denial into a 403.
"""

from typing import Optional, Dict, Any

from fastapi import status


class MarketplaceError(Exception):
    """Base exception class for all marketplace exceptions"""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses"""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "status_code": self.status_code,
            "details": self.details,
        }


class ConfigurationError(MarketplaceError):
    """Raised for unknown roles, unknown permission tokens or a broken registry"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            error_code="CONFIGURATION_ERROR",
            details=details,
        )


class ConversionError(MarketplaceError):
    """Raised when an exchange rate cannot be determined"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message,
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            error_code="CONVERSION_ERROR",
            details=details,
        )


class PermissionDeniedError(MarketplaceError):
    """Raised by guards when the principal lacks a permission or role"""

    def __init__(self, requirement: str, role: Optional[str] = None):
        message = f"Permission denied: {requirement} required"
        details = {"required": requirement}
        if role:
            details["role"] = role
        super().__init__(
            message,
            status.HTTP_403_FORBIDDEN,
            error_code="PERMISSION_DENIED",
            details=details,
        )
