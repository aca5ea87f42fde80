"""
Custom exceptions for the sheet-forwarder service.

Provides a hierarchy of business and infrastructure exceptions
for proper error handling and HTTP status code mapping.
"""

from typing import Optional


class SheetForwarderError(Exception):
    """Base exception for all sheet-forwarder errors."""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


# =============================================================================
# Business Errors (4xx)
# =============================================================================

class BusinessError(SheetForwarderError):
    """Base exception for business logic errors (typically 4xx)."""
    pass


class ValidationError(BusinessError):
    """Raised when request validation fails."""

    def __init__(self, field: str, message: str):
        super().__init__(
            f"Validation error on '{field}': {message}",
            {"field": field}
        )
        self.field = field


# =============================================================================
# Infrastructure Errors (5xx)
# =============================================================================

class InfrastructureError(SheetForwarderError):
    """Base exception for infrastructure errors (typically 5xx)."""
    pass


class ConfigurationError(InfrastructureError):
    """Raised when a required configuration is missing."""

    def __init__(self, config_name: str, message: Optional[str] = None):
        msg = message or f"Configuration missing: {config_name}"
        super().__init__(msg, {"config_name": config_name})
        self.config_name = config_name


class ExternalServiceError(InfrastructureError):
    """Raised when an external service call fails."""

    def __init__(
        self,
        service_name: str,
        message: str,
        status_code: Optional[int] = None,
    ):
        super().__init__(
            f"{service_name} error: {message}",
            {
                "service_name": service_name,
                "status_code": status_code,
            }
        )
        self.service_name = service_name
        self.status_code = status_code


class SheetError(ExternalServiceError):
    """Raised when a Google Sheets call fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__("Sheets", message, status_code)


class GmailError(ExternalServiceError):
    """Raised when a Gmail API call fails."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__("Gmail", message, status_code)
