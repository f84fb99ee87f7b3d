"""
Custom exceptions for the dashboard service.

Provides a hierarchy of exceptions with HTTP-like error codes
for consistent error handling across routes, queries and API clients.
"""
from typing import Any, Dict, Optional


class DashboardError(Exception):
    """Base exception for all dashboard errors."""

    def __init__(
        self,
        message: str,
        code: int = 500,
        retryable: bool = True,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.retryable = retryable

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "success": False,
            "message": self.message,
            "error_code": self.code,
            "retryable": self.retryable,
        }


# ============================================
# 4xx Client Errors
# ============================================

class ValidationError(DashboardError):
    """400 Bad Request - Invalid input data."""

    def __init__(self, message: str = "Invalid request data"):
        super().__init__(message, code=400, retryable=False)


class AuthenticationError(DashboardError):
    """401 Unauthorized - Authentication required or failed."""

    def __init__(self, message: str = "Authentication required. Please sign in again."):
        super().__init__(message, code=401, retryable=False)


class ResourceNotFoundError(DashboardError):
    """404 Not Found - Requested resource doesn't exist."""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message, code=404, retryable=False)


class DAONotFoundError(ResourceNotFoundError):
    """DAO not found."""

    def __init__(self, name: str = ""):
        message = f"No DAO found with name: {name}" if name else "DAO not found"
        super().__init__(message)


class ProposalNotFoundError(ResourceNotFoundError):
    """Proposal not found."""

    def __init__(self, proposal_id: str = ""):
        message = f"Proposal '{proposal_id}' not found" if proposal_id else "Proposal not found"
        super().__init__(message)


# ============================================
# 5xx Server Errors
# ============================================

class InternalError(DashboardError):
    """500 Internal Server Error - Unexpected error."""

    def __init__(self, message: str = "An unexpected error occurred."):
        super().__init__(message, code=500, retryable=True)


class ConfigurationError(DashboardError):
    """500 - Required configuration is missing."""

    def __init__(self, message: str = "Server configuration is incomplete."):
        super().__init__(message, code=500, retryable=False)


class UpstreamAPIError(DashboardError):
    """An external API (Hiro, Stacks node, cache service) failed."""

    def __init__(
        self,
        message: str = "An upstream service failed.",
        status_code: Optional[int] = None,
        response: Optional[Dict[str, Any]] = None,
    ):
        self.status_code = status_code
        self.response = response
        super().__init__(message, code=500, retryable=True)


# ============================================
# Exception Classification Helpers
# ============================================

def classify_exception(error: Exception) -> DashboardError:
    """
    Convert a generic exception to a DashboardError.

    This helps normalize error handling across different libraries.
    """
    if isinstance(error, DashboardError):
        return error

    error_type = type(error).__name__
    error_msg = str(error)

    if 'timeout' in error_type.lower() or 'timeout' in error_msg.lower():
        return UpstreamAPIError(f"Operation timed out: {error_msg}")

    if 'connect' in error_type.lower() or 'connection' in error_msg.lower():
        return UpstreamAPIError(f"Connection error: {error_msg}")

    if 'auth' in error_type.lower() or 'unauthorized' in error_msg.lower():
        return AuthenticationError(f"Authentication failed: {error_msg}")

    return InternalError(f"Unexpected error: {error_msg}")
