"""
Custom exceptions for the application.

Each exception carries the message returned to the client; the HTTP status
for each class is assigned in alertnav.main.
"""

from typing import Optional, Any, Dict


class ApplicationException(Exception):
    """Base exception for all application-specific exceptions."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(ApplicationException):
    """Exception raised for malformed input (400)."""
    pass


class AuthenticationException(ApplicationException):
    """Exception raised when no valid session is present (401)."""

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class NotFoundException(ApplicationException):
    """Exception raised when a requested resource is not found (404)."""

    def __init__(self, resource: str, identifier: Any = None):
        message = f"{resource} not found"
        super().__init__(message, {"resource": resource, "identifier": identifier})


class DatabaseException(ApplicationException):
    """Exception raised when the datastore fails (500). The cause is logged, never returned."""
    pass
