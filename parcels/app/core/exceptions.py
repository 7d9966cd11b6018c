"""
Custom exceptions for the parcel store.

Provides standardized error codes so callers can tell absence,
guard violations and storage failures apart.
"""

from typing import Any, Dict


class AppException(Exception):
    """Base application exception."""
    
    def __init__(self, message: str, error_code: str, details: Dict[str, Any] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(message)


class ResourceNotFoundError(AppException):
    """Raised when requested resource is not found."""
    
    def __init__(self, resource: str, resource_id: Any = None, message: str = None):
        super().__init__(
            message=message or f"{resource} not found",
            error_code="ERR_NOT_FOUND_001",
            details={"resource": resource, "id": resource_id}
        )


class ParcelNotFoundError(ResourceNotFoundError):
    """Raised when no parcel row matches the requested number."""
    
    def __init__(self, number: int):
        self.number = number
        super().__init__("parcel", number)


class GuardViolationError(AppException):
    """Raised when the current status of a parcel forbids a mutation."""
    
    def __init__(self, message: str, number: int, status: str):
        self.number = number
        self.status = status
        super().__init__(
            message=message,
            error_code="ERR_GUARD_001",
            details={"number": number, "status": status}
        )


class AddressChangeNotPermittedError(GuardViolationError):
    """Raised when changing the address of a parcel that is not registered."""
    
    def __init__(self, number: int, status: str):
        super().__init__("address change not permitted", number, status)


class DeleteNotPermittedError(GuardViolationError):
    """Raised when deleting a parcel that is not registered."""
    
    def __init__(self, number: int, status: str):
        super().__init__("delete not permitted", number, status)


class StorageError(AppException):
    """Raised when the underlying database call fails."""
    
    def __init__(self, operation: str, cause: Exception):
        self.operation = operation
        super().__init__(
            message=f"storage failure during {operation}: {cause}",
            error_code="ERR_STORAGE_001",
            details={"operation": operation}
        )


class SchemaInitError(SystemExit):
    """
    Raised when the parcel table cannot be ensured.
    
    Subclasses SystemExit: it passes through `except Exception` handlers
    and terminates the process when left unhandled.
    """
    
    def __init__(self, cause: Exception):
        self.cause = cause
        self.message = f"Failed to create parcel table: {cause}"
        super().__init__(self.message)
