"""
Custom Exceptions

Application-specific exceptions with HTTP status codes and error codes.

Exception Hierarchy:
====================
    QuillException (base)
       │
       ├── NotFoundError (404)             ← Resource not found
       │      ├── UserNotFoundError
       │      ├── PostNotFoundError
       │      ├── CategoryNotFoundError
       │      └── MalformedIdentifierError ← Id is not a valid ObjectId
       ├── ValidationError (400)           ← Invalid input data
       │      └── ReferenceNotFoundError   ← Related user/category missing
       ├── ConflictError (409)             ← Resource conflict
       │      ├── DuplicateResourceError   ← Unique email/name taken
       │      └── NoChangesDetectedError   ← Update would change nothing
       └── ServiceUnavailableError (503)   ← Document store unreachable
              └── StoreError

Usage:
======
    from quill.shared.core.exceptions import NotFoundError, ValidationError

    raise PostNotFoundError(post_id)
    # Results in: {"error": {"code": "NOT_FOUND", "message": "Post with id 'abc' not found"}}

    raise ReferenceNotFoundError("Author does not exist", details={"author_id": author_id})

Exception Handling:
===================
    Exceptions are caught by the error handler middleware and converted to JSON:
    {
        "error": {
            "code": "NOT_FOUND",
            "message": "User with id '65f...' not found",
            "details": {}
        }
    }
"""

from typing import Any, Optional


class QuillException(Exception):
    """
    Base exception for all Quill application errors.

    Attributes:
        message: Human-readable error message
        status_code: HTTP status code (default 500)
        error_code: Machine-readable error code
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.error_code = error_code or "INTERNAL_ERROR"
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Returns:
            Dictionary with error details for JSON response
        """
        return {
            "error": {
                "code": self.error_code,
                "message": self.message,
                "details": self.details,
            }
        }


# ═══════════════════════════════════════════════════════════════════════════════
# NOT FOUND ERRORS (404)
# ═══════════════════════════════════════════════════════════════════════════════


class NotFoundError(QuillException):
    """
    Resource not found error (404 Not Found).

    Example:
        raise NotFoundError("User", user_id)
        # Message: "User with id '65f0c...' not found"
    """

    def __init__(
        self,
        resource: str,
        resource_id: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
        error_code: str = "NOT_FOUND",
        message: Optional[str] = None,
    ) -> None:
        if message is None:
            message = f"{resource} not found"
            if resource_id:
                message = f"{resource} with id '{resource_id}' not found"
        super().__init__(
            message=message,
            status_code=404,
            error_code=error_code,
            details=details,
        )


class UserNotFoundError(NotFoundError):
    """User not found error."""

    def __init__(self, user_id: str) -> None:
        super().__init__(resource="User", resource_id=user_id)


class PostNotFoundError(NotFoundError):
    """Post not found error."""

    def __init__(self, post_id: str) -> None:
        super().__init__(resource="Post", resource_id=post_id)


class CategoryNotFoundError(NotFoundError):
    """Category not found error."""

    def __init__(self, category_id: str) -> None:
        super().__init__(resource="Category", resource_id=category_id)


class MalformedIdentifierError(NotFoundError):
    """
    Identifier is not a well-formed ObjectId.

    Always raised before the store is touched, so nothing is written.
    """

    def __init__(self, resource: str, value: Any) -> None:
        super().__init__(
            resource=resource,
            message=f"Invalid {resource.lower()} ID: {value}",
            error_code="MALFORMED_IDENTIFIER",
            details={"resource": resource, "value": str(value)},
        )


# ═══════════════════════════════════════════════════════════════════════════════
# VALIDATION & CONFLICT ERRORS (400, 409)
# ═══════════════════════════════════════════════════════════════════════════════


class ValidationError(QuillException):
    """
    Validation error (400 Bad Request).

    Raised when input data fails validation.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        details: Optional[dict[str, Any]] = None,
        error_code: str = "VALIDATION_ERROR",
    ) -> None:
        super().__init__(
            message=message,
            status_code=400,
            error_code=error_code,
            details=details,
        )


class ReferenceNotFoundError(ValidationError):
    """
    A related entity named in the request does not exist.

    Example:
        raise ReferenceNotFoundError("One or more categories do not exist",
                                     details={"missing": ["65f..."]})
    """

    def __init__(
        self,
        message: str = "Referenced resource does not exist",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            details=details,
            error_code="REFERENCE_NOT_FOUND",
        )


class ConflictError(QuillException):
    """
    Resource conflict error (409 Conflict).

    Example:
        raise ConflictError("Email already registered")
    """

    def __init__(
        self,
        message: str = "Resource conflict",
        details: Optional[dict[str, Any]] = None,
        error_code: str = "CONFLICT",
    ) -> None:
        super().__init__(
            message=message,
            status_code=409,
            error_code=error_code,
            details=details,
        )


class DuplicateResourceError(ConflictError):
    """
    Duplicate resource error.

    Raised when a unique field (user email, category name) is already taken.
    """

    def __init__(
        self,
        message: str = "Resource already exists",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message=message, details=details)


class NoChangesDetectedError(ConflictError):
    """Update request would not alter any stored field."""

    def __init__(
        self,
        message: str = "No changes detected in the update data",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message=message, details=details, error_code="NO_CHANGES")


# ═══════════════════════════════════════════════════════════════════════════════
# SERVICE ERRORS (503)
# ═══════════════════════════════════════════════════════════════════════════════


class ServiceUnavailableError(QuillException):
    """
    Service temporarily unavailable error (503).
    """

    def __init__(
        self,
        message: str = "Service temporarily unavailable",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(
            message=message,
            status_code=503,
            error_code="SERVICE_UNAVAILABLE",
            details=details,
        )


class StoreError(ServiceUnavailableError):
    """
    Document store operation failed.

    Wraps driver errors so callers above the store never depend on
    the driver's exception types.
    """

    def __init__(
        self,
        operation: str,
        message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        msg = message or f"Document store operation '{operation}' failed"
        extra_details = details or {}
        extra_details["operation"] = operation
        super().__init__(message=msg, details=extra_details)
