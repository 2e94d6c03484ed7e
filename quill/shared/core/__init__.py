"""
Core Module

Provides core functionality shared across the application:
- Structured logging
- Custom exceptions

Usage:
======
    from quill.shared.core.logging import logger, get_logger
    from quill.shared.core.exceptions import QuillException, NotFoundError

    logger.info("Starting operation", user_id=user_id)
"""

from quill.shared.core.logging import (
    logger,
    get_logger,
    log_context,
    clear_log_context,
)
from quill.shared.core.exceptions import (
    QuillException,
    NotFoundError,
    UserNotFoundError,
    PostNotFoundError,
    CategoryNotFoundError,
    MalformedIdentifierError,
    ValidationError,
    ReferenceNotFoundError,
    ConflictError,
    DuplicateResourceError,
    NoChangesDetectedError,
    ServiceUnavailableError,
    StoreError,
)

__all__ = [
    # Logging
    "logger",
    "get_logger",
    "log_context",
    "clear_log_context",
    # Exceptions
    "QuillException",
    "NotFoundError",
    "UserNotFoundError",
    "PostNotFoundError",
    "CategoryNotFoundError",
    "MalformedIdentifierError",
    "ValidationError",
    "ReferenceNotFoundError",
    "ConflictError",
    "DuplicateResourceError",
    "NoChangesDetectedError",
    "ServiceUnavailableError",
    "StoreError",
]
