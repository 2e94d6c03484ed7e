"""
API Handlers

Route handlers for the Quill API.

Handlers follow the pattern:
- Parse HTTP requests
- Call service methods
- Format HTTP responses

All business logic is delegated to the service layer. Errors are raised
as QuillException subclasses and rendered by the global handlers.
"""

from quill.api.handlers import (
    category_handler,
    health_handler,
    post_handler,
    user_handler,
)

__all__ = [
    "category_handler",
    "health_handler",
    "post_handler",
    "user_handler",
]
