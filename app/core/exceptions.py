"""
Domain exceptions raised by the CRUD and SQL helper layers.

Each exception carries the HTTP status code it maps to. A single handler
registered in main.py turns them into `{"detail": ...}` responses, the same
shape FastAPI uses for HTTPException.
"""

from typing import Optional

from fastapi import status


class AppError(Exception):
    """Base class for errors that surface as HTTP responses."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequestError(AppError):
    """Invalid input: empty updates, unknown filters, duplicates."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad Request"


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not Found"
