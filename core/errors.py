"""
Error taxonomy shared by the flows, storage helpers and HTTP layer.

Each error carries the HTTP status it maps to and the message that is safe
to show to the caller.  Lower-level exceptions are logged where they are
caught and replaced by one of these.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import status


class ApiError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal Server Error"

    def __init__(self, message: Optional[str] = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.message}


class ValidationError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid data"

    def __init__(
        self,
        details: Optional[List[Dict[str, str]]] = None,
        message: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or []

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.message, "details": self.details}


class AuthenticationError(ApiError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class NotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class ConflictError(ApiError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "User already exists"


class InternalError(ApiError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal Server Error"
