from __future__ import annotations

from typing import Any, Optional


class AppError(Exception):
    """Application error carrying a machine-readable code and an HTTP status."""

    def __init__(
        self,
        code: str,
        status_code: int,
        message: str,
        details: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.code = code
        self.status_code = status_code
        self.message = message
        self.details = details


class NotFoundError(AppError):
    def __init__(self, message: str = "Resource not found", details: Optional[dict[str, Any]] = None):
        super().__init__("NOT_FOUND", 404, message, details)
