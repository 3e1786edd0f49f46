from typing import Any, Dict, Optional

from fastapi import status


class AppError(Exception):
    """Base for failures surfaced to the caller as typed responses."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(AppError):
    def __init__(self, entity: str, entity_id: Optional[str] = None):
        if entity_id:
            message = f"{entity} {entity_id} not found"
        else:
            message = f"{entity} not found"
        super().__init__(message=message, status_code=status.HTTP_404_NOT_FOUND)


class ForbiddenError(AppError):
    def __init__(self, operation: str = "modify", entity: str = "entity"):
        super().__init__(
            message=f"Not authorized to {operation} this {entity}",
            status_code=status.HTTP_403_FORBIDDEN,
        )


class ValidationError(AppError):
    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=details,
        )
