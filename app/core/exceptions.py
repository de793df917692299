from typing import Any, Dict, Optional

from fastapi import status


class ServiceError(Exception):
    """Base exception for service layer errors."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        error_code: str = "INTERNAL_SERVER_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code
        self.details = details


class NotFoundError(ServiceError):
    """Referenced entity does not exist. Error code is <ENTITY>_NOT_FOUND."""

    def __init__(self, entity: str, message: Optional[str] = None) -> None:
        super().__init__(
            message or f"{entity.replace('_', ' ').capitalize()} not found",
            status.HTTP_404_NOT_FOUND,
            f"{entity.upper()}_NOT_FOUND",
        )


class DeleteFailedError(ServiceError):
    """DELETE touched zero rows for a row whose existence was already confirmed."""

    def __init__(self, entity: str) -> None:
        super().__init__(
            f"Failed to delete {entity.replace('_', ' ')}",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "DELETE_FAILED",
        )


class ValidationFailedError(ServiceError):
    def __init__(self, message: str, issues: list) -> None:
        super().__init__(
            message,
            status.HTTP_400_BAD_REQUEST,
            "VALIDATION_ERROR",
            {"validationErrors": issues},
        )
