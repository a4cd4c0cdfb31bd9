"""Standard API response models.

The dashboard device reads a ``success`` flag plus ``data``; failures that the
device can absorb set ``warning`` instead of an HTTP error status.
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Standard API response model."""

    success: bool = True
    data: T | None = None
    message: str | None = None
    warning: str | None = None

    @classmethod
    def ok(
        cls,
        data: T = None,
        message: str | None = None,
        warning: str | None = None,
    ) -> "ApiResponse[T]":
        return cls(success=True, data=data, message=message, warning=warning)


class ErrorResponse(BaseModel):
    """Error response body."""

    error: dict

    @classmethod
    def create(
        cls,
        code: str,
        message: str,
    ) -> "ErrorResponse":
        error_dict: dict[str, Any] = {"code": code, "message": message}
        return cls(error=error_dict)
