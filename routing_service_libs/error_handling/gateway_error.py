"""Exception carrying a structured ErrorDetail."""

from __future__ import annotations

from typing import Any, NoReturn
from uuid import UUID

from .error_models import ERROR_CODE_HTTP_STATUS, ErrorCode, ErrorDetail


class GatewayError(Exception):
    """Raised for failures that cannot be expressed as a returned Result."""

    def __init__(self, error_detail: ErrorDetail, status_code: int | None = None) -> None:
        super().__init__(error_detail.message)
        self.error_detail = error_detail
        self.status_code = status_code or ERROR_CODE_HTTP_STATUS[error_detail.error_code]

    @property
    def error_code(self) -> ErrorCode:
        return self.error_detail.error_code

    @property
    def correlation_id(self) -> UUID:
        return self.error_detail.correlation_id

    def __str__(self) -> str:
        return f"[{self.error_code.value}] {self.error_detail.message}"


def create_error_detail(
    error_code: ErrorCode,
    message: str,
    service: str,
    operation: str,
    correlation_id: UUID,
    **details: Any,
) -> ErrorDetail:
    return ErrorDetail(
        error_code=error_code,
        message=message,
        correlation_id=correlation_id,
        service=service,
        operation=operation,
        details=details,
    )


def raise_configuration_error(
    service: str,
    operation: str,
    message: str,
    correlation_id: UUID,
    **details: Any,
) -> NoReturn:
    """Raise a GatewayError for a missing or inconsistent configuration value."""
    raise GatewayError(
        create_error_detail(
            ErrorCode.CONFIGURATION_ERROR, message, service, operation, correlation_id, **details
        )
    )
