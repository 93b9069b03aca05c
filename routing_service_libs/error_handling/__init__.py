"""Structured error handling shared by the gateway components."""

from .error_models import ERROR_CODE_HTTP_STATUS, ErrorCode, ErrorDetail
from .gateway_error import GatewayError, create_error_detail, raise_configuration_error

__all__ = [
    "ERROR_CODE_HTTP_STATUS",
    "ErrorCode",
    "ErrorDetail",
    "GatewayError",
    "create_error_detail",
    "raise_configuration_error",
]
