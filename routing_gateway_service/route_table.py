"""
Static routing configuration.

RouteTable maps each backend service to its base URL and is built once from
Settings when the DI container starts. GATEWAY_ROUTES describes every
endpoint the gateway exposes; per-endpoint variance (identity injection,
required query parameters, body schema) lives here as data.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from uuid import uuid4

from pydantic import BaseModel

from routing_gateway_service.config import Settings
from routing_gateway_service.models.schemas import DebitInstructionDay
from routing_service_libs.error_handling import raise_configuration_error


class BackendService(str, Enum):
    LOGIN = "login"
    CUSTOMER = "customer"
    MORTGAGE = "mortgage"
    PRODUCT = "product"
    DEBIT_INSTRUCTION = "debit_instruction"


class AuthMode(str, Enum):
    NONE = "none"
    BEARER = "bearer"
    LOGIN = "login"


@dataclass(frozen=True)
class RouteTarget:
    service: BackendService
    base_url: str


class RouteTable:
    """Read-only mapping from logical service name to backend base address."""

    def __init__(self, targets: Mapping[BackendService, str]) -> None:
        self._targets: Mapping[BackendService, RouteTarget] = MappingProxyType(
            {
                service: RouteTarget(service=service, base_url=base_url.rstrip("/"))
                for service, base_url in targets.items()
            }
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> RouteTable:
        return cls(
            {
                BackendService.LOGIN: settings.LOGIN_SERVICE_URL,
                BackendService.CUSTOMER: settings.CUSTOMER_SERVICE_URL,
                BackendService.MORTGAGE: settings.MORTGAGE_SERVICE_URL,
                BackendService.PRODUCT: settings.PRODUCT_SERVICE_URL,
                BackendService.DEBIT_INSTRUCTION: settings.DEBIT_INSTRUCTION_SERVICE_URL,
            }
        )

    @property
    def targets(self) -> Mapping[BackendService, RouteTarget]:
        return self._targets

    def target_for(self, service: BackendService) -> RouteTarget:
        target = self._targets.get(service)
        if target is None:
            raise_configuration_error(
                service="routing_gateway_service",
                operation="resolve_route_target",
                message=f"No base address configured for backend '{service.value}'",
                correlation_id=uuid4(),
                backend=service.value,
            )
        return target


@dataclass(frozen=True)
class RouteDefinition:
    name: str
    method: str
    path: str
    backend: BackendService
    auth: AuthMode = AuthMode.BEARER
    identity_header: bool = False
    identity_query: bool = False
    required_query: tuple[str, ...] = ()
    body_model: type[BaseModel] | None = None

    @property
    def endpoint(self) -> str:
        return f"{self.method} {self.path}"


LOGIN_ROUTE = RouteDefinition(
    name="login",
    method="POST",
    path="/login",
    backend=BackendService.LOGIN,
    auth=AuthMode.LOGIN,
)
CUSTOMER_ROUTE = RouteDefinition(
    name="customer",
    method="GET",
    path="/customer",
    backend=BackendService.CUSTOMER,
    identity_header=True,
)
MORTGAGES_ROUTE = RouteDefinition(
    name="mortgages",
    method="GET",
    path="/mortgages",
    backend=BackendService.MORTGAGE,
    identity_header=True,
)
PRODUCT_ROUTE = RouteDefinition(
    name="product",
    method="GET",
    path="/product",
    backend=BackendService.PRODUCT,
    required_query=("mortgageId",),
)
GET_DEBIT_INSTRUCTION_ROUTE = RouteDefinition(
    name="get_debit_instruction",
    method="GET",
    path="/debitinstruction",
    backend=BackendService.DEBIT_INSTRUCTION,
    identity_query=True,
    required_query=("mortgageId",),
)
PUT_DEBIT_INSTRUCTION_ROUTE = RouteDefinition(
    name="update_debit_instruction",
    method="PUT",
    path="/debitinstruction",
    backend=BackendService.DEBIT_INSTRUCTION,
    identity_query=True,
    required_query=("mortgageId",),
    body_model=DebitInstructionDay,
)

GATEWAY_ROUTES: tuple[RouteDefinition, ...] = (
    LOGIN_ROUTE,
    CUSTOMER_ROUTE,
    MORTGAGES_ROUTE,
    PRODUCT_ROUTE,
    GET_DEBIT_INSTRUCTION_ROUTE,
    PUT_DEBIT_INSTRUCTION_ROUTE,
)
