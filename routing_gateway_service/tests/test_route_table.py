"""Tests for the static route table and route definitions."""

from __future__ import annotations

import pytest

from routing_gateway_service.config import Settings
from routing_gateway_service.route_table import (
    CUSTOMER_ROUTE,
    GATEWAY_ROUTES,
    GET_DEBIT_INSTRUCTION_ROUTE,
    LOGIN_ROUTE,
    MORTGAGES_ROUTE,
    PRODUCT_ROUTE,
    PUT_DEBIT_INSTRUCTION_ROUTE,
    AuthMode,
    BackendService,
    RouteTable,
)
from routing_service_libs.error_handling import ErrorCode, GatewayError


class TestRouteTable:
    def test_from_settings_maps_every_backend(self, route_table: RouteTable):
        assert set(route_table.targets) == set(BackendService)
        assert route_table.target_for(BackendService.LOGIN).base_url == "http://login.test"
        assert (
            route_table.target_for(BackendService.DEBIT_INSTRUCTION).base_url
            == "http://debit-instruction.test"
        )

    def test_default_addresses(self):
        table = RouteTable.from_settings(Settings())

        assert table.target_for(BackendService.LOGIN).base_url == "http://host.docker.internal:8081"
        assert (
            table.target_for(BackendService.CUSTOMER).base_url
            == "http://host.docker.internal:8083"
        )
        assert (
            table.target_for(BackendService.MORTGAGE).base_url
            == "http://host.docker.internal:8084"
        )
        assert (
            table.target_for(BackendService.PRODUCT).base_url == "http://host.docker.internal:8085"
        )
        assert (
            table.target_for(BackendService.DEBIT_INSTRUCTION).base_url
            == "http://host.docker.internal:8086"
        )

    def test_trailing_slash_is_stripped(self):
        table = RouteTable({BackendService.CUSTOMER: "http://customer.test/"})

        assert table.target_for(BackendService.CUSTOMER).base_url == "http://customer.test"

    def test_targets_are_read_only(self, route_table: RouteTable):
        with pytest.raises(TypeError):
            route_table.targets[BackendService.LOGIN] = None  # type: ignore[index]

    def test_unconfigured_backend_raises_configuration_error(self):
        table = RouteTable({BackendService.LOGIN: "http://login.test"})

        with pytest.raises(GatewayError) as exc_info:
            table.target_for(BackendService.PRODUCT)

        assert exc_info.value.error_code == ErrorCode.CONFIGURATION_ERROR
        assert exc_info.value.error_detail.details["backend"] == "product"

    def test_settings_read_backend_urls_from_environment(self, monkeypatch):
        monkeypatch.setenv("ROUTING_GATEWAY_CUSTOMER_SERVICE_URL", "http://customers:9000")
        monkeypatch.setenv("PRODUCT_SERVICE_URL", "http://products:9001")

        table = RouteTable.from_settings(Settings())

        assert table.target_for(BackendService.CUSTOMER).base_url == "http://customers:9000"
        assert table.target_for(BackendService.PRODUCT).base_url == "http://products:9001"


class TestRouteDefinitions:
    def test_exposed_endpoints(self):
        assert [route.endpoint for route in GATEWAY_ROUTES] == [
            "POST /login",
            "GET /customer",
            "GET /mortgages",
            "GET /product",
            "GET /debitinstruction",
            "PUT /debitinstruction",
        ]

    def test_login_uses_username_password(self):
        assert LOGIN_ROUTE.auth is AuthMode.LOGIN
        assert LOGIN_ROUTE.backend is BackendService.LOGIN

    @pytest.mark.parametrize("route", [CUSTOMER_ROUTE, MORTGAGES_ROUTE])
    def test_identity_carried_as_header(self, route):
        assert route.auth is AuthMode.BEARER
        assert route.identity_header
        assert not route.identity_query

    def test_product_requires_mortgage_id_without_identity(self):
        assert PRODUCT_ROUTE.required_query == ("mortgageId",)
        assert not PRODUCT_ROUTE.identity_header
        assert not PRODUCT_ROUTE.identity_query

    @pytest.mark.parametrize("route", [GET_DEBIT_INSTRUCTION_ROUTE, PUT_DEBIT_INSTRUCTION_ROUTE])
    def test_debit_instruction_carries_identity_in_query(self, route):
        assert route.backend is BackendService.DEBIT_INSTRUCTION
        assert route.identity_query
        assert route.required_query == ("mortgageId",)

    def test_only_update_validates_body(self):
        assert PUT_DEBIT_INSTRUCTION_ROUTE.body_model is not None
        assert GET_DEBIT_INSTRUCTION_ROUTE.body_model is None
