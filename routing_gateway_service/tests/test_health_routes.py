"""Tests for the health and metrics endpoints."""

from __future__ import annotations


class TestHealthRoutes:
    async def test_health_check(self, client):
        response = await client.get("/healthz")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "routing_gateway_service_test"
        assert data["checks"] == {"service_responsive": True}

    async def test_health_lists_backend_addresses(self, client):
        response = await client.get("/healthz")

        dependencies = response.json()["dependencies"]
        assert dependencies["login"]["base_url"] == "http://login.test"
        assert dependencies["customer"]["base_url"] == "http://customer.test"
        assert dependencies["mortgage"]["base_url"] == "http://mortgage.test"
        assert dependencies["product"]["base_url"] == "http://product.test"
        assert dependencies["debit_instruction"]["base_url"] == "http://debit-instruction.test"

    async def test_health_makes_no_backend_calls(self, client, respx_mock):
        await client.get("/healthz")

        assert len(respx_mock.calls) == 0

    async def test_metrics_endpoint(self, client):
        response = await client.get("/metrics")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert "routing_gateway_http_requests_total" in response.text

    async def test_metrics_registered_before_any_gateway_request(self, client):
        response = await client.get("/metrics")

        for family in (
            "routing_gateway_http_requests_total",
            "routing_gateway_http_request_duration_seconds",
            "routing_gateway_downstream_service_calls_total",
            "routing_gateway_downstream_service_call_duration_seconds",
            "routing_gateway_auth_validations_total",
            "routing_gateway_api_errors_total",
        ):
            assert f"# TYPE {family}" in response.text
