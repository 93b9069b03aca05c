"""Metrics definitions for the Routing Gateway Service."""

from __future__ import annotations

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram


class GatewayMetrics:
    """A container for all Prometheus metrics for the Routing Gateway Service."""

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """Initialize metrics with optional registry for test isolation."""
        if registry is None:
            registry = REGISTRY
        self.http_requests_total = Counter(
            "routing_gateway_http_requests_total",
            "Total number of HTTP requests handled by the Routing Gateway.",
            ["method", "endpoint", "http_status"],
            registry=registry,
        )
        self.http_request_duration_seconds = Histogram(
            "routing_gateway_http_request_duration_seconds",
            "HTTP request duration in seconds for the Routing Gateway.",
            ["method", "endpoint"],
            registry=registry,
        )
        self.downstream_service_calls_total = Counter(
            "routing_gateway_downstream_service_calls_total",
            "Total number of calls to backend services.",
            ["service", "method", "endpoint", "status_code"],
            registry=registry,
        )
        self.downstream_service_call_duration_seconds = Histogram(
            "routing_gateway_downstream_service_call_duration_seconds",
            "Duration of calls to backend services in seconds.",
            ["service", "method", "endpoint"],
            registry=registry,
        )
        self.auth_validations_total = Counter(
            "routing_gateway_auth_validations_total",
            "Credential validations against the login service by outcome.",
            ["credential_type", "outcome"],
            registry=registry,
        )
        self.api_errors_total = Counter(
            "routing_gateway_api_errors_total",
            "Total number of API errors.",
            ["endpoint", "error_type"],
            registry=registry,
        )
