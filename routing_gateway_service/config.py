"""
Configuration for the Routing Gateway Service.

Uses Pydantic settings for environment-based configuration. Backend base
URLs are read once at process start and never change afterwards.
"""

from __future__ import annotations

from enum import Enum

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Configuration settings for the Routing Gateway Service."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="ROUTING_GATEWAY_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    SERVICE_NAME: str = "routing-gateway-service"

    ENVIRONMENT: Environment = Field(
        default=Environment.DEVELOPMENT,
        validation_alias=AliasChoices("ENVIRONMENT", "ROUTING_GATEWAY_ENVIRONMENT"),
        description="Runtime environment for the service",
    )

    # HTTP server configuration
    HTTP_HOST: str = Field(default="0.0.0.0", description="HTTP server host")
    HTTP_PORT: int = Field(default=8080, description="HTTP server port")

    LOG_LEVEL: str = Field(default="INFO", description="Logging level")

    CORS_ORIGINS: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:5173"],
        description="Allowed CORS origins",
    )
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: list[str] = Field(default=["GET", "POST", "PUT", "OPTIONS"])
    CORS_ALLOW_HEADERS: list[str] = Field(default=["*"])

    # HTTP client timeouts (transport level only)
    HTTP_CLIENT_TIMEOUT_SECONDS: int = 30
    HTTP_CLIENT_CONNECT_TIMEOUT_SECONDS: int = 10

    # Backend base URLs
    LOGIN_SERVICE_URL: str = Field(
        default="http://host.docker.internal:8081",
        description="Login/authentication service base URL",
        validation_alias=AliasChoices("ROUTING_GATEWAY_LOGIN_SERVICE_URL", "LOGIN_SERVICE_URL"),
    )
    CUSTOMER_SERVICE_URL: str = Field(
        default="http://host.docker.internal:8083",
        description="Customer service base URL",
        validation_alias=AliasChoices(
            "ROUTING_GATEWAY_CUSTOMER_SERVICE_URL", "CUSTOMER_SERVICE_URL"
        ),
    )
    MORTGAGE_SERVICE_URL: str = Field(
        default="http://host.docker.internal:8084",
        description="Mortgage service base URL",
        validation_alias=AliasChoices(
            "ROUTING_GATEWAY_MORTGAGE_SERVICE_URL", "MORTGAGE_SERVICE_URL"
        ),
    )
    PRODUCT_SERVICE_URL: str = Field(
        default="http://host.docker.internal:8085",
        description="Product service base URL",
        validation_alias=AliasChoices("ROUTING_GATEWAY_PRODUCT_SERVICE_URL", "PRODUCT_SERVICE_URL"),
    )
    DEBIT_INSTRUCTION_SERVICE_URL: str = Field(
        default="http://host.docker.internal:8086",
        description="Debit instruction service base URL",
        validation_alias=AliasChoices(
            "ROUTING_GATEWAY_DEBIT_INSTRUCTION_SERVICE_URL", "DEBIT_INSTRUCTION_SERVICE_URL"
        ),
    )

    # Login backend endpoints
    AUTH_VALIDATE_PATH: str = Field(
        default="/auth", description="Token validation endpoint on the login service"
    )
    AUTH_LOGIN_PATH: str = Field(
        default="/login", description="Credential exchange endpoint on the login service"
    )
    IDENTITY_HEADER_NAME: str = Field(
        default="customerId",
        description="Header/query name carrying the resolved caller identity",
    )

    def is_development(self) -> bool:
        return self.ENVIRONMENT == Environment.DEVELOPMENT

    def is_production(self) -> bool:
        return self.ENVIRONMENT == Environment.PRODUCTION


# Global settings instance
settings = Settings()
