"""
Immutable values flowing through the gateway pipeline.

An InboundRequest is captured once per call; the rewriter derives a new
OutboundRequest from it rather than mutating it. Header and query
multimaps are ordered tuples of pairs so repeated names survive.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from uuid import UUID, uuid4

Pairs = tuple[tuple[str, str], ...]


def first_value(pairs: Pairs, name: str, *, case_sensitive: bool = True) -> str | None:
    """Return the first value stored under ``name`` or None."""
    if not case_sensitive:
        name = name.lower()
    for key, value in pairs:
        if (key if case_sensitive else key.lower()) == name:
            return value
    return None


@dataclass(frozen=True)
class InboundRequest:
    method: str
    path: str
    query_params: Pairs = ()
    headers: Pairs = ()
    body: bytes | None = None
    correlation_id: UUID = field(default_factory=uuid4)

    def header(self, name: str) -> str | None:
        return first_value(self.headers, name, case_sensitive=False)

    def query(self, name: str) -> str | None:
        return first_value(self.query_params, name)


@dataclass(frozen=True)
class OutboundRequest:
    method: str
    url: str
    path: str
    query_params: Pairs = ()
    headers: Pairs = ()
    body: bytes | None = None

    def header(self, name: str) -> str | None:
        return first_value(self.headers, name, case_sensitive=False)


@dataclass(frozen=True)
class GatewayResponse:
    status_code: int
    headers: Pairs = ()
    body: bytes = b""

    def header(self, name: str) -> str | None:
        return first_value(self.headers, name, case_sensitive=False)


@dataclass(frozen=True)
class BearerToken:
    token: str

    def __repr__(self) -> str:
        return "BearerToken(***)"


@dataclass(frozen=True)
class UsernamePassword:
    username: str
    password: str

    def __repr__(self) -> str:
        return f"UsernamePassword(username={self.username!r}, password=***)"


Credential = BearerToken | UsernamePassword


@dataclass(frozen=True)
class Identity:
    """Caller identity resolved by the authentication backend for one request."""

    customer_id: str | None
    session: GatewayResponse | None = None


class AuthErrorKind(str, Enum):
    MISSING_CREDENTIAL = "MissingCredential"
    INVALID_CREDENTIALS = "InvalidCredentials"
    INVALID_TOKEN = "InvalidToken"
    AUTH_BACKEND_ERROR = "AuthBackendError"
    AUTH_BACKEND_UNAVAILABLE = "AuthBackendUnavailable"


@dataclass(frozen=True)
class AuthError:
    kind: AuthErrorKind
    status_code: int
    message: str
    reason: str = ""


class ForwardErrorKind(str, Enum):
    FORWARDING_UNAUTHORIZED = "ForwardingUnauthorized"
    FORWARDING_FAILED = "ForwardingFailed"
    UNEXPECTED_FORWARDING_ERROR = "UnexpectedForwardingError"


@dataclass(frozen=True)
class ForwardError:
    kind: ForwardErrorKind
    status_code: int
    path: str
    message: str
