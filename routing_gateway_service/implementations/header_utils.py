"""Header filtering rules shared by the rewriter, forwarder and auth gate."""

from __future__ import annotations

import httpx

# Connection-scoped headers (RFC 7230 6.1); never passed to the next hop.
HOP_BY_HOP_HEADERS = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "te",
        "trailer",
        "trailers",
        "transfer-encoding",
        "upgrade",
    }
)

# Describe the caller's hop to the gateway; httpx sets them for the outbound call.
NON_FORWARDED_HEADERS = HOP_BY_HOP_HEADERS | {"host", "content-length"}

# httpx has already decoded the body, so length and encoding are recomputed
# when a backend response is relayed.
NON_RELAYED_HEADERS = HOP_BY_HOP_HEADERS | {"content-length", "content-encoding"}


def relayable_headers(response: httpx.Response) -> tuple[tuple[str, str], ...]:
    """Backend response headers that may be passed back to the caller."""
    return tuple(
        (name, value)
        for name, value in response.headers.multi_items()
        if name.lower() not in NON_RELAYED_HEADERS
    )
