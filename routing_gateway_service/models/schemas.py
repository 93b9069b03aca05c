"""Request body schemas validated at the gateway before forwarding."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, StrictInt


class LoginRequest(BaseModel):
    """Credentials exchanged at the login service."""

    username: str | None = None
    password: str | None = None


class DebitInstructionDay(BaseModel):
    """Body of a debit instruction update."""

    model_config = ConfigDict(extra="allow")

    debInstructSelectedDay: StrictInt
