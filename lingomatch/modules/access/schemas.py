"""Access schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field


class PassphraseVerifyRequest(BaseModel):
    """Member re-enters the current passphrase."""

    passphrase: str = Field(min_length=1, max_length=255)


class PassphraseRotateRequest(BaseModel):
    """Admin sets a new passphrase."""

    passphrase: str = Field(min_length=1, max_length=255)


class AccessStatusRead(BaseModel):
    """Passphrase status of the current user."""

    current_version: int | None
    user_version: int
    needs_reverification: bool
