"""Access API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from lingomatch.modules.access.schemas import (
    AccessStatusRead,
    PassphraseRotateRequest,
    PassphraseVerifyRequest,
)
from lingomatch.modules.access.service import AccessService, get_access_service
from lingomatch.modules.identity.service import get_current_user

router = APIRouter(prefix="/access", tags=["access"])


@router.get("/status", response_model=AccessStatusRead)
async def access_status(
    service: AccessService = Depends(get_access_service),
    current_user=Depends(get_current_user),
) -> AccessStatusRead:
    """Whether current user must re-enter the passphrase."""
    config, blocked = await service.get_status(current_user)
    return AccessStatusRead(
        current_version=config.version if config is not None else None,
        user_version=current_user.passphrase_version,
        needs_reverification=blocked,
    )


@router.post("/verify", response_model=AccessStatusRead)
async def verify_passphrase(
    payload: PassphraseVerifyRequest,
    service: AccessService = Depends(get_access_service),
    current_user=Depends(get_current_user),
) -> AccessStatusRead:
    """Submit the current passphrase."""
    user = await service.verify_passphrase(current_user, payload.passphrase)
    config, blocked = await service.get_status(user)
    return AccessStatusRead(
        current_version=config.version if config is not None else None,
        user_version=user.passphrase_version,
        needs_reverification=blocked,
    )


@router.put("/passphrase", response_model=AccessStatusRead)
async def rotate_passphrase(
    payload: PassphraseRotateRequest,
    service: AccessService = Depends(get_access_service),
    current_user=Depends(get_current_user),
) -> AccessStatusRead:
    """Set a new passphrase; members must verify again."""
    config = await service.rotate_passphrase(payload.passphrase, current_user)
    return AccessStatusRead(
        current_version=config.version,
        user_version=current_user.passphrase_version,
        needs_reverification=False,
    )
