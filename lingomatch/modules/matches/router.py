"""Matches API router."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status

from lingomatch.modules.access.service import require_verified_user
from lingomatch.modules.matches.schemas import MatchCreate, MatchRead
from lingomatch.modules.matches.service import MatchesService, get_matches_service

router = APIRouter(prefix="/matches", tags=["matches"])


@router.post("", response_model=MatchRead, status_code=status.HTTP_201_CREATED)
async def create_match(
    payload: MatchCreate,
    service: MatchesService = Depends(get_matches_service),
    current_user=Depends(require_verified_user),
) -> MatchRead:
    """Teacher accepts a student."""
    match = await service.create_match(payload.student_id, current_user)
    return MatchRead.model_validate(match)


@router.get("", response_model=list[MatchRead])
async def list_matches(
    service: MatchesService = Depends(get_matches_service),
    current_user=Depends(require_verified_user),
) -> list[MatchRead]:
    """List active matches of current user."""
    items = await service.list_matches(current_user)
    return [MatchRead.model_validate(item) for item in items]


@router.post("/{match_id}/archive", response_model=MatchRead)
async def archive_match(
    match_id: UUID,
    service: MatchesService = Depends(get_matches_service),
    current_user=Depends(require_verified_user),
) -> MatchRead:
    """Archive match."""
    match = await service.archive_match(match_id, current_user)
    return MatchRead.model_validate(match)
