"""Player-facing puzzle API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends

from src.api.dependencies import get_current_user, get_progression_service
from src.models.user import User
from src.schemas.progress import ProgressSnapshot, ProgressSummary
from src.schemas.puzzle import (
    PuzzleDetailResponse,
    PuzzleListResponse,
    PuzzleSummary,
    PuzzleWithStatus,
)
from src.services.progression import ProgressionService

router = APIRouter(prefix="/api/v1/puzzles", tags=["puzzles"])


@router.get("", response_model=PuzzleListResponse)
def list_puzzles(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[ProgressionService, Depends(get_progression_service)],
):
    """List active puzzles in level order with the user's unlock status."""
    levels = service.list_levels(current_user)

    puzzles = [
        PuzzleWithStatus(
            **PuzzleSummary.model_validate(level.puzzle).model_dump(),
            is_unlocked=level.is_unlocked,
            is_completed=level.is_completed,
            progress=ProgressSummary.model_validate(level.progress) if level.progress else None,
        )
        for level in levels
    ]
    return PuzzleListResponse(puzzles=puzzles)


@router.get("/{puzzle_id}", response_model=PuzzleDetailResponse)
def get_puzzle(
    puzzle_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[ProgressionService, Depends(get_progression_service)],
):
    """Open a puzzle for play.

    Locked levels and, for free users, a second new level on the same UTC day
    are refused with 403.
    """
    puzzle, progress = service.open_level(current_user, puzzle_id)

    return PuzzleDetailResponse(
        puzzle=PuzzleSummary.model_validate(puzzle),
        progress=ProgressSnapshot.model_validate(progress) if progress else None,
    )
