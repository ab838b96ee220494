"""Progress API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from src.api.dependencies import get_current_user, get_progression_service
from src.models.user import User
from src.schemas.progress import (
    ProgressDetailResponse,
    ProgressListResponse,
    ProgressResponse,
    ProgressSave,
    ProgressSaveResponse,
    ProgressSnapshot,
    ProgressWithPuzzle,
)
from src.services.progression import ProgressionService

router = APIRouter(prefix="/api/v1/progress", tags=["progress"])


@router.get("", response_model=ProgressListResponse)
def list_progress(
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[ProgressionService, Depends(get_progression_service)],
):
    """Get all progress for the current user."""
    records = service.list_progress(current_user)
    return ProgressListResponse(
        progress=[ProgressWithPuzzle.model_validate(record) for record in records]
    )


@router.get("/{puzzle_id}", response_model=ProgressDetailResponse)
def get_progress(
    puzzle_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[ProgressionService, Depends(get_progression_service)],
):
    """Get progress for a specific puzzle."""
    progress = service.get_progress(current_user, puzzle_id)
    if progress is None:
        return ProgressDetailResponse(progress=None, message="No progress found for this puzzle")
    return ProgressDetailResponse(progress=ProgressResponse.model_validate(progress))


@router.put("/{puzzle_id}", response_model=ProgressSaveResponse)
def save_progress(
    puzzle_id: int,
    progress_data: ProgressSave,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[ProgressionService, Depends(get_progression_service)],
):
    """Save or update progress for a puzzle."""
    progress = service.save_progress(current_user, puzzle_id, progress_data.placed_piece_ids)

    return ProgressSaveResponse(
        message="Puzzle completed!" if progress.is_completed else "Progress saved",
        progress=ProgressSnapshot.model_validate(progress),
    )


@router.delete("/{puzzle_id}", status_code=status.HTTP_204_NO_CONTENT)
def reset_progress(
    puzzle_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    service: Annotated[ProgressionService, Depends(get_progression_service)],
):
    """Reset progress for a puzzle. The next save starts a fresh record."""
    service.reset_progress(current_user, puzzle_id)
