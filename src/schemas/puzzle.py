"""Puzzle schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.models.puzzle import MAX_GRID_SIZE, MIN_GRID_SIZE
from src.schemas.progress import ProgressSnapshot, ProgressSummary


class PuzzleSummary(BaseModel):
    """Player-facing puzzle fields."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    image_url: str
    audio_url: str | None
    spotify_playlist_url: str | None
    grid_rows: int
    grid_cols: int
    level_order: int


class PuzzleWithStatus(PuzzleSummary):
    """Puzzle in the level list with the user's status."""

    is_unlocked: bool
    is_completed: bool
    progress: ProgressSummary | None


class PuzzleListResponse(BaseModel):
    """Level list for the current user."""

    puzzles: list[PuzzleWithStatus]


class PuzzleDetailResponse(BaseModel):
    """Single puzzle opened for play."""

    puzzle: PuzzleSummary
    progress: ProgressSnapshot | None


class PuzzleCreate(BaseModel):
    """Create a puzzle (admin)."""

    title: str = Field(..., min_length=1, max_length=100)
    image_url: str = Field(..., min_length=1, max_length=1024)
    image_key: str | None = Field(None, max_length=512)
    audio_url: str | None = Field(None, max_length=1024)
    spotify_playlist_url: str | None = Field(None, max_length=1024)
    grid_rows: int = Field(..., ge=MIN_GRID_SIZE, le=MAX_GRID_SIZE)
    grid_cols: int = Field(..., ge=MIN_GRID_SIZE, le=MAX_GRID_SIZE)
    level_order: int = Field(..., ge=1)
    is_active: bool = True


class PuzzleUpdate(BaseModel):
    """Update a puzzle (admin)."""

    title: str | None = Field(None, min_length=1, max_length=100)
    image_url: str | None = Field(None, min_length=1, max_length=1024)
    image_key: str | None = Field(None, max_length=512)
    audio_url: str | None = Field(None, max_length=1024)
    spotify_playlist_url: str | None = Field(None, max_length=1024)
    grid_rows: int | None = Field(None, ge=MIN_GRID_SIZE, le=MAX_GRID_SIZE)
    grid_cols: int | None = Field(None, ge=MIN_GRID_SIZE, le=MAX_GRID_SIZE)
    level_order: int | None = Field(None, ge=1)
    is_active: bool | None = None


class PuzzleAdminResponse(PuzzleSummary):
    """Full puzzle record (admin)."""

    image_key: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class PuzzleOrder(BaseModel):
    """New position for one puzzle."""

    id: int
    level_order: int = Field(..., ge=1)


class PuzzleReorderRequest(BaseModel):
    """Reorder puzzles (admin)."""

    puzzle_orders: list[PuzzleOrder] = Field(..., min_length=1)
