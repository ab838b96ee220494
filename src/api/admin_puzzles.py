"""Admin puzzle catalog endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from src.api.dependencies import get_catalog, get_progress_store, require_admin
from src.database import get_db, store_errors
from src.models.puzzle import Puzzle
from src.models.user import User
from src.schemas.puzzle import (
    PuzzleAdminResponse,
    PuzzleCreate,
    PuzzleReorderRequest,
    PuzzleUpdate,
)
from src.services.catalog import Catalog
from src.services.progress_store import ProgressStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/admin/puzzles", tags=["admin"])

# Columns that cannot be cleared through an update
REQUIRED_FIELDS = {"title", "image_url", "grid_rows", "grid_cols", "level_order", "is_active"}


def ensure_level_order_free(catalog: Catalog, level_order: int, exclude_id: int | None = None):
    """Reject a level order already used by another puzzle."""
    if catalog.level_order_taken(level_order, exclude_id=exclude_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Level {level_order} already exists",
        )


@router.get("", response_model=list[PuzzleAdminResponse])
def list_all_puzzles(
    admin: Annotated[User, Depends(require_admin)],
    catalog: Annotated[Catalog, Depends(get_catalog)],
):
    """List all puzzles, including inactive ones."""
    return catalog.list_all()


@router.get("/{puzzle_id}", response_model=PuzzleAdminResponse)
def get_puzzle(
    puzzle_id: int,
    admin: Annotated[User, Depends(require_admin)],
    catalog: Annotated[Catalog, Depends(get_catalog)],
):
    """Get a single puzzle by ID."""
    return catalog.get(puzzle_id, include_inactive=True)


@router.post("", response_model=PuzzleAdminResponse, status_code=status.HTTP_201_CREATED)
def create_puzzle(
    puzzle_data: PuzzleCreate,
    admin: Annotated[User, Depends(require_admin)],
    catalog: Annotated[Catalog, Depends(get_catalog)],
    db: Annotated[Session, Depends(get_db)],
):
    """Create a new puzzle level."""
    ensure_level_order_free(catalog, puzzle_data.level_order)

    puzzle = Puzzle(**puzzle_data.model_dump())
    with store_errors(db, "create puzzle"):
        db.add(puzzle)
        db.commit()
        db.refresh(puzzle)

    logger.info(f"Admin {admin.id} created puzzle {puzzle.id} at level {puzzle.level_order}")
    return puzzle


@router.put("/{puzzle_id}", response_model=PuzzleAdminResponse)
def update_puzzle(
    puzzle_id: int,
    puzzle_data: PuzzleUpdate,
    admin: Annotated[User, Depends(require_admin)],
    catalog: Annotated[Catalog, Depends(get_catalog)],
    db: Annotated[Session, Depends(get_db)],
):
    """Update a puzzle. Only the provided fields change."""
    puzzle = catalog.get(puzzle_id, include_inactive=True)
    updates = puzzle_data.model_dump(exclude_unset=True)

    new_order = updates.get("level_order")
    if new_order is not None and new_order != puzzle.level_order:
        ensure_level_order_free(catalog, new_order, exclude_id=puzzle.id)

    for field, value in updates.items():
        if value is None and field in REQUIRED_FIELDS:
            continue
        setattr(puzzle, field, value)

    with store_errors(db, "update puzzle"):
        db.commit()
        db.refresh(puzzle)
    return puzzle


@router.delete("/{puzzle_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_puzzle(
    puzzle_id: int,
    admin: Annotated[User, Depends(require_admin)],
    catalog: Annotated[Catalog, Depends(get_catalog)],
    store: Annotated[ProgressStore, Depends(get_progress_store)],
    db: Annotated[Session, Depends(get_db)],
):
    """Delete a puzzle together with every user's progress on it."""
    puzzle = catalog.get(puzzle_id, include_inactive=True)

    removed = store.delete_for_puzzle(puzzle.id)
    with store_errors(db, "delete puzzle"):
        db.delete(puzzle)
        db.commit()

    logger.info(f"Admin {admin.id} deleted puzzle {puzzle_id} ({removed} progress records)")


@router.post("/reorder")
def reorder_puzzles(
    request: PuzzleReorderRequest,
    admin: Annotated[User, Depends(require_admin)],
    catalog: Annotated[Catalog, Depends(get_catalog)],
    db: Annotated[Session, Depends(get_db)],
):
    """Assign new level orders to several puzzles at once."""
    ids = [entry.id for entry in request.puzzle_orders]
    orders = [entry.level_order for entry in request.puzzle_orders]
    if len(set(ids)) != len(ids) or len(set(orders)) != len(orders):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Puzzle ids and level orders must be unique",
        )

    puzzles = {puzzle_id: catalog.get(puzzle_id, include_inactive=True) for puzzle_id in ids}
    for entry in request.puzzle_orders:
        if _order_owned_by(puzzles, entry.level_order):
            continue
        if catalog.level_order_taken(entry.level_order):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Level {entry.level_order} already exists",
            )

    with store_errors(db, "reorder puzzles"):
        # Park the moved puzzles above the current maximum so swaps do not
        # trip the unique level_order constraint mid-update.
        max_order = db.query(func.max(Puzzle.level_order)).scalar() or 0
        for offset, puzzle in enumerate(puzzles.values(), start=1):
            puzzle.level_order = max_order + offset
        db.flush()

        for entry in request.puzzle_orders:
            puzzles[entry.id].level_order = entry.level_order
        db.commit()

    logger.info(f"Admin {admin.id} reordered {len(ids)} puzzles")
    return {"message": "Puzzles reordered successfully"}


def _order_owned_by(puzzles: dict[int, Puzzle], level_order: int) -> bool:
    return any(puzzle.level_order == level_order for puzzle in puzzles.values())
