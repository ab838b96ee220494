"""Completion evaluation for puzzle progress."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class CompletionResult:
    """Derived completion state for one save."""

    is_completed: bool
    completed_at: datetime | None


def distinct_pieces(placed_piece_ids: Iterable[str]) -> list[str]:
    """De-duplicate piece ids, keeping the first occurrence order."""
    return list(dict.fromkeys(placed_piece_ids))


def evaluate_completion(
    placed_piece_ids: Iterable[str],
    total_pieces: int,
    previous_completed_at: datetime | None,
    now: datetime,
) -> CompletionResult:
    """Derive completion from the placed pieces and the grid's piece count.

    A puzzle is complete once the number of distinct placed pieces reaches
    ``total_pieces``. The first save that crosses the threshold
    stamps ``completed_at`` with ``now``. Completion is sticky: a record that
    was already completed keeps its original ``completed_at`` and stays
    completed even if a later save sends fewer pieces.
    """
    if previous_completed_at is not None:
        return CompletionResult(is_completed=True, completed_at=previous_completed_at)

    placed_count = len(set(placed_piece_ids))
    if placed_count >= total_pieces:
        return CompletionResult(is_completed=True, completed_at=now)

    return CompletionResult(is_completed=False, completed_at=None)
