"""Progression service tests."""

from datetime import UTC

import pytest

from src.exceptions import ForbiddenError, ForbiddenReason, NotFoundError
from src.models.enums import SubscriptionTier
from src.services.progression import ProgressionService


def pieces(count: int) -> list[str]:
    return [f"piece-{i}" for i in range(count)]


@pytest.fixture
def service(db, clock):
    return ProgressionService(db, clock=clock)


def test_scenario_completing_first_level_unlocks_second(service, user, make_puzzle):
    """Test the A/B walkthrough: completing A unlocks B without completing it."""
    level_a = make_puzzle(1)
    level_b = make_puzzle(2, rows=3, cols=3)

    before = {status.puzzle.level_order: status.is_unlocked for status in service.list_levels(user)}
    assert before == {1: True, 2: False}

    progress = service.save_progress(user, level_a.id, pieces(9))
    assert progress.is_completed is True

    after = {status.puzzle.id: status for status in service.list_levels(user)}
    assert after[level_a.id].is_unlocked is True
    assert after[level_a.id].is_completed is True
    assert after[level_b.id].is_unlocked is True
    assert after[level_b.id].is_completed is False
    assert after[level_b.id].progress is None


def test_open_level_checks_unlock_before_quota(service, user, make_puzzle):
    """Test that a locked level reports level_locked even when the quota is spent."""
    first = make_puzzle(1)
    second = make_puzzle(2)
    service.save_progress(user, first.id, [])

    with pytest.raises(ForbiddenError) as exc_info:
        service.open_level(user, second.id)
    assert exc_info.value.reason == ForbiddenReason.LEVEL_LOCKED


def test_open_level_daily_limit(service, user, make_puzzle):
    """Test that opening a second untouched level the same day is denied."""
    first = make_puzzle(1, rows=2, cols=2)
    second = make_puzzle(2)
    service.save_progress(user, first.id, pieces(4))

    with pytest.raises(ForbiddenError) as exc_info:
        service.open_level(user, second.id)
    assert exc_info.value.reason == ForbiddenReason.DAILY_LIMIT


def test_open_level_next_day_allowed(service, user, make_puzzle, clock):
    """Test that the quota frees up after midnight UTC."""
    first = make_puzzle(1, rows=2, cols=2)
    second = make_puzzle(2)
    service.save_progress(user, first.id, pieces(4))
    clock.advance(days=1)

    puzzle, progress = service.open_level(user, second.id)

    assert puzzle.id == second.id
    assert progress is None


def test_continuing_is_allowed_after_quota_spent(service, user, make_puzzle):
    """Test that saving again to an existing record is never limited."""
    first = make_puzzle(1)
    service.save_progress(user, first.id, ["a"])

    progress = service.save_progress(user, first.id, ["a", "b"])

    assert progress.placed_piece_ids == ["a", "b"]


def test_pro_user_skips_quota(db, service, user, make_puzzle):
    """Test that pro users may start several levels in one day."""
    user.subscription_tier = SubscriptionTier.PRO.value
    db.commit()
    first = make_puzzle(1, rows=2, cols=2)
    second = make_puzzle(2)
    service.save_progress(user, first.id, pieces(4))

    progress = service.save_progress(user, second.id, ["a"])

    assert progress.puzzle_id == second.id


def test_open_inactive_level_not_found(service, user, make_puzzle):
    """Test that retired levels are not playable."""
    puzzle = make_puzzle(1, is_active=False)
    with pytest.raises(NotFoundError):
        service.open_level(user, puzzle.id)


def test_reset_then_resave(service, user, make_puzzle, clock):
    """Test that reset clears the record and the next save starts over."""
    puzzle = make_puzzle(1)
    service.save_progress(user, puzzle.id, ["a"])

    assert service.reset_progress(user, puzzle.id) is True
    assert service.get_progress(user, puzzle.id) is None

    clock.advance(minutes=10)
    progress = service.save_progress(user, puzzle.id, ["b"])
    assert progress.placed_piece_ids == ["b"]
    created_at = progress.created_at
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=UTC)
    assert created_at == clock.now
