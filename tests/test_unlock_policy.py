"""Unlock policy tests."""

import pytest

from src.exceptions import ForbiddenError, ForbiddenReason
from src.services.progress_store import ProgressStore
from src.services.unlock_policy import UnlockPolicy


def complete(db, user, puzzle):
    """Save every piece of a puzzle for the user."""
    pieces = [f"piece-{i}" for i in range(puzzle.total_pieces)]
    return ProgressStore(db).upsert(user.id, puzzle, pieces)


def test_first_level_always_unlocked(db, user, make_puzzle):
    """Test that level 1 is unlocked with no progress at all."""
    first = make_puzzle(1)
    assert UnlockPolicy(db).is_unlocked(user.id, first) is True


def test_level_locked_until_predecessor_completed(db, user, make_puzzle):
    """Test that level n needs level n-1 completed."""
    first, second = make_puzzle(1), make_puzzle(2)
    policy = UnlockPolicy(db)

    assert policy.is_unlocked(user.id, second) is False

    ProgressStore(db).upsert(user.id, first, ["piece-0"])
    assert policy.is_unlocked(user.id, second) is False

    complete(db, user, first)
    assert policy.is_unlocked(user.id, second) is True


def test_ensure_unlocked_raises_level_locked(db, user, make_puzzle):
    """Test that a locked level raises ForbiddenError(level_locked)."""
    make_puzzle(1)
    second = make_puzzle(2)

    with pytest.raises(ForbiddenError) as exc_info:
        UnlockPolicy(db).ensure_unlocked(user.id, second)
    assert exc_info.value.reason == ForbiddenReason.LEVEL_LOCKED


def test_local_chain_only_checks_immediate_predecessor(db, user, make_puzzle):
    """Test that completing level 2 unlocks level 3 without level 1."""
    make_puzzle(1)
    second, third = make_puzzle(2), make_puzzle(3)
    complete(db, user, second)

    assert UnlockPolicy(db, chain="local").is_unlocked(user.id, third) is True


def test_global_chain_requires_every_earlier_level(db, user, make_puzzle):
    """Test that the global chain needs the whole prefix completed."""
    first, second, third = make_puzzle(1), make_puzzle(2), make_puzzle(3)
    complete(db, user, second)
    policy = UnlockPolicy(db, chain="global")

    assert policy.is_unlocked(user.id, third) is False
    complete(db, user, first)
    assert policy.is_unlocked(user.id, third) is True


def test_gap_open_policy_unlocks(db, user, make_puzzle):
    """Test that a missing predecessor leaves the level unlocked by default."""
    make_puzzle(1)
    third = make_puzzle(3)
    assert UnlockPolicy(db, gap_policy="open").is_unlocked(user.id, third) is True


def test_gap_closed_policy_locks(db, user, make_puzzle):
    """Test that the closed gap policy locks a level without a predecessor."""
    make_puzzle(1)
    third = make_puzzle(3)
    assert UnlockPolicy(db, gap_policy="closed").is_unlocked(user.id, third) is False


def test_inactive_predecessor_counts_as_gap(db, user, make_puzzle):
    """Test that a retired predecessor is treated like a gap."""
    make_puzzle(1)
    make_puzzle(2, is_active=False)
    third = make_puzzle(3)
    assert UnlockPolicy(db).is_unlocked(user.id, third) is True


def test_unlock_map_matches_single_checks(db, user, make_puzzle):
    """Test that the one-pass map agrees with per-level checks."""
    levels = [make_puzzle(order) for order in range(1, 5)]
    complete(db, user, levels[0])
    complete(db, user, levels[2])
    policy = UnlockPolicy(db)

    completed = policy.completed_orders(user.id, levels)
    status = policy.unlock_map(levels, completed)

    assert completed == {1, 3}
    assert status == {
        levels[0].id: True,
        levels[1].id: True,
        levels[2].id: False,
        levels[3].id: True,
    }
    for level in levels:
        assert status[level.id] == policy.is_unlocked(user.id, level)


def test_unlock_map_global_chain(db, user, make_puzzle):
    """Test the one-pass map with the global chain."""
    levels = [make_puzzle(order) for order in range(1, 4)]
    policy = UnlockPolicy(db, chain="global")

    status = policy.unlock_map(levels, {2})

    assert status == {levels[0].id: True, levels[1].id: False, levels[2].id: False}
