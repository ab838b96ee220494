"""SQLAlchemy models."""

from src.models.puzzle import Puzzle
from src.models.user import User
from src.models.user_progress import UserProgress

__all__ = [
    "User",
    "Puzzle",
    "UserProgress",
]
