"""Pydantic schemas for API requests and responses."""

from src.schemas.auth import (
    AccountActivation,
    AccountActivationResponse,
    AdminRegisterResponse,
    AuthResponse,
    UserLogin,
    UserRegister,
    UserResponse,
)
from src.schemas.progress import (
    ProgressDetailResponse,
    ProgressListResponse,
    ProgressSave,
    ProgressSaveResponse,
)
from src.schemas.puzzle import (
    PuzzleAdminResponse,
    PuzzleCreate,
    PuzzleDetailResponse,
    PuzzleListResponse,
    PuzzleReorderRequest,
    PuzzleUpdate,
)
from src.schemas.subscription import SubscriptionStatus, SubscriptionSync

__all__ = [
    "UserRegister",
    "UserLogin",
    "AuthResponse",
    "UserResponse",
    "AdminRegisterResponse",
    "AccountActivation",
    "AccountActivationResponse",
    "ProgressSave",
    "ProgressSaveResponse",
    "ProgressDetailResponse",
    "ProgressListResponse",
    "PuzzleListResponse",
    "PuzzleDetailResponse",
    "PuzzleCreate",
    "PuzzleUpdate",
    "PuzzleAdminResponse",
    "PuzzleReorderRequest",
    "SubscriptionSync",
    "SubscriptionStatus",
]
