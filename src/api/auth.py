"""Account API endpoints: player sign-up, login and admin account management."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_user, require_admin
from src.database import get_db
from src.models.enums import UserRole
from src.models.user import User
from src.schemas.auth import (
    AccountActivation,
    AccountActivationResponse,
    AdminRegisterResponse,
    AuthResponse,
    UserLogin,
    UserRegister,
    UserResponse,
)
from src.services.auth import authenticate_user, create_access_token, create_user, get_user_by_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


def _ensure_email_available(db: Session, email: str) -> None:
    if get_user_by_email(db, email):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email already registered",
        )


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    db: Annotated[Session, Depends(get_db)],
):
    """Register a player account on the free tier."""
    _ensure_email_available(db, user_data.email)

    user = create_user(db, user_data.email, user_data.password, user_data.name)

    return AuthResponse(
        access_token=create_access_token(user.id, user.email),
        user=UserResponse.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: UserLogin,
    db: Annotated[Session, Depends(get_db)],
):
    """Login with email and password. Inactive accounts are refused."""
    user = authenticate_user(db, credentials.email, credentials.password)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is not activated",
        )

    return AuthResponse(
        access_token=create_access_token(user.id, user.email),
        user=UserResponse.model_validate(user),
    )


@router.get("/me", response_model=UserResponse)
async def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Get current user information."""
    return current_user


@router.post("/logout")
async def logout(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Logout (client should discard token)."""
    return {"message": "Logged out successfully"}


@router.post(
    "/admin/register",
    response_model=AdminRegisterResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register_admin(
    user_data: UserRegister,
    db: Annotated[Session, Depends(get_db)],
):
    """Request an admin account.

    The account starts inactive and cannot log in until another active
    admin activates it.
    """
    _ensure_email_available(db, user_data.email)

    user = create_user(
        db,
        user_data.email,
        user_data.password,
        user_data.name,
        role=UserRole.ADMIN,
        is_active=False,
    )
    logger.info(f"Admin account {user.id} registered, awaiting activation")

    return AdminRegisterResponse(
        message="Admin account created. Awaiting activation.",
        user=UserResponse.model_validate(user),
    )


@router.put("/admin/{user_id}/activate", response_model=AccountActivationResponse)
async def set_account_active(
    user_id: int,
    activation: AccountActivation,
    admin: Annotated[User, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
):
    """Activate or deactivate another account."""
    target = db.query(User).filter(User.id == user_id).first()
    if not target:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )

    if target.id == admin.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot change your own active status",
        )

    target.is_active = activation.is_active
    db.commit()
    db.refresh(target)

    action = "activated" if target.is_active else "deactivated"
    logger.info(f"Admin {admin.id} {action} account {target.id}")

    return AccountActivationResponse(
        message=f"Account {action} successfully",
        user=UserResponse.model_validate(target),
    )
