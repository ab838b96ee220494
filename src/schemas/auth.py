"""Authentication schemas."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserRegister(BaseModel):
    """User registration request."""

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=6, max_length=72)
    name: str | None = Field(None, max_length=255)


class UserLogin(BaseModel):
    """User login request."""

    email: EmailStr = Field(..., max_length=255)
    password: str = Field(..., min_length=1, max_length=72)


class AuthResponse(BaseModel):
    """Authentication response with token and user info."""

    access_token: str
    token_type: str = "bearer"  # noqa: S105
    user: "UserResponse"


class UserResponse(BaseModel):
    """User information response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str | None
    role: str
    subscription_tier: str
    is_active: bool


class AdminRegisterResponse(BaseModel):
    """Admin account created, pending activation."""

    message: str
    user: UserResponse


class AccountActivation(BaseModel):
    """Activate or deactivate an account."""

    is_active: bool


class AccountActivationResponse(BaseModel):
    """Result of an activation change."""

    message: str
    user: UserResponse
