"""Subscription schemas."""

from typing import Literal

from pydantic import BaseModel, Field


class SubscriptionSync(BaseModel):
    """Subscription state reported by the billing provider on the client."""

    revenuecat_id: str = Field(..., min_length=1, max_length=255)
    is_pro: bool


class SubscriptionStatus(BaseModel):
    """Current subscription tier."""

    subscription_tier: Literal["free", "pro"]
    message: str | None = None
