"""Subscription tier endpoints."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_user
from src.database import get_db, store_errors
from src.models.enums import SubscriptionTier
from src.models.user import User
from src.schemas.subscription import SubscriptionStatus, SubscriptionSync

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/subscription", tags=["subscription"])


@router.post("/sync", response_model=SubscriptionStatus)
def sync_subscription(
    sync_data: SubscriptionSync,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
):
    """Record the tier reported by the client after purchase, restore or launch."""
    tier = SubscriptionTier.PRO if sync_data.is_pro else SubscriptionTier.FREE

    with store_errors(db, "sync subscription"):
        current_user.revenuecat_id = sync_data.revenuecat_id
        current_user.subscription_tier = tier.value
        db.commit()
        db.refresh(current_user)

    logger.info(f"User {current_user.id} subscription synced: {tier.value}")
    return SubscriptionStatus(subscription_tier=tier.value, message="Subscription synced")


@router.get("/status", response_model=SubscriptionStatus)
def get_subscription_status(
    current_user: Annotated[User, Depends(get_current_user)],
):
    """Get the current user's subscription tier."""
    return SubscriptionStatus(subscription_tier=current_user.tier.value)
