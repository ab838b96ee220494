"""User model."""

from sqlalchemy import Boolean, Column, Integer, String

from src.database import Base
from src.models.enums import SubscriptionTier, UserRole
from src.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """User model for authentication, ownership and tier lookup."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=True)
    role = Column(String(20), nullable=False, default=UserRole.USER.value)  # 'user' | 'admin'
    is_active = Column(Boolean, nullable=False, default=True)
    subscription_tier = Column(String(20), nullable=False, default=SubscriptionTier.FREE.value)
    revenuecat_id = Column(String(255), nullable=True)

    @property
    def tier(self) -> SubscriptionTier:
        """Subscription tier as an enum, treating unknown values as free."""
        try:
            return SubscriptionTier(self.subscription_tier or SubscriptionTier.FREE.value)
        except ValueError:
            return SubscriptionTier.FREE

    @property
    def is_admin(self) -> bool:
        """Check if the user may manage the puzzle catalog."""
        return self.role == UserRole.ADMIN.value
