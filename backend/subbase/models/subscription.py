"""
Subscription database model.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Date, Numeric, Enum, Text, Index
import enum
from subbase.database import Base


class BillingCycle(str, enum.Enum):
    """Billing cycle enumeration."""
    monthly = "monthly"
    yearly = "yearly"


class SubscriptionStatus(str, enum.Enum):
    """Subscription status enumeration. Only active subscriptions count towards costs."""
    active = "active"
    paused = "paused"
    cancelled = "cancelled"


class Subscription(Base):
    """Recurring subscription owned by a single user."""

    __tablename__ = "subscriptions"
    __table_args__ = (
        Index("ix_subscriptions_user_id_status", "user_id", "status"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(36), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    cost = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="PLN")
    billing_cycle = Column(Enum(BillingCycle), nullable=False)
    status = Column(Enum(SubscriptionStatus), nullable=False, default=SubscriptionStatus.active)
    start_date = Column(Date, nullable=False)
    next_billing_date = Column(Date, nullable=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
