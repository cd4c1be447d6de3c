"""
Database models package.
"""

from subbase.models.subscription import Subscription, BillingCycle, SubscriptionStatus

__all__ = [
    "Subscription",
    "BillingCycle",
    "SubscriptionStatus",
]
