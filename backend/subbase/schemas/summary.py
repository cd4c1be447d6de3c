"""Pydantic schemas for the subscription cost summary."""

from pydantic import BaseModel, field_serializer
from decimal import Decimal


class SubscriptionSummary(BaseModel):
    """
    Normalized spend across mixed billing cycles.

    Totals only include active subscriptions; counts include every status.
    """
    monthly_total: Decimal
    yearly_total: Decimal
    currency: str
    active_count: int
    paused_count: int
    cancelled_count: int

    @field_serializer("monthly_total", "yearly_total")
    def serialize_total(self, total: Decimal) -> float:
        return float(total)


class SubscriptionSummaryResponse(BaseModel):
    data: SubscriptionSummary
