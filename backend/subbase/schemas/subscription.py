"""
Subscription Pydantic schemas for API validation.
"""

from pydantic import BaseModel, Field, field_serializer, model_validator
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, List
from subbase.models.subscription import BillingCycle, SubscriptionStatus


def _check_billing_dates(start_date: Optional[date], next_billing_date: Optional[date]) -> None:
    if start_date and next_billing_date and next_billing_date < start_date:
        raise ValueError("Next billing date must be on or after start date")


class SubscriptionBase(BaseModel):
    """Fields shared by create and full-update requests."""
    name: str = Field(..., min_length=1, max_length=255)
    cost: Decimal = Field(..., gt=0, le=100000, decimal_places=2)
    billing_cycle: BillingCycle
    start_date: date
    description: Optional[str] = Field(None, max_length=1000)

    @model_validator(mode="after")
    def check_next_billing_date(self):
        _check_billing_dates(self.start_date, getattr(self, "next_billing_date", None))
        return self


class SubscriptionCreate(SubscriptionBase):
    """Schema for creating a subscription."""
    currency: str = Field("PLN", min_length=3, max_length=3)
    status: SubscriptionStatus = SubscriptionStatus.active
    next_billing_date: Optional[date] = None


class SubscriptionUpdate(SubscriptionBase):
    """Schema for a full replacement (PUT). Every field is required."""
    currency: str = Field(..., min_length=3, max_length=3)
    status: SubscriptionStatus
    next_billing_date: Optional[date]
    description: Optional[str] = Field(..., max_length=1000)


class SubscriptionPatch(BaseModel):
    """Schema for a partial update (PATCH). Only provided fields change."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    cost: Optional[Decimal] = Field(None, gt=0, le=100000, decimal_places=2)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    billing_cycle: Optional[BillingCycle] = None
    status: Optional[SubscriptionStatus] = None
    start_date: Optional[date] = None
    next_billing_date: Optional[date] = None
    description: Optional[str] = Field(None, max_length=1000)

    @model_validator(mode="after")
    def reject_null_required_fields(self):
        for field in self.model_fields_set - {"next_billing_date", "description"}:
            if getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self


class SubscriptionResponse(BaseModel):
    """Subscription as exposed to clients. Never carries user_id."""
    id: str
    name: str
    cost: Decimal
    currency: str
    billing_cycle: BillingCycle
    status: SubscriptionStatus
    start_date: date
    next_billing_date: Optional[date] = None
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @field_serializer("cost")
    def serialize_cost(self, cost: Decimal) -> float:
        return float(cost)


class SubscriptionEnvelope(BaseModel):
    data: SubscriptionResponse


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class SubscriptionListResponse(BaseModel):
    data: List[SubscriptionResponse]
    pagination: Pagination
