"""
Subscription API endpoints.
"""

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session
from typing import Optional

from subbase.dependencies import get_db, get_current_user_id
from subbase.models.subscription import SubscriptionStatus
from subbase.schemas.subscription import (
    SubscriptionCreate,
    SubscriptionUpdate,
    SubscriptionPatch,
    SubscriptionResponse,
    SubscriptionEnvelope,
    SubscriptionListResponse,
)
from subbase.schemas.summary import SubscriptionSummaryResponse
from subbase.services import subscription_service, summary_service

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


@router.get("", response_model=SubscriptionListResponse)
def list_subscriptions(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[SubscriptionStatus] = Query(None),
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """List the user's subscriptions, newest first."""
    items, pagination = subscription_service.list_page(db, user_id, page=page, limit=limit, status=status)
    return SubscriptionListResponse(
        data=[SubscriptionResponse.model_validate(s) for s in items],
        pagination=pagination
    )


@router.post("", response_model=SubscriptionEnvelope, status_code=201)
def create_subscription(
    data: SubscriptionCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Create a new subscription."""
    subscription = subscription_service.create(db, user_id, data)
    return SubscriptionEnvelope(data=SubscriptionResponse.model_validate(subscription))


@router.get("/summary", response_model=SubscriptionSummaryResponse)
def get_summary(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Cost summary across all of the user's subscriptions.
    monthly_total: active monthly costs + yearly costs / 12
    yearly_total: active monthly costs * 12 + yearly costs
    """
    return SubscriptionSummaryResponse(data=summary_service.calculate_summary(db, user_id))


@router.get("/{subscription_id}", response_model=SubscriptionEnvelope)
def get_subscription(
    subscription_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Get a single subscription."""
    subscription = subscription_service.get_by_id(db, user_id, subscription_id)
    return SubscriptionEnvelope(data=SubscriptionResponse.model_validate(subscription))


@router.put("/{subscription_id}", response_model=SubscriptionEnvelope)
def update_subscription(
    subscription_id: str,
    data: SubscriptionUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Replace a subscription."""
    subscription = subscription_service.update(db, user_id, subscription_id, data)
    return SubscriptionEnvelope(data=SubscriptionResponse.model_validate(subscription))


@router.patch("/{subscription_id}", response_model=SubscriptionEnvelope)
def patch_subscription(
    subscription_id: str,
    data: SubscriptionPatch,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Update some fields of a subscription."""
    subscription = subscription_service.patch(db, user_id, subscription_id, data)
    return SubscriptionEnvelope(data=SubscriptionResponse.model_validate(subscription))


@router.delete("/{subscription_id}", status_code=204)
def delete_subscription(
    subscription_id: str,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """Delete a subscription."""
    subscription_service.delete(db, user_id, subscription_id)
    return Response(status_code=204)
