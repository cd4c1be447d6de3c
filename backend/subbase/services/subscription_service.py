"""
Owner-scoped subscription storage.

Every function takes the owner's ``user_id`` explicitly and filters on it,
so a caller can only ever read or modify rows belonging to that owner.
"""

import logging
import math
import uuid
from datetime import datetime
from typing import List, Optional, Sequence, Tuple
from sqlalchemy.orm import Session

from subbase.errors import NotFoundError, ValidationApiError
from subbase.models.subscription import Subscription, SubscriptionStatus
from subbase.schemas.subscription import (
    SubscriptionCreate,
    SubscriptionUpdate,
    SubscriptionPatch,
    Pagination,
)

logger = logging.getLogger(__name__)


def _owner_query(db: Session, user_id: str):
    return db.query(Subscription).filter(Subscription.user_id == user_id)


def list_by_owner(
    db: Session,
    user_id: str,
    status: Optional[SubscriptionStatus] = None
) -> List[Subscription]:
    """All of the user's subscriptions, oldest first, optionally filtered by status."""
    query = _owner_query(db, user_id)
    if status is not None:
        query = query.filter(Subscription.status == status)
    return query.order_by(Subscription.created_at.asc(), Subscription.id.asc()).all()


def list_by_ids(db: Session, user_id: str, ids: Sequence[str]) -> List[Subscription]:
    """The subset of ``ids`` that exist and belong to the user."""
    if not ids:
        return []
    return _owner_query(db, user_id).filter(
        Subscription.id.in_(list(ids))
    ).order_by(Subscription.created_at.asc(), Subscription.id.asc()).all()


def list_page(
    db: Session,
    user_id: str,
    page: int = 1,
    limit: int = 10,
    status: Optional[SubscriptionStatus] = None
) -> Tuple[List[Subscription], Pagination]:
    """Newest-first page of the user's subscriptions plus pagination metadata."""
    query = _owner_query(db, user_id)
    if status is not None:
        query = query.filter(Subscription.status == status)

    total = query.count()
    items = query.order_by(
        Subscription.created_at.desc(), Subscription.id.desc()
    ).offset((page - 1) * limit).limit(limit).all()

    pagination = Pagination(
        page=page,
        limit=limit,
        total=total,
        total_pages=math.ceil(total / limit),
    )
    return items, pagination


def get_by_id(db: Session, user_id: str, subscription_id: str) -> Subscription:
    subscription = _owner_query(db, user_id).filter(
        Subscription.id == subscription_id
    ).first()
    if not subscription:
        raise NotFoundError("Subscription")
    return subscription


def create(db: Session, user_id: str, data: SubscriptionCreate) -> Subscription:
    subscription = Subscription(
        id=str(uuid.uuid4()),
        user_id=user_id,
        **data.model_dump(),
    )
    db.add(subscription)
    db.commit()
    db.refresh(subscription)
    logger.info("Created subscription %s for user %s", subscription.id, user_id)
    return subscription


def update(
    db: Session,
    user_id: str,
    subscription_id: str,
    data: SubscriptionUpdate
) -> Subscription:
    """Replace every editable field of a subscription."""
    subscription = get_by_id(db, user_id, subscription_id)

    for field, value in data.model_dump().items():
        setattr(subscription, field, value)
    subscription.updated_at = datetime.utcnow()

    db.commit()
    db.refresh(subscription)
    return subscription


def patch(
    db: Session,
    user_id: str,
    subscription_id: str,
    data: SubscriptionPatch
) -> Subscription:
    """Update only the fields present in the request."""
    subscription = get_by_id(db, user_id, subscription_id)
    changes = data.model_dump(exclude_unset=True)

    start_date = changes.get("start_date", subscription.start_date)
    next_billing_date = changes.get("next_billing_date", subscription.next_billing_date)
    if start_date and next_billing_date and next_billing_date < start_date:
        raise ValidationApiError(
            "Invalid input data",
            [{"field": "next_billing_date", "message": "Next billing date must be on or after start date"}],
        )

    for field, value in changes.items():
        setattr(subscription, field, value)
    subscription.updated_at = datetime.utcnow()

    db.commit()
    db.refresh(subscription)
    return subscription


def delete(db: Session, user_id: str, subscription_id: str) -> None:
    subscription = get_by_id(db, user_id, subscription_id)
    db.delete(subscription)
    db.commit()
    logger.info("Deleted subscription %s for user %s", subscription_id, user_id)
