"""Service for normalizing subscription costs into monthly and yearly totals."""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable
from sqlalchemy.orm import Session

from subbase.config import settings
from subbase.models.subscription import BillingCycle, SubscriptionStatus
from subbase.schemas.summary import SubscriptionSummary
from subbase.services import subscription_service

CENTS = Decimal("0.01")
MONTHS_PER_YEAR = 12


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def compute_summary(
    subscriptions: Iterable,
    default_currency: str = settings.default_currency
) -> SubscriptionSummary:
    """
    Compute cost totals and status counts for one owner's subscriptions.

    - monthly_total: active monthly costs + (active yearly costs / 12)
    - yearly_total: (active monthly costs * 12) + active yearly costs
    - Counts include every subscription regardless of status.
    - Totals are rounded half-up to 2 decimal places.
    - Currency is taken from the first subscription; mixed currencies are
      summed as-is without conversion.
    """
    subscriptions = list(subscriptions)

    monthly_total = Decimal("0")
    yearly_total = Decimal("0")
    counts = {status: 0 for status in SubscriptionStatus}

    currency = subscriptions[0].currency if subscriptions else default_currency

    for sub in subscriptions:
        counts[SubscriptionStatus(sub.status)] += 1

        if sub.status != SubscriptionStatus.active:
            continue

        cost = _to_decimal(sub.cost)

        if sub.billing_cycle == BillingCycle.monthly:
            monthly_total += cost
            yearly_total += cost * MONTHS_PER_YEAR
        elif sub.billing_cycle == BillingCycle.yearly:
            monthly_total += cost / MONTHS_PER_YEAR
            yearly_total += cost

    return SubscriptionSummary(
        monthly_total=monthly_total.quantize(CENTS, rounding=ROUND_HALF_UP),
        yearly_total=yearly_total.quantize(CENTS, rounding=ROUND_HALF_UP),
        currency=currency,
        active_count=counts[SubscriptionStatus.active],
        paused_count=counts[SubscriptionStatus.paused],
        cancelled_count=counts[SubscriptionStatus.cancelled],
    )


def calculate_summary(db: Session, user_id: str) -> SubscriptionSummary:
    """Summarize every subscription the user owns."""
    subscriptions = subscription_service.list_by_owner(db, user_id)
    return compute_summary(subscriptions)
