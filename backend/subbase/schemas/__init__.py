"""
Pydantic schemas package.
"""

from subbase.schemas.subscription import (
    SubscriptionCreate,
    SubscriptionUpdate,
    SubscriptionPatch,
    SubscriptionResponse,
    SubscriptionEnvelope,
    SubscriptionListResponse,
    Pagination,
)
from subbase.schemas.summary import (
    SubscriptionSummary,
    SubscriptionSummaryResponse,
)
from subbase.schemas.insights import (
    GeneratedInsight,
    Insight,
    InsightsPayload,
    InsightsResult,
    InsightsRequest,
    InsightsResponse,
)

__all__ = [
    "SubscriptionCreate",
    "SubscriptionUpdate",
    "SubscriptionPatch",
    "SubscriptionResponse",
    "SubscriptionEnvelope",
    "SubscriptionListResponse",
    "Pagination",
    "SubscriptionSummary",
    "SubscriptionSummaryResponse",
    "GeneratedInsight",
    "Insight",
    "InsightsPayload",
    "InsightsResult",
    "InsightsRequest",
    "InsightsResponse",
]
