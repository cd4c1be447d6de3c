"""Pydantic schemas for AI-generated subscription insights."""

from pydantic import BaseModel, Field
from datetime import datetime
from uuid import UUID
from typing import List, Literal, Optional

INSIGHT_MESSAGE_MAX_LENGTH = 200

# Sent to the model as the structured-output contract; mirrors InsightsPayload.
INSIGHTS_JSON_SCHEMA = {
    "type": "object",
    "properties": {
        "insights": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "type": {"type": "string", "enum": ["observation"]},
                    "message": {"type": "string", "maxLength": INSIGHT_MESSAGE_MAX_LENGTH},
                },
                "required": ["type", "message"],
                "additionalProperties": False,
            },
            "minItems": 2,
            "maxItems": 4,
        },
    },
    "required": ["insights"],
    "additionalProperties": False,
}


class Insight(BaseModel):
    type: Literal["observation"] = "observation"
    message: str = Field(..., min_length=1, max_length=INSIGHT_MESSAGE_MAX_LENGTH)


class GeneratedInsight(BaseModel):
    """An item as returned by the model; every field must be present."""
    type: Literal["observation"]
    message: str = Field(..., min_length=1, max_length=INSIGHT_MESSAGE_MAX_LENGTH)


class InsightsPayload(BaseModel):
    """Shape the model must return in structured mode."""
    insights: List[GeneratedInsight] = Field(..., min_length=2, max_length=4)


class InsightsResult(BaseModel):
    insights: List[Insight]
    generated_at: datetime
    subscription_count: int


class InsightsRequest(BaseModel):
    """Request body for POST /ai/insights. Omit ids to analyze all active subscriptions."""
    subscription_ids: Optional[List[UUID]] = None


class InsightsResponse(BaseModel):
    data: InsightsResult
