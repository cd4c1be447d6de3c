"""Service for generating AI observations about a user's subscription portfolio."""

import json
import logging
import re
from datetime import datetime, timezone
from typing import List, Optional, Sequence
from pydantic import ValidationError
from sqlalchemy.orm import Session

from subbase.ai.client import AIClient, get_ai_client
from subbase.ai.prompts import (
    INSIGHTS_SYSTEM,
    INSIGHTS_SYSTEM_UNSTRUCTURED,
    build_insights_user_prompt,
)
from subbase.config import Settings, settings
from subbase.errors import AIResponseFormatError, NotFoundError
from subbase.models.subscription import SubscriptionStatus
from subbase.schemas.insights import (
    INSIGHTS_JSON_SCHEMA,
    INSIGHT_MESSAGE_MAX_LENGTH,
    Insight,
    InsightsPayload,
    InsightsResult,
)
from subbase.services import subscription_service

logger = logging.getLogger(__name__)

UNSTRUCTURED_MAX_INSIGHTS = 5
JSON_ARRAY_PATTERN = re.compile(r"\[[\s\S]*\]")

STRUCTURED_RESPONSE_FORMAT = {
    "type": "json_schema",
    "json_schema": {
        "name": "subscription_insights",
        "schema": INSIGHTS_JSON_SCHEMA,
        "strict": True,
    },
}


class InsightsGenerator:
    """
    Turns a set of subscriptions into 2-4 short observations.

    In ``structured`` mode the model is asked for schema-constrained JSON and
    the answer is validated strictly. ``unstructured`` mode is a degraded
    path: free text is searched for a JSON array and falls back to the raw
    text as a single observation.
    """

    def __init__(self, client: Optional[AIClient] = None, config: Settings = settings):
        if client is None:
            client = get_ai_client() if config is settings else AIClient(config=config)
        self.client = client
        self.config = config

    async def generate(self, subscriptions: Sequence) -> InsightsResult:
        subscriptions = list(subscriptions)

        if not subscriptions:
            logger.warning("Insights requested for an empty subscription set")
            return InsightsResult(
                insights=[],
                generated_at=datetime.now(timezone.utc),
                subscription_count=0,
            )

        user_prompt = build_insights_user_prompt(subscriptions)

        if self.config.ai_insights_mode == "unstructured":
            insights = await self._generate_unstructured(user_prompt)
        else:
            insights = await self._generate_structured(user_prompt)

        logger.info(
            "AI insights generated: subscription_count=%d insights_count=%d mode=%s",
            len(subscriptions),
            len(insights),
            self.config.ai_insights_mode,
        )

        return InsightsResult(
            insights=insights,
            generated_at=datetime.now(timezone.utc),
            subscription_count=len(subscriptions),
        )

    async def _generate_structured(self, user_prompt: str) -> List[Insight]:
        result = await self.client.complete_json(
            system_prompt=INSIGHTS_SYSTEM.format(language=self.config.ai_response_language),
            user_prompt=user_prompt,
            response_format=STRUCTURED_RESPONSE_FORMAT,
        )

        try:
            payload = InsightsPayload.model_validate(result)
        except ValidationError as e:
            logger.error(f"Failed to validate AI response: {e}")
            raise AIResponseFormatError() from e

        return [Insight(message=item.message) for item in payload.insights]

    async def _generate_unstructured(self, user_prompt: str) -> List[Insight]:
        content = await self.client.complete(
            system_prompt=INSIGHTS_SYSTEM_UNSTRUCTURED.format(language=self.config.ai_response_language),
            user_prompt=user_prompt,
        )
        return parse_unstructured_insights(content)


def _fallback_insight(content: str) -> List[Insight]:
    message = content.strip()[:INSIGHT_MESSAGE_MAX_LENGTH]
    if not message:
        return []
    return [Insight(message=message)]


def parse_unstructured_insights(content: str) -> List[Insight]:
    """
    Extract observations from free-form model output.

    Uses the first bracketed JSON array in the text. Items without a string
    message are dropped and at most five are kept. When no array can be
    found or parsed, the trimmed text becomes a single observation.
    """
    match = JSON_ARRAY_PATTERN.search(content)
    if not match:
        logger.warning("Could not find JSON array in AI response")
        return _fallback_insight(content)

    try:
        parsed = json.loads(match.group(0))
    except ValueError as e:
        logger.warning(f"Failed to parse AI response: {e}")
        return _fallback_insight(content)

    if not isinstance(parsed, list):
        return _fallback_insight(content)

    insights = [
        Insight(message=item["message"].strip()[:INSIGHT_MESSAGE_MAX_LENGTH])
        for item in parsed
        if isinstance(item, dict) and isinstance(item.get("message"), str) and item["message"].strip()
    ]
    return insights[:UNSTRUCTURED_MAX_INSIGHTS]


async def generate_insights_for_user(
    db: Session,
    user_id: str,
    subscription_ids: Optional[Sequence[str]] = None,
    generator: Optional[InsightsGenerator] = None
) -> InsightsResult:
    """
    Generate insights for specific subscriptions, or all active ones.

    Raises NotFoundError when any requested id is missing or owned by
    someone else.
    """
    if subscription_ids:
        requested = set(subscription_ids)
        subscriptions = subscription_service.list_by_ids(db, user_id, list(requested))
        if len(subscriptions) != len(requested):
            raise NotFoundError("One or more subscriptions")
    else:
        subscriptions = subscription_service.list_by_owner(
            db, user_id, status=SubscriptionStatus.active
        )

    generator = generator or InsightsGenerator()
    return await generator.generate(subscriptions)
