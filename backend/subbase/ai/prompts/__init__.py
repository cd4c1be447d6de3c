from subbase.ai.prompts.subscription_insights import (
    INSIGHTS_SYSTEM,
    INSIGHTS_SYSTEM_UNSTRUCTURED,
    INSIGHTS_USER,
    build_insights_user_prompt,
)

__all__ = [
    "INSIGHTS_SYSTEM",
    "INSIGHTS_SYSTEM_UNSTRUCTURED",
    "INSIGHTS_USER",
    "build_insights_user_prompt",
]
