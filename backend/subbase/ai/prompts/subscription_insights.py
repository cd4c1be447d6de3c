"""AI prompts for subscription portfolio insights."""

from typing import Iterable

INSIGHTS_SYSTEM = """You are a financial advisor specialising in subscription management.
Your task is to analyze the user's subscriptions and provide practical observations.

Guidelines:
- Focus on cost optimization opportunities
- Identify overlapping or duplicated services
- Point out subscriptions that may be going unused
- Suggest better billing cycles where appropriate (e.g. yearly instead of monthly)
- Keep every observation concise, at most 200 characters
- Produce between 2 and 4 observations per analysis
- Every observation must have the type "observation"
- Write in {language}"""

INSIGHTS_SYSTEM_UNSTRUCTURED = INSIGHTS_SYSTEM + """

Respond with a JSON array of observations only:
[{{"type": "observation", "message": "<observation>"}}]"""

INSIGHTS_USER = """Analyze the following subscriptions and provide observations:

{subscriptions_list}

Total subscriptions: {total_count}
Active subscriptions: {active_count}"""

CYCLE_LABELS = {
    "monthly": "per month",
    "yearly": "per year",
}


def _value(field):
    return getattr(field, "value", field)


def build_insights_user_prompt(subscriptions: Iterable) -> str:
    """Numbered list of subscriptions followed by total and active counts."""
    subscriptions = list(subscriptions)

    entries = []
    for idx, sub in enumerate(subscriptions, start=1):
        cycle = _value(sub.billing_cycle)
        lines = [
            f"{idx}. {sub.name}",
            f"   - Cost: {sub.cost} {sub.currency} {CYCLE_LABELS.get(cycle, cycle)}",
            f"   - Status: {_value(sub.status)}",
            f"   - Start date: {sub.start_date}",
        ]
        if sub.description:
            lines.append(f"   - Description: {sub.description}")
        entries.append("\n".join(lines))

    active_count = sum(1 for sub in subscriptions if _value(sub.status) == "active")

    return INSIGHTS_USER.format(
        subscriptions_list="\n\n".join(entries),
        total_count=len(subscriptions),
        active_count=active_count,
    )
