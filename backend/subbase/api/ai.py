"""API endpoints for AI-generated subscription insights."""

from fastapi import APIRouter, Depends
from typing import Optional
from sqlalchemy.orm import Session

from subbase.dependencies import get_db, get_current_user_id, get_insights_generator
from subbase.schemas.insights import InsightsRequest, InsightsResponse
from subbase.services import insights_service
from subbase.services.insights_service import InsightsGenerator

router = APIRouter(prefix="/ai", tags=["ai"])


@router.post("/insights", response_model=InsightsResponse)
async def generate_insights(
    body: Optional[InsightsRequest] = None,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    generator: InsightsGenerator = Depends(get_insights_generator)
):
    """
    Generate observations for the given subscriptions.
    Without subscription_ids every active subscription is analyzed.
    """
    subscription_ids = None
    if body and body.subscription_ids:
        subscription_ids = [str(i) for i in body.subscription_ids]
    result = await insights_service.generate_insights_for_user(
        db,
        user_id,
        subscription_ids=subscription_ids,
        generator=generator
    )
    return InsightsResponse(data=result)
