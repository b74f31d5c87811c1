"""
Campaign Scoring Routes
=======================
Analyze creators for a betting, gaming or esports campaign
"""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session
from typing import List
import logging

from influencer_hub.config import settings
from influencer_hub.database import get_db
from influencer_hub.exceptions import StoreUnavailableError
from influencer_hub.models import SourceProfile
from influencer_hub.schemas.scoring import AnalyzeCampaignRequest, AnalyzeCampaignResponse
from influencer_hub.services.campaign_scoring_service import create_campaign_scoring_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/scoring", tags=["Campaign Scoring"])


def _load_records(db: Session, request: AnalyzeCampaignRequest, limit: int) -> List[SourceProfile]:
    query = db.query(SourceProfile)
    if request.streamer_ids:
        query = query.filter(SourceProfile.id.in_(request.streamer_ids))
    if request.platform:
        query = query.filter(SourceProfile.platform == request.platform.value)
    return query.order_by(SourceProfile.followers.desc(), SourceProfile.id).limit(limit).all()


@router.post("/analyze", response_model=AnalyzeCampaignResponse)
async def analyze_campaign(
    request: AnalyzeCampaignRequest,
    db: Session = Depends(get_db)
):
    """
    Score creators for a campaign type and rank them.

    With ``streamer_ids`` the given records are analyzed; otherwise the
    largest creators (optionally on one platform) are picked by followers.
    """
    limit = request.limit or settings.SCORING_ANALYZE_LIMIT

    # Sync session, keep the query off the event loop
    records = await run_in_threadpool(_load_records, db, request, limit)

    if not records:
        raise HTTPException(status_code=404, detail="No creators found to analyze")

    service = create_campaign_scoring_service(db)
    try:
        return await service.analyze_for_campaign(
            records,
            request.campaign_type,
            limit=limit,
            persist=request.persist,
        )
    except StoreUnavailableError as e:
        logger.error(f"Campaign analysis aborted, store unavailable: {e}")
        raise HTTPException(status_code=503, detail="Database unavailable")
