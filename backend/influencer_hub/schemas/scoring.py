"""
Pydantic schemas for the campaign scoring routes.
"""
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from influencer_hub.models import Platform
from influencer_hub.scoring.signals import CampaignType


class AnalyzeCampaignRequest(BaseModel):
    """Pick creators by id, or the top creators by followers on a platform"""
    campaign_type: CampaignType
    streamer_ids: Optional[List[str]] = None
    platform: Optional[Platform] = None
    limit: Optional[int] = Field(None, ge=1, le=100)
    persist: bool = False


class PredictionsOut(BaseModel):
    ctr: float
    conversion_rate: float
    roi: float
    risk_level: str
    risk_factors: List[str]


class InsightsOut(BaseModel):
    why_selected: str
    audience_insights: str
    brand_alignment: str
    suggested_approach: str


class CreatorScoreOut(BaseModel):
    streamer_id: str
    platform: str
    username: str
    display_name: Optional[str] = None
    followers: int
    campaign_type: str
    score: float
    raw_score: float
    confidence: float
    tier: str
    breakdown: Dict[str, float]
    predictions: PredictionsOut
    insights: InsightsOut


class AnalyzeCampaignResponse(BaseModel):
    campaign_type: str
    analyzed: int
    errors: int
    persisted: int
    results: List[CreatorScoreOut]
