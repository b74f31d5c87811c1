"""
Gaming campaign scoring.
"""
from typing import Dict, Optional

from influencer_hub.models import SourceProfile
from influencer_hub.scoring.signals import (
    CampaignType, DerivedSignalProfile, FinancialCapacity, GamingSignals
)
from .base import BaseCampaignScorer, pct


GAMING_TAG_POINTS = 50
COMPETITIVE_TAG_POINTS = 25
HIGH_CAPACITY_POINTS = 25

COMPETITIVE_TAGS = {"FPS", "STRATEGY"}
HIGH_CAPACITY = {FinancialCapacity.PREMIUM, FinancialCapacity.WHALE}


class GamingScorer(BaseCampaignScorer):
    """
    Score creators for gaming campaigns.

    - gaming_score (60%): GAMING tag, FPS/STRATEGY tag, premium-or-better audience
    - audience_score (40%): social influence
    """

    campaign_type = CampaignType.GAMING
    weights = {
        "gaming_score": 0.60,
        "audience_score": 0.40,
    }

    def extract(self, record: SourceProfile, profile: DerivedSignalProfile) -> GamingSignals:
        return GamingSignals.from_profile(record, profile)

    def sub_scores(self, signals: GamingSignals) -> Dict[str, float]:
        gaming = 0.0
        if "GAMING" in signals.tags:
            gaming += GAMING_TAG_POINTS
        if signals.tags & COMPETITIVE_TAGS:
            gaming += COMPETITIVE_TAG_POINTS
        if signals.financial_capacity in HIGH_CAPACITY:
            gaming += HIGH_CAPACITY_POINTS

        return {
            "gaming_score": gaming,
            "audience_score": pct(signals.social_influence),
        }

    def corroborating_signal(self, signals: GamingSignals) -> Optional[float]:
        return signals.social_influence
