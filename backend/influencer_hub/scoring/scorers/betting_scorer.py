"""
Betting campaign scoring.
"""
from typing import Dict, Optional

from influencer_hub.models import Platform, SourceProfile
from influencer_hub.scoring.signals import (
    BettingSignals, CampaignType, DerivedSignalProfile, FinancialCapacity, RiskTolerance
)
from .base import BaseCampaignScorer, pct


RISK_TOLERANCE_POINTS = {
    RiskTolerance.HIGH_ROLLER: 50,
    RiskTolerance.AGGRESSIVE: 40,
    RiskTolerance.MODERATE: 25,
    RiskTolerance.CONSERVATIVE: 10,
}

FINANCIAL_CAPACITY_POINTS = {
    FinancialCapacity.WHALE: 30,
    FinancialCapacity.PREMIUM: 24,
    FinancialCapacity.STANDARD: 15,
    FinancialCapacity.BUDGET: 6,
}

GAMBLING_PROPENSITY_FACTOR = 0.20

GAMING_PLATFORM = Platform.TWITCH.value
GAMING_PLATFORM_BONUS = 12.0

LATAM_REGIONS = {"MEXICO", "COLOMBIA", "ARGENTINA", "CHILE", "BRAZIL"}
LATAM_REGION_BONUS = 10.0


class BettingScorer(BaseCampaignScorer):
    """
    Score creators for betting campaigns.

    Components:
    - psychology (35%): risk tolerance + financial capacity points, plus a
      fraction of gambling propensity
    - conversion (25%): sponsorship receptivity and viewer retention
    - safety (20%): brand-safety score
    - platform bonus: flat points for Twitch gaming streamers and LATAM regions,
      added after weighting, so the raw total can pass 100
    """

    campaign_type = CampaignType.BETTING
    weights = {
        "psychology_score": 0.35,
        "conversion_score": 0.25,
        "safety_score": 0.20,
    }
    bonus_name = "platform_bonus"

    def extract(self, record: SourceProfile, profile: DerivedSignalProfile) -> BettingSignals:
        return BettingSignals.from_profile(record, profile)

    def sub_scores(self, signals: BettingSignals) -> Dict[str, float]:
        psychology = (
            RISK_TOLERANCE_POINTS.get(signals.risk_tolerance, 0)
            + FINANCIAL_CAPACITY_POINTS.get(signals.financial_capacity, 0)
            + pct(signals.gambling_propensity) * GAMBLING_PROPENSITY_FACTOR
        )
        conversion = (
            pct(signals.sponsorship_receptivity) * 0.6
            + pct(signals.viewer_retention) * 0.4
        )
        return {
            "psychology_score": psychology,
            "conversion_score": conversion,
            "safety_score": pct(signals.brand_safety_score),
        }

    def bonus(self, signals: BettingSignals) -> float:
        bonus = 0.0
        if signals.platform == GAMING_PLATFORM and "GAMING" in signals.tags:
            bonus += GAMING_PLATFORM_BONUS
        if signals.region in LATAM_REGIONS:
            bonus += LATAM_REGION_BONUS
        return bonus

    def corroborating_signal(self, signals: BettingSignals) -> Optional[float]:
        return signals.gambling_propensity
