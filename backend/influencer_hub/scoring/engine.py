"""
Campaign scoring engine.

Scores one source record for one campaign type from its derived signal
profile. Pure and deterministic: the same record, signals and campaign type
always give the same result.
"""
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional
import logging

from influencer_hub.models import SourceProfile
from influencer_hub.scoring.scorers import get_scorer
from influencer_hub.scoring.scorers.base import pct
from influencer_hub.scoring.signals import CampaignType, DerivedSignalProfile


logger = logging.getLogger(__name__)

# Highest first; anything below the last threshold is C
TIER_THRESHOLDS = (
    (90.0, "S"),
    (75.0, "A"),
    (60.0, "B"),
)
DEFAULT_TIER = "C"

# Industry baselines
BASE_CTR = 3.2
BASE_CONVERSION_RATE = 2.1
BASE_ROI = 120.0

BRAND_SAFETY_RISK_THRESHOLD = 70.0
CONTROVERSY_RISK_THRESHOLD = 20.0
NO_RISK_FACTORS = "No significant risk factors identified"


@dataclass
class CampaignPredictions:
    ctr: float
    conversion_rate: float
    roi: float
    risk_level: str
    risk_factors: List[str] = field(default_factory=list)


@dataclass
class ScoreResult:
    """Result of scoring a record for a campaign type"""
    campaign_type: str
    score: float  # 0-100
    raw_score: float  # before clamping
    confidence: float  # 0-100
    tier: str
    breakdown: Dict[str, float]
    predictions: CampaignPredictions

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def tier_for(score: float) -> str:
    for threshold, tier in TIER_THRESHOLDS:
        if score >= threshold:
            return tier
    return DEFAULT_TIER


def risk_level_for(score: float) -> str:
    if score > 80:
        return "low"
    if score > 60:
        return "medium"
    return "high"


def predict_ctr(profile: DerivedSignalProfile, score: float) -> float:
    receptivity_bonus = pct(profile.sponsorship_receptivity) / 100
    return round(BASE_CTR * (score / 100) * (1 + receptivity_bonus), 1)


def predict_conversion_rate(profile: DerivedSignalProfile, score: float) -> float:
    psychology_bonus = pct(profile.gambling_propensity) / 100
    return round(BASE_CONVERSION_RATE * (score / 100) * (1 + psychology_bonus), 1)


def predict_roi(profile: DerivedSignalProfile, score: float) -> float:
    quality_bonus = pct(profile.repeat_viewer_rate) / 100
    return float(round(BASE_ROI * (score / 100) * (1 + quality_bonus)))


def identify_risk_factors(profile: DerivedSignalProfile) -> List[str]:
    risks = []

    if profile.brand_safety_score is not None and profile.brand_safety_score < BRAND_SAFETY_RISK_THRESHOLD:
        risks.append("Brand safety score below threshold")

    if profile.controversy_impact_score is not None and profile.controversy_impact_score > CONTROVERSY_RISK_THRESHOLD:
        risks.append("Potential controversy impact detected")

    if profile.exclusivity_deals:
        risks.append("Existing exclusivity deals may conflict")

    if not risks:
        risks.append(NO_RISK_FACTORS)

    return risks


class CampaignScoringEngine:
    """
    Score records against campaign types.

    Each campaign type has its own scorer (see ``scoring.scorers``); the
    engine adds tiering and campaign predictions on top.
    """

    def score(
        self,
        record: SourceProfile,
        campaign_type: CampaignType,
        profile: Optional[DerivedSignalProfile] = None
    ) -> ScoreResult:
        scorer = get_scorer(campaign_type)
        profile = profile or DerivedSignalProfile()

        signals = scorer.extract(record, profile)
        components = scorer.calculate(signals)

        predictions = CampaignPredictions(
            ctr=predict_ctr(profile, components.score),
            conversion_rate=predict_conversion_rate(profile, components.score),
            roi=predict_roi(profile, components.score),
            risk_level=risk_level_for(components.score),
            risk_factors=identify_risk_factors(profile),
        )

        result = ScoreResult(
            campaign_type=scorer.campaign_type.value,
            score=components.score,
            raw_score=components.raw_score,
            confidence=components.confidence,
            tier=tier_for(components.score),
            breakdown=components.breakdown,
            predictions=predictions,
        )

        logger.debug(
            f"  {record.platform}/{record.username} {result.campaign_type}: "
            f"score={result.score} conf={result.confidence} tier={result.tier} "
            f"breakdown={result.breakdown}"
        )
        return result
