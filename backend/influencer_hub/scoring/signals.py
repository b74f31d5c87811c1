"""
Derived signal profiles and the per-campaign views the scorers read.

``DerivedSignalProfile`` is what a signal generator returns for one source
record. Scorers never read it directly: each campaign type projects it (plus
the few record fields it needs) into its own frozen signal structure, so the
set of inputs behind every score is fixed and explicit.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, List, Literal, Optional

from pydantic import BaseModel, Field

from influencer_hub.models import SourceProfile


class CampaignType(str, Enum):
    BETTING = "betting"
    GAMING = "gaming"
    ESPORTS = "esports"


class RiskTolerance(str, Enum):
    CONSERVATIVE = "conservative"
    MODERATE = "moderate"
    AGGRESSIVE = "aggressive"
    HIGH_ROLLER = "high-roller"


class FinancialCapacity(str, Enum):
    BUDGET = "budget"
    STANDARD = "standard"
    PREMIUM = "premium"
    WHALE = "whale"


Percentage = Optional[float]


class DerivedSignalProfile(BaseModel):
    """Behavioural and risk signals for one creator. Every field may be missing."""

    # Audience psychology
    risk_tolerance: Optional[RiskTolerance] = None
    financial_capacity: Optional[FinancialCapacity] = None
    gambling_propensity: Percentage = Field(None, ge=0, le=100)
    impulse_decision_making: Percentage = Field(None, ge=0, le=100)
    social_influence: Percentage = Field(None, ge=0, le=100)

    # Engagement
    sponsorship_receptivity: Percentage = Field(None, ge=0, le=100)
    repeat_viewer_rate: Percentage = Field(None, ge=0, le=100)
    chat_sentiment_during_ads: Optional[Literal["positive", "neutral", "negative"]] = None
    peak_activity_hours: List[int] = Field(default_factory=list)

    # Content performance
    viewer_retention: Percentage = Field(None, ge=0, le=100)
    engaging_content_types: List[str] = Field(default_factory=list)

    # Risk
    brand_safety_score: Percentage = Field(None, ge=0, le=100)
    controversy_impact_score: Percentage = Field(None, ge=0, le=100)
    regulatory_compliance: Optional[Literal["excellent", "good", "moderate", "poor"]] = None
    community_moderation: Optional[Literal["strict", "moderate", "lenient"]] = None
    exclusivity_deals: bool = False


def _tag_set(record: SourceProfile) -> FrozenSet[str]:
    return frozenset(str(t).upper() for t in (record.tags or []))


@dataclass(frozen=True)
class BettingSignals:
    campaign_type: Literal["betting"]
    risk_tolerance: Optional[RiskTolerance]
    financial_capacity: Optional[FinancialCapacity]
    gambling_propensity: Percentage
    sponsorship_receptivity: Percentage
    viewer_retention: Percentage
    brand_safety_score: Percentage
    platform: str
    region: Optional[str]
    tags: FrozenSet[str]

    @classmethod
    def from_profile(cls, record: SourceProfile, profile: DerivedSignalProfile) -> "BettingSignals":
        return cls(
            campaign_type="betting",
            risk_tolerance=profile.risk_tolerance,
            financial_capacity=profile.financial_capacity,
            gambling_propensity=profile.gambling_propensity,
            sponsorship_receptivity=profile.sponsorship_receptivity,
            viewer_retention=profile.viewer_retention,
            brand_safety_score=profile.brand_safety_score,
            platform=record.platform,
            region=(record.region or "").upper() or None,
            tags=_tag_set(record),
        )


@dataclass(frozen=True)
class GamingSignals:
    campaign_type: Literal["gaming"]
    financial_capacity: Optional[FinancialCapacity]
    social_influence: Percentage
    brand_safety_score: Percentage
    tags: FrozenSet[str]

    @classmethod
    def from_profile(cls, record: SourceProfile, profile: DerivedSignalProfile) -> "GamingSignals":
        return cls(
            campaign_type="gaming",
            financial_capacity=profile.financial_capacity,
            social_influence=profile.social_influence,
            brand_safety_score=profile.brand_safety_score,
            tags=_tag_set(record),
        )


@dataclass(frozen=True)
class EsportsSignals:
    campaign_type: Literal["esports"]
    repeat_viewer_rate: Percentage
    engaging_content_types: FrozenSet[str]
    brand_safety_score: Percentage
    current_game: Optional[str]
    tags: FrozenSet[str]

    @classmethod
    def from_profile(cls, record: SourceProfile, profile: DerivedSignalProfile) -> "EsportsSignals":
        return cls(
            campaign_type="esports",
            repeat_viewer_rate=profile.repeat_viewer_rate,
            engaging_content_types=frozenset(t.lower() for t in profile.engaging_content_types),
            brand_safety_score=profile.brand_safety_score,
            current_game=record.current_game,
            tags=_tag_set(record),
        )


SIGNAL_TYPES: Dict[CampaignType, type] = {
    CampaignType.BETTING: BettingSignals,
    CampaignType.GAMING: GamingSignals,
    CampaignType.ESPORTS: EsportsSignals,
}
