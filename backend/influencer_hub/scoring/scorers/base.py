"""
Base scorer interface for campaign scoring strategies.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from influencer_hub.models import SourceProfile
from influencer_hub.scoring.signals import CampaignType, DerivedSignalProfile


BASE_CONFIDENCE = 60.0
CORROBORATION_THRESHOLD = 70.0
CORROBORATION_BONUS = 20.0
SAFETY_THRESHOLD = 70.0
SAFETY_PENALTY = 15.0
MISSING_FIELD_PENALTY = 5.0


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return min(max(value, low), high)


def pct(value: Optional[float]) -> float:
    """Missing percentages count as zero."""
    return float(value) if value is not None else 0.0


@dataclass
class ScoreComponents:
    """Everything a scorer computes before tiering and predictions."""
    score: float
    raw_score: float
    confidence: float
    breakdown: Dict[str, float] = field(default_factory=dict)


class BaseCampaignScorer(ABC):
    """
    Abstract base for campaign scorers.

    A scorer owns a fixed decomposition: named sub-scores on a 0-100 scale,
    a weight per sub-score, and an optional flat bonus added after weighting.
    """

    campaign_type: CampaignType
    weights: Dict[str, float] = {}
    bonus_name: Optional[str] = None

    @abstractmethod
    def extract(self, record: SourceProfile, profile: DerivedSignalProfile) -> Any:
        """Project the full signal profile into this campaign's signal structure."""
        pass

    @abstractmethod
    def sub_scores(self, signals: Any) -> Dict[str, float]:
        """Return one 0-100 value per key of ``weights``."""
        pass

    def bonus(self, signals: Any) -> float:
        return 0.0

    @abstractmethod
    def corroborating_signal(self, signals: Any) -> Optional[float]:
        """The percentage that, when above the threshold, raises confidence."""
        pass

    def missing_fields(self, signals: Any) -> int:
        return sum(
            1 for name, value in vars(signals).items()
            if value is None and name not in ("region", "current_game")
        )

    def confidence(self, signals: Any) -> float:
        confidence = BASE_CONFIDENCE

        corroborating = self.corroborating_signal(signals)
        if corroborating is not None and corroborating > CORROBORATION_THRESHOLD:
            confidence += CORROBORATION_BONUS

        safety = getattr(signals, "brand_safety_score", None)
        if safety is not None and safety < SAFETY_THRESHOLD:
            confidence -= SAFETY_PENALTY

        confidence -= MISSING_FIELD_PENALTY * self.missing_fields(signals)
        return clamp(confidence)

    def calculate(self, signals: Any) -> ScoreComponents:
        """
        Weighted sum of sub-scores plus bonus, clamped to [0, 100].
        """
        parts = self.sub_scores(signals)
        breakdown = {name: round(value, 2) for name, value in parts.items()}

        raw = sum(parts[name] * weight for name, weight in self.weights.items())
        bonus = self.bonus(signals)
        if self.bonus_name:
            breakdown[self.bonus_name] = bonus
        raw += bonus

        return ScoreComponents(
            score=round(clamp(raw), 2),
            raw_score=raw,
            confidence=self.confidence(signals),
            breakdown=breakdown,
        )
