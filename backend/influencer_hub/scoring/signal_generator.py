"""
Heuristic signal generator.

Derives a signal profile from fields already on a source record when no
richer (e.g. AI-backed) generator is plugged in. Any callable taking a
``SourceProfile`` and returning a ``DerivedSignalProfile`` (sync or async)
can stand in for it.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional
import logging

from influencer_hub.models import SourceProfile
from influencer_hub.scoring.signals import (
    DerivedSignalProfile, FinancialCapacity, RiskTolerance
)

logger = logging.getLogger(__name__)

POPULAR_FOLLOWERS = 100_000
ACTIVE_WITHIN = timedelta(days=7)


class HeuristicSignalGenerator:
    """Rule-based signals from tags, followers, activity and fraud check."""

    def __call__(self, record: SourceProfile) -> DerivedSignalProfile:
        return self.generate(record)

    def generate(self, record: SourceProfile, now: Optional[datetime] = None) -> DerivedSignalProfile:
        now = now or datetime.now(timezone.utc)
        tags = {str(t).upper() for t in (record.tags or [])}

        has_gaming_content = "GAMING" in tags
        is_popular = (record.followers or 0) > POPULAR_FOLLOWERS
        is_active = bool(record.is_live) or self._streamed_recently(record.last_streamed, now)

        return DerivedSignalProfile(
            risk_tolerance=RiskTolerance.AGGRESSIVE if has_gaming_content else RiskTolerance.MODERATE,
            gambling_propensity=75 if has_gaming_content else 45,
            impulse_decision_making=70 if is_popular else 50,
            social_influence=80 if is_active else 60,
            financial_capacity=FinancialCapacity.PREMIUM if is_popular else FinancialCapacity.STANDARD,
            peak_activity_hours=[19, 20, 21, 22],
            sponsorship_receptivity=75 if is_active else 50,
            chat_sentiment_during_ads="positive" if is_popular else "neutral",
            repeat_viewer_rate=80 if is_active else 60,
            engaging_content_types=["gaming", "tournaments"] if has_gaming_content else ["variety"],
            viewer_retention=85 if is_popular else 65,
            regulatory_compliance="good",
            brand_safety_score=90 if record.fraud_check == "CLEAN" else 60,
            controversy_impact_score=10,
            community_moderation="moderate",
            exclusivity_deals=False,
        )

    @staticmethod
    def _streamed_recently(last_streamed: Optional[datetime], now: datetime) -> bool:
        if not last_streamed:
            return False
        if last_streamed.tzinfo is None:
            last_streamed = last_streamed.replace(tzinfo=timezone.utc)
        return last_streamed > now - ACTIVE_WITHIN
