"""
Esports campaign scoring.
"""
from typing import Dict, Optional

from influencer_hub.models import SourceProfile
from influencer_hub.scoring.signals import CampaignType, DerivedSignalProfile, EsportsSignals
from .base import BaseCampaignScorer, pct


COMPETITIVE_TAG_POINTS = 50
COMPETITIVE_GAME_POINTS = 30
TOURNAMENT_CONTENT_POINTS = 20

COMPETITIVE_TAGS = {"FPS", "STRATEGY"}
COMPETITIVE_GAMES = {"cs:go", "cs2", "valorant", "league of legends", "dota 2"}


class EsportsScorer(BaseCampaignScorer):
    """
    Score creators for esports campaigns.

    - competitive_score (70%): FPS/STRATEGY tag, competitive title being
      played, tournament content
    - engagement_score (30%): repeat-viewer rate
    """

    campaign_type = CampaignType.ESPORTS
    weights = {
        "competitive_score": 0.70,
        "engagement_score": 0.30,
    }

    def extract(self, record: SourceProfile, profile: DerivedSignalProfile) -> EsportsSignals:
        return EsportsSignals.from_profile(record, profile)

    def sub_scores(self, signals: EsportsSignals) -> Dict[str, float]:
        competitive = 0.0
        if signals.tags & COMPETITIVE_TAGS:
            competitive += COMPETITIVE_TAG_POINTS
        if signals.current_game and signals.current_game.strip().lower() in COMPETITIVE_GAMES:
            competitive += COMPETITIVE_GAME_POINTS
        if "tournaments" in signals.engaging_content_types:
            competitive += TOURNAMENT_CONTENT_POINTS

        return {
            "competitive_score": competitive,
            "engagement_score": pct(signals.repeat_viewer_rate),
        }

    def corroborating_signal(self, signals: EsportsSignals) -> Optional[float]:
        return signals.repeat_viewer_rate
