"""
Campaign scorer factory and registry.
"""
from .base import BaseCampaignScorer, ScoreComponents
from .betting_scorer import BettingScorer
from .gaming_scorer import GamingScorer
from .esports_scorer import EsportsScorer

from influencer_hub.scoring.signals import CampaignType

# Registry of available scorers
SCORER_REGISTRY = {
    CampaignType.BETTING: BettingScorer,
    CampaignType.GAMING: GamingScorer,
    CampaignType.ESPORTS: EsportsScorer,
}


def get_scorer(campaign_type) -> BaseCampaignScorer:
    """
    Factory function to create the scorer for a campaign type.

    Args:
        campaign_type: CampaignType or its string value (betting, gaming, esports)

    Returns:
        Instantiated scorer

    Raises:
        ValueError: If campaign_type is not in the registry
    """
    try:
        key = CampaignType(campaign_type)
    except ValueError:
        raise ValueError(
            f"Unknown campaign type: {campaign_type}. "
            f"Available: {[c.value for c in SCORER_REGISTRY]}"
        )

    return SCORER_REGISTRY[key]()
