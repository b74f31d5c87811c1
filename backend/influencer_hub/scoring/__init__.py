"""
Campaign scoring engine.

Scores creators for betting, gaming and esports campaigns from a derived
signal profile.

Main components:
- signals:          signal profile + per-campaign signal structures
- signal_generator: heuristic signals from existing record fields
- scorers:          one scorer per campaign type, looked up with get_scorer()
- engine:           scoring, tiering and campaign predictions
- insights:         human-readable explanations of a score

Usage:
    from influencer_hub.scoring.engine import CampaignScoringEngine

    result = CampaignScoringEngine().score(record, "betting", signals)
"""

__all__ = ["signals", "signal_generator", "scorers", "engine", "insights"]
