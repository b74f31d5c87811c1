"""
Human-readable insights for a scored creator.
"""
from typing import Dict

from influencer_hub.models import SourceProfile
from influencer_hub.scoring.engine import ScoreResult
from influencer_hub.scoring.signals import DerivedSignalProfile, RiskTolerance


def why_selected(record: SourceProfile, profile: DerivedSignalProfile, result: ScoreResult) -> str:
    reasons = []

    if result.breakdown.get("psychology_score", 0) > 60 and profile.risk_tolerance:
        reasons.append(f"high-risk tolerance audience ({profile.risk_tolerance.value})")

    if profile.gambling_propensity is not None and profile.gambling_propensity > 70:
        reasons.append(f"{profile.gambling_propensity:g}% gambling propensity")

    if profile.brand_safety_score is not None and profile.brand_safety_score > 85:
        reasons.append("excellent brand safety record")

    if (record.followers or 0) > 100_000:
        reasons.append(f"strong reach with {record.followers:,} followers")

    if not reasons:
        return f"Scored {result.score:.1f}/100 for {result.campaign_type} campaign."
    return f"Selected for {result.campaign_type} campaign due to: {', '.join(reasons)}."


def audience_insights(profile: DerivedSignalProfile) -> str:
    risk = profile.risk_tolerance.value if profile.risk_tolerance else "unknown"
    capacity = profile.financial_capacity.value if profile.financial_capacity else "unknown"
    return (
        f"Audience profile shows {risk} risk tolerance with "
        f"{profile.gambling_propensity or 0:g}% gambling propensity. "
        f"{capacity.capitalize()} financial capacity tier with "
        f"{profile.repeat_viewer_rate or 0:g}% repeat viewer rate."
    )


def brand_alignment(profile: DerivedSignalProfile, campaign_type: str) -> str:
    safety = profile.brand_safety_score
    safety_text = f"{safety:g}/100 safety score" if safety is not None else "unknown safety score"
    compliance = profile.regulatory_compliance or "unknown"
    moderation = profile.community_moderation or "unknown"
    return (
        f"Brand alignment: {safety_text} with {compliance} regulatory compliance. "
        f"Community moderation is {moderation}, suitable for {campaign_type} campaigns."
    )


def suggested_approach(record: SourceProfile, profile: DerivedSignalProfile) -> str:
    approach = []

    if profile.risk_tolerance in (RiskTolerance.AGGRESSIVE, RiskTolerance.HIGH_ROLLER):
        approach.append("Use competitive/high-stakes messaging")

    if profile.chat_sentiment_during_ads == "positive":
        approach.append("Interactive chat integration recommended")

    if "GAMING" in {str(t).upper() for t in (record.tags or [])}:
        approach.append("Gaming-focused content integration")

    text = ". ".join(approach) + "." if approach else "Standard sponsored segment."
    if profile.peak_activity_hours:
        hours = "-".join(str(h) for h in profile.peak_activity_hours)
        text += f" Optimal timing: {hours} hours."
    return text


def build_insights(
    record: SourceProfile,
    profile: DerivedSignalProfile,
    result: ScoreResult
) -> Dict[str, str]:
    return {
        "why_selected": why_selected(record, profile, result),
        "audience_insights": audience_insights(profile),
        "brand_alignment": brand_alignment(profile, result.campaign_type),
        "suggested_approach": suggested_approach(record, profile),
    }
