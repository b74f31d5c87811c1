"""
Unification core components.
"""
from .matcher import IdentityMatcher, MatchState, Cluster
from .resolver import AttributeResolver, ResolvedAttributes, ResolvedValue
from .aggregator import ProfileAggregator, UnifiedProfile, PlatformSnapshot
from .merge import MergeEngine
from .backfill import BackfillPropagator


__all__ = [
    "IdentityMatcher",
    "MatchState",
    "Cluster",
    "AttributeResolver",
    "ResolvedAttributes",
    "ResolvedValue",
    "ProfileAggregator",
    "UnifiedProfile",
    "PlatformSnapshot",
    "MergeEngine",
    "BackfillPropagator",
]
