"""
Attribute resolver - picks one authoritative value per attribute for a cluster.
"""
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple
import logging

from influencer_hub.models import SourceProfile
from influencer_hub.unification.core.matcher import Cluster
from influencer_hub.unification.priority import (
    COUNTRY, CATEGORY, priority_of, region_to_country
)


logger = logging.getLogger(__name__)


@dataclass
class ResolvedValue:
    value: Optional[str] = None
    source: Optional[str] = None


@dataclass
class ResolvedAttributes:
    country: ResolvedValue = field(default_factory=ResolvedValue)
    category: ResolvedValue = field(default_factory=ResolvedValue)
    tags: List[str] = field(default_factory=list)

    def get(self, attribute: str) -> ResolvedValue:
        return self.country if attribute == COUNTRY else self.category


def _country_candidates(record: SourceProfile) -> Iterator[Tuple[str, Optional[str]]]:
    if record.inferred_country:
        yield record.inferred_country, record.inferred_country_source
    native = region_to_country(record.region)
    if native:
        yield native, record.platform


def _category_candidates(record: SourceProfile) -> Iterator[Tuple[str, Optional[str]]]:
    if record.inferred_category:
        yield record.inferred_category, record.inferred_category_source
    if record.primary_category:
        yield record.primary_category, record.platform


_CANDIDATES = {
    COUNTRY: _country_candidates,
    CATEGORY: _category_candidates,
}


class AttributeResolver:
    """
    Resolve country, category and tags for a cluster.

    Every record contributes its previously inferred value (with the source
    stored alongside it) and its native value (sourced from its own
    platform). The candidate whose source has strictly the highest priority
    wins; on equal priority the first one found is kept. A value resolved
    from a strong source in an earlier pass travels on the records as an
    inferred value, so a later pass with only weaker data cannot replace it.

    Tags are a plain union across the cluster.
    """

    def resolve(self, cluster: Cluster) -> ResolvedAttributes:
        members = cluster.members
        return ResolvedAttributes(
            country=self.resolve_attribute(COUNTRY, members),
            category=self.resolve_attribute(CATEGORY, members),
            tags=self.merge_tags(members),
        )

    @staticmethod
    def resolve_attribute(attribute: str, records: List[SourceProfile]) -> ResolvedValue:
        best = ResolvedValue()
        best_priority = -1
        for record in records:
            for value, source in _CANDIDATES[attribute](record):
                rank = priority_of(attribute, source)
                if rank > best_priority:
                    best = ResolvedValue(value=value, source=source)
                    best_priority = rank
        return best

    @staticmethod
    def merge_tags(records: List[SourceProfile]) -> List[str]:
        tags = set()
        for record in records:
            tags.update(t for t in (record.tags or []) if t)
        return sorted(tags)
