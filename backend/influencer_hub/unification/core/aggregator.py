"""
Profile aggregator - shapes a resolved cluster into a unified profile.
"""
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional
import logging

from influencer_hub.models import Platform, SourceProfile
from influencer_hub.unification.core.matcher import Cluster
from influencer_hub.unification.core.resolver import ResolvedAttributes


logger = logging.getLogger(__name__)


@dataclass
class PlatformSnapshot:
    """Copy of one source record stored in a unified profile's platform slot."""
    id: str
    username: str
    display_name: str
    followers: int
    avatar: Optional[str]
    url: Optional[str]
    verified: bool = False

    @classmethod
    def from_record(cls, record: SourceProfile) -> "PlatformSnapshot":
        return cls(
            id=record.id,
            username=record.username,
            display_name=record.display_name or record.username,
            followers=int(record.followers or 0),
            avatar=record.avatar_url,
            url=record.profile_url,
            verified=False,  # Can be enriched later
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlatformSnapshot":
        return cls(
            id=data["id"],
            username=data.get("username", ""),
            display_name=data.get("display_name", ""),
            followers=int(data.get("followers") or 0),
            avatar=data.get("avatar"),
            url=data.get("url"),
            verified=bool(data.get("verified", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class UnifiedProfile:
    """In-memory unified identity built during a pass, before it is persisted."""
    display_name: str
    country: Optional[str] = None
    country_source: Optional[str] = None
    primary_category: Optional[str] = None
    category_source: Optional[str] = None
    language: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    slots: Dict[Platform, PlatformSnapshot] = field(default_factory=dict)
    source_streamer_ids: List[str] = field(default_factory=list)

    @property
    def total_reach(self) -> int:
        return sum(s.followers for s in self.slots.values())

    @property
    def platform_count(self) -> int:
        return len(self.slots)

    def slots_as_dict(self) -> Dict[str, Dict[str, Any]]:
        return {p.slot_key: s.to_dict() for p, s in self.slots.items()}


class ProfileAggregator:
    """
    Build a ``UnifiedProfile`` from a cluster and its resolved attributes.

    Only one slot per platform. If a cluster holds two records from the
    same platform the first one is kept and the second dropped; the dropped
    record's id is not added to ``source_streamer_ids``.
    """

    def build(self, cluster: Cluster, resolved: ResolvedAttributes) -> UnifiedProfile:
        head = cluster.head
        profile = UnifiedProfile(
            display_name=head.display_name or head.username,
            country=resolved.country.value,
            country_source=resolved.country.source,
            primary_category=resolved.category.value,
            category_source=resolved.category.source,
            tags=list(resolved.tags),
        )

        for record in cluster.members:
            self.add_platform_data(profile, record)
            if profile.language is None and record.language:
                profile.language = record.language

        return profile

    @staticmethod
    def add_platform_data(profile: UnifiedProfile, record: SourceProfile) -> bool:
        """Fill the record's platform slot. Returns False if the slot was taken."""
        platform = Platform(record.platform)
        if platform in profile.slots:
            logger.warning(
                f"Duplicate {platform.value} record {record.id} ({record.username}) "
                f"in cluster of {profile.display_name!r}, keeping "
                f"{profile.slots[platform].username}"
            )
            return False

        profile.slots[platform] = PlatformSnapshot.from_record(record)
        profile.source_streamer_ids.append(record.id)
        return True
