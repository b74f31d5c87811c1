"""
Identity matcher - groups per-platform records that belong to the same creator.

Anchor records (streaming platforms) seed identities; satellite records
(social platforms) are attached to the first anchor that claims them.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set
import logging

from influencer_hub.models import SourceProfile
from influencer_hub.unification.core.social_links import parse_social_link


logger = logging.getLogger(__name__)

MATCH_SOCIAL_LINK = "social_link"
MATCH_USERNAME = "username"
MATCH_DISPLAY_NAME = "display_name"


@dataclass
class Cluster:
    """One candidate identity: a head record plus the satellites linked to it."""
    head: SourceProfile
    satellites: List[SourceProfile] = field(default_factory=list)
    match_keys: Dict[str, str] = field(default_factory=dict)
    standalone: bool = False

    @property
    def members(self) -> List[SourceProfile]:
        return [self.head] + self.satellites

    def attach(self, record: SourceProfile, key: str) -> None:
        self.satellites.append(record)
        self.match_keys[record.id] = key


class MatchState:
    """
    Lookup maps and claims for a single matching pass.

    Built fresh for every pass so that passes never share state.
    """

    def __init__(self, satellites: Iterable[SourceProfile]):
        self.satellites: List[SourceProfile] = list(satellites)
        self.by_username: Dict[str, List[SourceProfile]] = {}
        self.claimed: Set[str] = set()
        self.errors = 0

        for record in self.satellites:
            if not record.username:
                continue
            key = record.username.lower()
            self.by_username.setdefault(key, []).append(record)

    def available(self, username: Optional[str]) -> List[SourceProfile]:
        """Unclaimed satellites whose username equals ``username`` (case-insensitive)."""
        if not username:
            return []
        return [
            r for r in self.by_username.get(username.lower(), [])
            if r.id not in self.claimed
        ]

    def claim(self, record: SourceProfile) -> None:
        self.claimed.add(record.id)

    def unclaimed(self) -> List[SourceProfile]:
        return [r for r in self.satellites if r.id not in self.claimed]


class IdentityMatcher:
    """
    Cluster anchors and satellites into candidate identities.

    Matching keys, tried in order for each satellite:
    1. a link in the anchor's social links naming the satellite's platform + username
    2. anchor username == satellite username (case-insensitive)
    3. anchor display name without whitespace == satellite username (case-insensitive)

    Anchors are processed by descending followers. A satellite claimed by an
    earlier anchor is not offered to later ones, so the higher-reach anchor
    wins ties. Satellites nobody claims become standalone clusters.
    """

    def match(
        self,
        anchors: Iterable[SourceProfile],
        satellites: Iterable[SourceProfile],
        state: Optional[MatchState] = None
    ) -> List[Cluster]:
        state = state or MatchState(satellites)

        # sorted() is stable, equal follower counts keep input order
        ordered = sorted(anchors, key=lambda r: r.followers or 0, reverse=True)

        clusters: List[Cluster] = []
        for anchor in ordered:
            try:
                clusters.append(self._build_cluster(anchor, state))
            except Exception as e:
                logger.error(f"Error matching {anchor.platform}/{anchor.username}: {e}")
                state.errors += 1

        for satellite in state.unclaimed():
            state.claim(satellite)
            clusters.append(Cluster(head=satellite, standalone=True))

        logger.info(
            f"Matched {len(ordered)} anchors and {len(state.satellites)} satellites "
            f"into {len(clusters)} clusters"
        )
        return clusters

    def _build_cluster(self, anchor: SourceProfile, state: MatchState) -> Cluster:
        cluster = Cluster(head=anchor)

        # 1. Explicit links
        for link in anchor.social_links or []:
            if isinstance(link, dict):
                link = link.get("url")
            parsed = parse_social_link(link)
            if not parsed:
                continue
            for candidate in state.available(parsed.username):
                if candidate.platform == parsed.platform.value:
                    state.claim(candidate)
                    cluster.attach(candidate, MATCH_SOCIAL_LINK)

        # 2. Same username
        for candidate in state.available(anchor.username):
            state.claim(candidate)
            cluster.attach(candidate, MATCH_USERNAME)

        # 3. Display name with whitespace removed
        compact_name = "".join((anchor.display_name or "").split())
        for candidate in state.available(compact_name):
            state.claim(candidate)
            cluster.attach(candidate, MATCH_DISPLAY_NAME)

        if cluster.satellites:
            logger.debug(
                f"  {anchor.platform}/{anchor.username} ← "
                + ", ".join(f"{s.platform}/{s.username}" for s in cluster.satellites)
            )
        return cluster
