# tests/unification/test_aggregator.py
"""
Tests for ProfileAggregator

Run with: pytest tests/unification/test_aggregator.py -v
"""

import pytest

from influencer_hub.models import Platform
from influencer_hub.unification.core.aggregator import (
    PlatformSnapshot, ProfileAggregator, UnifiedProfile
)
from influencer_hub.unification.core.matcher import Cluster
from influencer_hub.unification.core.resolver import AttributeResolver


@pytest.fixture
def aggregator():
    return ProfileAggregator()


def _build(aggregator, cluster):
    return aggregator.build(cluster, AttributeResolver().resolve(cluster))


class TestBuild:

    def test_slots_and_totals(self, aggregator, make_profile):
        twitch = make_profile("TWITCH", "alice", display_name="Alice", followers=200_000,
                              avatar_url="https://cdn/a.png", profile_url="https://twitch.tv/alice")
        linkedin = make_profile("LINKEDIN", "alice-biz", followers=5_000)

        profile = _build(aggregator, Cluster(head=twitch, satellites=[linkedin]))

        assert profile.display_name == "Alice"
        assert set(profile.slots) == {Platform.TWITCH, Platform.LINKEDIN}
        assert profile.total_reach == 205_000
        assert profile.platform_count == 2
        assert profile.source_streamer_ids == [twitch.id, linkedin.id]
        assert profile.slots[Platform.TWITCH] == PlatformSnapshot(
            id=twitch.id,
            username="alice",
            display_name="Alice",
            followers=200_000,
            avatar="https://cdn/a.png",
            url="https://twitch.tv/alice",
            verified=False,
        )

    def test_display_name_falls_back_to_username(self, aggregator, make_profile):
        record = make_profile("TIKTOK", "nameless", display_name="")

        profile = _build(aggregator, Cluster(head=record, standalone=True))

        assert profile.display_name == "nameless"

    def test_resolved_attributes_copied(self, aggregator, make_profile):
        twitch = make_profile("TWITCH", "alice", primary_category="Slots", tags=["GAMING"])
        youtube = make_profile("YOUTUBE", "alice", region="CHILE", language="es", tags=["CASINO"])

        profile = _build(aggregator, Cluster(head=twitch, satellites=[youtube]))

        assert (profile.country, profile.country_source) == ("CL", "YOUTUBE")
        assert (profile.primary_category, profile.category_source) == ("Slots", "TWITCH")
        assert profile.language == "es"
        assert profile.tags == ["CASINO", "GAMING"]

    def test_slots_as_dict_uses_lowercase_keys(self, aggregator, make_profile):
        record = make_profile("X", "alice", followers=10)

        slots = _build(aggregator, Cluster(head=record)).slots_as_dict()

        assert list(slots) == ["x"]
        assert slots["x"]["followers"] == 10


class TestKeepFirst:
    """Two records from the same platform in one cluster"""

    def test_first_record_kept(self, aggregator, make_profile):
        anchor = make_profile("TWITCH", "alice", followers=100)
        first = make_profile("TIKTOK", "alice", followers=10)
        second = make_profile("TIKTOK", "alice", followers=99_999)

        profile = _build(aggregator, Cluster(head=anchor, satellites=[first, second]))

        assert profile.slots[Platform.TIKTOK].id == first.id
        assert second.id not in profile.source_streamer_ids
        assert profile.total_reach == 110

    def test_add_platform_data_reports_collision(self, make_profile):
        profile = UnifiedProfile(display_name="Alice")
        a = make_profile("TIKTOK", "alice")
        b = make_profile("TIKTOK", "alice2")

        assert ProfileAggregator.add_platform_data(profile, a) is True
        assert ProfileAggregator.add_platform_data(profile, b) is False
        assert profile.platform_count == 1

    def test_snapshot_dict_round_trip(self, make_profile):
        record = make_profile("KICK", "alice", followers=None)
        snapshot = PlatformSnapshot.from_record(record)

        assert snapshot.followers == 0
        assert PlatformSnapshot.from_dict(snapshot.to_dict()) == snapshot
