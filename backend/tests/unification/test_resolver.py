# tests/unification/test_resolver.py
"""
Tests for AttributeResolver and the source-priority tables

Run with: pytest tests/unification/test_resolver.py -v
"""

import pytest

from influencer_hub.unification.core.matcher import Cluster
from influencer_hub.unification.core.resolver import AttributeResolver
from influencer_hub.unification.priority import (
    COUNTRY, CATEGORY, UNRANKED, outranks, priority_of, region_to_country
)


@pytest.fixture
def resolver():
    return AttributeResolver()


# ============================================================================
# TEST: Priority tables
# ============================================================================

class TestPriority:

    def test_country_order(self):
        assert outranks(COUNTRY, "YOUTUBE", "X")
        assert outranks(COUNTRY, "X", "TWITCH")
        assert outranks(COUNTRY, "TWITCH", "TIKTOK")
        assert not outranks(COUNTRY, "TIKTOK", "YOUTUBE")

    def test_category_order(self):
        assert outranks(CATEGORY, "TWITCH", "YOUTUBE")
        assert outranks(CATEGORY, "YOUTUBE", "TIKTOK")
        assert not outranks(CATEGORY, "LINKEDIN", "FACEBOOK")

    def test_equal_sources_do_not_outrank(self):
        assert not outranks(COUNTRY, "YOUTUBE", "YOUTUBE")

    @pytest.mark.parametrize("source", [None, "", "MYSPACE"])
    def test_unknown_sources_rank_lowest(self, source):
        assert priority_of(COUNTRY, source) == UNRANKED
        assert outranks(COUNTRY, "TIKTOK", source)
        assert not outranks(COUNTRY, source, "TIKTOK")

    def test_source_is_case_insensitive(self):
        assert priority_of(COUNTRY, "youtube") == priority_of(COUNTRY, "YOUTUBE")

    def test_region_to_country(self):
        assert region_to_country("Mexico") == "MX"
        assert region_to_country("UK") == "GB"
        assert region_to_country("WORLDWIDE") is None
        assert region_to_country(None) is None
        assert region_to_country("ATLANTIS") is None


# ============================================================================
# TEST: Resolution
# ============================================================================

class TestResolve:

    def test_highest_priority_source_wins(self, resolver, make_profile):
        twitch = make_profile("TWITCH", "alice", region="USA", primary_category="Just Chatting")
        youtube = make_profile("YOUTUBE", "alice", region="MEXICO", primary_category="Gaming")

        resolved = resolver.resolve(Cluster(head=twitch, satellites=[youtube]))

        assert (resolved.country.value, resolved.country.source) == ("MX", "YOUTUBE")
        assert (resolved.category.value, resolved.category.source) == ("Just Chatting", "TWITCH")

    def test_equal_priority_keeps_first(self, resolver, make_profile):
        first = make_profile("TWITCH", "a", inferred_country="US", inferred_country_source="X")
        second = make_profile("TWITCH", "b", inferred_country="CA", inferred_country_source="X")

        resolved = resolver.resolve(Cluster(head=first, satellites=[second]))

        assert resolved.country.value == "US"

    def test_inferred_value_beats_weaker_native(self, resolver, make_profile):
        """A value resolved from YOUTUBE earlier survives a pass with only TWITCH data"""
        twitch = make_profile(
            "TWITCH", "alice", region="USA",
            inferred_country="MX", inferred_country_source="YOUTUBE"
        )

        resolved = resolver.resolve(Cluster(head=twitch))

        assert resolved.country.value == "MX"
        assert resolved.country.source == "YOUTUBE"

    def test_no_candidates(self, resolver, make_profile):
        record = make_profile("TIKTOK", "quiet", region=None)

        resolved = resolver.resolve(Cluster(head=record, standalone=True))

        assert resolved.country.value is None
        assert resolved.country.source is None
        assert resolved.category.value is None

    def test_tags_union_sorted(self, resolver, make_profile):
        a = make_profile("TWITCH", "a", tags=["GAMING", "FPS"])
        b = make_profile("TIKTOK", "a", tags=["FPS", "IRL", None])

        resolved = resolver.resolve(Cluster(head=a, satellites=[b]))

        assert resolved.tags == ["FPS", "GAMING", "IRL"]

    def test_resolution_is_monotonic_across_passes(self, resolver, make_profile):
        """Adding a weaker candidate never moves the resolved source down"""
        youtube = make_profile("YOUTUBE", "alice", region="BRAZIL")
        first = resolver.resolve(Cluster(head=youtube))

        tiktok = make_profile("TIKTOK", "alice", region="USA")
        second = resolver.resolve(Cluster(head=youtube, satellites=[tiktok]))

        assert priority_of(COUNTRY, second.country.source) >= priority_of(COUNTRY, first.country.source)
        assert second.country.value == "BR"
