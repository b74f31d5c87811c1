# tests/unification/test_matcher.py
"""
Tests for IdentityMatcher

Coverage:
- Matching keys (social link, username, compact display name)
- First-claim-wins across anchors
- Standalone satellites
- Every record lands in exactly one cluster
- Per-anchor error isolation

Run with: pytest tests/unification/test_matcher.py -v
"""

import pytest
from unittest.mock import patch

from influencer_hub.unification.core.matcher import (
    IdentityMatcher,
    MatchState,
    MATCH_SOCIAL_LINK,
    MATCH_USERNAME,
    MATCH_DISPLAY_NAME,
)


@pytest.fixture
def matcher():
    return IdentityMatcher()


def _cluster_of(clusters, record):
    found = [c for c in clusters if record in c.members]
    assert len(found) == 1
    return found[0]


# ============================================================================
# TEST: Matching keys
# ============================================================================

class TestMatchingKeys:

    def test_social_link_match(self, matcher, make_profile):
        """Scenario: anchor links to a LinkedIn profile with a different username"""
        anchor = make_profile(
            "TWITCH", "alice", followers=200_000,
            social_links=["https://www.linkedin.com/in/alice-biz/"]
        )
        linkedin = make_profile("LINKEDIN", "alice-biz", followers=5_000)

        clusters = matcher.match([anchor], [linkedin])

        assert len(clusters) == 1
        assert clusters[0].head is anchor
        assert clusters[0].satellites == [linkedin]
        assert clusters[0].match_keys[linkedin.id] == MATCH_SOCIAL_LINK

    def test_social_link_dict_entries(self, matcher, make_profile):
        anchor = make_profile(
            "YOUTUBE", "alicegg",
            social_links=[{"platform": "tiktok", "url": "https://tiktok.com/@alice_tt"}]
        )
        tiktok = make_profile("TIKTOK", "alice_tt")

        clusters = matcher.match([anchor], [tiktok])

        assert clusters[0].satellites == [tiktok]

    def test_social_link_requires_matching_platform(self, matcher, make_profile):
        """A link to instagram.com/bob does not claim bob's TikTok"""
        anchor = make_profile("TWITCH", "alice", social_links=["https://instagram.com/bob"])
        tiktok_bob = make_profile("TIKTOK", "bob")

        clusters = matcher.match([anchor], [tiktok_bob])

        assert clusters[0].satellites == []
        assert _cluster_of(clusters, tiktok_bob).standalone

    def test_username_match_case_insensitive(self, matcher, make_profile):
        anchor = make_profile("TWITCH", "Alice")
        instagram = make_profile("INSTAGRAM", "alice")

        clusters = matcher.match([anchor], [instagram])

        assert clusters[0].satellites == [instagram]
        assert clusters[0].match_keys[instagram.id] == MATCH_USERNAME

    def test_display_name_match(self, matcher, make_profile):
        anchor = make_profile("KICK", "ag_live", display_name="Alice Gamer")
        x = make_profile("X", "alicegamer")

        clusters = matcher.match([anchor], [x])

        assert clusters[0].satellites == [x]
        assert clusters[0].match_keys[x.id] == MATCH_DISPLAY_NAME

    def test_all_keys_in_one_cluster(self, matcher, make_profile):
        anchor = make_profile(
            "TWITCH", "alice", display_name="Alice GG",
            social_links=["https://www.linkedin.com/in/alice-biz/"]
        )
        linkedin = make_profile("LINKEDIN", "alice-biz")
        tiktok = make_profile("TIKTOK", "alice")
        x = make_profile("X", "AliceGG")

        clusters = matcher.match([anchor], [linkedin, tiktok, x])

        assert len(clusters) == 1
        assert clusters[0].match_keys == {
            linkedin.id: MATCH_SOCIAL_LINK,
            tiktok.id: MATCH_USERNAME,
            x.id: MATCH_DISPLAY_NAME,
        }


# ============================================================================
# TEST: Claims and ordering
# ============================================================================

class TestClaims:

    def test_higher_followers_anchor_wins(self, matcher, make_profile):
        """Two anchors share a username; the bigger one claims the satellite"""
        small = make_profile("KICK", "alice", followers=1_000)
        big = make_profile("TWITCH", "alice", followers=200_000)
        tiktok = make_profile("TIKTOK", "alice")

        clusters = matcher.match([small, big], [tiktok])

        assert _cluster_of(clusters, tiktok).head is big
        assert _cluster_of(clusters, small).satellites == []

    def test_equal_followers_keep_input_order(self, matcher, make_profile):
        first = make_profile("TWITCH", "alice", followers=500)
        second = make_profile("YOUTUBE", "alice", followers=500)
        tiktok = make_profile("TIKTOK", "alice")

        clusters = matcher.match([first, second], [tiktok])

        assert _cluster_of(clusters, tiktok).head is first

    def test_satellite_claimed_once(self, matcher, make_profile):
        """Link from one anchor and username from another: first claim wins"""
        big = make_profile("TWITCH", "streamer_one", followers=9_000,
                           social_links=["https://x.com/shared"])
        small = make_profile("YOUTUBE", "shared", followers=10)
        x = make_profile("X", "shared")

        clusters = matcher.match([small, big], [x])

        assert _cluster_of(clusters, x).head is big

    def test_unclaimed_satellites_are_standalone(self, matcher, make_profile):
        anchor = make_profile("TWITCH", "alice")
        loner = make_profile("INSTAGRAM", "someone_else")

        clusters = matcher.match([anchor], [loner])

        standalone = [c for c in clusters if c.standalone]
        assert len(standalone) == 1
        assert standalone[0].head is loner
        assert standalone[0].satellites == []

    def test_every_record_in_exactly_one_cluster(self, matcher, make_profile):
        anchors = [
            make_profile("TWITCH", "alice", followers=300),
            make_profile("YOUTUBE", "alice", followers=200),
            make_profile("KICK", "bob", followers=100),
        ]
        satellites = [
            make_profile("TIKTOK", "alice"),
            make_profile("INSTAGRAM", "alice"),
            make_profile("X", "bob"),
            make_profile("FACEBOOK", "carol"),
        ]

        clusters = matcher.match(anchors, satellites)

        seen = [r.id for c in clusters for r in c.members]
        assert sorted(seen) == sorted(r.id for r in anchors + satellites)

    def test_satellites_without_username_are_standalone(self, matcher, make_profile):
        anchor = make_profile("TWITCH", "alice")
        blank = make_profile("TIKTOK", "placeholder")
        blank.username = ""

        clusters = matcher.match([anchor], [blank])

        assert _cluster_of(clusters, blank).standalone


# ============================================================================
# TEST: Pass state and errors
# ============================================================================

class TestMatchState:

    def test_state_is_per_pass(self, matcher, make_profile):
        anchor = make_profile("TWITCH", "alice")
        tiktok = make_profile("TIKTOK", "alice")

        first = matcher.match([anchor], [tiktok])
        second = matcher.match([anchor], [tiktok])

        assert first[0].satellites == [tiktok]
        assert second[0].satellites == [tiktok]

    def test_available_excludes_claimed(self, make_profile):
        tiktok = make_profile("TIKTOK", "alice")
        state = MatchState([tiktok])

        assert state.available("ALICE") == [tiktok]
        state.claim(tiktok)
        assert state.available("alice") == []
        assert state.unclaimed() == []

    def test_anchor_error_is_counted_and_skipped(self, matcher, make_profile):
        good = make_profile("TWITCH", "good", followers=10)
        bad = make_profile("TWITCH", "bad", followers=20)
        state = MatchState([])

        original = matcher._build_cluster

        def flaky(anchor, st):
            if anchor is bad:
                raise RuntimeError("boom")
            return original(anchor, st)

        with patch.object(matcher, "_build_cluster", side_effect=flaky):
            clusters = matcher.match([good, bad], [], state=state)

        assert [c.head for c in clusters] == [good]
        assert state.errors == 1
