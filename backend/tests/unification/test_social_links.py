# tests/unification/test_social_links.py
"""
Tests for social-link parsing

Run with: pytest tests/unification/test_social_links.py -v
"""

import pytest

from influencer_hub.models import Platform
from influencer_hub.unification.core.social_links import ParsedLink, parse_social_link


class TestParseSocialLink:
    """Profile URLs → (platform, username)"""

    @pytest.mark.parametrize("url,platform,username", [
        ("https://www.linkedin.com/in/alice-biz/", Platform.LINKEDIN, "alice-biz"),
        ("https://www.tiktok.com/@alice", Platform.TIKTOK, "alice"),
        ("https://instagram.com/alice.plays", Platform.INSTAGRAM, "alice.plays"),
        ("https://twitter.com/alice_gg", Platform.X, "alice_gg"),
        ("https://x.com/alice_gg", Platform.X, "alice_gg"),
        ("https://facebook.com/alice.page", Platform.FACEBOOK, "alice.page"),
        ("https://www.youtube.com/@AliceGG", Platform.YOUTUBE, "AliceGG"),
        ("https://twitch.tv/alice", Platform.TWITCH, "alice"),
        ("https://kick.com/alice-live", Platform.KICK, "alice-live"),
    ])
    def test_profile_urls(self, url, platform, username):
        assert parse_social_link(url) == ParsedLink(platform, username)

    def test_case_insensitive_domain(self):
        assert parse_social_link("HTTPS://WWW.TIKTOK.COM/@Alice") == ParsedLink(Platform.TIKTOK, "Alice")

    def test_x_pattern_does_not_match_other_domains(self):
        """box.com/... must not be read as an X profile"""
        assert parse_social_link("https://box.com/alice") is None

    @pytest.mark.parametrize("url", [
        "https://instagram.com/p/Cx12ab",
        "https://www.instagram.com/reel/Cx12ab",
        "https://www.facebook.com/profile.php?id=123",
        "https://twitter.com/intent/tweet",
    ])
    def test_non_profile_paths(self, url):
        assert parse_social_link(url) is None

    @pytest.mark.parametrize("url", [None, "", "not a url", "https://example.com/alice", 42])
    def test_unparseable(self, url):
        assert parse_social_link(url) is None
