"""
Parse raw social-link URLs into (platform, username) pairs.
"""
import re
from typing import NamedTuple, Optional

from influencer_hub.models import Platform


class ParsedLink(NamedTuple):
    platform: Platform
    username: str


# Order matters: the first pattern that matches wins
_LINK_PATTERNS = [
    (re.compile(r'tiktok\.com/@?([a-zA-Z0-9_.]+)', re.IGNORECASE), Platform.TIKTOK),
    (re.compile(r'instagram\.com/([a-zA-Z0-9_.]+)', re.IGNORECASE), Platform.INSTAGRAM),
    (re.compile(r'(?:^|[/.])(?:twitter|x)\.com/([a-zA-Z0-9_]+)', re.IGNORECASE), Platform.X),
    (re.compile(r'facebook\.com/([a-zA-Z0-9_.]+)', re.IGNORECASE), Platform.FACEBOOK),
    (re.compile(r'linkedin\.com/in/([a-zA-Z0-9_-]+)', re.IGNORECASE), Platform.LINKEDIN),
    # Anchor platforms: parsed for completeness, never matched (only anchor links are followed)
    (re.compile(r'youtube\.com/@([a-zA-Z0-9_.-]+)', re.IGNORECASE), Platform.YOUTUBE),
    (re.compile(r'twitch\.tv/([a-zA-Z0-9_]+)', re.IGNORECASE), Platform.TWITCH),
    (re.compile(r'kick\.com/([a-zA-Z0-9_-]+)', re.IGNORECASE), Platform.KICK),
]

# Path segments that look like usernames but are site sections
_RESERVED_SEGMENTS = {
    'p', 'reel', 'reels', 'explore', 'share', 'watch', 'channel',
    'company', 'intent', 'home', 'hashtag', 'stories', 'videos',
    'profile.php',
}


def parse_social_link(url: Optional[str]) -> Optional[ParsedLink]:
    """
    Return the platform and username a profile URL points at.

    Example:
      "https://www.linkedin.com/in/alice-biz/" → ParsedLink(LINKEDIN, "alice-biz")
      "https://instagram.com/p/Cx12ab"         → None (post, not a profile)
    """
    if not url or not isinstance(url, str):
        return None

    for pattern, platform in _LINK_PATTERNS:
        match = pattern.search(url.strip())
        if match:
            username = match.group(1).rstrip('.')
            if not username or username.lower() in _RESERVED_SEGMENTS:
                return None
            return ParsedLink(platform, username)
    return None
