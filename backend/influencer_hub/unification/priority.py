"""
Source-priority tables for resolved attributes.

Platforms that expose an attribute as structured data rank above platforms
where it has to be inferred from text, which rank above platforms with no
native signal. Both the attribute resolver and the backfill propagator read
these tables; keep them the only copy.
"""
from typing import Optional, Sequence

from influencer_hub.models import Platform


COUNTRY = "country"
CATEGORY = "category"

# Highest priority first
SOURCE_PRIORITY = {
    COUNTRY: (
        Platform.YOUTUBE,    # channel country field
        Platform.X,          # profile location
        Platform.INSTAGRAM,
        Platform.FACEBOOK,
        Platform.LINKEDIN,
        Platform.TWITCH,     # region guessed from broadcast language
        Platform.KICK,
        Platform.TIKTOK,
    ),
    CATEGORY: (
        Platform.TWITCH,     # game directory
        Platform.KICK,
        Platform.YOUTUBE,    # video category id
        Platform.TIKTOK,
        Platform.INSTAGRAM,
        Platform.X,
        Platform.FACEBOOK,
        Platform.LINKEDIN,
    ),
}

ATTRIBUTES: Sequence[str] = tuple(SOURCE_PRIORITY.keys())

# Rank given to a missing or unrecognised source
UNRANKED = 0


def priority_of(attribute: str, source: Optional[str]) -> int:
    """
    Return the numeric priority of ``source`` for ``attribute``.

    Larger is stronger. Unknown sources get ``UNRANKED``, below every platform.
    """
    table = SOURCE_PRIORITY[attribute]
    if not source:
        return UNRANKED
    try:
        platform = Platform(str(source).upper())
    except ValueError:
        return UNRANKED
    if platform not in table:
        return UNRANKED
    return len(table) - table.index(platform)


def outranks(attribute: str, new_source: Optional[str], current_source: Optional[str]) -> bool:
    """True when ``new_source`` is strictly stronger than ``current_source``."""
    return priority_of(attribute, new_source) > priority_of(attribute, current_source)


# Region names used by ingestion jobs → ISO country codes
REGION_TO_COUNTRY = {
    "MEXICO": "MX",
    "COLOMBIA": "CO",
    "ARGENTINA": "AR",
    "CHILE": "CL",
    "PERU": "PE",
    "VENEZUELA": "VE",
    "ECUADOR": "EC",
    "BRAZIL": "BR",
    "USA": "US",
    "CANADA": "CA",
    "UK": "GB",
    "SPAIN": "ES",
    "GERMANY": "DE",
    "FRANCE": "FR",
    "JAPAN": "JP",
    "KOREA": "KR",
    "WORLDWIDE": None,
    "OTHER": None,
}


def region_to_country(region: Optional[str]) -> Optional[str]:
    if not region:
        return None
    return REGION_TO_COUNTRY.get(region.upper())
