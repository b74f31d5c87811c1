# backend/influencer_hub/models.py
"""
SQLAlchemy ORM models.

Two tables:
1. streamers   - per-platform creator records written by ingestion jobs
2. influencers - unified cross-platform identities written by the unification pass
"""

import enum
import uuid

from sqlalchemy import (
    Column, String, Boolean, Integer, BigInteger, Float, JSON, TIMESTAMP,
    CheckConstraint, UniqueConstraint, Index
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.sql import func

from influencer_hub.database import Base


# JSONB on Postgres, plain JSON everywhere else (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


def _uuid_str() -> str:
    return str(uuid.uuid4())


class Platform(str, enum.Enum):
    """Platforms a creator record can come from."""
    TWITCH = "TWITCH"
    YOUTUBE = "YOUTUBE"
    KICK = "KICK"
    TIKTOK = "TIKTOK"
    INSTAGRAM = "INSTAGRAM"
    X = "X"
    FACEBOOK = "FACEBOOK"
    LINKEDIN = "LINKEDIN"

    @property
    def slot_key(self) -> str:
        """Key used for this platform in slot dicts and id column names."""
        return self.value.lower()


PLATFORM_VALUES = tuple(p.value for p in Platform)


# ============================================================================
# SOURCE PROFILES
# ============================================================================

class SourceProfile(Base):
    """One creator account on one platform."""
    __tablename__ = "streamers"

    id = Column(String(36), primary_key=True, default=_uuid_str)
    platform = Column(String(20), nullable=False, index=True)
    username = Column(String(255), nullable=False)
    display_name = Column(String(255), nullable=False, default="")
    followers = Column(BigInteger, nullable=False, default=0)
    avatar_url = Column(String(1024))
    profile_url = Column(String(1024))
    language = Column(String(20))
    region = Column(String(50))
    tags = Column(JSONType, default=list)
    social_links = Column(JSONType, default=list)
    primary_category = Column(String(100))
    current_game = Column(String(255))

    # Attributes inferred for this record, plus the platform that supplied them
    inferred_country = Column(String(10))
    inferred_country_source = Column(String(20))
    inferred_category = Column(String(100))
    inferred_category_source = Column(String(20))

    # Signals read by the heuristic signal generator
    fraud_check = Column(String(20), default="PENDING")
    is_live = Column(Boolean, default=False)
    last_streamed = Column(TIMESTAMP(timezone=True))

    # Campaign scoring outputs
    igaming_score = Column(Integer)
    brand_safety_score = Column(Float)
    gambling_compatibility = Column(Boolean)
    conversion_potential = Column(JSONType)
    igaming_intelligence = Column(JSONType)

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("platform", "username", name="uq_streamer_platform_username"),
        CheckConstraint("followers >= 0", name="chk_streamer_followers"),
        Index("idx_streamer_platform_followers", "platform", "followers"),
    )

    @property
    def platform_enum(self) -> Platform:
        return Platform(self.platform)

    def __repr__(self):
        return f"<SourceProfile(id={self.id}, platform={self.platform}, username='{self.username}')>"


# ============================================================================
# UNIFIED IDENTITIES
# ============================================================================

class UnifiedIdentity(Base):
    """
    Cross-platform profile for one real creator or organization.

    Per-platform snapshots live in ``platform_slots`` keyed by lower-case
    platform name; each snapshot's ``id`` is mirrored into the matching
    ``<platform>_id`` column so identities can be looked up by any
    platform identifier.
    """
    __tablename__ = "influencers"

    id = Column(String(36), primary_key=True, default=_uuid_str)
    display_name = Column(String(255), nullable=False)

    country = Column(String(10))
    country_source = Column(String(20))
    primary_category = Column(String(100))
    category_source = Column(String(20))
    language = Column(String(20))
    tags = Column(JSONType, default=list)

    platform_slots = Column(JSONType, default=dict)
    # Example: {
    #   "twitch": {"id": "...", "username": "alice", "display_name": "Alice",
    #              "followers": 200000, "avatar": None, "url": "...", "verified": False}
    # }

    twitch_id = Column(String(36), unique=True, index=True)
    youtube_id = Column(String(36), unique=True, index=True)
    kick_id = Column(String(36), unique=True, index=True)
    tiktok_id = Column(String(36), unique=True, index=True)
    instagram_id = Column(String(36), unique=True, index=True)
    x_id = Column(String(36), unique=True, index=True)
    facebook_id = Column(String(36), unique=True, index=True)
    linkedin_id = Column(String(36), unique=True, index=True)

    # Aggregated
    total_reach = Column(BigInteger, nullable=False, default=0)
    platform_count = Column(Integer, nullable=False, default=0)
    source_streamer_ids = Column(JSONType, default=list)
    last_verified_at = Column(TIMESTAMP(timezone=True))

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        Index("idx_influencer_total_reach", "total_reach"),
    )

    @classmethod
    def id_column(cls, platform: Platform):
        """Return the ``<platform>_id`` column attribute for a platform."""
        return getattr(cls, f"{platform.slot_key}_id")

    def __repr__(self):
        return (
            f"<UnifiedIdentity(id={self.id}, name='{self.display_name}', "
            f"platforms={self.platform_count}, reach={self.total_reach})>"
        )
