"""
Merge engine - writes unified profiles to the influencers table.

Two modes:
- fresh:       table is empty → batched inserts, conflicting rows skipped
- incremental: table has rows → merge into an existing identity sharing any
               platform id, else insert
"""
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Set
import logging
import uuid

from sqlalchemy import func, or_
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.orm import Session

from influencer_hub.exceptions import StoreUnavailableError
from influencer_hub.models import Platform, UnifiedIdentity
from influencer_hub.unification.core.aggregator import PlatformSnapshot, UnifiedProfile
from influencer_hub.unification.priority import COUNTRY, CATEGORY, outranks


logger = logging.getLogger(__name__)

CREATED = "created"
UPDATED = "updated"
UNCHANGED = "unchanged"

_INSERTERS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}


def is_connection_error(error: Exception) -> bool:
    """True for failures that mean the store itself is unreachable."""
    if isinstance(error, OperationalError):
        return True
    return isinstance(error, DBAPIError) and bool(error.connection_invalidated)


class MergeEngine:
    """
    Persist unified profiles without destroying already-linked data.

    Assumes a single writer per pass: the lookup-then-write in incremental
    mode is not safe against a concurrent pass.
    """

    def __init__(self, db: Session, batch_size: int = 500):
        self.db = db
        self.batch_size = batch_size

    # ------------------------------------------------------------------ #
    # Entry point
    # ------------------------------------------------------------------ #

    def is_fresh(self) -> bool:
        return (self.db.query(func.count(UnifiedIdentity.id)).scalar() or 0) == 0

    def persist(
        self,
        profiles: List[UnifiedProfile],
        on_progress: Optional[Callable[[int, int], None]] = None
    ) -> Dict[str, Any]:
        """
        Write all profiles of one pass.

        Returns:
            dict: {"mode", "created", "updated", "unchanged", "skipped", "errors"}
        """
        stats = {
            "mode": "fresh" if self.is_fresh() else "incremental",
            "created": 0,
            "updated": 0,
            "unchanged": 0,
            "skipped": 0,
            "errors": 0,
        }
        logger.info(f"Persisting {len(profiles)} unified profiles ({stats['mode']} mode)")

        if stats["mode"] == "fresh":
            for start in range(0, len(profiles), self.batch_size):
                batch = profiles[start:start + self.batch_size]
                try:
                    inserted = self.insert_batch(batch)
                except Exception as e:
                    self.db.rollback()
                    if is_connection_error(e):
                        raise StoreUnavailableError(str(e)) from e
                    logger.error(f"Batch insert failed at offset {start}: {e}")
                    stats["errors"] += len(batch)
                    continue
                stats["created"] += inserted
                stats["skipped"] += len(batch) - inserted
                if on_progress:
                    on_progress(start + len(batch), len(profiles))
            return stats

        for i, profile in enumerate(profiles, 1):
            try:
                result = self.merge_profile(profile)
                self.db.commit()
                stats[result] += 1
            except Exception as e:
                self.db.rollback()
                if is_connection_error(e):
                    raise StoreUnavailableError(str(e)) from e
                logger.error(f"Error merging {profile.display_name!r}: {e}")
                stats["errors"] += 1
            if on_progress:
                on_progress(i, len(profiles))

        return stats

    # ------------------------------------------------------------------ #
    # Fresh mode
    # ------------------------------------------------------------------ #

    def insert_batch(self, profiles: List[UnifiedProfile]) -> int:
        """Insert a batch, skipping rows that hit a unique key. Returns rows inserted."""
        if not profiles:
            return 0

        dialect = self.db.get_bind().dialect.name
        inserter = _INSERTERS.get(dialect)
        if inserter is None:
            raise RuntimeError(f"Batched insert not supported on dialect {dialect!r}")

        now = datetime.now(timezone.utc)
        rows = [self.to_row(p, now) for p in profiles]
        stmt = (
            inserter(UnifiedIdentity)
            .values(rows)
            .on_conflict_do_nothing()
            .returning(UnifiedIdentity.id)
        )
        inserted = len(self.db.execute(stmt).fetchall())
        self.db.commit()

        if inserted < len(rows):
            logger.info(f"  Skipped {len(rows) - inserted} duplicate rows in batch")
        return inserted

    @staticmethod
    def to_row(profile: UnifiedProfile, now: datetime) -> Dict[str, Any]:
        row = {
            "id": str(uuid.uuid4()),
            "display_name": profile.display_name,
            "country": profile.country,
            "country_source": profile.country_source,
            "primary_category": profile.primary_category,
            "category_source": profile.category_source,
            "language": profile.language,
            "tags": list(profile.tags),
            "platform_slots": profile.slots_as_dict(),
            "total_reach": profile.total_reach,
            "platform_count": profile.platform_count,
            "source_streamer_ids": list(profile.source_streamer_ids),
            "last_verified_at": now,
        }
        for platform in Platform:
            snapshot = profile.slots.get(platform)
            row[f"{platform.slot_key}_id"] = snapshot.id if snapshot else None
        return row

    # ------------------------------------------------------------------ #
    # Incremental mode
    # ------------------------------------------------------------------ #

    def find_matches(self, profile: UnifiedProfile) -> List[UnifiedIdentity]:
        """Stored identities sharing any platform id with the profile, oldest first."""
        conditions = [
            UnifiedIdentity.id_column(platform) == snapshot.id
            for platform, snapshot in profile.slots.items()
        ]
        if not conditions:
            return []
        return (
            self.db.query(UnifiedIdentity)
            .filter(or_(*conditions))
            .order_by(UnifiedIdentity.created_at, UnifiedIdentity.id)
            .all()
        )

    def merge_profile(self, profile: UnifiedProfile) -> str:
        matches = self.find_matches(profile)

        if not matches:
            self.db.add(UnifiedIdentity(**self.to_row(profile, datetime.now(timezone.utc))))
            self.db.flush()
            return CREATED

        existing = matches[0]
        if len(matches) > 1:
            logger.warning(
                f"{profile.display_name!r} matches {len(matches)} stored identities, "
                f"merging into {existing.id}"
            )

        # Record ids already linked to some other stored identity stay there
        linked_elsewhere: Set[str] = set()
        for other in matches[1:]:
            linked_elsewhere.update(other.source_streamer_ids or [])
            linked_elsewhere.update(
                s["id"] for s in (other.platform_slots or {}).values() if s
            )

        changed = self.apply_merge(existing, profile, linked_elsewhere)
        if not changed:
            return UNCHANGED

        existing.last_verified_at = datetime.now(timezone.utc)
        self.db.flush()
        return UPDATED

    @staticmethod
    def apply_merge(
        existing: UnifiedIdentity,
        profile: UnifiedProfile,
        linked_elsewhere: Optional[Set[str]] = None
    ) -> bool:
        """
        Merge ``profile`` into ``existing`` in place. Returns True if anything changed.

        - only empty slots are filled, linked slots are never overwritten
        - source ids are unioned
        - country/category move only to a strictly higher-priority source
        - totals are recomputed from the merged slots
        """
        linked_elsewhere = linked_elsewhere or set()
        changed = False

        slots = dict(existing.platform_slots or {})
        for platform, snapshot in profile.slots.items():
            if slots.get(platform.slot_key) or snapshot.id in linked_elsewhere:
                continue
            slots[platform.slot_key] = snapshot.to_dict()
            setattr(existing, f"{platform.slot_key}_id", snapshot.id)
            changed = True

        source_ids = list(existing.source_streamer_ids or [])
        for source_id in profile.source_streamer_ids:
            if source_id not in source_ids and source_id not in linked_elsewhere:
                source_ids.append(source_id)
                changed = True

        tags = sorted(set(existing.tags or []) | set(profile.tags))
        if tags != sorted(existing.tags or []):
            changed = True

        for attribute, value_field, source_field, value, source in (
            (COUNTRY, "country", "country_source", profile.country, profile.country_source),
            (CATEGORY, "primary_category", "category_source",
             profile.primary_category, profile.category_source),
        ):
            if value is None:
                continue
            current = getattr(existing, value_field)
            if current is None or outranks(attribute, source, getattr(existing, source_field)):
                if current != value or getattr(existing, source_field) != source:
                    setattr(existing, value_field, value)
                    setattr(existing, source_field, source)
                    changed = True

        if existing.language is None and profile.language:
            existing.language = profile.language
            changed = True

        if not changed:
            return False

        existing.platform_slots = slots
        existing.source_streamer_ids = source_ids
        existing.tags = tags
        filled = [PlatformSnapshot.from_dict(s) for s in slots.values() if s]
        existing.total_reach = sum(s.followers for s in filled)
        existing.platform_count = len(filled)
        return True
