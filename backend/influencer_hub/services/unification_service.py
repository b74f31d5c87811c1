# backend/influencer_hub/services/unification_service.py
"""
Unification Service - runs one identity unification pass end to end.

Flow:
1. Load anchor records (streaming platforms) by descending followers
2. Load satellite records (social platforms)
3. Match → clusters
4. Resolve attributes + aggregate each cluster into a unified profile
5. Persist (fresh batched insert or incremental merge)
6. Backfill resolved attributes onto the source records

The pass builds everything in memory before writing. It is best-effort per
record: a failing record is logged and counted, and the pass moves on. Only
losing the database aborts the pass.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple
from datetime import datetime
import logging
import threading

from sqlalchemy import func
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session

from influencer_hub.config import settings
from influencer_hub.database import check_connection
from influencer_hub.exceptions import StoreUnavailableError, UnificationInProgressError
from influencer_hub.models import Platform, SourceProfile, UnifiedIdentity
from influencer_hub.unification.core import (
    AttributeResolver,
    BackfillPropagator,
    Cluster,
    IdentityMatcher,
    MatchState,
    MergeEngine,
    ProfileAggregator,
    ResolvedAttributes,
    UnifiedProfile,
)
from influencer_hub.unification.core.merge import is_connection_error

logger = logging.getLogger(__name__)

# One pass per process; cross-process exclusion is left to the deployment
_pass_lock = threading.Lock()


class UnificationService:
    """Orchestrates matcher → resolver → aggregator → merge → backfill."""

    def __init__(
        self,
        db: Session,
        anchor_platforms: Optional[Sequence[str]] = None,
        satellite_platforms: Optional[Sequence[str]] = None,
        batch_size: Optional[int] = None,
        progress_every: Optional[int] = None
    ):
        self.db = db
        self.anchor_platforms = [
            Platform(p).value for p in (anchor_platforms or settings.ANCHOR_PLATFORMS)
        ]
        self.satellite_platforms = [
            Platform(p).value for p in (satellite_platforms or settings.SATELLITE_PLATFORMS)
        ]
        self.progress_every = progress_every or settings.UNIFICATION_PROGRESS_EVERY

        self.matcher = IdentityMatcher()
        self.resolver = AttributeResolver()
        self.aggregator = ProfileAggregator()
        self.merge_engine = MergeEngine(
            db, batch_size=batch_size or settings.UNIFICATION_INSERT_BATCH_SIZE
        )
        self.backfill = BackfillPropagator(db)

    # ------------------------------------------------------------------ #
    # Pass
    # ------------------------------------------------------------------ #

    def run_pass(self, run_backfill: bool = True) -> Dict[str, Any]:
        """
        Run a full unification pass.

        Returns:
            dict: pass statistics

        Raises:
            StoreUnavailableError: database unreachable, retry the whole pass
            UnificationInProgressError: another pass is running in this process
        """
        if not _pass_lock.acquire(blocking=False):
            raise UnificationInProgressError("A unification pass is already running")
        try:
            return self._run_pass(run_backfill)
        finally:
            _pass_lock.release()

    def _run_pass(self, run_backfill: bool) -> Dict[str, Any]:
        start_time = datetime.utcnow()

        logger.info("=" * 60)
        logger.info("Starting influencer unification pass")
        logger.info("=" * 60)

        check_connection(self.db)

        anchors, satellites = self._load_records()
        logger.info(f"Found {len(anchors)} anchor records ({', '.join(self.anchor_platforms)})")
        logger.info(f"Found {len(satellites)} satellite records ({', '.join(self.satellite_platforms)})")

        # Step 1: Cluster
        state = MatchState(satellites)
        clusters = self.matcher.match(anchors, satellites, state=state)

        # Step 2: Resolve + aggregate
        profiles, resolved_pairs, build_errors = self.build_profiles(clusters)

        # Step 3: Persist
        stats: Dict[str, Any] = {
            "anchors": len(anchors),
            "satellites": len(satellites),
            "clusters": len(clusters),
        }
        stats.update(self.merge_engine.persist(profiles, on_progress=self._log_progress))
        stats["errors"] += state.errors + build_errors

        # Step 4: Backfill
        stats["backfill_writes"] = 0
        if run_backfill:
            try:
                stats["backfill_writes"] = self.backfill.propagate(resolved_pairs)
            except DBAPIError as e:
                self.db.rollback()
                if is_connection_error(e):
                    raise StoreUnavailableError(str(e)) from e
                logger.error(f"Backfill failed: {e}")
                stats["errors"] += 1

        stats["duration_seconds"] = round((datetime.utcnow() - start_time).total_seconds(), 2)

        logger.info("")
        logger.info("─" * 60)
        logger.info("UNIFICATION COMPLETE")
        logger.info(f"  Mode:            {stats['mode']}")
        logger.info(f"  Clusters:        {stats['clusters']}")
        logger.info(f"  Created:         {stats['created']}")
        logger.info(f"  Updated:         {stats['updated']}")
        logger.info(f"  Unchanged:       {stats['unchanged']}")
        logger.info(f"  Skipped:         {stats['skipped']}")
        logger.info(f"  Errors:          {stats['errors']}")
        logger.info(f"  Backfill writes: {stats['backfill_writes']}")

        return stats

    def _load_records(self) -> Tuple[List[SourceProfile], List[SourceProfile]]:
        try:
            anchors = (
                self.db.query(SourceProfile)
                .filter(SourceProfile.platform.in_(self.anchor_platforms))
                .order_by(SourceProfile.followers.desc(), SourceProfile.id)
                .all()
            )
            satellites = (
                self.db.query(SourceProfile)
                .filter(SourceProfile.platform.in_(self.satellite_platforms))
                .order_by(SourceProfile.id)
                .all()
            )
        except DBAPIError as e:
            if is_connection_error(e):
                raise StoreUnavailableError(str(e)) from e
            raise
        return anchors, satellites

    def build_profiles(
        self,
        clusters: List[Cluster]
    ) -> Tuple[List[UnifiedProfile], List[Tuple[Cluster, ResolvedAttributes]], int]:
        """Resolve and aggregate every cluster. Returns (profiles, resolved pairs, errors)."""
        profiles = []
        resolved_pairs = []
        errors = 0

        for cluster in clusters:
            try:
                resolved = self.resolver.resolve(cluster)
                profiles.append(self.aggregator.build(cluster, resolved))
                resolved_pairs.append((cluster, resolved))
            except Exception as e:
                logger.error(f"Error building profile for {cluster.head.platform}/{cluster.head.username}: {e}")
                errors += 1

        return profiles, resolved_pairs, errors

    def _log_progress(self, done: int, total: int) -> None:
        if done % self.progress_every == 0 or done == total:
            logger.info(f"  Progress: {done}/{total} profiles written")

    # ------------------------------------------------------------------ #
    # Stats
    # ------------------------------------------------------------------ #

    def get_stats(self, top: int = 10) -> Dict[str, Any]:
        """Summary of the influencers table."""
        total = self.db.query(func.count(UnifiedIdentity.id)).scalar() or 0

        by_platform_count = {i: 0 for i in range(1, len(Platform) + 1)}
        rows = (
            self.db.query(UnifiedIdentity.platform_count, func.count(UnifiedIdentity.id))
            .group_by(UnifiedIdentity.platform_count)
            .all()
        )
        for platform_count, count in rows:
            if platform_count in by_platform_count:
                by_platform_count[platform_count] = count

        by_platform = {}
        for platform in Platform:
            by_platform[platform.value] = (
                self.db.query(func.count(UnifiedIdentity.id))
                .filter(UnifiedIdentity.id_column(platform).isnot(None))
                .scalar() or 0
            )

        top_by_reach = (
            self.db.query(UnifiedIdentity)
            .order_by(UnifiedIdentity.total_reach.desc())
            .limit(top)
            .all()
        )

        return {
            "total": total,
            "by_platform_count": by_platform_count,
            "by_platform": by_platform,
            "top_by_reach": [
                {
                    "id": i.id,
                    "display_name": i.display_name,
                    "total_reach": i.total_reach,
                    "platform_count": i.platform_count,
                    "usernames": {
                        key: slot["username"]
                        for key, slot in (i.platform_slots or {}).items() if slot
                    },
                }
                for i in top_by_reach
            ],
        }


def create_unification_service(db: Session, **kwargs) -> UnificationService:
    """Factory function"""
    return UnificationService(db, **kwargs)
