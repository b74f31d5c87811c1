# backend/influencer_hub/services/campaign_scoring_service.py
"""
Campaign Scoring Service - analyzes many creators for one campaign type.

Flow per record:
1. Get a derived signal profile (heuristic generator by default)
2. Score with the campaign scoring engine
3. Build insight text
4. Optionally persist the score onto the source record

Records are scored concurrently, bounded by SCORING_MAX_CONCURRENCY. Sync
generators run in worker threads so they overlap like async ones. A record
whose generator or scorer fails is logged, counted and dropped from the
ranking.
"""

from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Union
from datetime import datetime
import asyncio
import inspect
import logging

from sqlalchemy.orm import Session

from influencer_hub.config import settings
from influencer_hub.exceptions import StoreUnavailableError
from influencer_hub.models import SourceProfile
from influencer_hub.scoring.engine import CampaignScoringEngine, ScoreResult
from influencer_hub.scoring.insights import build_insights
from influencer_hub.scoring.signal_generator import HeuristicSignalGenerator
from influencer_hub.scoring.signals import CampaignType, DerivedSignalProfile
from influencer_hub.unification.core.merge import is_connection_error

logger = logging.getLogger(__name__)

GAMBLING_COMPATIBILITY_THRESHOLD = 60

SignalGenerator = Callable[
    [SourceProfile],
    Union[DerivedSignalProfile, Awaitable[DerivedSignalProfile]]
]


class CampaignScoringService:
    """Score, rank and explain creators for a campaign."""

    def __init__(
        self,
        db: Optional[Session] = None,
        generator: Optional[SignalGenerator] = None,
        max_concurrency: Optional[int] = None
    ):
        self.db = db
        self.generator = generator or HeuristicSignalGenerator()
        self.max_concurrency = max_concurrency or settings.SCORING_MAX_CONCURRENCY
        self.engine = CampaignScoringEngine()
        self._generator_is_async = (
            inspect.iscoroutinefunction(self.generator)
            or inspect.iscoroutinefunction(getattr(self.generator, "__call__", None))
        )

    async def analyze_for_campaign(
        self,
        records: Sequence[SourceProfile],
        campaign_type: CampaignType,
        limit: Optional[int] = None,
        persist: bool = False
    ) -> Dict[str, Any]:
        """
        Score records for a campaign type and rank them by score.

        Args:
            records: source records to analyze
            campaign_type: betting, gaming or esports
            limit: analyze at most this many records (in the given order)
            persist: write scores back onto the records (needs a session)

        Returns:
            dict with campaign_type, analyzed, errors and ranked results
        """
        campaign_type = CampaignType(campaign_type)
        limit = limit or settings.SCORING_ANALYZE_LIMIT
        batch = list(records)[:limit]

        logger.info(
            f"Analyzing {len(batch)} creators for {campaign_type.value} campaign "
            f"(concurrency={self.max_concurrency})"
        )

        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def bounded(record: SourceProfile):
            async with semaphore:
                return await self._analyze_one(record, campaign_type)

        outcomes = await asyncio.gather(*(bounded(r) for r in batch))

        analyzed = [o for o in outcomes if o is not None]
        errors = len(outcomes) - len(analyzed)
        analyzed.sort(key=lambda item: item["result"].score, reverse=True)

        persisted = 0
        if persist:
            # Sync session: commit off the event loop
            persisted = await asyncio.to_thread(self._persist, analyzed)

        logger.info(
            f"Campaign analysis complete: {len(analyzed)} scored, {errors} errors, "
            f"{persisted} persisted"
        )

        return {
            "campaign_type": campaign_type.value,
            "analyzed": len(analyzed),
            "errors": errors,
            "persisted": persisted,
            "results": [
                {
                    "streamer_id": item["record"].id,
                    "platform": item["record"].platform,
                    "username": item["record"].username,
                    "display_name": item["record"].display_name,
                    "followers": item["record"].followers,
                    **item["result"].to_dict(),
                    "insights": item["insights"],
                }
                for item in analyzed
            ],
        }

    async def _analyze_one(
        self,
        record: SourceProfile,
        campaign_type: CampaignType
    ) -> Optional[Dict[str, Any]]:
        try:
            profile = await self._generate(record)
            result = self.engine.score(record, campaign_type, profile)
            return {
                "record": record,
                "profile": profile,
                "result": result,
                "insights": build_insights(record, profile, result),
            }
        except Exception as e:
            logger.error(f"Error analyzing {record.platform}/{record.username}: {e}")
            return None

    async def _generate(self, record: SourceProfile) -> DerivedSignalProfile:
        if self._generator_is_async:
            return await self.generator(record)

        # Sync generators may block (model calls), run them in worker threads
        profile = await asyncio.to_thread(self.generator, record)
        if inspect.isawaitable(profile):
            profile = await profile
        return profile

    def _persist(self, analyzed: List[Dict[str, Any]]) -> int:
        if self.db is None:
            logger.warning("persist requested without a database session, skipping")
            return 0

        persisted = 0
        for item in analyzed:
            record = item["record"]
            try:
                self.apply_result(record, item["profile"], item["result"])
                self.db.commit()
                persisted += 1
            except Exception as e:
                self.db.rollback()
                if is_connection_error(e):
                    raise StoreUnavailableError(str(e)) from e
                logger.error(f"Error persisting score for {record.platform}/{record.username}: {e}")

        return persisted

    @staticmethod
    def apply_result(
        record: SourceProfile,
        profile: DerivedSignalProfile,
        result: ScoreResult
    ) -> None:
        """Copy a score and its signals onto the source record."""
        record.igaming_score = round(result.score)
        record.brand_safety_score = profile.brand_safety_score
        record.gambling_compatibility = (
            profile.gambling_propensity is not None
            and profile.gambling_propensity > GAMBLING_COMPATIBILITY_THRESHOLD
        )
        record.conversion_potential = {
            "ctr": result.predictions.ctr,
            "conversion_rate": result.predictions.conversion_rate,
            "roi": result.predictions.roi,
        }
        intelligence = profile.model_dump(mode="json")
        intelligence["campaign_type"] = result.campaign_type
        intelligence["tier"] = result.tier
        intelligence["confidence"] = result.confidence
        intelligence["analyzed_at"] = datetime.utcnow().isoformat()
        record.igaming_intelligence = intelligence


def create_campaign_scoring_service(
    db: Optional[Session] = None,
    generator: Optional[SignalGenerator] = None,
    max_concurrency: Optional[int] = None
) -> CampaignScoringService:
    """Factory function"""
    return CampaignScoringService(db, generator=generator, max_concurrency=max_concurrency)
