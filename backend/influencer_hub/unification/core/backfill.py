"""
Backfill propagator - copies resolved attributes back onto source records.
"""
from typing import Iterable, Tuple
import logging

from sqlalchemy.orm import Session

from influencer_hub.models import SourceProfile
from influencer_hub.unification.core.matcher import Cluster
from influencer_hub.unification.core.resolver import ResolvedAttributes
from influencer_hub.unification.priority import COUNTRY, CATEGORY, outranks


logger = logging.getLogger(__name__)

_INFERRED_FIELDS = {
    COUNTRY: ("inferred_country", "inferred_country_source"),
    CATEGORY: ("inferred_category", "inferred_category_source"),
}


class BackfillPropagator:
    """
    Write a cluster's resolved country, category and tags onto its records.

    A record's inferred value is replaced only when the resolved value's
    source strictly outranks the source stored on the record, so running
    backfill twice on the same data writes nothing the second time.
    """

    def __init__(self, db: Session):
        self.db = db

    def propagate(self, resolved_clusters: Iterable[Tuple[Cluster, ResolvedAttributes]]) -> int:
        """
        Backfill every cluster. Returns the number of fields written.
        """
        writes = 0
        for cluster, resolved in resolved_clusters:
            for record in cluster.members:
                writes += self.apply(record, resolved)

        if writes:
            self.db.commit()
        logger.info(f"Backfill wrote {writes} fields")
        return writes

    @staticmethod
    def apply(record: SourceProfile, resolved: ResolvedAttributes) -> int:
        """Update one record in place. Returns the number of fields changed."""
        writes = 0

        for attribute, (value_field, source_field) in _INFERRED_FIELDS.items():
            candidate = resolved.get(attribute)
            if candidate.value is None:
                continue
            if not outranks(attribute, candidate.source, getattr(record, source_field)):
                continue
            if getattr(record, value_field) != candidate.value:
                setattr(record, value_field, candidate.value)
                writes += 1
            if getattr(record, source_field) != candidate.source:
                setattr(record, source_field, candidate.source)
                writes += 1

        if resolved.tags and set(record.tags or []) != set(resolved.tags):
            record.tags = list(resolved.tags)
            writes += 1

        return writes
