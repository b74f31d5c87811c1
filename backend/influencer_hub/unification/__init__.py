"""
Identity unification engine.

Turns per-platform creator records into unified cross-platform identities.

Main components:
- core.matcher:    cluster anchor and satellite records
- core.resolver:   pick country/category by source priority, union tags
- core.aggregator: build per-platform slots and aggregated reach
- core.merge:      persist identities (fresh or incremental)
- core.backfill:   copy resolved attributes back onto source records
- priority:        the shared source-priority tables

Usage:
    from influencer_hub.services.unification_service import UnificationService

    service = UnificationService(db)
    stats = service.run_pass()
"""

__all__ = ["core", "priority"]
