"""
Pydantic schemas for the unification routes.
"""
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class RunUnificationRequest(BaseModel):
    run_backfill: bool = True
    anchor_platforms: Optional[List[str]] = None
    satellite_platforms: Optional[List[str]] = None


class UnificationRunResponse(BaseModel):
    """Statistics for one unification pass"""
    status: str = "complete"
    anchors: int
    satellites: int
    clusters: int
    mode: str
    created: int
    updated: int
    unchanged: int
    skipped: int
    errors: int
    backfill_writes: int
    duration_seconds: float


class TopIdentity(BaseModel):
    id: str
    display_name: str
    total_reach: int
    platform_count: int
    usernames: Dict[str, str] = Field(default_factory=dict)


class UnificationStatsResponse(BaseModel):
    total: int
    by_platform_count: Dict[int, int]
    by_platform: Dict[str, int]
    top_by_reach: List[TopIdentity]
