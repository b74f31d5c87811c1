"""
Unification Routes
==================
Trigger a unification pass and read identity-table statistics
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
import logging

from influencer_hub.database import get_db
from influencer_hub.exceptions import StoreUnavailableError, UnificationInProgressError
from influencer_hub.schemas.unification import (
    RunUnificationRequest,
    UnificationRunResponse,
    UnificationStatsResponse,
)
from influencer_hub.services.unification_service import create_unification_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/unification", tags=["Unification"])


@router.post("/run", response_model=UnificationRunResponse)
def run_unification(
    request: Optional[RunUnificationRequest] = None,
    db: Session = Depends(get_db)
):
    """
    Run a unification pass synchronously (waits for completion)

    Returns 409 when a pass is already running in this process and 503 when
    the database is unreachable. A failed pass is safe to re-run.
    """
    request = request or RunUnificationRequest()
    try:
        service = create_unification_service(
            db,
            anchor_platforms=request.anchor_platforms,
            satellite_platforms=request.satellite_platforms,
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    try:
        stats = service.run_pass(run_backfill=request.run_backfill)
    except UnificationInProgressError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except StoreUnavailableError as e:
        logger.error(f"Unification aborted, store unavailable: {e}")
        raise HTTPException(status_code=503, detail="Database unavailable, retry the pass")

    return {"status": "complete", **stats}


@router.get("/stats", response_model=UnificationStatsResponse)
def get_unification_stats(top: int = 10, db: Session = Depends(get_db)):
    """Identity counts by platform and platform count, plus the top identities by reach"""
    return create_unification_service(db).get_stats(top=top)
