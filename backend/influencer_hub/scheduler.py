"""APScheduler configuration for periodic unification passes."""

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger
import asyncio
import logging

from influencer_hub.config import settings
from influencer_hub.exceptions import StoreUnavailableError, UnificationInProgressError

logger = logging.getLogger(__name__)

# Create scheduler instance
scheduler = AsyncIOScheduler()

UNIFICATION_JOB_ID = "influencer_unification"


def run_unification_job():
    """
    Run one unification pass with its own session.

    Failures are logged; the next scheduled run retries the whole pass.
    """
    from influencer_hub.database import SessionLocal
    from influencer_hub.services.unification_service import create_unification_service

    db = SessionLocal()
    try:
        stats = create_unification_service(db).run_pass()
        logger.info(f"Scheduled unification finished: {stats}")
        return stats
    except UnificationInProgressError:
        logger.warning("Scheduled unification skipped, a pass is already running")
    except StoreUnavailableError as e:
        logger.error(f"Scheduled unification aborted, store unavailable: {e}")
    finally:
        db.close()


async def run_scheduled_unification():
    """Called by APScheduler; the pass itself is blocking, so run it off the event loop."""
    logger.info("Running scheduled influencer unification...")
    await asyncio.to_thread(run_unification_job)


def start_scheduler():
    """
    Initialize and start the APScheduler.

    Jobs:
    - Influencer unification: UNIFICATION_SCHEDULE (cron, default daily at 03:00)
    """
    if scheduler.running:
        logger.info("Scheduler already running")
        return

    scheduler.add_job(
        run_scheduled_unification,
        trigger=CronTrigger.from_crontab(settings.UNIFICATION_SCHEDULE),
        id=UNIFICATION_JOB_ID,
        name="Influencer Unification",
        replace_existing=True,
        max_instances=1,
        coalesce=True
    )
    logger.info(f"✅ Scheduled: Influencer Unification ({settings.UNIFICATION_SCHEDULE})")

    scheduler.start()
    logger.info("✅ APScheduler started successfully!")

    for job in scheduler.get_jobs():
        logger.info(f"   • {job.name}: Next run at {job.next_run_time}")


def stop_scheduler():
    """Stop the scheduler gracefully."""
    if scheduler.running:
        scheduler.shutdown()
        logger.info("Scheduler stopped")
