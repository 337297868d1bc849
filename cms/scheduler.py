"""
Background Scheduler - Scheduled Post Publishing

Uses APScheduler to publish blog posts whose ``scheduled_for`` time has
passed.

Default Schedule: Every 5 minutes (configurable via PUBLISH_CHECK_INTERVAL_MINUTES)
"""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from cms.config import get_settings
from cms.database import async_session
from cms.middleware.metrics import record_scheduled_publishes
from cms.services.blog import publish_due_posts

logger = logging.getLogger(__name__)

settings = get_settings()
scheduler = AsyncIOScheduler()


async def publish_scheduled_posts() -> int:
    """
    Scheduled task: move due ``scheduled`` posts to ``published``.

    Errors are logged and swallowed so one failed run does not stop the
    schedule.
    """
    try:
        async with async_session() as db:
            count = await publish_due_posts(db)
    except Exception:
        logger.exception("Scheduled publish run failed")
        return 0

    record_scheduled_publishes(count)
    return count


def start_scheduler():
    """Start the background scheduler"""
    scheduler.add_job(
        publish_scheduled_posts,
        trigger=IntervalTrigger(minutes=settings.publish_check_interval_minutes),
        id="publish_scheduled_posts",
        replace_existing=True,
    )
    scheduler.start()
    logger.info(
        f"Scheduler started: publishing due posts every {settings.publish_check_interval_minutes} minutes"
    )


def stop_scheduler():
    """Stop the background scheduler"""
    if scheduler.running:
        scheduler.shutdown()
