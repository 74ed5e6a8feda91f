"""
Background scheduler for periodic tasks.

This module manages background jobs that run on a schedule:
- Prune stale presence heartbeats: every PRESENCE_PRUNE_INTERVAL_MINUTES
"""

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from groupchat.core.config import settings
from groupchat.services.presence import PresenceTracker
import logging

logger = logging.getLogger(__name__)

scheduler = BackgroundScheduler()


def prune_presence_job(presence: PresenceTracker):
    """
    Drop heartbeats older than the presence timeout.

    Pruned users would already count as offline; this only keeps the
    in-memory map from growing with users who left long ago.
    """
    try:
        removed = presence.prune()
        if removed > 0:
            logger.info(f"Presence prune completed: Removed {removed} stale heartbeats")
        else:
            logger.debug("Presence prune completed: No stale heartbeats")
    except Exception as e:
        logger.error(f"Error in prune_presence_job: {str(e)}")


def start_scheduler(presence: PresenceTracker):
    """
    Start the background scheduler.

    This should be called when the FastAPI app starts.
    """
    if not scheduler.running:
        scheduler.add_job(
            prune_presence_job,
            trigger=IntervalTrigger(minutes=settings.PRESENCE_PRUNE_INTERVAL_MINUTES),
            args=[presence],
            id="prune_presence",
            name="Prune stale presence heartbeats",
            replace_existing=True
        )

        scheduler.start()
        logger.info(
            "Background scheduler started. Presence prune scheduled every "
            f"{settings.PRESENCE_PRUNE_INTERVAL_MINUTES} minutes."
        )


def stop_scheduler():
    """
    Stop the background scheduler.

    This should be called when the FastAPI app shuts down.
    """
    if scheduler.running:
        scheduler.shutdown()
        logger.info("Background scheduler stopped.")
