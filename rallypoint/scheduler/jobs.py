"""Periodic sweep of pending notifications and due reminders."""

from __future__ import annotations

import logging

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy.orm import sessionmaker

from rallypoint.application.use_cases.notifications import NotificationPipeline, SweepSummary
from rallypoint.config import Settings, get_settings
from rallypoint.infrastructure.database import SessionLocal
from rallypoint.infrastructure.notifications import ChangeFeed, change_feed
from rallypoint.infrastructure.push import PushGateway

logger = logging.getLogger(__name__)

SWEEP_JOB_ID = "process_pending_notifications"

scheduler = BackgroundScheduler()


def run_sweep(
    gateway: PushGateway,
    *,
    session_factory: sessionmaker = SessionLocal,
    settings: Settings | None = None,
    feed: ChangeFeed | None = change_feed,
) -> SweepSummary:
    """Run one sweep in its own session."""

    session = session_factory()
    try:
        pipeline = NotificationPipeline(
            session, gateway, settings=settings or get_settings(), change_feed=feed
        )
        return pipeline.process_pending()
    finally:
        session.close()


def process_pending_job(gateway: PushGateway) -> None:
    """Scheduler entry point; a failed sweep is logged and retried next tick."""

    try:
        run_sweep(gateway)
    except Exception:
        logger.exception("Scheduled notification sweep failed")


def start_scheduler(gateway: PushGateway, settings: Settings | None = None) -> None:
    """Start the background scheduler with the sweep job."""

    settings = settings or get_settings()
    scheduler.add_job(
        process_pending_job,
        trigger=IntervalTrigger(seconds=settings.sweep_interval_seconds),
        args=[gateway],
        id=SWEEP_JOB_ID,
        name="Process pending notifications",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
    )
    if not scheduler.running:
        scheduler.start()
    logger.info(
        "Notification sweep scheduled every %d second(s)", settings.sweep_interval_seconds
    )


def shutdown_scheduler() -> None:
    """Stop the scheduler without waiting for a running sweep to finish."""

    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Notification sweep scheduler stopped")
