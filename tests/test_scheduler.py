"""Tests for the periodic sweep job."""

from __future__ import annotations

import logging

from rallypoint.application.use_cases.notifications import NotificationRecordWriter
from rallypoint.scheduler import jobs


def test_run_sweep_uses_its_own_session(seed, session_factory, settings, gateway):
    ana = seed.user("Ana")
    seed.token(ana, "tok-ana")

    writer_session = session_factory()
    try:
        NotificationRecordWriter(writer_session).create_notification(
            type="direct",
            title="Queued",
            content="Left over from an outage",
            data=None,
            created_by=None,
            audience={ana},
        )
    finally:
        writer_session.close()

    summary = jobs.run_sweep(
        gateway, session_factory=session_factory, settings=settings, feed=None
    )

    assert summary.processed == 1
    assert summary.sent == 1
    assert [message.to for message in gateway.messages] == ["tok-ana"]


def test_failed_sweep_is_logged_not_raised(monkeypatch, caplog, gateway):
    def broken_sweep(*args, **kwargs):
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(jobs, "run_sweep", broken_sweep)

    with caplog.at_level(logging.ERROR, logger=jobs.__name__):
        jobs.process_pending_job(gateway)

    assert "Scheduled notification sweep failed" in caplog.text


def test_scheduler_registers_a_single_instance_job(settings, gateway):
    configured = settings.model_copy(update={"sweep_interval_seconds": 3600})
    try:
        jobs.start_scheduler(gateway, configured)
        job = jobs.scheduler.get_job(jobs.SWEEP_JOB_ID)

        assert job is not None
        assert job.max_instances == 1
        assert job.coalesce is True
        assert job.trigger.interval.total_seconds() == 3600
    finally:
        jobs.shutdown_scheduler()

    assert jobs.scheduler.running is False
