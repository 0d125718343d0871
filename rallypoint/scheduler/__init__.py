"""Scheduler package for automated tasks."""

from rallypoint.scheduler.jobs import run_sweep, shutdown_scheduler, start_scheduler

__all__ = ["run_sweep", "start_scheduler", "shutdown_scheduler"]
