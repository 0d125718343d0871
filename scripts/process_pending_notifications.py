"""Run one notification sweep from cron or by hand."""

from __future__ import annotations

import argparse
import logging

from sqlalchemy.exc import SQLAlchemyError

from rallypoint.config import get_settings
from rallypoint.domain.errors import NotificationError
from rallypoint.infrastructure.database import initialize_database
from rallypoint.infrastructure.push import ExpoPushGateway
from rallypoint.scheduler import run_sweep


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Send due reminders and retry pending push notifications once.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (defaults to LOG_LEVEL from the environment)",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    settings = get_settings()
    logging.basicConfig(level=(args.log_level or settings.log_level).upper())

    initialize_database()
    gateway = ExpoPushGateway.from_settings(settings)
    try:
        summary = run_sweep(gateway, settings=settings, feed=None)
    except (NotificationError, SQLAlchemyError) as exc:
        raise SystemExit(f"Notification sweep failed: {exc}") from exc
    finally:
        gateway.close()

    print(
        "Sweep complete:\n"
        f"  Reminders created: {summary.reminders_created}\n"
        f"  Processed: {summary.processed}\n"
        f"  Sent: {summary.sent}\n"
        f"  Failed: {summary.failed}\n"
        f"  Still pending: {summary.pending}"
    )


if __name__ == "__main__":
    main()
