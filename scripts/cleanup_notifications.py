"""Retention sweep for notifications and sent digest entries."""

from __future__ import annotations

import argparse
import logging

from sqlalchemy.exc import SQLAlchemyError

from blog_notifications.application.use_cases.digests import DigestDispatcher
from blog_notifications.application.use_cases.notifications import cleanup_old_notifications
from blog_notifications.config import get_settings
from blog_notifications.infrastructure.database import SessionLocal, initialize_database


def parse_args() -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Delete expired notifications.")
    parser.add_argument(
        "--days",
        type=int,
        default=settings.notification_retention_days,
        help=f"Notification age in days (default: {settings.notification_retention_days})",
    )
    parser.add_argument(
        "--digest-days",
        type=int,
        default=settings.digest_retention_days,
        help=f"Age of sent digest entries in days (default: {settings.digest_retention_days})",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    initialize_database()

    session = SessionLocal()
    try:
        notifications = cleanup_old_notifications(session, days=args.days)
        digests = DigestDispatcher(session).cleanup_sent(args.digest_days)
    except ValueError as exc:
        raise SystemExit(f"Invalid retention window: {exc}") from exc
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Cleanup failed: {exc}") from exc
    finally:
        session.close()

    print(f"Deleted notifications: {notifications}  Deleted digest entries: {digests}")


if __name__ == "__main__":
    main()
