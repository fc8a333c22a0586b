"""Send due email digests. Meant to be triggered by cron, one run per digest type."""

from __future__ import annotations

import argparse
import logging

from sqlalchemy.exc import SQLAlchemyError

from blog_notifications.application.use_cases.digests import DigestDispatcher
from blog_notifications.domain.entities import DigestType
from blog_notifications.infrastructure.database import SessionLocal, initialize_database


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Send the pending daily or weekly digests.")
    parser.add_argument(
        "--type",
        dest="digest_type",
        choices=[digest_type.value for digest_type in DigestType],
        required=True,
        help="Digest kind to process",
    )
    parser.add_argument(
        "--cleanup",
        action="store_true",
        help="Also purge sent queue entries older than the retention window",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    initialize_database()

    session = SessionLocal()
    try:
        dispatcher = DigestDispatcher(session)
        result = dispatcher.run_sweep(args.digest_type)
        removed = dispatcher.cleanup_sent() if args.cleanup else 0
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Digest sweep failed: {exc}") from exc
    finally:
        session.close()

    print(f"Processed: {result.processed}  Failed: {result.failed}  Purged: {removed}")
    if result.failed:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
