"""Send due digest queue entries as one batched email per user."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FuturesTimeoutError
from dataclasses import dataclass
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from blog_notifications.config import get_settings
from blog_notifications.domain.entities import (
    DigestQueueEntry,
    DigestType,
    Notification,
    Recipient,
)
from blog_notifications.infrastructure.email import EmailSender, render_digest_email, send_email
from blog_notifications.infrastructure.repositories import DigestQueueRepository, UserRepository
from blog_notifications.utils import now_in_app_timezone

logger = logging.getLogger(__name__)

# One sweep per digest type at a time within this process.
_SWEEP_LOCKS = {digest_type: threading.Lock() for digest_type in DigestType}


@dataclass(frozen=True)
class SweepResult:
    processed: int = 0
    failed: int = 0


@dataclass
class _UserDigest:
    user_id: int
    queue_ids: list[int]
    notifications: list[Notification]


class DigestSendError(RuntimeError):
    """Raised when a digest group could not be handed to the email transport."""


class DigestDispatcher:
    """Run digest sweeps and maintain the digest queue."""

    def __init__(
        self,
        session: Session,
        *,
        clock: Callable[[], datetime] = now_in_app_timezone,
        email_sender: EmailSender = send_email,
        send_timeout: float | None = None,
    ) -> None:
        self.session = session
        self.clock = clock
        self.email_sender = email_sender
        self.send_timeout = (
            send_timeout if send_timeout is not None else get_settings().digest_send_timeout_seconds
        )
        self.queue = DigestQueueRepository(session)
        self.users = UserRepository(session)

    def run_sweep(self, digest_type: DigestType | str) -> SweepResult:
        """Send every due, unsent entry of ``digest_type``.

        Each user group succeeds or fails on its own. Failed rows stay pending
        and are picked up again by the next sweep.
        """

        digest_type = DigestType(digest_type)
        lock = _SWEEP_LOCKS[digest_type]
        if not lock.acquire(blocking=False):
            logger.warning("A %s digest sweep is already running; skipping", digest_type.value)
            return SweepResult()
        try:
            return self._sweep(digest_type)
        finally:
            lock.release()

    def _sweep(self, digest_type: DigestType) -> SweepResult:
        now = self.clock()
        groups = self._group_by_user(self.queue.list_due(digest_type, now))
        if not groups:
            return SweepResult()

        recipients = self.users.get_map_by_ids(group.user_id for group in groups)
        processed = failed = 0
        for group in groups:
            try:
                self._send_group(group, recipients.get(group.user_id), digest_type)
            except Exception as exc:
                failed += len(group.queue_ids)
                self._record_failure(group, exc)
                continue

            try:
                self.queue.mark_group_sent(
                    group.queue_ids,
                    [notification.id for notification in group.notifications],
                    sent_at=now,
                )
            except Exception as exc:
                logger.exception(
                    "Digest for user %s was sent but could not be marked as sent", group.user_id
                )
                failed += len(group.queue_ids)
                self._record_failure(group, exc)
                continue
            processed += len(group.queue_ids)

        logger.info(
            "%s digest sweep finished: %s processed, %s failed",
            digest_type.value.capitalize(),
            processed,
            failed,
        )
        return SweepResult(processed=processed, failed=failed)

    @staticmethod
    def _group_by_user(
        rows: Sequence[tuple[DigestQueueEntry, Notification]],
    ) -> list[_UserDigest]:
        groups: dict[int, _UserDigest] = {}
        for entry, notification in rows:
            group = groups.setdefault(
                entry.user_id, _UserDigest(user_id=entry.user_id, queue_ids=[], notifications=[])
            )
            group.queue_ids.append(entry.id)
            group.notifications.append(notification)
        return list(groups.values())

    def _send_group(
        self, group: _UserDigest, recipient: Recipient | None, digest_type: DigestType
    ) -> None:
        if recipient is None or not recipient.email:
            raise DigestSendError("Recipient has no email address")

        subject, html_content = render_digest_email(recipient, group.notifications, digest_type)
        if not self._send_with_timeout(recipient, subject, html_content):
            raise DigestSendError("Email delivery failed")

    def _send_with_timeout(self, recipient: Recipient, subject: str, html_content: str) -> bool:
        executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="digest-send")
        try:
            future = executor.submit(self.email_sender, recipient, subject, html_content)
            try:
                return bool(future.result(timeout=self.send_timeout))
            except FuturesTimeoutError:
                raise DigestSendError(
                    f"Email send timed out after {self.send_timeout:g} seconds"
                ) from None
        finally:
            executor.shutdown(wait=False)

    def _record_failure(self, group: _UserDigest, exc: Exception) -> None:
        reason = str(exc) or exc.__class__.__name__
        logger.warning("Digest for user %s failed: %s", group.user_id, reason)
        try:
            self.queue.record_failure(group.queue_ids, reason)
        except Exception:
            self.session.rollback()
            logger.exception("Could not record digest failure for user %s", group.user_id)

    def cleanup_sent(self, days: int | None = None) -> int:
        """Delete sent queue rows older than ``days`` (retention setting by default)."""

        if days is None:
            days = get_settings().digest_retention_days
        if days <= 0:
            raise ValueError("days must be positive")
        deleted = self.queue.delete_sent_before(self.clock() - timedelta(days=days))
        logger.info("Removed %s sent digest entries older than %s days", deleted, days)
        return deleted

    def stats(self) -> dict[str, dict[str, int]]:
        return self.queue.count_by_status()


__all__ = ["DigestDispatcher", "DigestSendError", "SweepResult"]
