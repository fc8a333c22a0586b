"""SQLAlchemy model for the email digest queue."""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.sql import expression

from blog_notifications.infrastructure.database import Base


class DigestQueueEntryModel(Base):
    """A notification waiting to be batched into a digest email."""

    __tablename__ = "email_digest_queue"
    __table_args__ = (
        CheckConstraint("digest_type IN ('daily', 'weekly')", name="ck_digest_queue_type"),
        UniqueConstraint(
            "user_id", "notification_id", "digest_type", name="uq_digest_queue_entry"
        ),
        Index("idx_email_digest_queue_scheduled", "scheduled_at", "is_sent"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    notification_id = Column(
        Integer,
        ForeignKey("notifications.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    digest_type = Column(String(10), nullable=False)
    scheduled_at = Column(DateTime, nullable=False)
    is_sent = Column(Boolean, nullable=False, default=False, server_default=expression.false())
    sent_at = Column(DateTime, nullable=True)
    error_message = Column(Text, nullable=True)
    retry_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False)


__all__ = ["DigestQueueEntryModel"]
