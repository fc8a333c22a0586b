"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    JSON,
    String,
    Text,
)
from sqlalchemy.sql import expression

from blog_notifications.infrastructure.database import Base
from blog_notifications.utils import ensure_app_naive_datetime, now_in_app_timezone


def _now_naive():
    return ensure_app_naive_datetime(now_in_app_timezone())


class NotificationModel(Base):
    """Database representation for user notifications."""

    __tablename__ = "notifications"
    __table_args__ = (
        CheckConstraint("type IN ('system', 'interaction')", name="ck_notifications_type"),
        Index("idx_notifications_user_read", "user_id", "is_read"),
        Index("idx_notifications_user_type", "user_id", "type"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    type = Column(String(20), nullable=False)
    subtype = Column(String(20), nullable=True)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=True)
    related_data = Column(JSON, nullable=True)
    is_in_app_sent = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    is_email_sent = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )
    is_read = Column(Boolean, nullable=False, default=False, server_default=expression.false())
    read_at = Column(DateTime, nullable=True)
    deleted_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=_now_naive, index=True)


__all__ = ["NotificationModel"]
