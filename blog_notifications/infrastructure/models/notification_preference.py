"""SQLAlchemy model for per-user notification settings."""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.sql import expression

from blog_notifications.domain.entities.notification_preference import (
    DEFAULT_DAILY_DIGEST_TIME,
    DEFAULT_DND_END,
    DEFAULT_DND_START,
    DEFAULT_DND_TIMEZONE,
    DEFAULT_WEEKLY_DIGEST_DAY,
    DEFAULT_WEEKLY_DIGEST_TIME,
)
from blog_notifications.infrastructure.database import Base

_FREQUENCIES = "('realtime', 'daily', 'weekly', 'off')"


def _flag(default: bool) -> Column:
    return Column(
        Boolean,
        nullable=False,
        default=default,
        server_default=expression.true() if default else expression.false(),
    )


class NotificationPreferenceModel(Base):
    """One row per user, created lazily with the defaults below."""

    __tablename__ = "notification_settings"
    __table_args__ = (
        CheckConstraint(f"system_frequency IN {_FREQUENCIES}", name="ck_settings_system_frequency"),
        CheckConstraint(
            f"interaction_frequency IN {_FREQUENCIES}", name="ck_settings_interaction_frequency"
        ),
        CheckConstraint(
            "digest_weekly_day BETWEEN 0 AND 6", name="ck_settings_digest_weekly_day"
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
        index=True,
    )

    system_in_app = _flag(True)
    system_email = _flag(True)
    system_frequency = Column(String(10), nullable=False, default="realtime")

    interaction_in_app = _flag(True)
    interaction_email = _flag(True)
    interaction_frequency = Column(String(10), nullable=False, default="realtime")

    interaction_comment = _flag(True)
    interaction_like = _flag(True)
    interaction_favorite = _flag(True)
    interaction_mention = _flag(True)
    interaction_reply = _flag(True)
    interaction_follow = _flag(True)

    dnd_enabled = _flag(False)
    dnd_start = Column(String(5), nullable=True, default=DEFAULT_DND_START)
    dnd_end = Column(String(5), nullable=True, default=DEFAULT_DND_END)
    dnd_timezone = Column(String(64), nullable=False, default=DEFAULT_DND_TIMEZONE)

    digest_daily_time = Column(String(5), nullable=False, default=DEFAULT_DAILY_DIGEST_TIME)
    digest_weekly_day = Column(Integer, nullable=False, default=DEFAULT_WEEKLY_DIGEST_DAY)
    digest_weekly_time = Column(String(5), nullable=False, default=DEFAULT_WEEKLY_DIGEST_TIME)

    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)


__all__ = ["NotificationPreferenceModel"]
