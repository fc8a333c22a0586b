"""SQLAlchemy model for the blog user table."""

from sqlalchemy import Column, DateTime, Integer, String, func

from blog_notifications.infrastructure.database import Base


class UserModel(Base):
    """Database representation of a blog user.

    The table is owned by the user service; the notification core only reads
    the columns it needs to address emails and check roles.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), nullable=False, unique=True)
    display_name = Column(String(100), nullable=True)
    email = Column(String(255), nullable=True, index=True)
    role = Column(String(20), nullable=False, default="user")
    status = Column(String(20), nullable=False, default="active")
    created_at = Column(DateTime, nullable=False, server_default=func.now())


__all__ = ["UserModel"]
