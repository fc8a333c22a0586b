"""Domain entity representing a blog user as seen by the notification core."""

from dataclasses import dataclass


@dataclass
class Recipient:
    """Read-only view of a blog user that can receive notifications."""

    id: int
    display_name: str | None
    email: str | None
    role: str = "user"
    is_active: bool = True

    def is_admin(self) -> bool:
        """Return ``True`` when the user is an administrator."""

        return self.role.lower() == "admin"

    @property
    def name(self) -> str:
        return self.display_name or "User"
