"""Read access to the blog user table."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from sqlalchemy.orm import Session

from blog_notifications.domain.entities import Recipient
from blog_notifications.infrastructure.models import UserModel

ACTIVE_STATUS = "active"


class UserRepository:
    """Resolve notification recipients from the user table."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> Recipient | None:
        model = self.session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    def get_map_by_ids(self, user_ids: Iterable[int]) -> dict[int, Recipient]:
        ids = {user_id for user_id in user_ids if user_id}
        if not ids:
            return {}
        query = self.session.query(UserModel).filter(UserModel.id.in_(ids))
        return {model.id: self._to_entity(model) for model in query.all()}

    def list_active_ids(self) -> Sequence[int]:
        query = (
            self.session.query(UserModel.id)
            .filter(UserModel.status == ACTIVE_STATUS)
            .order_by(UserModel.id)
        )
        return [row.id for row in query.all()]

    @staticmethod
    def _to_entity(model: UserModel) -> Recipient:
        return Recipient(
            id=model.id,
            display_name=model.display_name or model.username,
            email=model.email,
            role=model.role or "user",
            is_active=model.status == ACTIVE_STATUS,
        )


__all__ = ["UserRepository"]
