from __future__ import annotations

from sqlalchemy import Engine
from sqlalchemy.orm import Session

from qrorder.application.ports.repositories import UserRepository
from qrorder.domain.common.ids import RestaurantId, UserId
from qrorder.domain.identity.entities import CallerRole, UserAccount
from qrorder.infrastructure.db.models.restaurant import UserModel
from qrorder.infrastructure.db.session import get_engine


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def get(self, user_id: UserId) -> UserAccount | None:
        with Session(self._engine) as session:
            model = session.get(UserModel, str(user_id))
        if model is None:
            return None
        return UserAccount(
            user_id=UserId(model.id),
            username=model.username,
            role=CallerRole(model.role),
            is_active=model.is_active,
            restaurant_id=RestaurantId(model.restaurant_id) if model.restaurant_id else None,
        )
