from __future__ import annotations

from sqlalchemy import Engine, select, update
from sqlalchemy.orm import Session

from qrorder.application.ports.repositories import RestaurantRepository
from qrorder.domain.common.ids import RestaurantId
from qrorder.domain.restaurant.entities import Restaurant, RestaurantStatus
from qrorder.infrastructure.db.models.restaurant import RestaurantModel
from qrorder.infrastructure.db.session import get_engine


class SqlAlchemyRestaurantRepository(RestaurantRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def get(self, restaurant_id: RestaurantId) -> Restaurant | None:
        with Session(self._engine) as session:
            model = session.get(RestaurantModel, str(restaurant_id))
        return _to_domain(model) if model is not None else None

    def get_by_slug(self, slug: str) -> Restaurant | None:
        statement = select(RestaurantModel).where(RestaurantModel.slug == slug).limit(1)
        with Session(self._engine) as session:
            model = session.execute(statement).scalar_one_or_none()
        return _to_domain(model) if model is not None else None

    def set_status(self, restaurant_id: RestaurantId, status: RestaurantStatus) -> None:
        statement = (
            update(RestaurantModel)
            .where(RestaurantModel.id == str(restaurant_id))
            .values(status=status.value)
        )
        with Session(self._engine) as session:
            session.execute(statement)
            session.commit()


def _to_domain(model: RestaurantModel) -> Restaurant:
    return Restaurant(
        restaurant_id=RestaurantId(model.id),
        name=model.name,
        slug=model.slug,
        status=RestaurantStatus(model.status),
    )
