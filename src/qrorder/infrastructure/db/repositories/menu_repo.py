from __future__ import annotations

from sqlalchemy import Engine, func, select
from sqlalchemy.orm import Session

from qrorder.application.ports.repositories import CatalogRepository
from qrorder.domain.common.ids import CategoryId, MenuItemId, RestaurantId
from qrorder.domain.common.money import Money
from qrorder.domain.menu.entities import Category, MenuItem
from qrorder.infrastructure.db.models.menu import CategoryModel, MenuItemModel
from qrorder.infrastructure.db.session import get_engine


class SqlAlchemyCatalogRepository(CatalogRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def find_available_item(
        self,
        restaurant_id: RestaurantId,
        item_id: MenuItemId,
    ) -> MenuItem | None:
        statement = (
            select(MenuItemModel)
            .where(
                MenuItemModel.id == str(item_id),
                MenuItemModel.restaurant_id == str(restaurant_id),
                MenuItemModel.is_available.is_(True),
            )
            .limit(1)
        )
        with Session(self._engine) as session:
            model = session.execute(statement).scalar_one_or_none()
        return _item_to_domain(model) if model is not None else None

    def list_categories(self, restaurant_id: RestaurantId) -> list[Category]:
        statement = (
            select(CategoryModel)
            .where(CategoryModel.restaurant_id == str(restaurant_id))
            .order_by(CategoryModel.position, CategoryModel.name)
        )
        with Session(self._engine) as session:
            models = session.execute(statement).scalars().all()
        return [
            Category(
                category_id=CategoryId(model.id),
                restaurant_id=RestaurantId(model.restaurant_id),
                name=model.name,
                position=model.position,
            )
            for model in models
        ]

    def list_available_items(
        self,
        restaurant_id: RestaurantId,
        category_id: CategoryId | None = None,
    ) -> list[MenuItem]:
        statement = select(MenuItemModel).where(
            MenuItemModel.restaurant_id == str(restaurant_id),
            MenuItemModel.is_available.is_(True),
        )
        if category_id is not None:
            statement = statement.where(MenuItemModel.category_id == str(category_id))
        statement = statement.order_by(MenuItemModel.created_at.desc(), MenuItemModel.id)
        with Session(self._engine) as session:
            models = session.execute(statement).scalars().all()
        return [_item_to_domain(model) for model in models]

    def count_items(self, restaurant_id: RestaurantId) -> int:
        statement = select(func.count(MenuItemModel.id)).where(
            MenuItemModel.restaurant_id == str(restaurant_id)
        )
        with Session(self._engine) as session:
            return int(session.execute(statement).scalar_one())


def _item_to_domain(model: MenuItemModel) -> MenuItem:
    return MenuItem(
        item_id=MenuItemId(model.id),
        restaurant_id=RestaurantId(model.restaurant_id),
        name=model.name,
        description=model.description,
        price_money=Money(amount_cents=model.price_cents, currency=model.currency),
        is_available=model.is_available,
        category_id=CategoryId(model.category_id) if model.category_id else None,
    )
