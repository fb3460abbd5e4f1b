from __future__ import annotations

from dataclasses import dataclass

from qrorder.domain.common.ids import CategoryId, MenuItemId, RestaurantId
from qrorder.domain.common.money import Money


@dataclass(frozen=True)
class Category:
    category_id: CategoryId
    restaurant_id: RestaurantId
    name: str
    position: int = 0


@dataclass(frozen=True)
class MenuItem:
    item_id: MenuItemId
    restaurant_id: RestaurantId
    name: str
    description: str | None
    price_money: Money
    is_available: bool
    category_id: CategoryId | None = None

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("name must be non-empty")

    def orderable_by(self, restaurant_id: RestaurantId) -> bool:
        return self.is_available and str(self.restaurant_id) == str(restaurant_id)
