from __future__ import annotations

from qrorder.application.errors import MenuItemUnavailableError, OrderValidationError
from qrorder.application.ports.repositories import CatalogRepository
from qrorder.domain.common.ids import MenuItemId, RestaurantId
from qrorder.domain.order.entities import OrderLine

MAX_LINE_QUANTITY = 999


class CatalogSnapshot:
    """Turns requested menu items into order lines priced from the live catalog.

    Name and unit price are copied at this point and never looked up again,
    so later menu edits do not change orders that were already placed.
    """

    def __init__(self, catalog_repository: CatalogRepository) -> None:
        self._catalog_repository = catalog_repository

    def resolve_line(
        self,
        restaurant_id: RestaurantId,
        menu_item_id: str,
        quantity: int,
    ) -> OrderLine:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise OrderValidationError("quantity must be a positive integer")
        if quantity > MAX_LINE_QUANTITY:
            raise OrderValidationError(f"quantity must not exceed {MAX_LINE_QUANTITY}")
        if not menu_item_id:
            raise OrderValidationError("menuItemId is required")

        menu_item = self._catalog_repository.find_available_item(
            restaurant_id=restaurant_id,
            item_id=MenuItemId(menu_item_id),
        )
        if menu_item is None or not menu_item.orderable_by(restaurant_id):
            raise MenuItemUnavailableError(
                f"menu item {menu_item_id} not found or unavailable, "
                "please refresh the menu and try again"
            )

        return OrderLine(
            menu_item_id=menu_item.item_id,
            name=menu_item.name,
            unit_price=menu_item.price_money,
            quantity=quantity,
        )
