from __future__ import annotations

from qrorder.application.dto.responses import (
    CategoryResponse,
    CustomerMenuResponse,
    MenuItemResponse,
)
from qrorder.application.mappers.order_mapper import to_money_response
from qrorder.domain.common.ids import RestaurantId
from qrorder.domain.menu.entities import Category, MenuItem


def to_customer_menu_response(
    restaurant_id: RestaurantId,
    categories: list[Category],
    items: list[MenuItem],
) -> CustomerMenuResponse:
    return CustomerMenuResponse(
        restaurantId=str(restaurant_id),
        categories=[
            CategoryResponse(
                categoryId=str(category.category_id),
                name=category.name,
                position=category.position,
            )
            for category in sorted(categories, key=lambda category: category.position)
        ],
        items=[
            MenuItemResponse(
                itemId=str(item.item_id),
                name=item.name,
                description=item.description,
                priceMoney=to_money_response(item.price_money),
                isAvailable=item.is_available,
                categoryId=str(item.category_id) if item.category_id else None,
            )
            for item in items
        ],
    )
