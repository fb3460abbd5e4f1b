from __future__ import annotations

from qrorder.application.dto.responses import (
    MoneyResponse,
    OrderLineResponse,
    OrderResponse,
    RestaurantResponse,
    TrackedOrderResponse,
)
from qrorder.domain.common.money import Money
from qrorder.domain.order.entities import Order
from qrorder.domain.restaurant.entities import Restaurant


def to_money_response(money: Money) -> MoneyResponse:
    return MoneyResponse(amountCents=money.amount_cents, currency=money.currency)


def to_order_response(order: Order) -> OrderResponse:
    return OrderResponse(
        orderId=str(order.order_id),
        restaurantId=str(order.restaurant_id),
        tableNumber=order.table_number,
        status=order.status.value,
        trackingCode=str(order.tracking_code),
        lines=[
            OrderLineResponse(
                menuItemId=str(line.menu_item_id),
                name=line.name,
                quantity=line.quantity,
                unitPrice=to_money_response(line.unit_price),
                lineTotal=to_money_response(line.line_total),
            )
            for line in order.lines
        ],
        total=to_money_response(order.total),
        createdAt=order.created_at,
        updatedAt=order.updated_at,
    )


def to_restaurant_response(restaurant: Restaurant) -> RestaurantResponse:
    return RestaurantResponse(
        restaurantId=str(restaurant.restaurant_id),
        name=restaurant.name,
        slug=restaurant.slug,
        status=restaurant.status.value,
    )


def to_tracked_order_response(order: Order, restaurant: Restaurant) -> TrackedOrderResponse:
    return TrackedOrderResponse(
        order=to_order_response(order),
        restaurant=to_restaurant_response(restaurant),
    )
