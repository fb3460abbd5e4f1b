from __future__ import annotations

from qrorder.application.dto.responses import TrackedOrderResponse
from qrorder.application.errors import OrderNotFoundError
from qrorder.application.mappers.order_mapper import to_tracked_order_response
from qrorder.application.ports.repositories import OrderRepository, RestaurantRepository
from qrorder.domain.order.tracking import is_well_formed, normalize_tracking_code


class TrackOrder:
    """Public lookup by tracking code.

    This is the one read path that ignores tenant scope: knowing the code is
    what grants access to the order.
    """

    def __init__(
        self,
        order_repository: OrderRepository,
        restaurant_repository: RestaurantRepository,
    ) -> None:
        self._order_repository = order_repository
        self._restaurant_repository = restaurant_repository

    def execute(self, tracking_code: str) -> TrackedOrderResponse:
        code = normalize_tracking_code(tracking_code)
        order = self._order_repository.get_by_tracking_code(code) if is_well_formed(code) else None
        if order is None:
            raise OrderNotFoundError(f"no order with tracking code {code}")

        restaurant = self._restaurant_repository.get(order.restaurant_id)
        if restaurant is None:
            raise OrderNotFoundError(f"no order with tracking code {code}")
        return to_tracked_order_response(order, restaurant)
