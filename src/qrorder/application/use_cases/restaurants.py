from __future__ import annotations

import logging

from qrorder.application.dto.responses import RestaurantResponse
from qrorder.application.errors import (
    OrderValidationError,
    RestaurantNotFoundError,
    RestaurantUnavailableError,
    TenantAccessDeniedError,
)
from qrorder.application.mappers.order_mapper import to_restaurant_response
from qrorder.application.ports.repositories import RestaurantRepository
from qrorder.domain.common.ids import RestaurantId
from qrorder.domain.identity.entities import TenantContext
from qrorder.domain.restaurant.entities import (
    Restaurant,
    RestaurantBlockedError,
    RestaurantStatus,
)

logger = logging.getLogger(__name__)


def ensure_restaurant_open(restaurant: Restaurant) -> Restaurant:
    try:
        restaurant.ensure_active()
    except RestaurantBlockedError as exc:
        raise RestaurantUnavailableError(
            "restaurant is currently blocked and cannot accept orders"
        ) from exc
    return restaurant


def load_active_restaurant(
    restaurant_repository: RestaurantRepository,
    restaurant_id: RestaurantId,
) -> Restaurant:
    restaurant = restaurant_repository.get(restaurant_id)
    if restaurant is None:
        raise RestaurantNotFoundError(f"restaurant {restaurant_id} not found")
    return ensure_restaurant_open(restaurant)


class GetPublicRestaurant:
    """Resolves the slug printed in a table QR code."""

    def __init__(self, restaurant_repository: RestaurantRepository) -> None:
        self._restaurant_repository = restaurant_repository

    def execute(self, slug: str) -> RestaurantResponse:
        normalized = slug.strip().lower()
        restaurant = self._restaurant_repository.get_by_slug(normalized)
        if restaurant is None:
            raise RestaurantNotFoundError(f"restaurant {normalized} not found")
        return to_restaurant_response(ensure_restaurant_open(restaurant))


class SetRestaurantStatus:
    def __init__(self, restaurant_repository: RestaurantRepository) -> None:
        self._restaurant_repository = restaurant_repository

    def execute(
        self,
        tenant: TenantContext | None,
        restaurant_id: RestaurantId,
        status: str,
    ) -> RestaurantResponse:
        if tenant is None or not tenant.is_platform_admin:
            raise TenantAccessDeniedError("platform admin privileges required")
        try:
            new_status = RestaurantStatus(status.strip().upper())
        except ValueError as exc:
            raise OrderValidationError("status must be one of: ACTIVE, BLOCKED") from exc

        restaurant = self._restaurant_repository.get(restaurant_id)
        if restaurant is None:
            raise RestaurantNotFoundError(f"restaurant {restaurant_id} not found")
        if restaurant.status != new_status:
            self._restaurant_repository.set_status(restaurant_id, new_status)
            logger.info(
                "restaurant_status_changed",
                extra={
                    "restaurant_id": str(restaurant_id),
                    "from_status": restaurant.status.value,
                    "to_status": new_status.value,
                },
            )
        return to_restaurant_response(restaurant.with_status(new_status))
