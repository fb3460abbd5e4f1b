from __future__ import annotations

import logging

from pydantic import ValidationError

from qrorder.application.dto.responses import CustomerMenuResponse
from qrorder.application.mappers.menu_mapper import to_customer_menu_response
from qrorder.application.ports.cache import CacheStore
from qrorder.application.ports.repositories import CatalogRepository, RestaurantRepository
from qrorder.application.use_cases.restaurants import load_active_restaurant
from qrorder.domain.common.ids import CategoryId, RestaurantId

logger = logging.getLogger(__name__)

DEFAULT_MENU_CACHE_TTL_SECONDS = 60


def menu_cache_key(restaurant_id: RestaurantId, category_id: CategoryId | None = None) -> str:
    return f"menu:{restaurant_id}:{category_id or 'all'}"


class GetCustomerMenu:
    def __init__(
        self,
        restaurant_repository: RestaurantRepository,
        catalog_repository: CatalogRepository,
        cache: CacheStore,
        ttl_seconds: int = DEFAULT_MENU_CACHE_TTL_SECONDS,
    ) -> None:
        self._restaurant_repository = restaurant_repository
        self._catalog_repository = catalog_repository
        self._cache = cache
        self._ttl_seconds = ttl_seconds

    def _cache_get(self, key: str) -> str | None:
        try:
            return self._cache.get(key)
        except Exception:
            logger.warning("menu_cache_read_failed", extra={"cache_key": key})
            return None

    def _cache_set(self, key: str, value: str) -> None:
        try:
            self._cache.set(key, value, ttl_seconds=self._ttl_seconds)
        except Exception:
            logger.warning("menu_cache_write_failed", extra={"cache_key": key})

    def execute(
        self,
        restaurant_id: RestaurantId,
        category_id: CategoryId | None = None,
    ) -> CustomerMenuResponse:
        # Status is checked on every call, only the menu payload is cached.
        load_active_restaurant(self._restaurant_repository, restaurant_id)

        key = menu_cache_key(restaurant_id, category_id)
        payload = self._cache_get(key)
        if payload:
            try:
                return CustomerMenuResponse.model_validate_json(payload)
            except ValidationError:
                logger.warning("menu_cache_payload_invalid", extra={"cache_key": key})

        categories = self._catalog_repository.list_categories(restaurant_id)
        items = self._catalog_repository.list_available_items(restaurant_id, category_id)
        response = to_customer_menu_response(restaurant_id, categories, items)
        self._cache_set(key, response.model_dump_json())
        return response
