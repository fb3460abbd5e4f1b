from __future__ import annotations

import os

from fastapi import APIRouter, Depends, Query

from qrorder.api.auth import require_tenant
from qrorder.application.dto.requests import UpdateRestaurantStatusRequest
from qrorder.application.dto.responses import CustomerMenuResponse, RestaurantResponse
from qrorder.application.use_cases.get_customer_menu import (
    DEFAULT_MENU_CACHE_TTL_SECONDS,
    GetCustomerMenu,
)
from qrorder.application.use_cases.restaurants import GetPublicRestaurant, SetRestaurantStatus
from qrorder.domain.common.ids import CategoryId, RestaurantId
from qrorder.domain.identity.entities import TenantContext
from qrorder.infrastructure.cache.cache_store import RedisCacheStore
from qrorder.infrastructure.db.repositories.menu_repo import SqlAlchemyCatalogRepository
from qrorder.infrastructure.db.repositories.restaurant_repo import (
    SqlAlchemyRestaurantRepository,
)

router = APIRouter()


def _menu_cache_ttl_seconds() -> int:
    return int(os.getenv("MENU_CACHE_TTL_SECONDS", str(DEFAULT_MENU_CACHE_TTL_SECONDS)))


def _get_customer_menu_use_case() -> GetCustomerMenu:
    return GetCustomerMenu(
        restaurant_repository=SqlAlchemyRestaurantRepository(),
        catalog_repository=SqlAlchemyCatalogRepository(),
        cache=RedisCacheStore(),
        ttl_seconds=_menu_cache_ttl_seconds(),
    )


def _get_public_restaurant_use_case() -> GetPublicRestaurant:
    return GetPublicRestaurant(restaurant_repository=SqlAlchemyRestaurantRepository())


def _set_restaurant_status_use_case() -> SetRestaurantStatus:
    return SetRestaurantStatus(restaurant_repository=SqlAlchemyRestaurantRepository())


@router.get("/v1/restaurants/slug/{slug}", response_model=RestaurantResponse)
def get_restaurant_by_slug(slug: str) -> RestaurantResponse:
    return _get_public_restaurant_use_case().execute(slug)


@router.get("/v1/restaurants/{restaurant_id}/menu", response_model=CustomerMenuResponse)
def get_customer_menu(
    restaurant_id: str,
    category_id: str | None = Query(default=None, alias="categoryId"),
) -> CustomerMenuResponse:
    return _get_customer_menu_use_case().execute(
        RestaurantId(restaurant_id),
        CategoryId(category_id) if category_id else None,
    )


@router.patch("/v1/admin/restaurants/{restaurant_id}/status", response_model=RestaurantResponse)
def set_restaurant_status(
    restaurant_id: str,
    request_dto: UpdateRestaurantStatusRequest,
    tenant: TenantContext = Depends(require_tenant),
) -> RestaurantResponse:
    return _set_restaurant_status_use_case().execute(
        tenant,
        RestaurantId(restaurant_id),
        request_dto.status,
    )
