from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from qrorder.domain.common.ids import (
    CategoryId,
    MenuItemId,
    OrderId,
    RestaurantId,
    TrackingCode,
    UserId,
)
from qrorder.domain.identity.entities import UserAccount
from qrorder.domain.menu.entities import Category, MenuItem
from qrorder.domain.order.entities import Order, OrderStatus
from qrorder.domain.restaurant.entities import Restaurant, RestaurantStatus


class RestaurantRepository(Protocol):
    def get(self, restaurant_id: RestaurantId) -> Restaurant | None: ...

    def get_by_slug(self, slug: str) -> Restaurant | None: ...

    def set_status(self, restaurant_id: RestaurantId, status: RestaurantStatus) -> None: ...


class CatalogRepository(Protocol):
    def find_available_item(
        self,
        restaurant_id: RestaurantId,
        item_id: MenuItemId,
    ) -> MenuItem | None: ...

    def list_categories(self, restaurant_id: RestaurantId) -> list[Category]: ...

    def list_available_items(
        self,
        restaurant_id: RestaurantId,
        category_id: CategoryId | None = None,
    ) -> list[MenuItem]: ...

    def count_items(self, restaurant_id: RestaurantId) -> int: ...


class UserRepository(Protocol):
    def get(self, user_id: UserId) -> UserAccount | None: ...


class OrderRepository(Protocol):
    def add(self, order: Order) -> None: ...

    def get(self, order_id: OrderId) -> Order | None: ...

    def get_by_tracking_code(self, tracking_code: str) -> Order | None: ...

    def tracking_code_exists(self, tracking_code: str) -> bool: ...

    def update_status(
        self,
        order_id: OrderId,
        expected_status: OrderStatus,
        new_status: OrderStatus,
        updated_at: datetime,
    ) -> Order: ...

    def list_for_restaurant(
        self,
        restaurant_id: RestaurantId,
        status: OrderStatus | None,
        table_number: int | None,
        limit: int,
        cursor: str | None,
    ) -> tuple[list[Order], str | None]: ...


class ReportingRepository(Protocol):
    def sales_between(
        self,
        restaurant_id: RestaurantId,
        start: datetime,
        end: datetime | None,
    ) -> SalesTotals: ...

    def daily_sales(
        self,
        restaurant_id: RestaurantId,
        start: datetime,
        end: datetime,
    ) -> list[DailySales]: ...

    def top_item(self, restaurant_id: RestaurantId) -> ItemQuantity | None: ...

    def peak_hour(self, restaurant_id: RestaurantId) -> BucketCount | None: ...

    def peak_weekday(self, restaurant_id: RestaurantId) -> BucketCount | None: ...

    def count_orders(
        self,
        restaurant_id: RestaurantId,
        *,
        status: OrderStatus | None = None,
        since: datetime | None = None,
        until: datetime | None = None,
    ) -> int: ...


class DuplicateTrackingCodeError(Exception):
    def __init__(self, tracking_code: TrackingCode | str) -> None:
        super().__init__(f"tracking code {tracking_code} already taken")
        self.tracking_code = tracking_code


class StaleOrderStatusError(Exception):
    pass


class InvalidCursorError(Exception):
    pass


@dataclass(frozen=True)
class SalesTotals:
    orders: int
    amount_cents: int


@dataclass(frozen=True)
class DailySales:
    day: str
    orders: int
    amount_cents: int


@dataclass(frozen=True)
class ItemQuantity:
    name: str
    quantity: int


@dataclass(frozen=True)
class BucketCount:
    bucket: int
    orders: int
