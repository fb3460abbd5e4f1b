from __future__ import annotations

import sys
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[2] / "src"))

from qrorder.application.ports.repositories import (
    BucketCount,
    DailySales,
    DuplicateTrackingCodeError,
    InvalidCursorError,
    ItemQuantity,
    SalesTotals,
    StaleOrderStatusError,
)
from qrorder.application.ports.tokens import InvalidTokenError
from qrorder.application.use_cases.place_order import PlaceOrder
from qrorder.domain.common.ids import (
    CategoryId,
    MenuItemId,
    OrderId,
    RestaurantId,
    UserId,
)
from qrorder.domain.common.money import Money
from qrorder.domain.identity.entities import CallerRole, TenantContext, UserAccount
from qrorder.domain.menu.entities import Category, MenuItem
from qrorder.domain.order.entities import Order, OrderLine, OrderStatus
from qrorder.domain.restaurant.entities import Restaurant, RestaurantStatus


class FakeRestaurantRepository:
    def __init__(self, restaurants: list[Restaurant]) -> None:
        self.restaurants = {str(restaurant.restaurant_id): restaurant for restaurant in restaurants}
        self.status_updates: list[tuple[str, RestaurantStatus]] = []

    def get(self, restaurant_id: RestaurantId) -> Restaurant | None:
        return self.restaurants.get(str(restaurant_id))

    def get_by_slug(self, slug: str) -> Restaurant | None:
        for restaurant in self.restaurants.values():
            if restaurant.slug == slug:
                return restaurant
        return None

    def set_status(self, restaurant_id: RestaurantId, status: RestaurantStatus) -> None:
        key = str(restaurant_id)
        self.restaurants[key] = self.restaurants[key].with_status(status)
        self.status_updates.append((key, status))


class FakeCatalogRepository:
    def __init__(self, items: list[MenuItem], categories: list[Category] | None = None) -> None:
        self.items = {str(item.item_id): item for item in items}
        self.categories = categories or []
        self.list_calls = 0

    def find_available_item(
        self,
        restaurant_id: RestaurantId,
        item_id: MenuItemId,
    ) -> MenuItem | None:
        item = self.items.get(str(item_id))
        if item is None or str(item.restaurant_id) != str(restaurant_id) or not item.is_available:
            return None
        return item

    def list_categories(self, restaurant_id: RestaurantId) -> list[Category]:
        return [c for c in self.categories if str(c.restaurant_id) == str(restaurant_id)]

    def list_available_items(
        self,
        restaurant_id: RestaurantId,
        category_id: CategoryId | None = None,
    ) -> list[MenuItem]:
        self.list_calls += 1
        return [
            item
            for item in self.items.values()
            if str(item.restaurant_id) == str(restaurant_id)
            and item.is_available
            and (category_id is None or str(item.category_id) == str(category_id))
        ]

    def count_items(self, restaurant_id: RestaurantId) -> int:
        return sum(
            1 for item in self.items.values() if str(item.restaurant_id) == str(restaurant_id)
        )

    def reprice(self, item_id: str, amount_cents: int) -> None:
        item = self.items[item_id]
        self.items[item_id] = replace(
            item,
            price_money=Money(amount_cents=amount_cents, currency=item.price_money.currency),
        )


class FakeOrderRepository:
    def __init__(self) -> None:
        self.orders: dict[str, Order] = {}
        self.add_attempts = 0
        self.forced_collisions = 0
        self.status_changed_behind_our_back: OrderStatus | None = None

    def add(self, order: Order) -> None:
        self.add_attempts += 1
        if self.forced_collisions > 0:
            self.forced_collisions -= 1
            raise DuplicateTrackingCodeError(order.tracking_code)
        if self.tracking_code_exists(str(order.tracking_code)):
            raise DuplicateTrackingCodeError(order.tracking_code)
        self.orders[str(order.order_id)] = order

    def get(self, order_id: OrderId) -> Order | None:
        return self.orders.get(str(order_id))

    def get_by_tracking_code(self, tracking_code: str) -> Order | None:
        for order in self.orders.values():
            if str(order.tracking_code) == tracking_code:
                return order
        return None

    def tracking_code_exists(self, tracking_code: str) -> bool:
        return self.get_by_tracking_code(tracking_code) is not None

    def update_status(
        self,
        order_id: OrderId,
        expected_status: OrderStatus,
        new_status: OrderStatus,
        updated_at: datetime,
    ) -> Order:
        key = str(order_id)
        if self.status_changed_behind_our_back is not None:
            self.orders[key] = replace(
                self.orders[key], status=self.status_changed_behind_our_back
            )
            self.status_changed_behind_our_back = None
        current = self.orders.get(key)
        if current is None or current.status != expected_status:
            raise StaleOrderStatusError(f"order {order_id} changed")
        updated = replace(current, status=new_status, updated_at=updated_at)
        self.orders[key] = updated
        return updated

    def list_for_restaurant(
        self,
        restaurant_id: RestaurantId,
        status: OrderStatus | None,
        table_number: int | None,
        limit: int,
        cursor: str | None,
    ) -> tuple[list[Order], str | None]:
        if cursor is not None and not cursor.isdigit():
            raise InvalidCursorError("invalid cursor")
        matching = sorted(
            (
                order
                for order in self.orders.values()
                if str(order.restaurant_id) == str(restaurant_id)
                and (status is None or order.status == status)
                and (table_number is None or order.table_number == table_number)
            ),
            key=lambda order: (order.created_at, str(order.order_id)),
            reverse=True,
        )
        offset = int(cursor) if cursor else 0
        page = matching[offset : offset + limit]
        has_more = len(matching) > offset + limit
        return page, str(offset + limit) if has_more else None


class FakeUserRepository:
    def __init__(self, accounts: list[UserAccount]) -> None:
        self.accounts = {str(account.user_id): account for account in accounts}

    def get(self, user_id: UserId) -> UserAccount | None:
        return self.accounts.get(str(user_id))


class FakeTokenDecoder:
    def __init__(self, tokens: dict[str, str]) -> None:
        self.tokens = tokens

    def subject(self, token: str) -> UserId:
        if token not in self.tokens:
            raise InvalidTokenError("invalid token")
        return UserId(self.tokens[token])


class FakePublisher:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[tuple[str, str]] = []

    def publish(self, channel: str, message: str) -> None:
        if self.fail:
            raise ConnectionError("redis unavailable")
        self.calls.append((channel, message))


class FakeCacheStore:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.values: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    def get(self, key: str) -> str | None:
        if self.fail:
            raise ConnectionError("redis unavailable")
        return self.values.get(key)

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        if self.fail:
            raise ConnectionError("redis unavailable")
        self.values[key] = value
        self.ttls[key] = ttl_seconds


class FakeReportingRepository:
    def __init__(self) -> None:
        self.sales: dict[tuple[datetime, datetime | None], SalesTotals] = {}
        self.days: list[DailySales] = []
        self.best_seller: ItemQuantity | None = None
        self.busiest_hour: BucketCount | None = None
        self.busiest_weekday: BucketCount | None = None
        self.order_counts: dict[str, int] = {}
        self.calls: list[tuple[str, object]] = []

    def sales_between(
        self,
        restaurant_id: RestaurantId,
        start: datetime,
        end: datetime | None,
    ) -> SalesTotals:
        self.calls.append(("sales_between", restaurant_id))
        return self.sales.get((start, end), SalesTotals(orders=0, amount_cents=0))

    def daily_sales(
        self,
        restaurant_id: RestaurantId,
        start: datetime,
        end: datetime,
    ) -> list[DailySales]:
        self.calls.append(("daily_sales", (start, end)))
        return self.days

    def top_item(self, restaurant_id: RestaurantId) -> ItemQuantity | None:
        return self.best_seller

    def peak_hour(self, restaurant_id: RestaurantId) -> BucketCount | None:
        return self.busiest_hour

    def peak_weekday(self, restaurant_id: RestaurantId) -> BucketCount | None:
        return self.busiest_weekday

    def count_orders(
        self,
        restaurant_id: RestaurantId,
        *,
        status: OrderStatus | None = None,
        since: datetime | None = None,
        until: datetime | None = None,
    ) -> int:
        self.calls.append(("count_orders", restaurant_id))
        if status is not None:
            return self.order_counts.get(status.value, 0)
        return self.order_counts.get("since" if since else "all", 0)


def make_item(
    item_id: str,
    restaurant_id: str = "rst_001",
    *,
    name: str | None = None,
    amount_cents: int = 24900,
    available: bool = True,
    category_id: str | None = "cat_001",
) -> MenuItem:
    return MenuItem(
        item_id=MenuItemId(item_id),
        restaurant_id=RestaurantId(restaurant_id),
        name=name or f"Item {item_id}",
        description=None,
        price_money=Money(amount_cents=amount_cents, currency="INR"),
        is_available=available,
        category_id=CategoryId(category_id) if category_id else None,
    )


def operator_for(restaurant_id: str, user_id: str = "usr_op") -> TenantContext:
    return TenantContext(
        caller_id=UserId(user_id),
        role=CallerRole.OPERATOR,
        restaurant_id=RestaurantId(restaurant_id),
    )


@pytest.fixture
def restaurant_repository() -> FakeRestaurantRepository:
    return FakeRestaurantRepository(
        [
            Restaurant(
                restaurant_id=RestaurantId("rst_001"),
                name="Spice Route",
                slug="spice-route",
                status=RestaurantStatus.ACTIVE,
            ),
            Restaurant(
                restaurant_id=RestaurantId("rst_002"),
                name="Harbor Grill",
                slug="harbor-grill",
                status=RestaurantStatus.BLOCKED,
            ),
            Restaurant(
                restaurant_id=RestaurantId("rst_003"),
                name="Corner Cafe",
                slug="corner-cafe",
                status=RestaurantStatus.ACTIVE,
            ),
        ]
    )


@pytest.fixture
def catalog_repository() -> FakeCatalogRepository:
    return FakeCatalogRepository(
        items=[
            make_item("itm_001", name="Paneer Tikka", amount_cents=24900),
            make_item("itm_002", name="Butter Chicken", amount_cents=34900, category_id="cat_002"),
            make_item("itm_off", name="Mutton Biryani", amount_cents=42900, available=False),
            make_item("itm_blocked", "rst_002", name="Grilled Fish", amount_cents=52900),
            make_item("itm_cafe", "rst_003", name="Cold Coffee", amount_cents=9900),
        ],
        categories=[
            Category(CategoryId("cat_002"), RestaurantId("rst_001"), "Mains", position=2),
            Category(CategoryId("cat_001"), RestaurantId("rst_001"), "Starters", position=1),
            Category(CategoryId("cat_009"), RestaurantId("rst_003"), "Drinks", position=1),
        ],
    )


@pytest.fixture
def order_repository() -> FakeOrderRepository:
    return FakeOrderRepository()


@pytest.fixture
def publisher() -> FakePublisher:
    return FakePublisher()


@pytest.fixture
def cache_store() -> FakeCacheStore:
    return FakeCacheStore()


@pytest.fixture
def reporting_repository() -> FakeReportingRepository:
    return FakeReportingRepository()


@pytest.fixture
def operator_tenant() -> TenantContext:
    return operator_for("rst_001", "usr_op_001")


@pytest.fixture
def other_operator_tenant() -> TenantContext:
    return operator_for("rst_003", "usr_op_003")


@pytest.fixture
def admin_tenant() -> TenantContext:
    return TenantContext(caller_id=UserId("usr_admin"), role=CallerRole.PLATFORM_ADMIN)


@pytest.fixture
def place_order(
    restaurant_repository: FakeRestaurantRepository,
    catalog_repository: FakeCatalogRepository,
    order_repository: FakeOrderRepository,
    publisher: FakePublisher,
) -> PlaceOrder:
    return PlaceOrder(
        restaurant_repository=restaurant_repository,
        catalog_repository=catalog_repository,
        order_repository=order_repository,
        publisher=publisher,
    )


@pytest.fixture
def stored_order(order_repository: FakeOrderRepository):
    """Factory that stores an order directly, bypassing PlaceOrder."""

    def _store(
        order_id: str,
        *,
        restaurant_id: str = "rst_001",
        status: OrderStatus = OrderStatus.PENDING,
        table_number: int = 4,
        tracking_code: str | None = None,
        minutes_ago: int = 0,
    ) -> Order:
        created_at = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc) - timedelta(
            minutes=minutes_ago
        )
        line = OrderLine(
            menu_item_id=MenuItemId("itm_001"),
            name="Paneer Tikka",
            unit_price=Money(amount_cents=24900, currency="INR"),
            quantity=1,
        )
        order = Order(
            order_id=OrderId(order_id),
            restaurant_id=RestaurantId(restaurant_id),
            table_number=table_number,
            status=status,
            lines=(line,),
            total=line.line_total,
            tracking_code=tracking_code or f"TM-{order_id[-6:].upper():A>6}",
            created_at=created_at,
            updated_at=created_at,
        )
        order_repository.orders[order_id] = order
        return order

    return _store


@pytest.fixture
def user_repository() -> FakeUserRepository:
    return FakeUserRepository(
        [
            UserAccount(
                user_id=UserId("usr_op_001"),
                username="spice-route-ops",
                role=CallerRole.OPERATOR,
                is_active=True,
                restaurant_id=RestaurantId("rst_001"),
            ),
            UserAccount(
                user_id=UserId("usr_op_003"),
                username="corner-cafe-ops",
                role=CallerRole.OPERATOR,
                is_active=True,
                restaurant_id=RestaurantId("rst_003"),
            ),
            UserAccount(
                user_id=UserId("usr_admin"),
                username="platform-admin",
                role=CallerRole.PLATFORM_ADMIN,
                is_active=True,
                restaurant_id=None,
            ),
        ]
    )


@pytest.fixture
def token_decoder() -> FakeTokenDecoder:
    return FakeTokenDecoder({"op-1": "usr_op_001", "op-3": "usr_op_003", "admin": "usr_admin"})
