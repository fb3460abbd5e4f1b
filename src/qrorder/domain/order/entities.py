from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum

from qrorder.domain.common.ids import MenuItemId, OrderId, RestaurantId, TrackingCode
from qrorder.domain.common.money import Money


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    READY = "READY"


ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.ACCEPTED, OrderStatus.REJECTED}),
    OrderStatus.ACCEPTED: frozenset({OrderStatus.READY}),
    OrderStatus.REJECTED: frozenset(),
    OrderStatus.READY: frozenset(),
}


def can_transition(from_status: OrderStatus, to_status: OrderStatus) -> bool:
    return to_status in ALLOWED_TRANSITIONS[from_status]


@dataclass(frozen=True)
class OrderLine:
    menu_item_id: MenuItemId
    name: str
    unit_price: Money
    quantity: int

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValueError("quantity must be >= 1")

    @property
    def line_total(self) -> Money:
        return self.unit_price.times(self.quantity)


@dataclass(frozen=True)
class Order:
    order_id: OrderId
    restaurant_id: RestaurantId
    table_number: int
    status: OrderStatus
    lines: tuple[OrderLine, ...]
    total: Money
    tracking_code: TrackingCode
    created_at: datetime
    updated_at: datetime

    def __post_init__(self) -> None:
        if self.table_number < 1:
            raise ValueError("table_number must be >= 1")
        if not self.lines:
            raise ValueError("order must contain at least one line")
        if self.total != _sum_lines(self.lines):
            raise ValueError("order total must equal sum of line totals")

    def transition_to(self, new_status: OrderStatus, now: datetime) -> Order:
        if not can_transition(self.status, new_status):
            raise OrderTransitionError(
                f"cannot move order from status={self.status.value} to status={new_status.value}"
            )
        return replace(self, status=new_status, updated_at=now)


def create_pending_order(
    order_id: OrderId,
    restaurant_id: RestaurantId,
    table_number: int,
    lines: list[OrderLine],
    tracking_code: TrackingCode,
    now: datetime,
) -> Order:
    if not lines:
        raise ValueError("order must contain at least one line")

    return Order(
        order_id=order_id,
        restaurant_id=restaurant_id,
        table_number=table_number,
        status=OrderStatus.PENDING,
        lines=tuple(lines),
        total=_sum_lines(lines),
        tracking_code=tracking_code,
        created_at=now,
        updated_at=now,
    )


def _sum_lines(lines: tuple[OrderLine, ...] | list[OrderLine]) -> Money:
    total = Money(amount_cents=0, currency=lines[0].unit_price.currency)
    for line in lines:
        total = total.plus(line.line_total)
    return total


class OrderTransitionError(Exception):
    pass
