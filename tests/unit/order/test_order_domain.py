from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from qrorder.domain.common.ids import MenuItemId, OrderId, RestaurantId, TrackingCode
from qrorder.domain.common.money import Money
from qrorder.domain.order.entities import (
    Order,
    OrderLine,
    OrderStatus,
    OrderTransitionError,
    can_transition,
    create_pending_order,
)
from qrorder.domain.order.events import OrderStatusChanged

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def _line(amount_cents: int = 300, quantity: int = 2) -> OrderLine:
    return OrderLine(
        menu_item_id=MenuItemId("itm_001"),
        name="Masala Dosa",
        unit_price=Money(amount_cents=amount_cents, currency="INR"),
        quantity=quantity,
    )


def _pending() -> Order:
    return create_pending_order(
        order_id=OrderId("ord_001"),
        restaurant_id=RestaurantId("rst_001"),
        table_number=3,
        lines=[_line(300, 2), _line(150, 1)],
        tracking_code=TrackingCode("TM-ABC234"),
        now=NOW,
    )


def test_order_line_quantity_must_be_gte_one() -> None:
    with pytest.raises(ValueError):
        _line(quantity=0)


def test_line_total_is_unit_price_times_quantity() -> None:
    assert _line(300, 3).line_total == Money(amount_cents=900, currency="INR")


def test_create_pending_order_sums_lines_and_stamps_times() -> None:
    order = _pending()

    assert order.status == OrderStatus.PENDING
    assert order.total == Money(amount_cents=750, currency="INR")
    assert order.created_at == order.updated_at == NOW
    assert order.tracking_code == "TM-ABC234"


def test_order_total_must_match_lines() -> None:
    with pytest.raises(ValueError):
        Order(
            order_id=OrderId("ord_001"),
            restaurant_id=RestaurantId("rst_001"),
            table_number=1,
            status=OrderStatus.PENDING,
            lines=(_line(300, 1),),
            total=Money(amount_cents=290, currency="INR"),
            tracking_code=TrackingCode("TM-ABC234"),
            created_at=NOW,
            updated_at=NOW,
        )


@pytest.mark.parametrize("table_number", [0, -2])
def test_order_rejects_non_positive_table(table_number: int) -> None:
    with pytest.raises(ValueError):
        create_pending_order(
            order_id=OrderId("ord_001"),
            restaurant_id=RestaurantId("rst_001"),
            table_number=table_number,
            lines=[_line()],
            tracking_code=TrackingCode("TM-ABC234"),
            now=NOW,
        )


def test_order_requires_lines() -> None:
    with pytest.raises(ValueError):
        create_pending_order(
            order_id=OrderId("ord_001"),
            restaurant_id=RestaurantId("rst_001"),
            table_number=1,
            lines=[],
            tracking_code=TrackingCode("TM-ABC234"),
            now=NOW,
        )


@pytest.mark.parametrize(
    ("from_status", "to_status", "allowed"),
    [
        (OrderStatus.PENDING, OrderStatus.ACCEPTED, True),
        (OrderStatus.PENDING, OrderStatus.REJECTED, True),
        (OrderStatus.PENDING, OrderStatus.READY, False),
        (OrderStatus.PENDING, OrderStatus.PENDING, False),
        (OrderStatus.ACCEPTED, OrderStatus.READY, True),
        (OrderStatus.ACCEPTED, OrderStatus.PENDING, False),
        (OrderStatus.ACCEPTED, OrderStatus.REJECTED, False),
        (OrderStatus.ACCEPTED, OrderStatus.ACCEPTED, False),
        (OrderStatus.REJECTED, OrderStatus.ACCEPTED, False),
        (OrderStatus.READY, OrderStatus.ACCEPTED, False),
        (OrderStatus.READY, OrderStatus.READY, False),
    ],
)
def test_transition_table(from_status: OrderStatus, to_status: OrderStatus, allowed: bool) -> None:
    assert can_transition(from_status, to_status) is allowed


def test_accept_then_ready_refreshes_updated_at() -> None:
    accepted_at = NOW + timedelta(minutes=2)
    ready_at = NOW + timedelta(minutes=15)

    order = (
        _pending()
        .transition_to(OrderStatus.ACCEPTED, accepted_at)
        .transition_to(OrderStatus.READY, ready_at)
    )

    assert order.status == OrderStatus.READY
    assert order.updated_at == ready_at
    assert order.created_at == NOW
    with pytest.raises(OrderTransitionError):
        order.transition_to(OrderStatus.REJECTED, ready_at)


def test_illegal_transition_raises_and_leaves_order_untouched() -> None:
    order = _pending()

    with pytest.raises(OrderTransitionError):
        order.transition_to(OrderStatus.READY, NOW)

    assert order.status == OrderStatus.PENDING
    assert order.updated_at == NOW


def test_rejected_order_is_terminal() -> None:
    rejected = _pending().transition_to(OrderStatus.REJECTED, NOW)

    for target in OrderStatus:
        with pytest.raises(OrderTransitionError):
            rejected.transition_to(target, NOW)


def test_status_changed_event_type_follows_target_status() -> None:
    event = OrderStatusChanged(
        order_id=OrderId("ord_001"),
        restaurant_id=RestaurantId("rst_001"),
        from_status=OrderStatus.ACCEPTED,
        to_status=OrderStatus.READY,
        occurred_at=NOW,
    )
    assert event.event_type == "order.ready"


def test_money_invariants() -> None:
    with pytest.raises(ValueError):
        Money(amount_cents=-1, currency="INR")
    with pytest.raises(ValueError):
        Money(amount_cents=100, currency="inr")
    with pytest.raises(ValueError):
        Money(amount_cents=100, currency="IN")
    with pytest.raises(ValueError):
        Money(amount_cents=100, currency="INR").plus(Money(amount_cents=1, currency="USD"))
