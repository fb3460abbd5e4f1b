from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from qrorder.application.dto.requests import PlaceOrderLineRequest, PlaceOrderRequest
from qrorder.application.errors import (
    InvalidOrderTransitionError,
    OrderNotFoundError,
    OrderValidationError,
    TenantAccessDeniedError,
)
from qrorder.application.use_cases.context import NO_TRACE
from qrorder.application.use_cases.update_order_status import UpdateOrderStatus
from qrorder.domain.common.ids import OrderId
from qrorder.domain.order.entities import OrderStatus


@pytest.fixture
def update_status(order_repository, publisher) -> UpdateOrderStatus:
    return UpdateOrderStatus(order_repository=order_repository, publisher=publisher)


def test_operator_accepts_then_marks_ready(
    update_status: UpdateOrderStatus,
    stored_order,
    operator_tenant,
    order_repository,
    publisher,
) -> None:
    placed = stored_order("ord_001")

    accepted = update_status.execute(operator_tenant, OrderId("ord_001"), "ACCEPTED", NO_TRACE)
    ready = update_status.execute(operator_tenant, OrderId("ord_001"), "ready", NO_TRACE)

    assert accepted.status == "ACCEPTED"
    assert ready.status == "READY"
    assert ready.updatedAt != placed.updated_at
    assert order_repository.get(OrderId("ord_001")).status == OrderStatus.READY

    event_types = [json.loads(message)["event_type"] for _, message in publisher.calls]
    assert event_types == ["order.accepted", "order.ready"]
    last_payload = json.loads(publisher.calls[-1][1])["payload"]
    assert last_payload["previousStatus"] == "ACCEPTED"
    assert last_payload["status"] == "READY"


def test_status_changes_never_touch_lines_or_total(
    update_status: UpdateOrderStatus,
    place_order,
    operator_tenant,
    order_repository,
) -> None:
    placed = place_order.execute(
        None,
        PlaceOrderRequest(
            restaurant_id="rst_001",
            table_number=4,
            lines=[
                PlaceOrderLineRequest(menu_item_id="itm_001", quantity=2),
                PlaceOrderLineRequest(menu_item_id="itm_002", quantity=1),
            ],
        ),
        NO_TRACE,
    )
    order_id = OrderId(placed.orderId)
    before = order_repository.get(order_id)

    accepted = update_status.execute(operator_tenant, order_id, "ACCEPTED", NO_TRACE)
    ready = update_status.execute(operator_tenant, order_id, "READY", NO_TRACE)

    after = order_repository.get(order_id)
    assert after.lines == before.lines
    assert after.total == before.total
    for response in (accepted, ready):
        assert response.lines == placed.lines
        assert response.total == placed.total


def test_pending_order_can_be_rejected(
    update_status: UpdateOrderStatus,
    stored_order,
    operator_tenant,
) -> None:
    stored_order("ord_001")
    response = update_status.execute(operator_tenant, OrderId("ord_001"), "REJECTED", NO_TRACE)
    assert response.status == "REJECTED"


@pytest.mark.parametrize(
    ("current", "target"),
    [
        (OrderStatus.PENDING, "READY"),
        (OrderStatus.PENDING, "PENDING"),
        (OrderStatus.ACCEPTED, "PENDING"),
        (OrderStatus.ACCEPTED, "ACCEPTED"),
        (OrderStatus.ACCEPTED, "REJECTED"),
        (OrderStatus.REJECTED, "ACCEPTED"),
        (OrderStatus.READY, "ACCEPTED"),
    ],
)
def test_illegal_transitions_leave_order_unchanged(
    update_status: UpdateOrderStatus,
    stored_order,
    operator_tenant,
    order_repository,
    publisher,
    current: OrderStatus,
    target: str,
) -> None:
    before = stored_order("ord_001", status=current)

    with pytest.raises(InvalidOrderTransitionError):
        update_status.execute(operator_tenant, OrderId("ord_001"), target, NO_TRACE)

    assert order_repository.get(OrderId("ord_001")) == before
    assert publisher.calls == []


def test_unknown_status_value_is_a_validation_error(
    update_status: UpdateOrderStatus,
    stored_order,
    operator_tenant,
) -> None:
    stored_order("ord_001")
    with pytest.raises(OrderValidationError):
        update_status.execute(operator_tenant, OrderId("ord_001"), "COOKING", NO_TRACE)


def test_missing_order_is_not_found(update_status: UpdateOrderStatus, operator_tenant) -> None:
    with pytest.raises(OrderNotFoundError):
        update_status.execute(operator_tenant, OrderId("ord_404"), "ACCEPTED", NO_TRACE)


def test_operator_cannot_touch_another_restaurants_order(
    update_status: UpdateOrderStatus,
    stored_order,
    other_operator_tenant,
    order_repository,
) -> None:
    before = stored_order("ord_001", restaurant_id="rst_001")

    with pytest.raises(TenantAccessDeniedError):
        update_status.execute(other_operator_tenant, OrderId("ord_001"), "ACCEPTED", NO_TRACE)

    assert order_repository.get(OrderId("ord_001")) == before


@pytest.mark.parametrize("caller", ["anonymous", "admin"])
def test_only_operators_update_status(
    update_status: UpdateOrderStatus,
    stored_order,
    admin_tenant,
    caller: str,
) -> None:
    stored_order("ord_001")
    tenant = admin_tenant if caller == "admin" else None
    with pytest.raises(TenantAccessDeniedError):
        update_status.execute(tenant, OrderId("ord_001"), "ACCEPTED", NO_TRACE)


def test_lost_race_surfaces_as_invalid_transition(
    update_status: UpdateOrderStatus,
    stored_order,
    operator_tenant,
    order_repository,
) -> None:
    stored_order("ord_001")
    order_repository.status_changed_behind_our_back = OrderStatus.REJECTED

    with pytest.raises(InvalidOrderTransitionError, match="concurrently"):
        update_status.execute(operator_tenant, OrderId("ord_001"), "ACCEPTED", NO_TRACE)

    assert order_repository.get(OrderId("ord_001")).status == OrderStatus.REJECTED
