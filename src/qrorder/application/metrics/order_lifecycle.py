from __future__ import annotations

from datetime import datetime, timezone

from prometheus_client import Counter, Histogram

from qrorder.domain.order.entities import Order, OrderStatus

ORDERS_TOTAL = Counter(
    "qrorder_orders_total",
    "Total number of orders observed by status.",
    ["restaurant_id", "status"],
)

ORDER_TRANSITION_TOTAL = Counter(
    "qrorder_order_transition_total",
    "Total number of order lifecycle transitions.",
    ["from", "to"],
)

ORDER_REJECTED_REQUESTS_TOTAL = Counter(
    "qrorder_order_rejected_requests_total",
    "Order creation requests refused before anything was persisted.",
    ["reason"],
)

TRACKING_CODE_COLLISIONS_TOTAL = Counter(
    "qrorder_tracking_code_collisions_total",
    "Tracking code candidates discarded because they were already taken at insert time.",
)

ORDER_TIME_TO_ACCEPT_SECONDS = Histogram(
    "qrorder_order_time_to_accept_seconds",
    "Time between order placement and acceptance.",
)

ORDER_TIME_TO_READY_SECONDS = Histogram(
    "qrorder_order_time_to_ready_seconds",
    "Time between order placement and readiness.",
)


def record_order_status(order: Order) -> None:
    ORDERS_TOTAL.labels(
        restaurant_id=str(order.restaurant_id),
        status=order.status.value,
    ).inc()


def record_transition(from_status: OrderStatus, to_status: OrderStatus) -> None:
    ORDER_TRANSITION_TOTAL.labels(**{"from": from_status.value, "to": to_status.value}).inc()


def record_order_refused(reason: str) -> None:
    ORDER_REJECTED_REQUESTS_TOTAL.labels(reason=reason).inc()


def record_tracking_code_collision() -> None:
    TRACKING_CODE_COLLISIONS_TOTAL.inc()


def record_time_in_queue(order: Order, now: datetime | None = None) -> None:
    current = now or datetime.now(timezone.utc)
    elapsed = max((current - order.created_at).total_seconds(), 0.0)
    if order.status == OrderStatus.ACCEPTED:
        ORDER_TIME_TO_ACCEPT_SECONDS.observe(elapsed)
    elif order.status == OrderStatus.READY:
        ORDER_TIME_TO_READY_SECONDS.observe(elapsed)
