from __future__ import annotations

import logging
from datetime import datetime, timezone

from qrorder.application.dto.responses import OrderResponse
from qrorder.application.errors import (
    InvalidOrderTransitionError,
    OrderNotFoundError,
    OrderValidationError,
)
from qrorder.application.mappers.event_envelope import serialize_order_event
from qrorder.application.mappers.order_mapper import to_order_response
from qrorder.application.metrics.order_lifecycle import (
    record_order_status,
    record_time_in_queue,
    record_transition,
)
from qrorder.application.ports.publisher import EventPublisher
from qrorder.application.ports.repositories import OrderRepository, StaleOrderStatusError
from qrorder.application.use_cases.context import TraceContext
from qrorder.application.use_cases.publishing import publish_best_effort
from qrorder.application.use_cases.tenancy import load_owned_order, require_operator
from qrorder.domain.common.ids import OrderId
from qrorder.domain.identity.entities import TenantContext
from qrorder.domain.order.entities import OrderStatus, OrderTransitionError
from qrorder.domain.order.events import OrderStatusChanged

logger = logging.getLogger(__name__)


def parse_order_status(raw: str) -> OrderStatus:
    try:
        return OrderStatus(raw.strip().upper())
    except ValueError as exc:
        allowed = ", ".join(status.value for status in OrderStatus)
        raise OrderValidationError(f"status must be one of: {allowed}") from exc


class UpdateOrderStatus:
    def __init__(self, order_repository: OrderRepository, publisher: EventPublisher) -> None:
        self._order_repository = order_repository
        self._publisher = publisher

    def execute(
        self,
        tenant: TenantContext | None,
        order_id: OrderId,
        new_status: str,
        trace_ctx: TraceContext,
    ) -> OrderResponse:
        operator = require_operator(tenant)
        target = parse_order_status(new_status)
        order = load_owned_order(self._order_repository, operator, order_id)

        now = datetime.now(timezone.utc)
        try:
            updated = order.transition_to(target, now)
        except OrderTransitionError as exc:
            raise InvalidOrderTransitionError(str(exc)) from exc

        try:
            persisted_order = self._order_repository.update_status(
                order_id=order.order_id,
                expected_status=order.status,
                new_status=updated.status,
                updated_at=updated.updated_at,
            )
        except StaleOrderStatusError as exc:
            current = self._order_repository.get(order_id)
            if current is None:
                raise OrderNotFoundError(f"order {order_id} not found") from exc
            raise InvalidOrderTransitionError(
                f"order {order_id} moved to status={current.status.value} concurrently, "
                f"cannot apply {target.value}"
            ) from exc

        event = OrderStatusChanged(
            order_id=persisted_order.order_id,
            restaurant_id=persisted_order.restaurant_id,
            from_status=order.status,
            to_status=persisted_order.status,
            occurred_at=now,
        )
        message = serialize_order_event(
            event_type=event.event_type,
            occurred_at=event.occurred_at,
            order=persisted_order,
            trace_id=trace_ctx.trace_id,
            request_id=trace_ctx.request_id,
            previous_status=event.from_status.value,
        )
        record_transition(from_status=event.from_status, to_status=event.to_status)
        record_order_status(persisted_order)
        record_time_in_queue(persisted_order, now=now)
        publish_best_effort(self._publisher, str(persisted_order.restaurant_id), message)
        logger.info(
            "order_status_changed",
            extra={
                "order_id": str(event.order_id),
                "restaurant_id": str(event.restaurant_id),
                "from_status": event.from_status.value,
                "to_status": event.to_status.value,
            },
        )
        return to_order_response(persisted_order)
