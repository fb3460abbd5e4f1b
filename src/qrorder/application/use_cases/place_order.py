from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable
from uuid import uuid4

from qrorder.application.dto.requests import PlaceOrderRequest
from qrorder.application.dto.responses import OrderResponse
from qrorder.application.errors import (
    OrderValidationError,
    RestaurantNotFoundError,
    RestaurantUnavailableError,
    TenantAccessDeniedError,
    TrackingCodeExhaustedError,
)
from qrorder.application.mappers.event_envelope import serialize_order_event
from qrorder.application.mappers.order_mapper import to_order_response
from qrorder.application.metrics.order_lifecycle import (
    record_order_refused,
    record_order_status,
    record_tracking_code_collision,
)
from qrorder.application.ports.publisher import EventPublisher
from qrorder.application.ports.repositories import (
    CatalogRepository,
    DuplicateTrackingCodeError,
    OrderRepository,
    RestaurantRepository,
)
from qrorder.application.use_cases.catalog_snapshot import CatalogSnapshot
from qrorder.application.use_cases.context import TraceContext
from qrorder.application.use_cases.publishing import publish_best_effort
from qrorder.domain.common.ids import OrderId, RestaurantId, TrackingCode
from qrorder.domain.identity.entities import TenantContext
from qrorder.domain.order.entities import Order, OrderLine, create_pending_order
from qrorder.domain.order.events import OrderPlaced
from qrorder.domain.order.tracking import TrackingCodeSpaceExhaustedError, generate_unique_code
from qrorder.domain.restaurant.entities import RestaurantBlockedError

logger = logging.getLogger(__name__)

MAX_INSERT_ATTEMPTS = 5
MAX_TABLE_NUMBER = 10_000
MAX_ORDER_LINES = 100

CodeGenerator = Callable[[Callable[[str], bool]], TrackingCode]


class PlaceOrder:
    def __init__(
        self,
        restaurant_repository: RestaurantRepository,
        catalog_repository: CatalogRepository,
        order_repository: OrderRepository,
        publisher: EventPublisher,
        code_generator: CodeGenerator = generate_unique_code,
    ) -> None:
        self._restaurant_repository = restaurant_repository
        self._catalog = CatalogSnapshot(catalog_repository)
        self._order_repository = order_repository
        self._publisher = publisher
        self._code_generator = code_generator

    def execute(
        self,
        tenant: TenantContext | None,
        request_dto: PlaceOrderRequest,
        trace_ctx: TraceContext,
    ) -> OrderResponse:
        if tenant is not None and tenant.is_operator:
            record_order_refused("operator_caller")
            raise TenantAccessDeniedError("restaurant operators cannot place customer orders")

        restaurant_id = RestaurantId(request_dto.restaurant_id)
        restaurant = self._restaurant_repository.get(restaurant_id)
        if restaurant is None:
            record_order_refused("restaurant_not_found")
            raise RestaurantNotFoundError(f"restaurant {restaurant_id} not found")
        try:
            restaurant.ensure_active()
        except RestaurantBlockedError as exc:
            record_order_refused("restaurant_blocked")
            raise RestaurantUnavailableError(
                "restaurant is currently blocked and cannot accept orders"
            ) from exc

        table_number = request_dto.table_number
        if isinstance(table_number, bool) or table_number < 1:
            raise OrderValidationError("tableNumber must be a positive integer")
        if table_number > MAX_TABLE_NUMBER:
            raise OrderValidationError(f"tableNumber must not exceed {MAX_TABLE_NUMBER}")
        if not request_dto.lines:
            raise OrderValidationError("order must contain at least one line")
        if len(request_dto.lines) > MAX_ORDER_LINES:
            raise OrderValidationError(f"order must not exceed {MAX_ORDER_LINES} lines")

        # Every line is resolved before anything is written.
        order_lines = [
            self._catalog.resolve_line(
                restaurant_id=restaurant_id,
                menu_item_id=request_line.menu_item_id,
                quantity=request_line.quantity,
            )
            for request_line in request_dto.lines
        ]
        if len({line.unit_price.currency for line in order_lines}) > 1:
            raise OrderValidationError("order lines must share one currency")

        order = self._persist_with_fresh_code(
            restaurant_id=restaurant_id,
            table_number=table_number,
            lines=order_lines,
            now=datetime.now(timezone.utc),
        )

        event = OrderPlaced(
            order_id=order.order_id,
            restaurant_id=order.restaurant_id,
            table_number=order.table_number,
            tracking_code=order.tracking_code,
            total=order.total,
            created_at=order.created_at,
        )
        message = serialize_order_event(
            event_type="order.placed",
            occurred_at=event.created_at,
            order=order,
            trace_id=trace_ctx.trace_id,
            request_id=trace_ctx.request_id,
        )
        record_order_status(order)
        publish_best_effort(self._publisher, str(restaurant_id), message)
        logger.info(
            "order_placed",
            extra={
                "order_id": str(event.order_id),
                "restaurant_id": str(event.restaurant_id),
                "tracking_code": str(event.tracking_code),
                "amount_cents": event.total.amount_cents,
            },
        )
        return to_order_response(order)

    def _persist_with_fresh_code(
        self,
        restaurant_id: RestaurantId,
        table_number: int,
        lines: list[OrderLine],
        now: datetime,
    ) -> Order:
        order_id = OrderId(f"ord_{uuid4().hex[:12]}")
        for attempt in range(1, MAX_INSERT_ATTEMPTS + 1):
            try:
                tracking_code = self._code_generator(self._order_repository.tracking_code_exists)
            except TrackingCodeSpaceExhaustedError as exc:
                logger.error("tracking_code_space_exhausted", extra={"attempt": attempt})
                raise TrackingCodeExhaustedError(str(exc)) from exc

            order = create_pending_order(
                order_id=order_id,
                restaurant_id=restaurant_id,
                table_number=table_number,
                lines=lines,
                tracking_code=tracking_code,
                now=now,
            )
            try:
                self._order_repository.add(order)
            except DuplicateTrackingCodeError:
                # Lost the race between the existence check and the insert.
                record_tracking_code_collision()
                logger.warning(
                    "tracking_code_collision",
                    extra={"tracking_code": str(tracking_code), "attempt": attempt},
                )
                continue
            return order

        logger.error(
            "tracking_code_insert_retries_exhausted",
            extra={"attempt": MAX_INSERT_ATTEMPTS},
        )
        raise TrackingCodeExhaustedError(
            f"tracking code still colliding after {MAX_INSERT_ATTEMPTS} insert attempts"
        )
