from __future__ import annotations

from qrorder.application.dto.responses import OrderListResponse
from qrorder.application.errors import OrderValidationError, TenantAccessDeniedError
from qrorder.application.mappers.order_mapper import to_order_response
from qrorder.application.ports.repositories import InvalidCursorError, OrderRepository
from qrorder.application.use_cases.tenancy import require_operator
from qrorder.domain.common.ids import RestaurantId
from qrorder.domain.identity.entities import TenantContext
from qrorder.domain.order.entities import OrderStatus

_STATUS_MAP: dict[str, OrderStatus | None] = {
    "ALL": None,
    "PENDING": OrderStatus.PENDING,
    "ACCEPTED": OrderStatus.ACCEPTED,
    "REJECTED": OrderStatus.REJECTED,
    "READY": OrderStatus.READY,
}


class ListOrders:
    def __init__(self, order_repository: OrderRepository) -> None:
        self._order_repository = order_repository

    def execute(
        self,
        tenant: TenantContext | None,
        *,
        status: str = "ALL",
        table_number: int | None = None,
        restaurant_id: str | None = None,
        limit: int = 50,
        cursor: str | None = None,
    ) -> OrderListResponse:
        operator = require_operator(tenant)
        scope = RestaurantId(str(operator.restaurant_id))
        if restaurant_id is not None and restaurant_id != str(scope):
            raise TenantAccessDeniedError(
                "access denied, you can only access your own restaurant"
            )

        normalized_status = status.upper()
        if normalized_status not in _STATUS_MAP:
            raise OrderValidationError(f"invalid order status filter: {status}")
        if table_number is not None and table_number < 1:
            raise OrderValidationError("tableNumber must be a positive integer")
        if limit < 1 or limit > 200:
            raise OrderValidationError("limit must be between 1 and 200")

        try:
            orders, next_cursor = self._order_repository.list_for_restaurant(
                restaurant_id=scope,
                status=_STATUS_MAP[normalized_status],
                table_number=table_number,
                limit=limit,
                cursor=cursor,
            )
        except InvalidCursorError as exc:
            raise OrderValidationError("invalid cursor") from exc

        return OrderListResponse(
            orders=[to_order_response(order) for order in orders],
            count=len(orders),
            nextCursor=next_cursor,
        )
