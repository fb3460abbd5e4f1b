from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from qrorder.api.auth import optional_tenant, require_tenant
from qrorder.api.middleware.request_id import get_request_id
from qrorder.application.dto.requests import PlaceOrderRequest, UpdateOrderStatusRequest
from qrorder.application.dto.responses import (
    OrderListResponse,
    OrderResponse,
    TrackedOrderResponse,
)
from qrorder.application.use_cases.context import TraceContext
from qrorder.application.use_cases.get_order import GetOrder
from qrorder.application.use_cases.list_orders import ListOrders
from qrorder.application.use_cases.place_order import PlaceOrder
from qrorder.application.use_cases.track_order import TrackOrder
from qrorder.application.use_cases.update_order_status import UpdateOrderStatus
from qrorder.domain.common.ids import OrderId
from qrorder.domain.identity.entities import TenantContext
from qrorder.infrastructure.db.repositories.menu_repo import SqlAlchemyCatalogRepository
from qrorder.infrastructure.db.repositories.order_repo import SqlAlchemyOrderRepository
from qrorder.infrastructure.db.repositories.restaurant_repo import (
    SqlAlchemyRestaurantRepository,
)
from qrorder.infrastructure.messaging.redis_publisher import RedisEventPublisher
from qrorder.infrastructure.observability.otel import current_trace_id

router = APIRouter()


def _trace_context() -> TraceContext:
    return TraceContext(trace_id=current_trace_id(), request_id=get_request_id())


def _place_order_use_case() -> PlaceOrder:
    return PlaceOrder(
        restaurant_repository=SqlAlchemyRestaurantRepository(),
        catalog_repository=SqlAlchemyCatalogRepository(),
        order_repository=SqlAlchemyOrderRepository(),
        publisher=RedisEventPublisher(),
    )


def _list_orders_use_case() -> ListOrders:
    return ListOrders(order_repository=SqlAlchemyOrderRepository())


def _get_order_use_case() -> GetOrder:
    return GetOrder(order_repository=SqlAlchemyOrderRepository())


def _update_order_status_use_case() -> UpdateOrderStatus:
    return UpdateOrderStatus(
        order_repository=SqlAlchemyOrderRepository(),
        publisher=RedisEventPublisher(),
    )


def _track_order_use_case() -> TrackOrder:
    return TrackOrder(
        order_repository=SqlAlchemyOrderRepository(),
        restaurant_repository=SqlAlchemyRestaurantRepository(),
    )


@router.post("/v1/orders", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def place_order(
    request_dto: PlaceOrderRequest,
    tenant: TenantContext | None = Depends(optional_tenant),
) -> OrderResponse:
    return _place_order_use_case().execute(
        tenant=tenant,
        request_dto=request_dto,
        trace_ctx=_trace_context(),
    )


@router.get("/v1/orders", response_model=OrderListResponse)
def list_orders(
    tenant: TenantContext = Depends(require_tenant),
    order_status: str = Query(default="ALL", alias="status"),
    table_number: int | None = Query(default=None, alias="tableNumber"),
    restaurant_id: str | None = Query(default=None, alias="restaurantId"),
    limit: int = Query(default=50),
    cursor: str | None = Query(default=None),
) -> OrderListResponse:
    return _list_orders_use_case().execute(
        tenant,
        status=order_status,
        table_number=table_number,
        restaurant_id=restaurant_id,
        limit=limit,
        cursor=cursor,
    )


@router.get("/v1/orders/track/{tracking_code}", response_model=TrackedOrderResponse)
def track_order(tracking_code: str) -> TrackedOrderResponse:
    return _track_order_use_case().execute(tracking_code)


@router.get("/v1/orders/{order_id}", response_model=OrderResponse)
def get_order(order_id: str, tenant: TenantContext = Depends(require_tenant)) -> OrderResponse:
    return _get_order_use_case().execute(tenant, OrderId(order_id))


@router.patch("/v1/orders/{order_id}/status", response_model=OrderResponse)
def update_order_status(
    order_id: str,
    request_dto: UpdateOrderStatusRequest,
    tenant: TenantContext = Depends(require_tenant),
) -> OrderResponse:
    return _update_order_status_use_case().execute(
        tenant,
        OrderId(order_id),
        request_dto.status,
        _trace_context(),
    )
