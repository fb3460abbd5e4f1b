from __future__ import annotations

from qrorder.application.errors import OrderNotFoundError, TenantAccessDeniedError
from qrorder.application.ports.repositories import OrderRepository
from qrorder.domain.common.ids import OrderId
from qrorder.domain.identity.entities import TenantContext
from qrorder.domain.order.entities import Order


def require_operator(tenant: TenantContext | None) -> TenantContext:
    if tenant is None or not tenant.is_operator:
        raise TenantAccessDeniedError("restaurant operator privileges required")
    return tenant


def load_owned_order(
    order_repository: OrderRepository,
    tenant: TenantContext,
    order_id: OrderId,
) -> Order:
    """Absent orders are NotFound; orders of another restaurant are Forbidden."""
    order = order_repository.get(order_id)
    if order is None:
        raise OrderNotFoundError(f"order {order_id} not found")
    if not tenant.owns(order.restaurant_id):
        raise TenantAccessDeniedError("access denied, you can only access your own restaurant")
    return order
