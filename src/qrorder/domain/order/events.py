from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from qrorder.domain.common.ids import OrderId, RestaurantId, TrackingCode
from qrorder.domain.common.money import Money
from qrorder.domain.order.entities import OrderStatus


@dataclass(frozen=True)
class OrderPlaced:
    order_id: OrderId
    restaurant_id: RestaurantId
    table_number: int
    tracking_code: TrackingCode
    total: Money
    created_at: datetime


@dataclass(frozen=True)
class OrderStatusChanged:
    order_id: OrderId
    restaurant_id: RestaurantId
    from_status: OrderStatus
    to_status: OrderStatus
    occurred_at: datetime

    @property
    def event_type(self) -> str:
        return f"order.{self.to_status.value.lower()}"
