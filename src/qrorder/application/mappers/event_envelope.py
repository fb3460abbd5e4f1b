from __future__ import annotations

import json
from datetime import datetime
from typing import Any
from uuid import uuid4

from qrorder.domain.order.entities import Order


def event_channel(restaurant_id: str) -> str:
    return f"events:{restaurant_id}"


def serialize_order_event(
    *,
    event_type: str,
    occurred_at: datetime,
    order: Order,
    trace_id: str | None,
    request_id: str | None,
    previous_status: str | None = None,
) -> str:
    payload: dict[str, Any] = {
        "orderId": str(order.order_id),
        "tableNumber": order.table_number,
        "trackingCode": str(order.tracking_code),
        "status": order.status.value,
        "previousStatus": previous_status,
        "totalMoney": {
            "amountCents": order.total.amount_cents,
            "currency": order.total.currency,
        },
        "createdAt": order.created_at.isoformat(),
        "updatedAt": order.updated_at.isoformat(),
        "lines": [
            {
                "menuItemId": str(line.menu_item_id),
                "name": line.name,
                "quantity": line.quantity,
                "unitPriceCents": line.unit_price.amount_cents,
                "lineTotalCents": line.line_total.amount_cents,
            }
            for line in order.lines
        ],
    }
    envelope = {
        "event_id": str(uuid4()),
        "event_type": event_type,
        "occurred_at": occurred_at.isoformat(),
        "request_id": request_id,
        "trace_id": trace_id,
        "restaurant_id": str(order.restaurant_id),
        "payload": payload,
    }
    return json.dumps(envelope, separators=(",", ":"), ensure_ascii=False)
