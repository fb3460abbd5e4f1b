from __future__ import annotations

import logging

from qrorder.application.mappers.event_envelope import event_channel
from qrorder.application.ports.publisher import EventPublisher

logger = logging.getLogger(__name__)


def publish_best_effort(publisher: EventPublisher, restaurant_id: str, message: str) -> None:
    """Order state is already committed here; a broker outage must not fail the request."""
    try:
        publisher.publish(channel=event_channel(restaurant_id), message=message)
    except Exception:
        logger.exception("order_event_publish_failed", extra={"restaurant_id": restaurant_id})
