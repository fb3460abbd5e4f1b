from __future__ import annotations

import logging

from fastapi import APIRouter, Response, status

from qrorder.infrastructure.cache.redis_client import ping_redis
from qrorder.infrastructure.db.session import ping_database

router = APIRouter()
logger = logging.getLogger(__name__)

READINESS_TIMEOUT_SECONDS = 1.0


def _readiness_checks() -> dict[str, bool]:
    # Orders need Postgres; redis backs the menu cache and live order events.
    return {
        "postgres": ping_database(timeout_seconds=READINESS_TIMEOUT_SECONDS),
        "redis": ping_redis(timeout_seconds=READINESS_TIMEOUT_SECONDS),
    }


@router.get("/health/live")
def live() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/health/ready")
def ready(response: Response) -> dict[str, object]:
    checks = _readiness_checks()
    failing = [name for name, healthy in checks.items() if not healthy]
    if not failing:
        return {"status": "ok"}

    for name in failing:
        logger.warning("readiness_check_failed", extra={"check": name})
    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return {"status": "unavailable", "checks": checks}
