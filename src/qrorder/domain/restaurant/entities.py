from __future__ import annotations

import re
from dataclasses import dataclass, replace
from enum import Enum

from qrorder.domain.common.ids import RestaurantId

_SLUG_PATTERN = re.compile(r"^[a-z0-9-]+$")


class RestaurantStatus(str, Enum):
    ACTIVE = "ACTIVE"
    BLOCKED = "BLOCKED"


@dataclass(frozen=True)
class Restaurant:
    restaurant_id: RestaurantId
    name: str
    slug: str
    status: RestaurantStatus

    def __post_init__(self) -> None:
        if not self.name.strip():
            raise ValueError("name must be non-empty")
        if not _SLUG_PATTERN.match(self.slug):
            raise ValueError("slug may only contain lowercase letters, digits and hyphens")

    @property
    def is_blocked(self) -> bool:
        return self.status == RestaurantStatus.BLOCKED

    def ensure_active(self) -> None:
        if self.is_blocked:
            raise RestaurantBlockedError(f"restaurant {self.restaurant_id} is blocked")

    def with_status(self, status: RestaurantStatus) -> Restaurant:
        return replace(self, status=status)


class RestaurantBlockedError(Exception):
    pass
