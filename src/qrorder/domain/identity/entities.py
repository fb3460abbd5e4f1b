from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from qrorder.domain.common.ids import RestaurantId, UserId


class CallerRole(str, Enum):
    PLATFORM_ADMIN = "PLATFORM_ADMIN"
    OPERATOR = "OPERATOR"


@dataclass(frozen=True)
class UserAccount:
    user_id: UserId
    username: str
    role: CallerRole
    is_active: bool
    restaurant_id: RestaurantId | None


@dataclass(frozen=True)
class TenantContext:
    """Authenticated caller for one request.

    An operator is always bound to exactly one restaurant. Building an
    operator context without one raises, so no code path can run with an
    empty tenant scope.
    """

    caller_id: UserId
    role: CallerRole
    restaurant_id: RestaurantId | None = None

    def __post_init__(self) -> None:
        if self.role == CallerRole.OPERATOR and not self.restaurant_id:
            raise UnscopedOperatorError(f"operator {self.caller_id} has no restaurant")
        if self.role == CallerRole.PLATFORM_ADMIN and self.restaurant_id is not None:
            raise ValueError("platform admin context must not carry a restaurant_id")

    @property
    def is_operator(self) -> bool:
        return self.role == CallerRole.OPERATOR

    @property
    def is_platform_admin(self) -> bool:
        return self.role == CallerRole.PLATFORM_ADMIN

    def owns(self, restaurant_id: RestaurantId) -> bool:
        return self.is_operator and str(self.restaurant_id) == str(restaurant_id)


class UnscopedOperatorError(Exception):
    pass
