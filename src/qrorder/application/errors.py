from __future__ import annotations


class OrderValidationError(Exception):
    pass


class AuthenticationError(Exception):
    pass


class TenantAccessDeniedError(Exception):
    pass


class RestaurantNotFoundError(Exception):
    pass


class RestaurantUnavailableError(Exception):
    pass


class OrderNotFoundError(Exception):
    pass


class MenuItemUnavailableError(Exception):
    pass


class InvalidOrderTransitionError(Exception):
    pass


class TrackingCodeExhaustedError(Exception):
    pass
