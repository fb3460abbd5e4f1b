from __future__ import annotations

from typing import NewType

RestaurantId = NewType("RestaurantId", str)
CategoryId = NewType("CategoryId", str)
MenuItemId = NewType("MenuItemId", str)
OrderId = NewType("OrderId", str)
UserId = NewType("UserId", str)
TrackingCode = NewType("TrackingCode", str)
