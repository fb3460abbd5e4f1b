from __future__ import annotations

# Importing every model module registers all tables on Base.metadata.
from qrorder.infrastructure.db.models.menu import CategoryModel, MenuItemModel
from qrorder.infrastructure.db.models.order import OrderLineModel, OrderModel
from qrorder.infrastructure.db.models.restaurant import Base, RestaurantModel, UserModel

__all__ = [
    "Base",
    "CategoryModel",
    "MenuItemModel",
    "OrderLineModel",
    "OrderModel",
    "RestaurantModel",
    "UserModel",
]
