from __future__ import annotations

from typing import Any

from sqlalchemy import inspect
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.orm import Session

from qrorder.infrastructure.db.models.menu import CategoryModel, MenuItemModel
from qrorder.infrastructure.db.models.restaurant import RestaurantModel, UserModel
from qrorder.infrastructure.db.session import get_engine
from qrorder.infrastructure.security.jwt_tokens import issue_access_token

RESTAURANTS: list[dict[str, Any]] = [
    {"id": "rst_001", "name": "Spice Route", "slug": "spice-route", "status": "ACTIVE"},
    {"id": "rst_002", "name": "Harbor Grill", "slug": "harbor-grill", "status": "BLOCKED"},
]

CATEGORIES: list[dict[str, Any]] = [
    {"id": "cat_001", "restaurant_id": "rst_001", "name": "Starters", "position": 1},
    {"id": "cat_002", "restaurant_id": "rst_001", "name": "Mains", "position": 2},
    {"id": "cat_003", "restaurant_id": "rst_002", "name": "Grill", "position": 1},
]

MENU_ITEMS: list[dict[str, Any]] = [
    {
        "id": "itm_001",
        "restaurant_id": "rst_001",
        "category_id": "cat_001",
        "name": "Paneer Tikka",
        "description": "Chargrilled cottage cheese, mint chutney",
        "price_cents": 24900,
        "currency": "INR",
        "is_available": True,
    },
    {
        "id": "itm_002",
        "restaurant_id": "rst_001",
        "category_id": "cat_002",
        "name": "Butter Chicken",
        "description": "Tomato butter gravy",
        "price_cents": 34900,
        "currency": "INR",
        "is_available": True,
    },
    {
        "id": "itm_003",
        "restaurant_id": "rst_001",
        "category_id": "cat_002",
        "name": "Dal Makhani",
        "description": "Slow cooked black lentils",
        "price_cents": 22900,
        "currency": "INR",
        "is_available": True,
    },
    {
        "id": "itm_004",
        "restaurant_id": "rst_001",
        "category_id": "cat_002",
        "name": "Mutton Biryani",
        "description": "Weekend special",
        "price_cents": 42900,
        "currency": "INR",
        "is_available": False,
    },
    {
        "id": "itm_005",
        "restaurant_id": "rst_002",
        "category_id": "cat_003",
        "name": "Grilled Fish",
        "description": "Catch of the day",
        "price_cents": 52900,
        "currency": "INR",
        "is_available": True,
    },
]

USERS: list[dict[str, Any]] = [
    {
        "id": "usr_admin",
        "username": "platform-admin",
        "role": "PLATFORM_ADMIN",
        "is_active": True,
        "restaurant_id": None,
    },
    {
        "id": "usr_op_001",
        "username": "spice-route-ops",
        "role": "OPERATOR",
        "is_active": True,
        "restaurant_id": "rst_001",
    },
    {
        "id": "usr_op_002",
        "username": "harbor-grill-ops",
        "role": "OPERATOR",
        "is_active": True,
        "restaurant_id": "rst_002",
    },
    {
        "id": "usr_op_inactive",
        "username": "former-staff",
        "role": "OPERATOR",
        "is_active": False,
        "restaurant_id": "rst_001",
    },
]


def _upsert(session: Session, model: type, rows: list[dict[str, Any]]) -> None:
    for row in rows:
        session.execute(
            insert(model)
            .values(**row)
            .on_conflict_do_update(
                index_elements=[model.id],
                set_={key: value for key, value in row.items() if key != "id"},
            )
        )


def main() -> None:
    engine = get_engine(timeout_seconds=2.0)
    inspector = inspect(engine)
    required_tables = {"restaurants", "users", "categories", "menu_items"}
    if not required_tables.issubset(set(inspector.get_table_names(schema="public"))):
        print("no schema yet")
        return

    with Session(engine) as session:
        _upsert(session, RestaurantModel, RESTAURANTS)
        _upsert(session, CategoryModel, CATEGORIES)
        _upsert(session, MenuItemModel, MENU_ITEMS)
        _upsert(session, UserModel, USERS)
        session.commit()

    print("seed complete")
    for user in USERS:
        print(f"{user['username']}: {issue_access_token(user['id'])}")


if __name__ == "__main__":
    main()
