from __future__ import annotations

import base64
from datetime import datetime, timezone

from sqlalchemy import Engine, and_, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from qrorder.application.ports.repositories import (
    DuplicateTrackingCodeError,
    InvalidCursorError,
    OrderRepository,
    StaleOrderStatusError,
)
from qrorder.domain.common.ids import MenuItemId, OrderId, RestaurantId, TrackingCode
from qrorder.domain.common.money import Money
from qrorder.domain.order.entities import Order, OrderLine, OrderStatus
from qrorder.infrastructure.db.models.order import OrderLineModel, OrderModel
from qrorder.infrastructure.db.session import get_engine


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class SqlAlchemyOrderRepository(OrderRepository):
    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def add(self, order: Order) -> None:
        with Session(self._engine) as session:
            session.add(self._to_model(order))
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                if "tracking_code" in str(exc.orig).lower():
                    raise DuplicateTrackingCodeError(order.tracking_code) from exc
                raise

    def get(self, order_id: OrderId) -> Order | None:
        statement = (
            select(OrderModel)
            .options(joinedload(OrderModel.lines))
            .where(OrderModel.id == str(order_id))
            .limit(1)
        )
        with Session(self._engine) as session:
            model = session.execute(statement).unique().scalar_one_or_none()
        if model is None:
            return None
        return self._to_domain(model)

    def get_by_tracking_code(self, tracking_code: str) -> Order | None:
        statement = (
            select(OrderModel)
            .options(joinedload(OrderModel.lines))
            .where(OrderModel.tracking_code == tracking_code)
            .limit(1)
        )
        with Session(self._engine) as session:
            model = session.execute(statement).unique().scalar_one_or_none()
        if model is None:
            return None
        return self._to_domain(model)

    def tracking_code_exists(self, tracking_code: str) -> bool:
        statement = select(OrderModel.id).where(OrderModel.tracking_code == tracking_code).limit(1)
        with Session(self._engine) as session:
            return session.execute(statement).first() is not None

    def update_status(
        self,
        order_id: OrderId,
        expected_status: OrderStatus,
        new_status: OrderStatus,
        updated_at: datetime,
    ) -> Order:
        statement = (
            update(OrderModel)
            .where(
                OrderModel.id == str(order_id),
                OrderModel.status == expected_status.value,
            )
            .values(status=new_status.value, updated_at=updated_at)
        )
        with Session(self._engine) as session:
            result = session.execute(statement)
            if result.rowcount != 1:
                session.rollback()
                raise StaleOrderStatusError(
                    f"order {order_id} is no longer in status={expected_status.value}"
                )
            session.commit()

        updated = self.get(order_id)
        if updated is None:
            raise RuntimeError(f"order {order_id} not found after status update")
        return updated

    def list_for_restaurant(
        self,
        restaurant_id: RestaurantId,
        status: OrderStatus | None,
        table_number: int | None,
        limit: int,
        cursor: str | None,
    ) -> tuple[list[Order], str | None]:
        statement = (
            select(OrderModel)
            .options(joinedload(OrderModel.lines))
            .where(OrderModel.restaurant_id == str(restaurant_id))
        )
        if status is not None:
            statement = statement.where(OrderModel.status == status.value)
        if table_number is not None:
            statement = statement.where(OrderModel.table_number == table_number)

        cursor_parts = _decode_cursor(cursor) if cursor else None
        if cursor_parts is not None:
            cursor_created_at, cursor_order_id = cursor_parts
            statement = statement.where(
                or_(
                    OrderModel.created_at < cursor_created_at,
                    and_(
                        OrderModel.created_at == cursor_created_at,
                        OrderModel.id < cursor_order_id,
                    ),
                )
            )

        statement = statement.order_by(OrderModel.created_at.desc(), OrderModel.id.desc()).limit(
            limit + 1
        )

        with Session(self._engine) as session:
            models = list(session.execute(statement).unique().scalars().all())

        has_more = len(models) > limit
        page_models = models[:limit]
        orders = [self._to_domain(model) for model in page_models]
        next_cursor: str | None = None
        if has_more and page_models:
            last = page_models[-1]
            next_cursor = _encode_cursor(as_utc(last.created_at), last.id)
        return orders, next_cursor

    def _to_model(self, order: Order) -> OrderModel:
        order_model = OrderModel(
            id=str(order.order_id),
            restaurant_id=str(order.restaurant_id),
            table_number=order.table_number,
            status=order.status.value,
            tracking_code=str(order.tracking_code),
            total_cents=order.total.amount_cents,
            currency=order.total.currency,
            created_at=order.created_at,
            updated_at=order.updated_at,
        )
        order_model.lines = [
            OrderLineModel(
                id=f"{order.order_id}:{position}",
                order_id=str(order.order_id),
                position=position,
                menu_item_id=str(line.menu_item_id),
                name=line.name,
                quantity=line.quantity,
                unit_price_cents=line.unit_price.amount_cents,
                currency=line.unit_price.currency,
                line_total_cents=line.line_total.amount_cents,
            )
            for position, line in enumerate(order.lines)
        ]
        return order_model

    def _to_domain(self, model: OrderModel) -> Order:
        lines = tuple(
            OrderLine(
                menu_item_id=MenuItemId(line.menu_item_id),
                name=line.name,
                unit_price=Money(amount_cents=line.unit_price_cents, currency=line.currency),
                quantity=line.quantity,
            )
            for line in model.lines
        )
        return Order(
            order_id=OrderId(model.id),
            restaurant_id=RestaurantId(model.restaurant_id),
            table_number=model.table_number,
            status=OrderStatus(model.status),
            lines=lines,
            total=Money(amount_cents=model.total_cents, currency=model.currency),
            tracking_code=TrackingCode(model.tracking_code),
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
        )


def _encode_cursor(created_at: datetime, order_id: str) -> str:
    payload = f"{created_at.isoformat()}|{order_id}"
    return base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii")


def _decode_cursor(cursor: str) -> tuple[datetime, str]:
    try:
        raw = base64.urlsafe_b64decode(cursor.encode("ascii")).decode("utf-8")
        created_at_raw, order_id = raw.split("|", 1)
        return as_utc(datetime.fromisoformat(created_at_raw)), order_id
    except Exception as exc:
        raise InvalidCursorError("invalid cursor") from exc
