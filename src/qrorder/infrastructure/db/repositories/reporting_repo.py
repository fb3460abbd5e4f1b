from __future__ import annotations

from datetime import date, datetime
from typing import Any

from sqlalchemy import ColumnElement, Engine, Row, extract, func, select
from sqlalchemy.orm import Session

from qrorder.application.ports.repositories import (
    BucketCount,
    DailySales,
    ItemQuantity,
    ReportingRepository,
    SalesTotals,
)
from qrorder.domain.common.ids import RestaurantId
from qrorder.domain.order.entities import OrderStatus
from qrorder.infrastructure.db.models.order import OrderLineModel, OrderModel
from qrorder.infrastructure.db.session import get_engine

FINALIZED_STATUSES = (OrderStatus.ACCEPTED.value, OrderStatus.READY.value)


def _finalized(restaurant_id: RestaurantId) -> tuple[ColumnElement[bool], ...]:
    return (
        OrderModel.restaurant_id == str(restaurant_id),
        OrderModel.status.in_(FINALIZED_STATUSES),
    )


class SqlAlchemyReportingRepository(ReportingRepository):
    """Aggregates over finalized orders.

    Hour and weekday buckets are taken from the stored UTC timestamps.
    """

    def __init__(self, engine: Engine | None = None) -> None:
        self._engine = engine or get_engine()

    def sales_between(
        self,
        restaurant_id: RestaurantId,
        start: datetime,
        end: datetime | None,
    ) -> SalesTotals:
        statement = select(
            func.count(OrderModel.id),
            func.coalesce(func.sum(OrderModel.total_cents), 0),
        ).where(*_finalized(restaurant_id), OrderModel.created_at >= start)
        if end is not None:
            statement = statement.where(OrderModel.created_at < end)
        with Session(self._engine) as session:
            orders, amount = session.execute(statement).one()
        return SalesTotals(orders=int(orders), amount_cents=int(amount))

    def daily_sales(
        self,
        restaurant_id: RestaurantId,
        start: datetime,
        end: datetime,
    ) -> list[DailySales]:
        day = func.date(OrderModel.created_at)
        statement = (
            select(
                day.label("day"),
                func.count(OrderModel.id),
                func.coalesce(func.sum(OrderModel.total_cents), 0),
            )
            .where(
                *_finalized(restaurant_id),
                OrderModel.created_at >= start,
                OrderModel.created_at < end,
            )
            .group_by(day)
            .order_by(day)
        )
        with Session(self._engine) as session:
            rows = session.execute(statement).all()
        return [
            DailySales(day=_day_label(row[0]), orders=int(row[1]), amount_cents=int(row[2]))
            for row in rows
        ]

    def top_item(self, restaurant_id: RestaurantId) -> ItemQuantity | None:
        quantity = func.sum(OrderLineModel.quantity)
        statement = (
            select(OrderLineModel.name, quantity.label("quantity"))
            .join(OrderModel, OrderModel.id == OrderLineModel.order_id)
            .where(*_finalized(restaurant_id))
            .group_by(OrderLineModel.menu_item_id, OrderLineModel.name)
            .order_by(quantity.desc(), OrderLineModel.name)
            .limit(1)
        )
        with Session(self._engine) as session:
            row = session.execute(statement).first()
        if row is None:
            return None
        return ItemQuantity(name=row[0], quantity=int(row[1]))

    def peak_hour(self, restaurant_id: RestaurantId) -> BucketCount | None:
        row = self._busiest(restaurant_id, extract("hour", OrderModel.created_at))
        if row is None:
            return None
        return BucketCount(bucket=int(row[0]), orders=int(row[1]))

    def peak_weekday(self, restaurant_id: RestaurantId) -> BucketCount | None:
        row = self._busiest(restaurant_id, extract("dow", OrderModel.created_at))
        if row is None:
            return None
        # dow counts from Sunday=0; buckets are reported Monday=0.
        return BucketCount(bucket=(int(row[0]) + 6) % 7, orders=int(row[1]))

    def count_orders(
        self,
        restaurant_id: RestaurantId,
        *,
        status: OrderStatus | None = None,
        since: datetime | None = None,
        until: datetime | None = None,
    ) -> int:
        statement = select(func.count(OrderModel.id)).where(
            OrderModel.restaurant_id == str(restaurant_id)
        )
        if status is not None:
            statement = statement.where(OrderModel.status == status.value)
        if since is not None:
            statement = statement.where(OrderModel.created_at >= since)
        if until is not None:
            statement = statement.where(OrderModel.created_at < until)
        with Session(self._engine) as session:
            return int(session.execute(statement).scalar_one())

    def _busiest(
        self,
        restaurant_id: RestaurantId,
        bucket: ColumnElement[Any],
    ) -> Row[Any] | None:
        orders = func.count(OrderModel.id)
        statement = (
            select(bucket.label("bucket"), orders.label("orders"))
            .where(*_finalized(restaurant_id))
            .group_by(bucket)
            .order_by(orders.desc(), bucket)
            .limit(1)
        )
        with Session(self._engine) as session:
            return session.execute(statement).first()


def _day_label(value: date | str) -> str:
    if isinstance(value, date):
        return value.isoformat()
    return str(value)
