from __future__ import annotations

import calendar
from datetime import datetime, timedelta, timezone
from typing import Callable

from qrorder.application.dto.responses import (
    AnalyticsOverviewResponse,
    DailySalesResponse,
    DashboardStatsResponse,
    MonthlySalesReportResponse,
    MonthlyStatsResponse,
    MostSoldDishResponse,
    PeakDayResponse,
    PeakTimeResponse,
    TodayStatsResponse,
)
from qrorder.application.ports.repositories import CatalogRepository, ReportingRepository
from qrorder.application.use_cases.tenancy import require_operator
from qrorder.domain.common.ids import RestaurantId
from qrorder.domain.identity.entities import TenantContext
from qrorder.domain.order.entities import OrderStatus

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def start_of_day(moment: datetime) -> datetime:
    return moment.astimezone(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_month(moment: datetime) -> datetime:
    return start_of_day(moment).replace(day=1)


def start_of_next_month(moment: datetime) -> datetime:
    first = start_of_month(moment)
    if first.month == 12:
        return first.replace(year=first.year + 1, month=1)
    return first.replace(month=first.month + 1)


def sales_difference_percentage(today_cents: int, yesterday_cents: int) -> float:
    if yesterday_cents > 0:
        return round((today_cents - yesterday_cents) / yesterday_cents * 100, 2)
    return 100.0 if today_cents > 0 else 0.0


def _scope(tenant: TenantContext | None) -> RestaurantId:
    return RestaurantId(str(require_operator(tenant).restaurant_id))


class GetAnalyticsOverview:
    """Sales figures over finalized (accepted or ready) orders, in UTC days."""

    def __init__(self, reporting_repository: ReportingRepository, clock: Clock = _utc_now) -> None:
        self._reporting = reporting_repository
        self._clock = clock

    def execute(self, tenant: TenantContext | None) -> AnalyticsOverviewResponse:
        restaurant_id = _scope(tenant)
        now = self._clock()
        today_start = start_of_day(now)
        yesterday_start = today_start - timedelta(days=1)

        today = self._reporting.sales_between(restaurant_id, today_start, None)
        yesterday = self._reporting.sales_between(restaurant_id, yesterday_start, today_start)
        month = self._reporting.sales_between(restaurant_id, start_of_month(now), None)
        top_item = self._reporting.top_item(restaurant_id)
        peak_hour = self._reporting.peak_hour(restaurant_id)
        peak_weekday = self._reporting.peak_weekday(restaurant_id)

        return AnalyticsOverviewResponse(
            today=TodayStatsResponse(
                totalOrdersToday=today.orders,
                totalSalesToday=today.amount_cents,
                yesterdaySales=yesterday.amount_cents,
                salesDifferencePercentage=sales_difference_percentage(
                    today.amount_cents, yesterday.amount_cents
                ),
            ),
            monthly=MonthlyStatsResponse(
                totalOrdersThisMonth=month.orders,
                totalSalesThisMonth=month.amount_cents,
            ),
            mostSoldDish=MostSoldDishResponse(
                dishName=top_item.name if top_item else None,
                quantitySold=top_item.quantity if top_item else 0,
            ),
            peakTime=PeakTimeResponse(
                hour=peak_hour.bucket if peak_hour else None,
                orderCount=peak_hour.orders if peak_hour else 0,
            ),
            peakDay=PeakDayResponse(
                # Buckets are Monday=0 .. Sunday=6.
                weekday=calendar.day_name[peak_weekday.bucket] if peak_weekday else None,
                orderCount=peak_weekday.orders if peak_weekday else 0,
            ),
        )


class GetMonthlySalesReport:
    def __init__(self, reporting_repository: ReportingRepository, clock: Clock = _utc_now) -> None:
        self._reporting = reporting_repository
        self._clock = clock

    def execute(self, tenant: TenantContext | None) -> MonthlySalesReportResponse:
        restaurant_id = _scope(tenant)
        now = self._clock()
        month_start = start_of_month(now)
        days = self._reporting.daily_sales(restaurant_id, month_start, start_of_next_month(now))

        total_orders = sum(day.orders for day in days)
        total_sales = sum(day.amount_cents for day in days)
        average = round(total_sales / total_orders, 2) if total_orders else 0.0
        return MonthlySalesReportResponse(
            month=calendar.month_name[month_start.month],
            year=month_start.year,
            totalOrders=total_orders,
            totalSales=total_sales,
            averageOrderValue=average,
            days=[
                DailySalesResponse(date=day.day, orders=day.orders, sales=day.amount_cents)
                for day in days
            ],
        )


class GetDashboardStats:
    def __init__(
        self,
        catalog_repository: CatalogRepository,
        reporting_repository: ReportingRepository,
        clock: Clock = _utc_now,
    ) -> None:
        self._catalog = catalog_repository
        self._reporting = reporting_repository
        self._clock = clock

    def execute(self, tenant: TenantContext | None) -> DashboardStatsResponse:
        restaurant_id = _scope(tenant)
        today_start = start_of_day(self._clock())
        return DashboardStatsResponse(
            totalMenuItems=self._catalog.count_items(restaurant_id),
            todayOrders=self._reporting.count_orders(restaurant_id, since=today_start),
            pendingOrders=self._reporting.count_orders(
                restaurant_id, status=OrderStatus.PENDING
            ),
        )
