from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class MoneyResponse(BaseModel):
    amountCents: int
    currency: str


class OrderLineResponse(BaseModel):
    menuItemId: str
    name: str
    quantity: int
    unitPrice: MoneyResponse
    lineTotal: MoneyResponse


class OrderResponse(BaseModel):
    """A placed order. The order total is `total`, a Money object in minor units
    (`amountCents` plus `currency`) that always equals the sum of `lines[].lineTotal`.
    """

    orderId: str
    restaurantId: str
    tableNumber: int
    status: str
    trackingCode: str
    lines: list[OrderLineResponse] = Field(default_factory=list)
    total: MoneyResponse
    createdAt: datetime
    updatedAt: datetime


class OrderListResponse(BaseModel):
    orders: list[OrderResponse] = Field(default_factory=list)
    count: int
    nextCursor: str | None = None


class RestaurantResponse(BaseModel):
    restaurantId: str
    name: str
    slug: str
    status: str


class TrackedOrderResponse(BaseModel):
    order: OrderResponse
    restaurant: RestaurantResponse


class CategoryResponse(BaseModel):
    categoryId: str
    name: str
    position: int


class MenuItemResponse(BaseModel):
    itemId: str
    name: str
    description: str | None = None
    priceMoney: MoneyResponse
    isAvailable: bool
    categoryId: str | None = None


class CustomerMenuResponse(BaseModel):
    restaurantId: str
    categories: list[CategoryResponse] = Field(default_factory=list)
    items: list[MenuItemResponse] = Field(default_factory=list)


class TodayStatsResponse(BaseModel):
    totalOrdersToday: int
    totalSalesToday: int
    yesterdaySales: int
    salesDifferencePercentage: float


class MonthlyStatsResponse(BaseModel):
    totalOrdersThisMonth: int
    totalSalesThisMonth: int


class MostSoldDishResponse(BaseModel):
    dishName: str | None = None
    quantitySold: int


class PeakTimeResponse(BaseModel):
    hour: int | None = None
    orderCount: int


class PeakDayResponse(BaseModel):
    weekday: str | None = None
    orderCount: int


class AnalyticsOverviewResponse(BaseModel):
    today: TodayStatsResponse
    monthly: MonthlyStatsResponse
    mostSoldDish: MostSoldDishResponse
    peakTime: PeakTimeResponse
    peakDay: PeakDayResponse


class DailySalesResponse(BaseModel):
    date: str
    orders: int
    sales: int


class MonthlySalesReportResponse(BaseModel):
    month: str
    year: int
    totalOrders: int
    totalSales: int
    averageOrderValue: float
    days: list[DailySalesResponse] = Field(default_factory=list)


class DashboardStatsResponse(BaseModel):
    totalMenuItems: int
    todayOrders: int
    pendingOrders: int
