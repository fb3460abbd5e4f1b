from __future__ import annotations

from fastapi import APIRouter, Depends

from qrorder.api.auth import require_tenant
from qrorder.application.dto.responses import (
    AnalyticsOverviewResponse,
    DashboardStatsResponse,
    MonthlySalesReportResponse,
)
from qrorder.application.use_cases.analytics import (
    GetAnalyticsOverview,
    GetDashboardStats,
    GetMonthlySalesReport,
)
from qrorder.domain.identity.entities import TenantContext
from qrorder.infrastructure.db.repositories.menu_repo import SqlAlchemyCatalogRepository
from qrorder.infrastructure.db.repositories.reporting_repo import SqlAlchemyReportingRepository

router = APIRouter()


def _analytics_overview_use_case() -> GetAnalyticsOverview:
    return GetAnalyticsOverview(reporting_repository=SqlAlchemyReportingRepository())


def _monthly_report_use_case() -> GetMonthlySalesReport:
    return GetMonthlySalesReport(reporting_repository=SqlAlchemyReportingRepository())


def _dashboard_stats_use_case() -> GetDashboardStats:
    return GetDashboardStats(
        catalog_repository=SqlAlchemyCatalogRepository(),
        reporting_repository=SqlAlchemyReportingRepository(),
    )


@router.get("/v1/analytics/overview", response_model=AnalyticsOverviewResponse)
def analytics_overview(
    tenant: TenantContext = Depends(require_tenant),
) -> AnalyticsOverviewResponse:
    return _analytics_overview_use_case().execute(tenant)


@router.get("/v1/analytics/monthly", response_model=MonthlySalesReportResponse)
def monthly_sales_report(
    tenant: TenantContext = Depends(require_tenant),
) -> MonthlySalesReportResponse:
    return _monthly_report_use_case().execute(tenant)


@router.get("/v1/dashboard/stats", response_model=DashboardStatsResponse)
def dashboard_stats(tenant: TenantContext = Depends(require_tenant)) -> DashboardStatsResponse:
    return _dashboard_stats_use_case().execute(tenant)
