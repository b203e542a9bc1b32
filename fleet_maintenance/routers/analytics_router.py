"""
Analytics Router

Endpoints:
- GET /api/analytics/maintenance - Cost, downtime and prediction accuracy
- GET /api/analytics/fleet - Health, risk and utilization of the fleet
- GET /api/analytics/financial - Cost breakdown, budget variance and ROI
- GET /api/analytics/report - Comprehensive report for a period or date range
"""

import logging
from datetime import datetime
from typing import Optional, Tuple

from fastapi import APIRouter, Depends, Query

from fleet_maintenance.errors import ValidationError
from fleet_maintenance.models.fleet_models import as_utc
from fleet_maintenance.routers.dependencies import get_analytics
from fleet_maintenance.services import AnalyticsAggregator
from fleet_maintenance.services.analytics_service import REPORT_PERIODS

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/analytics", tags=["Analytics"])


def _date_window(
    start_date: Optional[datetime], end_date: Optional[datetime]
) -> Tuple[Optional[datetime], Optional[datetime]]:
    start, end = as_utc(start_date), as_utc(end_date)
    if start and end and start > end:
        raise ValidationError("start_date must not be after end_date", field="start_date")
    return start, end


@router.get("/maintenance")
def get_maintenance_analytics(
    start_date: Optional[datetime] = Query(None, description="Window start (ISO 8601)"),
    end_date: Optional[datetime] = Query(None, description="Window end (ISO 8601)"),
    analytics: AnalyticsAggregator = Depends(get_analytics),
):
    start, end = _date_window(start_date, end_date)
    return analytics.get_maintenance_analytics(start, end).to_dict()


@router.get("/fleet")
def get_fleet_analytics(analytics: AnalyticsAggregator = Depends(get_analytics)):
    return analytics.get_fleet_analytics().to_dict()


@router.get("/financial")
def get_financial_analytics(
    start_date: Optional[datetime] = Query(None, description="Window start (ISO 8601)"),
    end_date: Optional[datetime] = Query(None, description="Window end (ISO 8601)"),
    analytics: AnalyticsAggregator = Depends(get_analytics),
):
    start, end = _date_window(start_date, end_date)
    return analytics.get_financial_analytics(start, end).to_dict()


@router.get("/report")
def get_comprehensive_report(
    period: Optional[str] = Query(
        None, description=f"One of {', '.join(REPORT_PERIODS)}; default 6months"
    ),
    start_date: Optional[datetime] = Query(None, description="Overrides period"),
    end_date: Optional[datetime] = Query(None, description="Overrides period"),
    analytics: AnalyticsAggregator = Depends(get_analytics),
):
    """
    Comprehensive analytics report.

    Explicit start/end dates take precedence over ``period``; with neither,
    the last 6 months are reported.
    """
    if start_date or end_date:
        start, end = _date_window(start_date, end_date)
    else:
        start, end = analytics.resolve_period(period)

    report = analytics.generate_comprehensive_report(start, end)
    logger.info(
        f"Comprehensive report generated for "
        f"{report.start_date.date()} -> {report.end_date.date()}"
    )
    return report.to_dict()
