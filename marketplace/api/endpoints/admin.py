from typing import Optional

from fastapi import APIRouter, Depends, Query

from marketplace.api.dependencies import get_reports_service
from marketplace.errors import NoReportData
from marketplace.services.reports import ReportsService

api = APIRouter()
admin_api = api


@api.get("/admin/best-profession", tags=["Admin"])
def best_profession(
    start: str = Query(..., description="ISO date or datetime"),
    end: str = Query(..., description="ISO date or datetime"),
    reports: ReportsService = Depends(get_reports_service),
):
    """Profession that earned the most on contracts created in the range."""
    result = reports.best_profession(start, end)
    if result is None:
        raise NoReportData()
    return result


@api.get("/admin/best-clients", tags=["Admin"])
def best_clients(
    start: str = Query(..., description="ISO date or datetime"),
    end: str = Query(..., description="ISO date or datetime"),
    limit: Optional[int] = Query(default=None, ge=1, le=1000),
    reports: ReportsService = Depends(get_reports_service),
):
    """Clients who paid the most on contracts created in the range."""
    return reports.best_clients(start, end, limit=limit)
