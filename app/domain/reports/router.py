"""Dashboard and report endpoints"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import User
from .schemas import DashboardStats, ReportResponse
from .service import ReportService

router = APIRouter(tags=["Reports"])


def get_report_service(db: Session = Depends(get_db)) -> ReportService:
    """Dependency injection for ReportService"""
    return ReportService(db)


@router.get("/dashboard/stats", response_model=DashboardStats)
async def get_dashboard_stats(
    current_user: User = Depends(get_current_user),
    service: ReportService = Depends(get_report_service),
):
    """Counters and today's agenda for the dashboard"""
    return service.get_dashboard_stats(current_user)


@router.get("/reports", response_model=ReportResponse)
async def get_report(
    year: Optional[int] = Query(None, ge=2000, le=2100),
    current_user: User = Depends(get_current_user),
    service: ReportService = Depends(get_report_service),
):
    """Monthly activity, income and distributions for a calendar year"""
    return service.get_report(current_user, year)
