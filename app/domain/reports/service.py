"""Report service - dashboard counters and the yearly practice report"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ...email_templates import HEBREW_MONTHS
from ...models import User
from ...shared.timeutils import local_now, start_of_day, start_of_month, start_of_week
from ..payments.repository import PaymentRepository
from ..recordings.repository import RecordingRepository
from ..recordings.schemas import RecordingResponse
from ..sessions.schemas import SessionResponse
from ..tasks.repository import TaskRepository
from .repository import ReportRepository
from .schemas import DashboardStats, DistributionItem, MonthlyReport, ReportResponse, ReportTotals

logger = logging.getLogger(__name__)

SESSION_TYPE_REPORT_LABELS = {"ONLINE": "אונליין", "PHONE": "טלפון", "IN_PERSON": "פרונטלי"}
CLIENT_STATUS_REPORT_LABELS = {"ACTIVE": "פעילים", "INACTIVE": "לא פעילים", "ARCHIVED": "בארכיון"}


def _next_month(value: datetime) -> datetime:
    return value.replace(year=value.year + 1, month=1) if value.month == 12 else value.replace(month=value.month + 1)


class ReportService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = ReportRepository()

    def get_dashboard_stats(self, user: User) -> DashboardStats:
        now = local_now()
        today = start_of_day(now)
        today_sessions = self.repo.sessions_between(self.db, user.id, today, today + timedelta(days=1))

        return DashboardStats(
            totalClients=self.repo.count_clients(self.db, user.id),
            activeClients=self.repo.count_clients(self.db, user.id, status="ACTIVE"),
            sessionsThisWeek=self.repo.count_sessions(self.db, user.id, start_of_week(now)),
            sessionsThisMonth=self.repo.count_sessions(self.db, user.id, start_of_month(now)),
            pendingPayments=PaymentRepository.count_pending(self.db, user.id),
            pendingTasks=TaskRepository.count_open_tasks(self.db, user.id),
            todaySessions=[SessionResponse.from_model(s) for s in today_sessions],
            recentRecordings=[
                RecordingResponse.from_model(r, include_transcription=False)
                for r in RecordingRepository.get_recent_recordings(self.db, user.id)
            ],
        )

    def get_report(self, user: User, year: Optional[int] = None) -> ReportResponse:
        year = year or local_now().year
        year_start = datetime(year, 1, 1)
        year_end = datetime(year + 1, 1, 1)

        monthly = []
        month_start = year_start
        for month in range(1, 13):
            month_end = _next_month(month_start)
            monthly.append(
                MonthlyReport(
                    month=month,
                    label=HEBREW_MONTHS[month - 1],
                    sessions=self.repo.count_sessions(self.db, user.id, month_start, month_end, status="COMPLETED"),
                    income=PaymentRepository.paid_income(self.db, user.id, month_start, month_end),
                    newClients=self.repo.count_clients(
                        self.db, user.id, created_from=month_start, created_to=month_end
                    ),
                )
            )
            month_start = month_end

        totals = ReportTotals(
            clients=self.repo.count_clients(self.db, user.id),
            sessions=self.repo.count_sessions(self.db, user.id, year_start, year_end, status="COMPLETED"),
            income=PaymentRepository.paid_income(self.db, user.id, year_start, year_end),
            recordings=RecordingRepository.count_recordings(self.db, user.id),
        )

        session_types = [
            DistributionItem(key=t, label=SESSION_TYPE_REPORT_LABELS.get(t, t), count=c)
            for t, c in self.repo.session_type_counts(self.db, user.id, year_start, year_end)
        ]
        client_status = [
            DistributionItem(key=s, label=CLIENT_STATUS_REPORT_LABELS.get(s, s), count=c)
            for s, c in self.repo.client_status_counts(self.db, user.id)
        ]

        logger.info(f"📊 Report for {year} built for user {user.id}")
        return ReportResponse(
            year=year,
            monthlyData=monthly,
            totals=totals,
            sessionTypes=session_types,
            clientStatus=client_status,
        )
