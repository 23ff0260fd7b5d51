"""Dashboard and report schemas"""

from pydantic import BaseModel

from ..recordings.schemas import RecordingResponse
from ..sessions.schemas import SessionResponse


class DashboardStats(BaseModel):
    totalClients: int
    activeClients: int
    sessionsThisWeek: int
    sessionsThisMonth: int
    pendingPayments: int
    pendingTasks: int
    todaySessions: list[SessionResponse]
    recentRecordings: list[RecordingResponse]


class MonthlyReport(BaseModel):
    month: int
    label: str
    sessions: int
    income: float
    newClients: int


class ReportTotals(BaseModel):
    clients: int
    sessions: int
    income: float
    recordings: int


class DistributionItem(BaseModel):
    key: str
    label: str
    count: int


class ReportResponse(BaseModel):
    year: int
    monthlyData: list[MonthlyReport]
    totals: ReportTotals
    sessionTypes: list[DistributionItem]
    clientStatus: list[DistributionItem]
