"""Analytics report DTOs consumed by the dashboard."""
from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ReportModel(BaseModel):
    """Base for report DTOs: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class KpiStats(ReportModel):
    """Month-to-date KPIs with deltas against the prior month.

    ``fill_rate`` is completed ÷ finalized bookings. There is no slot
    capacity model, so it is an attendance-completion rate; the name is
    kept because dashboard consumers rely on it.
    """

    revenue_mtd: int
    booking_count: int
    new_clients: int
    no_show_rate: int
    fill_rate: int
    avg_ticket: int
    revenue_mtd_delta: Optional[int] = None
    booking_count_delta: Optional[int] = None
    new_clients_delta: Optional[int] = None
    no_show_rate_delta: Optional[int] = None
    fill_rate_delta: Optional[int] = None
    avg_ticket_delta: Optional[int] = None


class WeeklyBookings(ReportModel):
    week: str
    week_start: date
    lash: int = 0
    jewelry: int = 0
    crochet: int = 0
    consulting: int = 0


class WeeklyRevenue(ReportModel):
    week: str
    week_start: date
    revenue: int


class RetentionWeek(ReportModel):
    week: str
    week_start: date
    new_clients: int
    returning: int


class ServiceMixItem(ReportModel):
    label: str
    pct: int
    count: int


class StaffPerformanceItem(ReportModel):
    name: str
    role: str
    avatar: str
    bookings: int
    revenue: int
    avg_ticket: int
    utilization: int


class AttendanceStats(ReportModel):
    completed: int = 0
    no_show: int = 0
    cancelled: int = 0
    total: int = 0
    revenue_lost: int = 0


class AtRiskClient(ReportModel):
    client_id: str
    name: str
    last_visit: str
    days_since: int
    service: str
    urgency: Literal["high", "medium", "low"]


class TopService(ReportModel):
    service: str
    bookings: int
    revenue: int


class RebookRate(ReportModel):
    service: str
    rate: int


class PeakTimeSlot(ReportModel):
    label: str
    load: int


class PeakTimes(ReportModel):
    by_hour: list[PeakTimeSlot]
    by_day: list[PeakTimeSlot]


class ClientSourceItem(ReportModel):
    source: str
    count: int
    pct: int


class ClientLifetimeValue(ReportModel):
    client_id: str
    name: str
    total_spend: int
    transaction_count: int


class CancellationReasonItem(ReportModel):
    reason: str
    count: int
    pct: int


class CategoryGap(ReportModel):
    category: str
    avg_days: int


class AppointmentGapStats(ReportModel):
    overall: Optional[int] = None
    by_category: list[CategoryGap] = Field(default_factory=list)


class DashboardReport(ReportModel):
    """Every dashboard section; a section that failed to load is None
    and its error message is kept in ``errors``."""

    kpi_stats: Optional[KpiStats] = None
    bookings_trend: Optional[list[WeeklyBookings]] = None
    revenue_trend: Optional[list[WeeklyRevenue]] = None
    service_mix: Optional[list[ServiceMixItem]] = None
    staff_performance: Optional[list[StaffPerformanceItem]] = None
    attendance_stats: Optional[AttendanceStats] = None
    retention_trend: Optional[list[RetentionWeek]] = None
    at_risk_clients: Optional[list[AtRiskClient]] = None
    top_services: Optional[list[TopService]] = None
    rebook_rates: Optional[list[RebookRate]] = None
    peak_times: Optional[PeakTimes] = None
    client_sources: Optional[list[ClientSourceItem]] = None
    revenue_goal: Optional[int] = None
    client_ltv: Optional[list[ClientLifetimeValue]] = None
    cancellation_reasons: Optional[list[CancellationReasonItem]] = None
    appointment_gaps: Optional[AppointmentGapStats] = None
    errors: dict[str, str] = Field(default_factory=dict)
