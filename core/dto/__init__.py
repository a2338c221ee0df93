"""
Data Transfer Objects (DTOs) for dashboard reports.

This package contains Pydantic models describing every analytics section
as it is serialized to the dashboard.
"""

from core.dto.analytics import (
    AppointmentGapStats,
    AtRiskClient,
    AttendanceStats,
    CancellationReasonItem,
    CategoryGap,
    ClientLifetimeValue,
    ClientSourceItem,
    DashboardReport,
    KpiStats,
    PeakTimes,
    PeakTimeSlot,
    RebookRate,
    ReportModel,
    RetentionWeek,
    ServiceMixItem,
    StaffPerformanceItem,
    TopService,
    WeeklyBookings,
    WeeklyRevenue,
)

__all__ = [
    'AppointmentGapStats',
    'AtRiskClient',
    'AttendanceStats',
    'CancellationReasonItem',
    'CategoryGap',
    'ClientLifetimeValue',
    'ClientSourceItem',
    'DashboardReport',
    'KpiStats',
    'PeakTimes',
    'PeakTimeSlot',
    'RebookRate',
    'ReportModel',
    'RetentionWeek',
    'ServiceMixItem',
    'StaffPerformanceItem',
    'TopService',
    'WeeklyBookings',
    'WeeklyRevenue',
]
