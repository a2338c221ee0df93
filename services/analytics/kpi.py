"""KPI aggregation for the month-to-date cards."""
from dataclasses import dataclass
from typing import Iterable

from core.dto.analytics import KpiStats
from services.analytics.constants import (
    COMPLETED_STATUS,
    FINALIZED_STATUSES,
    NO_SHOW_STATUS,
    PAID_PAYMENT_STATUS,
)
from services.analytics.metrics import cents_to_units, pct, pct_delta, safe_div_round
from services.analytics.rows import BookingRow, PaymentRow


@dataclass(frozen=True)
class PeriodKpis:
    """KPI values for a single period."""
    revenue: int = 0
    booking_count: int = 0
    new_clients: int = 0
    no_show_rate: int = 0
    fill_rate: int = 0
    avg_ticket: int = 0


def compute_period_kpis(
    payments: Iterable[PaymentRow],
    bookings: Iterable[BookingRow],
    new_client_count: int,
) -> PeriodKpis:
    """Compute the KPI values of one period.

    ``payments`` and ``bookings`` must already be restricted to the period.
    Revenue only counts paid payments; the booking count covers every status,
    while the rates only look at finalized bookings.
    """
    paid = [p for p in payments if p.status == PAID_PAYMENT_STATUS]
    revenue = cents_to_units(sum(p.amount_in_cents for p in paid))

    booking_count = 0
    finalized = 0
    completed = 0
    no_shows = 0
    for booking in bookings:
        booking_count += 1
        if booking.status not in FINALIZED_STATUSES:
            continue
        finalized += 1
        if booking.status == COMPLETED_STATUS:
            completed += 1
        elif booking.status == NO_SHOW_STATUS:
            no_shows += 1

    return PeriodKpis(
        revenue=revenue,
        booking_count=booking_count,
        new_clients=new_client_count,
        no_show_rate=pct(no_shows, finalized),
        fill_rate=pct(completed, finalized),
        avg_ticket=safe_div_round(revenue, len(paid)),
    )


def build_kpi_stats(current: PeriodKpis, prior: PeriodKpis) -> KpiStats:
    """Current-period values plus percent deltas against the prior period."""
    return KpiStats(
        revenue_mtd=current.revenue,
        booking_count=current.booking_count,
        new_clients=current.new_clients,
        no_show_rate=current.no_show_rate,
        fill_rate=current.fill_rate,
        avg_ticket=current.avg_ticket,
        revenue_mtd_delta=pct_delta(current.revenue, prior.revenue),
        booking_count_delta=pct_delta(current.booking_count, prior.booking_count),
        new_clients_delta=pct_delta(current.new_clients, prior.new_clients),
        no_show_rate_delta=pct_delta(current.no_show_rate, prior.no_show_rate),
        fill_rate_delta=pct_delta(current.fill_rate, prior.fill_rate),
        avg_ticket_delta=pct_delta(current.avg_ticket, prior.avg_ticket),
    )
