"""Weekly trend aggregations over the trailing eight weeks."""
from collections import defaultdict
from datetime import datetime
from typing import Iterable, Mapping

from core.dto.analytics import RetentionWeek, WeeklyBookings, WeeklyRevenue
from services.analytics.constants import CATEGORIES, PAID_PAYMENT_STATUS
from services.analytics.metrics import cents_to_units
from services.analytics.rows import BookingRow, PaymentRow
from services.analytics.windows import week_label, week_start

_CATEGORY_VALUES = frozenset(c.value for c in CATEGORIES)


def bookings_by_category(bookings: Iterable[BookingRow]) -> list[WeeklyBookings]:
    """Pivot booking counts into one row per week and one column per category.

    A week appears as soon as it has any booking, even one whose service has
    no category; every category column is present and defaults to 0.
    """
    weeks: dict[datetime, dict[str, int]] = {}
    for booking in bookings:
        counts = weeks.setdefault(
            week_start(booking.starts_at),
            {c.value: 0 for c in CATEGORIES},
        )
        if booking.category in _CATEGORY_VALUES:
            counts[booking.category] += 1

    return [
        WeeklyBookings(
            week=week_label(start),
            week_start=start.date(),
            **counts,
        )
        for start, counts in sorted(weeks.items())
    ]


def revenue_by_week(payments: Iterable[PaymentRow]) -> list[WeeklyRevenue]:
    """Sum paid payments per week of payment (creation time if never stamped paid)."""
    totals: dict[datetime, int] = defaultdict(int)
    for payment in payments:
        if payment.status != PAID_PAYMENT_STATUS:
            continue
        totals[week_start(payment.effective_at)] += payment.amount_in_cents

    return [
        WeeklyRevenue(
            week=week_label(start),
            week_start=start.date(),
            revenue=cents_to_units(cents),
        )
        for start, cents in sorted(totals.items())
    ]


def retention_by_week(
    bookings: Iterable[BookingRow],
    first_booking_at: Mapping[str, datetime],
) -> list[RetentionWeek]:
    """New versus returning clients per week.

    A client is new in week W when none of their bookings, of any status,
    starts before W. ``first_booking_at`` holds each client's earliest-ever
    booking start; clients missing from it are treated as first seen in the
    window.
    """
    clients_by_week: dict[datetime, set[str]] = defaultdict(set)
    for booking in bookings:
        clients_by_week[week_start(booking.starts_at)].add(booking.client_id)

    result = []
    for start, clients in sorted(clients_by_week.items()):
        new_clients = sum(
            1 for client_id in clients
            if client_id not in first_booking_at or first_booking_at[client_id] >= start
        )
        result.append(RetentionWeek(
            week=week_label(start),
            week_start=start.date(),
            new_clients=new_clients,
            returning=len(clients) - new_clients,
        ))
    return result
