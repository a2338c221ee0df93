"""Share and histogram reports: service mix, attendance, reasons, peak times, sources."""
import logging
from collections import Counter
from typing import Any, Iterable, Mapping, Optional

from core.dto.analytics import (
    AttendanceStats,
    CancellationReasonItem,
    ClientSourceItem,
    PeakTimes,
    PeakTimeSlot,
    ServiceMixItem,
)
from services.analytics.constants import (
    CANCELLED_STATUS,
    CATEGORY_LABELS,
    CLIENT_ROLE,
    COMPLETED_STATUS,
    DEFAULT_REVENUE_GOAL,
    NO_REASON_LABEL,
    NO_SHOW_STATUS,
    PEAK_HOURS,
    REVENUE_GOAL_FIELD,
    WEEKDAY_LABELS,
)
from services.analytics.metrics import cents_to_units, pct, round_half_up
from services.analytics.rows import BookingRow, ProfileRow

logger = logging.getLogger(__name__)


def service_mix(bookings: Iterable[BookingRow]) -> list[ServiceMixItem]:
    """Share of bookings per service category.

    Uncategorised bookings count toward the total but get no row of their own.
    """
    counts = Counter(b.category for b in bookings)
    total = sum(counts.values())
    return [
        ServiceMixItem(
            label=CATEGORY_LABELS.get(category, category),
            pct=pct(count, total),
            count=count,
        )
        for category, count in counts.most_common()
        if category
    ]


def attendance(bookings: Iterable[BookingRow]) -> AttendanceStats:
    completed = no_show = cancelled = 0
    lost_cents = 0
    for booking in bookings:
        if booking.status == COMPLETED_STATUS:
            completed += 1
        elif booking.status == NO_SHOW_STATUS:
            no_show += 1
            lost_cents += booking.total_in_cents or 0
        elif booking.status == CANCELLED_STATUS:
            cancelled += 1

    return AttendanceStats(
        completed=completed,
        no_show=no_show,
        cancelled=cancelled,
        total=completed + no_show + cancelled,
        revenue_lost=cents_to_units(lost_cents),
    )


def cancellation_reasons(bookings: Iterable[BookingRow]) -> list[CancellationReasonItem]:
    """Cancelled bookings grouped by reason; missing or blank reasons share one bucket."""
    counts = Counter(
        (b.cancellation_reason or "").strip() or NO_REASON_LABEL
        for b in bookings
        if b.status == CANCELLED_STATUS
    )
    total = sum(counts.values())
    return [
        CancellationReasonItem(reason=reason, count=count, pct=pct(count, total))
        for reason, count in counts.most_common()
    ]


def _normalize(labels_and_counts: list[tuple[str, int]]) -> list[PeakTimeSlot]:
    # Busiest bucket is 100; an empty histogram divides by 1 and stays at 0
    busiest = max((count for _, count in labels_and_counts), default=0) or 1
    return [
        PeakTimeSlot(label=label, load=round_half_up(count / busiest * 100))
        for label, count in labels_and_counts
    ]


def peak_times(bookings: Iterable[BookingRow]) -> PeakTimes:
    """Load per opening hour (9am-6pm) and per weekday (Sun-Sat)."""
    by_hour: Counter[int] = Counter()
    by_day: Counter[int] = Counter()
    for booking in bookings:
        by_hour[booking.starts_at.hour] += 1
        # Python weeks start on Monday; the histogram starts on Sunday
        by_day[(booking.starts_at.weekday() + 1) % 7] += 1

    return PeakTimes(
        by_hour=_normalize([(label, by_hour[hour]) for hour, label in PEAK_HOURS]),
        by_day=_normalize([(label, by_day[i]) for i, label in enumerate(WEEKDAY_LABELS)]),
    )


def client_sources(profiles: Iterable[ProfileRow]) -> list[ClientSourceItem]:
    """Acquisition channels of client profiles that recorded one."""
    counts = Counter(
        p.source for p in profiles
        if p.role == CLIENT_ROLE and p.source is not None
    )
    total = sum(counts.values())
    return [
        ClientSourceItem(source=source, count=count, pct=pct(count, total))
        for source, count in counts.most_common()
    ]


def revenue_goal(config: Optional[Mapping[str, Any]]) -> int:
    """Monthly revenue goal from the financial config, with a default."""
    if not config:
        return DEFAULT_REVENUE_GOAL
    goal = config.get(REVENUE_GOAL_FIELD)
    if goal is None:
        return DEFAULT_REVENUE_GOAL
    try:
        return round_half_up(float(goal))
    except (TypeError, ValueError, OverflowError):
        logger.warning(f"Ignoring non-numeric {REVENUE_GOAL_FIELD}: {goal!r}")
        return DEFAULT_REVENUE_GOAL
