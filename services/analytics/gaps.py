"""Average number of days between a client's completed visits."""
from collections import defaultdict
from typing import Hashable, Iterable, Optional

from core.dto.analytics import AppointmentGapStats, CategoryGap
from services.analytics.constants import CATEGORY_LABELS, COMPLETED_STATUS
from services.analytics.metrics import round_half_up
from services.analytics.rows import BookingRow


def _partition_gaps(
    bookings: list[BookingRow],
    key,
) -> dict[Hashable, list[int]]:
    """Whole-day gaps to the previous booking inside each partition.

    The first booking of a partition has no predecessor and yields nothing;
    gaps shorter than one day are dropped.
    """
    partitions: dict[Hashable, list[BookingRow]] = defaultdict(list)
    for booking in bookings:
        partitions[key(booking)].append(booking)

    gaps: dict[Hashable, list[int]] = defaultdict(list)
    for partition_key, rows in partitions.items():
        rows.sort(key=lambda b: b.starts_at)
        for previous, current in zip(rows, rows[1:]):
            days = (current.starts_at - previous.starts_at).days
            if days > 0:
                gaps[partition_key].append(days)
    return gaps


def _average(values: list[int]) -> Optional[int]:
    if not values:
        return None
    return round_half_up(sum(values) / len(values))


def appointment_gaps(completed_bookings: Iterable[BookingRow]) -> AppointmentGapStats:
    """Overall and per-category average gap between completed visits.

    Partitions are per client overall and per (client, category) for the
    breakdown; categories without a qualifying gap are left out and the rest
    are sorted by their average gap.
    """
    bookings = [b for b in completed_bookings if b.status == COMPLETED_STATUS]

    overall_gaps = _partition_gaps(bookings, key=lambda b: b.client_id)
    overall = _average([g for gaps in overall_gaps.values() for g in gaps])

    categorised = [b for b in bookings if b.category]
    by_partition = _partition_gaps(categorised, key=lambda b: (b.client_id, b.category))
    by_category: dict[str, list[int]] = defaultdict(list)
    for (_, category), gaps in by_partition.items():
        by_category[category].extend(gaps)

    averages = [
        (sum(gaps) / len(gaps), category)
        for category, gaps in by_category.items()
        if gaps
    ]
    averages.sort(key=lambda pair: pair[0])

    return AppointmentGapStats(
        overall=overall,
        by_category=[
            CategoryGap(
                category=CATEGORY_LABELS.get(category, category),
                avg_days=round_half_up(avg),
            )
            for avg, category in averages
        ],
    )
