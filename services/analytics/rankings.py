"""Ranked lists: services, staff, client value, at-risk clients, rebooking."""
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Mapping

from core.dto.analytics import (
    AtRiskClient,
    ClientLifetimeValue,
    RebookRate,
    StaffPerformanceItem,
    TopService,
)
from services.analytics.constants import (
    AT_RISK_LIMIT,
    AT_RISK_MIN_DAYS,
    CLIENT_LTV_LIMIT,
    COMPLETED_STATUS,
    FINALIZED_STATUSES,
    OWNER_ROLE,
    PAID_PAYMENT_STATUS,
    REBOOK_LIMIT,
    TOP_SERVICES_LIMIT,
    UNKNOWN_LABEL,
    URGENCY_HIGH_DAYS,
    URGENCY_MEDIUM_DAYS,
)
from services.analytics.metrics import cents_to_units, full_name, pct, safe_div_round
from services.analytics.rows import BookingRow, PaymentRow, ProfileRow


def top_services(
    bookings: Iterable[BookingRow],
    limit: int = TOP_SERVICES_LIMIT,
) -> list[TopService]:
    """Most booked services with their booked revenue; ties keep first-seen order."""
    counts: dict[str, int] = defaultdict(int)
    cents: dict[str, int] = defaultdict(int)
    for booking in bookings:
        name = booking.service_name or UNKNOWN_LABEL
        counts[name] += 1
        cents[name] += booking.total_in_cents or 0

    ranked = sorted(counts, key=lambda name: counts[name], reverse=True)[:limit]
    return [
        TopService(service=name, bookings=counts[name], revenue=cents_to_units(cents[name]))
        for name in ranked
    ]


@dataclass
class _StaffTally:
    bookings: int = 0
    cents: int = 0
    completed: int = 0
    finalized: int = 0


def staff_performance(
    bookings: Iterable[BookingRow],
    staff: Mapping[str, ProfileRow],
) -> list[StaffPerformanceItem]:
    """Per staff member: bookings, revenue, average ticket and utilization.

    Utilization is completed ÷ finalized bookings. Bookings without an
    assigned staff member are ignored. Sorted by revenue, highest first.
    """
    tallies: dict[str, _StaffTally] = defaultdict(_StaffTally)
    for booking in bookings:
        if not booking.staff_id:
            continue
        tally = tallies[booking.staff_id]
        tally.bookings += 1
        tally.cents += booking.total_in_cents or 0
        if booking.status in FINALIZED_STATUSES:
            tally.finalized += 1
            if booking.status == COMPLETED_STATUS:
                tally.completed += 1

    items = []
    for staff_id, tally in sorted(tallies.items(), key=lambda kv: kv[1].cents, reverse=True):
        profile = staff.get(staff_id)
        first_name = profile.first_name if profile else None
        last_name = profile.last_name if profile else None
        revenue = cents_to_units(tally.cents)
        items.append(StaffPerformanceItem(
            name=full_name(first_name, last_name),
            role="Owner" if profile and profile.role == OWNER_ROLE else "Staff",
            avatar=(first_name or "?")[0].upper(),
            bookings=tally.bookings,
            revenue=revenue,
            avg_ticket=safe_div_round(revenue, tally.bookings),
            utilization=pct(tally.completed, tally.finalized),
        ))
    return items


@dataclass(frozen=True)
class ClientSpend:
    client_id: str
    spend_in_cents: int
    transaction_count: int


@dataclass(frozen=True)
class OverdueClient:
    client_id: str
    days_since: int
    last_visit: BookingRow


def _profile_name(profiles: Mapping[str, ProfileRow], client_id: str) -> str:
    profile = profiles.get(client_id)
    return full_name(profile.first_name, profile.last_name) if profile else UNKNOWN_LABEL


def rank_by_spend(payments: Iterable[PaymentRow], limit: int = CLIENT_LTV_LIMIT) -> list[ClientSpend]:
    """Top clients by total paid amount, before names are attached."""
    spend: dict[str, int] = defaultdict(int)
    transactions: dict[str, int] = defaultdict(int)
    for payment in payments:
        if payment.status != PAID_PAYMENT_STATUS:
            continue
        spend[payment.client_id] += payment.amount_in_cents
        transactions[payment.client_id] += 1

    ranked = sorted(spend, key=lambda client_id: spend[client_id], reverse=True)[:limit]
    return [ClientSpend(client_id, spend[client_id], transactions[client_id]) for client_id in ranked]


def lifetime_values(
    ranked: Iterable[ClientSpend],
    profiles: Mapping[str, ProfileRow],
) -> list[ClientLifetimeValue]:
    return [
        ClientLifetimeValue(
            client_id=entry.client_id,
            name=_profile_name(profiles, entry.client_id),
            total_spend=cents_to_units(entry.spend_in_cents),
            transaction_count=entry.transaction_count,
        )
        for entry in ranked
    ]


def client_lifetime_values(
    payments: Iterable[PaymentRow],
    profiles: Mapping[str, ProfileRow],
    limit: int = CLIENT_LTV_LIMIT,
) -> list[ClientLifetimeValue]:
    """Top clients by total paid amount across all time."""
    return lifetime_values(rank_by_spend(payments, limit), profiles)


def urgency_for(days_since: int) -> str:
    if days_since > URGENCY_HIGH_DAYS:
        return "high"
    if days_since > URGENCY_MEDIUM_DAYS:
        return "medium"
    return "low"


def rank_overdue(
    completed_bookings: Iterable[BookingRow],
    now: datetime,
    limit: int = AT_RISK_LIMIT,
) -> list[OverdueClient]:
    """Clients whose last completed visit was more than 30 days ago, longest absence first."""
    last_visit: dict[str, BookingRow] = {}
    for booking in completed_bookings:
        if booking.status != COMPLETED_STATUS:
            continue
        seen = last_visit.get(booking.client_id)
        if seen is None or booking.starts_at > seen.starts_at:
            last_visit[booking.client_id] = booking

    overdue = []
    for client_id, booking in last_visit.items():
        days_since = (now - booking.starts_at).days
        if days_since > AT_RISK_MIN_DAYS:
            overdue.append(OverdueClient(client_id, days_since, booking))

    overdue.sort(key=lambda c: c.days_since, reverse=True)
    return overdue[:limit]


def at_risk_entries(
    overdue: Iterable[OverdueClient],
    profiles: Mapping[str, ProfileRow],
) -> list[AtRiskClient]:
    result = []
    for entry in overdue:
        visit = entry.last_visit
        result.append(AtRiskClient(
            client_id=entry.client_id,
            name=_profile_name(profiles, entry.client_id),
            last_visit=f"{visit.starts_at:%b} {visit.starts_at.day}",
            days_since=entry.days_since,
            service=visit.service_name or UNKNOWN_LABEL,
            urgency=urgency_for(entry.days_since),
        ))
    return result


def at_risk_clients(
    completed_bookings: Iterable[BookingRow],
    profiles: Mapping[str, ProfileRow],
    now: datetime,
    limit: int = AT_RISK_LIMIT,
) -> list[AtRiskClient]:
    """Clients whose last completed visit was more than 30 days ago.

    The service shown is the one from that last completed visit. Longest
    absence first.
    """
    return at_risk_entries(rank_overdue(completed_bookings, now, limit), profiles)


@dataclass
class _ServiceVisits:
    name: str
    visits: dict[str, int] = field(default_factory=lambda: defaultdict(int))


def rebook_rates(
    completed_bookings: Iterable[BookingRow],
    limit: int = REBOOK_LIMIT,
) -> list[RebookRate]:
    """Share of each service's clients who completed it at least twice.

    Only the services with the most distinct clients are reported.
    """
    services: dict[int, _ServiceVisits] = {}
    for booking in completed_bookings:
        if booking.status != COMPLETED_STATUS or booking.service_id is None:
            continue
        entry = services.get(booking.service_id)
        if entry is None:
            entry = services[booking.service_id] = _ServiceVisits(
                name=booking.service_name or UNKNOWN_LABEL
            )
        entry.visits[booking.client_id] += 1

    ranked = sorted(services.values(), key=lambda s: len(s.visits), reverse=True)[:limit]
    return [
        RebookRate(
            service=entry.name,
            rate=pct(sum(1 for n in entry.visits.values() if n >= 2), len(entry.visits)),
        )
        for entry in ranked
    ]


def profiles_by_id(profiles: Iterable[ProfileRow]) -> dict[str, ProfileRow]:
    return {p.id: p for p in profiles}
