"""Tests for ranked reports."""
from datetime import timedelta

import pytest

from services.analytics.rankings import (
    at_risk_clients,
    client_lifetime_values,
    profiles_by_id,
    rebook_rates,
    staff_performance,
    top_services,
    urgency_for,
)


def test_top_services_ranked_by_bookings(make_booking, now):
    """Test services are ranked by booking count with summed revenue."""
    bookings = (
        [make_booking(now, service_name="Classic Set", total_in_cents=12000) for _ in range(2)]
        + [make_booking(now, service_name="Lash Lift", total_in_cents=8050) for _ in range(3)]
        + [make_booking(now, service_name=None, total_in_cents=1000)]
    )

    result = top_services(bookings)

    assert [(s.service, s.bookings, s.revenue) for s in result] == [
        ("Lash Lift", 3, 242),
        ("Classic Set", 2, 240),
        ("Unknown", 1, 10),
    ]


def test_top_services_limit(make_booking, now):
    bookings = [make_booking(now, service_name=f"Service {i}") for i in range(9)]

    assert len(top_services(bookings)) == 6


def test_staff_performance(make_booking, make_profile, now):
    """Test per-staff totals, owner label, avatar and utilization."""
    staff = profiles_by_id([
        make_profile("owner", role="admin", first_name="maya", last_name="Lee"),
        make_profile("asst", role="assistant", first_name="Jo", last_name=None),
    ])
    bookings = [
        make_booking(now, staff_id="asst", status="completed", total_in_cents=5000),
        make_booking(now, staff_id="owner", status="completed", total_in_cents=10000),
        make_booking(now, staff_id="owner", status="no_show", total_in_cents=10000),
        make_booking(now, staff_id="owner", status="scheduled", total_in_cents=10000),
        make_booking(now, staff_id=None, status="completed", total_in_cents=99999),
    ]

    result = staff_performance(bookings, staff)

    assert len(result) == 2
    owner, assistant = result
    assert owner.name == "maya Lee"
    assert owner.role == "Owner"
    assert owner.avatar == "M"
    assert owner.bookings == 3
    assert owner.revenue == 300
    assert owner.avg_ticket == 100
    assert owner.utilization == 50
    assert assistant.role == "Staff"
    assert assistant.utilization == 100


def test_staff_performance_unknown_profile(make_booking, now):
    result = staff_performance([make_booking(now, staff_id="ghost")], {})

    assert result[0].name == "Unknown"
    assert result[0].role == "Staff"
    assert result[0].avatar == "?"


def test_client_lifetime_values(make_payment, make_profile, now):
    """Test clients ranked by total paid amount with transaction counts."""
    payments = [
        make_payment(5000, now, client_id="a"),
        make_payment(5000, now, client_id="a"),
        make_payment(20000, now, client_id="b"),
        make_payment(90000, now, client_id="a", status="refunded"),
    ]
    profiles = profiles_by_id([make_profile("a", first_name="Ana"), make_profile("b", first_name="Bo", last_name="Kim")])

    result = client_lifetime_values(payments, profiles)

    assert [(c.client_id, c.name, c.total_spend, c.transaction_count) for c in result] == [
        ("b", "Bo Kim", 200, 1),
        ("a", "Ana", 100, 2),
    ]


@pytest.mark.parametrize("days,expected", [
    (55, "high"),
    (51, "high"),
    (50, "medium"),
    (45, "medium"),
    (40, "low"),
    (35, "low"),
])
def test_urgency_tiers(days, expected):
    assert urgency_for(days) == expected


def test_at_risk_clients(make_booking, make_profile, now):
    """Test threshold, urgency and ordering of at-risk clients."""
    bookings = [
        make_booking(now - timedelta(days=55), client_id="high", service_name="Volume Set"),
        make_booking(now - timedelta(days=45), client_id="medium", service_name="Lash Lift"),
        make_booking(now - timedelta(days=35), client_id="low", service_name="Fill"),
        make_booking(now - timedelta(days=25), client_id="recent", service_name="Fill"),
        make_booking(now - timedelta(days=30), client_id="boundary", service_name="Fill"),
    ]
    profiles = profiles_by_id([make_profile("high", first_name="Hana", last_name="Ito")])

    result = at_risk_clients(bookings, profiles, now)

    assert [(c.client_id, c.days_since, c.urgency) for c in result] == [
        ("high", 55, "high"),
        ("medium", 45, "medium"),
        ("low", 35, "low"),
    ]
    assert result[0].name == "Hana Ito"
    assert result[0].service == "Volume Set"
    assert result[0].last_visit == "Aug 21"
    assert result[1].name == "Unknown"


def test_at_risk_uses_most_recent_completed_visit(make_booking, now):
    """Test the last service comes from the latest completed booking."""
    bookings = [
        make_booking(now - timedelta(days=90), client_id="c", service_name="Old Service"),
        make_booking(now - timedelta(days=60), client_id="c", service_name="Latest Service"),
        make_booking(now - timedelta(days=5), client_id="c", service_name="Cancelled", status="cancelled"),
    ]

    result = at_risk_clients(bookings, {}, now)

    assert len(result) == 1
    assert result[0].days_since == 60
    assert result[0].service == "Latest Service"


def test_at_risk_limit(make_booking, now):
    bookings = [
        make_booking(now - timedelta(days=40 + i), client_id=f"c{i}")
        for i in range(12)
    ]

    result = at_risk_clients(bookings, {}, now)

    assert len(result) == 10
    assert result[0].days_since == 51


def test_rebook_rates(make_booking, now):
    """Test share of clients with two or more completed visits per service."""
    bookings = [
        make_booking(now, client_id="a", service_id=1, service_name="Classic"),
        make_booking(now, client_id="a", service_id=1, service_name="Classic"),
        make_booking(now, client_id="b", service_id=1, service_name="Classic"),
        make_booking(now, client_id="c", service_id=1, service_name="Classic"),
        make_booking(now, client_id="a", service_id=2, service_name="Lift"),
        make_booking(now, client_id="a", service_id=2, service_name="Lift"),
        make_booking(now, client_id="b", service_id=2, service_name="Lift", status="no_show"),
    ]

    result = rebook_rates(bookings)

    assert [(r.service, r.rate) for r in result] == [("Classic", 33), ("Lift", 100)]


def test_rebook_rates_limited_to_most_popular_services(make_booking, now):
    bookings = []
    for service_id in range(1, 9):
        for n in range(service_id):
            bookings.append(make_booking(now, client_id=f"c{n}", service_id=service_id, service_name=f"S{service_id}"))

    result = rebook_rates(bookings)

    assert [r.service for r in result] == ["S8", "S7", "S6", "S5", "S4", "S3"]
