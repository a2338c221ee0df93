"""Tests for appointment gap analysis."""
from datetime import datetime, timedelta

from services.analytics.gaps import appointment_gaps

START = datetime(2026, 1, 5, 10, 0)


def test_no_gaps_without_repeat_visits(make_booking):
    """Test single visits produce no gaps."""
    result = appointment_gaps([
        make_booking(START, client_id="a", category="lash"),
        make_booking(START, client_id="b", category="lash"),
    ])

    assert result.overall is None
    assert result.by_category == []


def test_overall_and_per_category_gaps(make_booking):
    """Test averages per client overall and per client and category."""
    bookings = [
        make_booking(START, client_id="a", category="lash"),
        make_booking(START + timedelta(days=20), client_id="a", category="jewelry"),
        make_booking(START + timedelta(days=30), client_id="a", category="lash"),
        make_booking(START, client_id="b", category="lash"),
        make_booking(START + timedelta(days=21), client_id="b", category="lash"),
    ]

    result = appointment_gaps(bookings)

    # a: 20, 10; b: 21
    assert result.overall == 17
    # lash: a 30, b 21 -> 25.5
    assert [(g.category, g.avg_days) for g in result.by_category] == [("Lash Services", 26)]


def test_categories_sorted_by_average(make_booking):
    bookings = [
        make_booking(START, client_id="a", category="crochet"),
        make_booking(START + timedelta(days=60), client_id="a", category="crochet"),
        make_booking(START, client_id="b", category="lash"),
        make_booking(START + timedelta(days=14), client_id="b", category="lash"),
    ]

    result = appointment_gaps(bookings)

    assert [g.category for g in result.by_category] == ["Lash Services", "Crochet"]


def test_same_day_visits_are_ignored(make_booking):
    """Test gaps shorter than a day do not count."""
    bookings = [
        make_booking(START, client_id="a", category="lash"),
        make_booking(START + timedelta(hours=3), client_id="a", category="lash"),
    ]

    result = appointment_gaps(bookings)

    assert result.overall is None
    assert result.by_category == []


def test_only_completed_visits_count(make_booking):
    bookings = [
        make_booking(START, client_id="a"),
        make_booking(START + timedelta(days=10), client_id="a", status="cancelled"),
        make_booking(START + timedelta(days=40), client_id="a"),
    ]

    assert appointment_gaps(bookings).overall == 40


def test_input_order_does_not_matter(make_booking):
    bookings = [
        make_booking(START + timedelta(days=14), client_id="a"),
        make_booking(START, client_id="a"),
    ]

    assert appointment_gaps(bookings).overall == 14
