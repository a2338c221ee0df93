import sys
import os
import asyncio
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncGenerator

import pytest
import pytest_asyncio

# Ensure project root is on sys.path so `import services` works
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

# Tests never talk to Postgres; settings must see this before they load
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("TIMEZONE", "America/New_York")

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from database.base import Base
import database.models  # noqa: F401
from services.analytics import CurrentUser
from services.analytics.constants import PAID_PAYMENT_STATUS
from services.analytics.rows import BookingRow, PaymentRow, ProfileRow


# Thursday
NOW = datetime(2026, 10, 15, 12, 0)


@pytest_asyncio.fixture(scope="function")
async def async_engine():
    """In-memory SQLite engine shared by every connection of a test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(async_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create database session for tests."""
    async_session = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_booking():
    """Build BookingRow objects with sensible defaults."""
    counter = {"id": 0}

    def _make(starts_at: datetime, client_id: str = "client-1", status: str = "completed", **kwargs) -> BookingRow:
        counter["id"] += 1
        kwargs.setdefault("id", counter["id"])
        return BookingRow(client_id=client_id, starts_at=starts_at, status=status, **kwargs)

    return _make


@pytest.fixture
def make_payment():
    def _make(
        amount_in_cents: int,
        paid_at: datetime | None,
        client_id: str = "client-1",
        status: str = PAID_PAYMENT_STATUS,
        created_at: datetime | None = None,
    ) -> PaymentRow:
        return PaymentRow(
            client_id=client_id,
            amount_in_cents=amount_in_cents,
            status=status,
            paid_at=paid_at,
            created_at=created_at or paid_at or NOW,
        )

    return _make


@pytest.fixture
def make_profile():
    def _make(profile_id: str, role: str = "client", **kwargs) -> ProfileRow:
        kwargs.setdefault("created_at", NOW)
        return ProfileRow(id=profile_id, role=role, **kwargs)

    return _make


class FakeStore:
    """In-memory AnalyticsStore applying the same filters as the repository."""

    def __init__(self, bookings=(), payments=(), profiles=(), settings=None):
        self.bookings = list(bookings)
        self.payments = list(payments)
        self.profiles = list(profiles)
        self.settings = dict(settings or {})
        self.failures: dict[str, Exception] = {}
        self.open_scopes = 0
        self.max_open_scopes = 0
        self.scopes_opened = 0
        self.profile_id_requests: list[set] = []

    def _fail(self, name: str):
        if name in self.failures:
            raise self.failures[name]

    async def fetch_bookings(self, window=None, statuses=None):
        self._fail("fetch_bookings")
        statuses = set(statuses) if statuses is not None else None
        return [
            b for b in sorted(self.bookings, key=lambda b: (b.starts_at, b.id))
            if (window is None or window.contains(b.starts_at))
            and (statuses is None or b.status in statuses)
        ]

    async def fetch_payments(self, window=None, status=PAID_PAYMENT_STATUS):
        self._fail("fetch_payments")
        return [
            p for p in self.payments
            if (window is None or (p.paid_at is not None and window.contains(p.paid_at)))
            and (status is None or p.status == status)
        ]

    async def count_profiles(self, role, window=None):
        self._fail("count_profiles")
        return sum(
            1 for p in self.profiles
            if p.role == role and (window is None or window.contains(p.created_at))
        )

    async def fetch_profiles(self, role=None, ids=None, with_source=False):
        self._fail("fetch_profiles")
        ids = set(ids) if ids is not None else None
        if ids is not None:
            self.profile_id_requests.append(ids)
        return [
            p for p in self.profiles
            if (role is None or p.role == role)
            and (ids is None or p.id in ids)
            and (not with_source or p.source is not None)
        ]

    async def fetch_first_booking_times(self, client_ids):
        self._fail("fetch_first_booking_times")
        wanted = set(client_ids)
        first: dict[str, datetime] = {}
        for b in self.bookings:
            if b.client_id in wanted and (b.client_id not in first or b.starts_at < first[b.client_id]):
                first[b.client_id] = b.starts_at
        return first

    async def get_setting(self, key):
        self._fail("get_setting")
        return self.settings.get(key)

    @asynccontextmanager
    async def scope(self):
        self.open_scopes += 1
        self.scopes_opened += 1
        self.max_open_scopes = max(self.max_open_scopes, self.open_scopes)
        try:
            # Yield to the loop so concurrent sections overlap
            await asyncio.sleep(0)
            yield self
        finally:
            self.open_scopes -= 1


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def studio_store() -> FakeStore:
    """A small studio: one owner, two clients, a handful of visits."""
    profiles = [
        ProfileRow(id="owner", role="admin", first_name="Maya", last_name="Lee", created_at=datetime(2025, 1, 1)),
        ProfileRow(id="anna", role="client", first_name="Anna", last_name="Park",
                   source="instagram", created_at=datetime(2026, 10, 12, 9, 0)),
        ProfileRow(id="bea", role="client", first_name="Bea", last_name="Cruz",
                   source="referral", created_at=datetime(2026, 9, 10, 9, 0)),
    ]
    bookings = [
        BookingRow(id=1, client_id="bea", starts_at=datetime(2026, 7, 1, 11, 0), status="completed",
                   total_in_cents=12000, staff_id="owner", service_id=1, service_name="Classic Set", category="lash"),
        BookingRow(id=2, client_id="bea", starts_at=datetime(2026, 8, 1, 11, 0), status="completed",
                   total_in_cents=12000, staff_id="owner", service_id=1, service_name="Classic Set", category="lash"),
        BookingRow(id=3, client_id="bea", starts_at=datetime(2026, 10, 2, 14, 0), status="no_show",
                   total_in_cents=5000, staff_id="owner", service_id=3, service_name="Style Consult",
                   category="consulting"),
        BookingRow(id=4, client_id="anna", starts_at=datetime(2026, 10, 13, 10, 0), status="completed",
                   total_in_cents=12000, staff_id="owner", service_id=1, service_name="Classic Set", category="lash"),
        BookingRow(id=5, client_id="anna", starts_at=datetime(2026, 10, 14, 16, 0), status="cancelled",
                   total_in_cents=4000, service_id=2, service_name="Ear Piercing", category="jewelry",
                   cancellation_reason="Sick"),
    ]
    payments = [
        PaymentRow(client_id="bea", amount_in_cents=12000, status="paid",
                   paid_at=datetime(2026, 8, 1, 12, 0), created_at=datetime(2026, 8, 1, 11, 0)),
        PaymentRow(client_id="bea", amount_in_cents=8000, status="paid",
                   paid_at=datetime(2026, 9, 5, 12, 0), created_at=datetime(2026, 9, 5, 11, 0)),
        PaymentRow(client_id="anna", amount_in_cents=12000, status="paid",
                   paid_at=datetime(2026, 10, 13, 11, 0), created_at=datetime(2026, 10, 13, 10, 0)),
        PaymentRow(client_id="anna", amount_in_cents=4000, status="refunded",
                   paid_at=datetime(2026, 10, 14, 11, 0), created_at=datetime(2026, 10, 14, 10, 0)),
    ]
    return FakeStore(
        bookings=bookings,
        payments=payments,
        profiles=profiles,
        settings={"financial_config": {"revenueGoalMonthly": 15000}},
    )


@pytest.fixture
def signed_in():
    async def _resolver():
        return CurrentUser(id="owner-1", role="admin")

    return _resolver


@pytest.fixture
def signed_out():
    async def _resolver():
        return None

    return _resolver
