"""Analytics service: authenticated entry points for every dashboard section."""
import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Awaitable, Callable, Optional

from core.config import settings
from core.dto.analytics import (
    AppointmentGapStats,
    AtRiskClient,
    AttendanceStats,
    CancellationReasonItem,
    ClientLifetimeValue,
    ClientSourceItem,
    DashboardReport,
    KpiStats,
    PeakTimes,
    RebookRate,
    RetentionWeek,
    ServiceMixItem,
    StaffPerformanceItem,
    TopService,
    WeeklyBookings,
    WeeklyRevenue,
)
from core.exceptions import NotAuthenticatedError, UnknownSectionError
from services.analytics import distributions, gaps, kpi, rankings, trends
from services.analytics.constants import (
    CANCELLED_STATUS,
    CLIENT_ROLE,
    COMPLETED_STATUS,
    FINANCIAL_CONFIG_KEY,
    GAP_MONTHS,
    PAID_PAYMENT_STATUS,
    RECENT_DAYS,
    TREND_WEEKS,
)
from services.analytics.store import StoreFactory
from services.analytics.windows import (
    TimeWindow,
    local_now,
    month_to_date,
    prior_month,
    trailing_days,
    trailing_months,
    trailing_weeks,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CurrentUser:
    """The authenticated caller."""
    id: str
    role: Optional[str] = None


UserResolver = Callable[[], Awaitable[Optional[CurrentUser]]]

# Dashboard sections in load order, mapped to their service methods
SECTIONS: dict[str, str] = {
    "kpi_stats": "get_kpi_stats",
    "bookings_trend": "get_bookings_trend",
    "revenue_trend": "get_revenue_trend",
    "service_mix": "get_service_mix",
    "staff_performance": "get_staff_performance",
    "attendance_stats": "get_attendance_stats",
    "retention_trend": "get_retention_trend",
    "at_risk_clients": "get_at_risk_clients",
    "top_services": "get_top_services",
    "rebook_rates": "get_rebook_rates",
    "peak_times": "get_peak_times",
    "client_sources": "get_client_sources",
    "revenue_goal": "get_revenue_goal",
    "client_ltv": "get_client_lifetime_values",
    "cancellation_reasons": "get_cancellation_reasons",
    "appointment_gaps": "get_appointment_gaps",
}


class AnalyticsService:
    """Builds dashboard reports from an injected analytics store.

    Each public method resolves the current user first and raises
    ``NotAuthenticatedError`` without touching the store when there is none.
    Store errors propagate unchanged. Every store access opens its own scope
    from ``store_factory`` so sections can run concurrently.
    """

    def __init__(
        self,
        store_factory: StoreFactory,
        user_resolver: UserResolver,
        clock: Optional[Callable[[], datetime]] = None,
        batch_size: Optional[int] = None,
        timezone: Optional[str] = None,
    ):
        self.store_factory = store_factory
        self.user_resolver = user_resolver
        tz = timezone or settings.timezone
        self.clock = clock or (lambda: local_now(tz))
        self.batch_size = batch_size or settings.analytics_batch_size

    async def _authenticate(self) -> CurrentUser:
        user = await self.user_resolver()
        if user is None:
            raise NotAuthenticatedError()
        return user

    # ------------------------------------------------------------------
    # KPI
    # ------------------------------------------------------------------

    async def _period_kpis(self, window: TimeWindow) -> kpi.PeriodKpis:
        async with self.store_factory() as store:
            payments = await store.fetch_payments(window, status=PAID_PAYMENT_STATUS)
            bookings = await store.fetch_bookings(window)
            new_clients = await store.count_profiles(CLIENT_ROLE, window)
        return kpi.compute_period_kpis(payments, bookings, new_clients)

    async def get_kpi_stats(self) -> KpiStats:
        """Month-to-date KPIs compared with the whole prior month."""
        await self._authenticate()
        now = self.clock()
        current, prior = await asyncio.gather(
            self._period_kpis(month_to_date(now)),
            self._period_kpis(prior_month(now)),
        )
        return kpi.build_kpi_stats(current, prior)

    # ------------------------------------------------------------------
    # Trends
    # ------------------------------------------------------------------

    async def get_bookings_trend(self) -> list[WeeklyBookings]:
        await self._authenticate()
        window = trailing_weeks(self.clock(), TREND_WEEKS)
        async with self.store_factory() as store:
            bookings = await store.fetch_bookings(window)
        return trends.bookings_by_category(bookings)

    async def get_revenue_trend(self) -> list[WeeklyRevenue]:
        await self._authenticate()
        window = trailing_weeks(self.clock(), TREND_WEEKS)
        async with self.store_factory() as store:
            payments = await store.fetch_payments(window, status=PAID_PAYMENT_STATUS)
        return trends.revenue_by_week(payments)

    async def get_retention_trend(self) -> list[RetentionWeek]:
        await self._authenticate()
        window = trailing_weeks(self.clock(), TREND_WEEKS)
        async with self.store_factory() as store:
            bookings = await store.fetch_bookings(window)
            first_booking_at = await store.fetch_first_booking_times(
                {b.client_id for b in bookings}
            )
        return trends.retention_by_week(bookings, first_booking_at)

    # ------------------------------------------------------------------
    # Rankings
    # ------------------------------------------------------------------

    async def get_top_services(self) -> list[TopService]:
        await self._authenticate()
        window = trailing_days(self.clock(), RECENT_DAYS)
        async with self.store_factory() as store:
            bookings = await store.fetch_bookings(window)
        return rankings.top_services(bookings)

    async def get_staff_performance(self) -> list[StaffPerformanceItem]:
        await self._authenticate()
        window = trailing_days(self.clock(), RECENT_DAYS)
        async with self.store_factory() as store:
            bookings = await store.fetch_bookings(window)
            staff = await store.fetch_profiles(
                ids={b.staff_id for b in bookings if b.staff_id}
            )
        return rankings.staff_performance(bookings, rankings.profiles_by_id(staff))

    async def get_client_lifetime_values(self) -> list[ClientLifetimeValue]:
        await self._authenticate()
        async with self.store_factory() as store:
            payments = await store.fetch_payments(status=PAID_PAYMENT_STATUS)
            ranked = rankings.rank_by_spend(payments)
            profiles = await store.fetch_profiles(ids=[entry.client_id for entry in ranked])
        return rankings.lifetime_values(ranked, rankings.profiles_by_id(profiles))

    async def get_at_risk_clients(self) -> list[AtRiskClient]:
        await self._authenticate()
        now = self.clock()
        async with self.store_factory() as store:
            bookings = await store.fetch_bookings(statuses=[COMPLETED_STATUS])
            overdue = rankings.rank_overdue(bookings, now)
            profiles = await store.fetch_profiles(ids=[entry.client_id for entry in overdue])
        return rankings.at_risk_entries(overdue, rankings.profiles_by_id(profiles))

    async def get_rebook_rates(self) -> list[RebookRate]:
        await self._authenticate()
        async with self.store_factory() as store:
            bookings = await store.fetch_bookings(statuses=[COMPLETED_STATUS])
        return rankings.rebook_rates(bookings)

    # ------------------------------------------------------------------
    # Distributions
    # ------------------------------------------------------------------

    async def get_service_mix(self) -> list[ServiceMixItem]:
        await self._authenticate()
        window = trailing_days(self.clock(), RECENT_DAYS)
        async with self.store_factory() as store:
            bookings = await store.fetch_bookings(window)
        return distributions.service_mix(bookings)

    async def get_attendance_stats(self) -> AttendanceStats:
        await self._authenticate()
        window = trailing_days(self.clock(), RECENT_DAYS)
        async with self.store_factory() as store:
            bookings = await store.fetch_bookings(window)
        return distributions.attendance(bookings)

    async def get_cancellation_reasons(self) -> list[CancellationReasonItem]:
        await self._authenticate()
        async with self.store_factory() as store:
            bookings = await store.fetch_bookings(statuses=[CANCELLED_STATUS])
        return distributions.cancellation_reasons(bookings)

    async def get_peak_times(self) -> PeakTimes:
        await self._authenticate()
        window = trailing_days(self.clock(), RECENT_DAYS)
        async with self.store_factory() as store:
            bookings = await store.fetch_bookings(window)
        return distributions.peak_times(bookings)

    async def get_client_sources(self) -> list[ClientSourceItem]:
        await self._authenticate()
        async with self.store_factory() as store:
            profiles = await store.fetch_profiles(role=CLIENT_ROLE, with_source=True)
        return distributions.client_sources(profiles)

    async def get_revenue_goal(self) -> int:
        await self._authenticate()
        async with self.store_factory() as store:
            config = await store.get_setting(FINANCIAL_CONFIG_KEY)
        return distributions.revenue_goal(config)

    # ------------------------------------------------------------------
    # Appointment gaps
    # ------------------------------------------------------------------

    async def get_appointment_gaps(self) -> AppointmentGapStats:
        await self._authenticate()
        window = trailing_months(self.clock(), GAP_MONTHS)
        async with self.store_factory() as store:
            bookings = await store.fetch_bookings(window, statuses=[COMPLETED_STATUS])
        return gaps.appointment_gaps(bookings)

    # ------------------------------------------------------------------
    # Dashboard
    # ------------------------------------------------------------------

    async def get_section(self, name: str) -> Any:
        """Load one dashboard section by name."""
        method = SECTIONS.get(name)
        if method is None:
            raise UnknownSectionError(name)
        return await getattr(self, method)()

    async def get_dashboard(self) -> DashboardReport:
        """Load every section, ``batch_size`` sections at a time.

        A section that fails is logged and reported in ``errors`` while the
        others still load. A missing user fails the whole dashboard.
        """
        user = await self._authenticate()
        started = time.monotonic()
        names = list(SECTIONS)
        values: dict[str, Any] = {}
        errors: dict[str, str] = {}

        for offset in range(0, len(names), self.batch_size):
            batch = names[offset:offset + self.batch_size]
            results = await asyncio.gather(
                *(self.get_section(name) for name in batch),
                return_exceptions=True,
            )
            for name, result in zip(batch, results):
                if isinstance(result, NotAuthenticatedError):
                    raise result
                if isinstance(result, Exception):
                    logger.error(
                        f"Dashboard section '{name}' failed: {result}",
                        exc_info=result,
                        extra={"section": name, "user_id": user.id},
                    )
                    errors[name] = str(result) or type(result).__name__
                    continue
                if isinstance(result, BaseException):
                    raise result
                values[name] = result

        duration = round(time.monotonic() - started, 3)
        logger.info(
            f"Dashboard built: {len(values)} sections loaded, {len(errors)} failed",
            extra={"user_id": user.id, "duration": duration},
        )
        return DashboardReport(**values, errors=errors)
