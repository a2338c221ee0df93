"""Read-only data access the analytics service depends on."""
from datetime import datetime
from typing import Any, AsyncContextManager, Callable, Iterable, Optional, Protocol

from services.analytics.constants import PAID_PAYMENT_STATUS
from services.analytics.rows import BookingRow, PaymentRow, ProfileRow
from services.analytics.windows import TimeWindow


class AnalyticsStore(Protocol):
    """Queries backing the dashboard; implemented by ``AnalyticsRepository``."""

    async def fetch_bookings(
        self,
        window: Optional[TimeWindow] = None,
        statuses: Optional[Iterable[str]] = None,
    ) -> list[BookingRow]:
        ...

    async def fetch_payments(
        self,
        window: Optional[TimeWindow] = None,
        status: Optional[str] = PAID_PAYMENT_STATUS,
    ) -> list[PaymentRow]:
        ...

    async def count_profiles(self, role: str, window: Optional[TimeWindow] = None) -> int:
        ...

    async def fetch_profiles(
        self,
        role: Optional[str] = None,
        ids: Optional[Iterable[str]] = None,
        with_source: bool = False,
    ) -> list[ProfileRow]:
        ...

    async def fetch_first_booking_times(self, client_ids: Iterable[str]) -> dict[str, datetime]:
        ...

    async def get_setting(self, key: str) -> Optional[dict[str, Any]]:
        ...


# Opens one store per call; concurrent sections never share a session.
StoreFactory = Callable[[], AsyncContextManager[AnalyticsStore]]
