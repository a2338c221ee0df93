"""Analytics repository: read-only queries behind the dashboard reports."""
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncIterator, Iterable, Optional

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from database.base import async_session_maker
from database.models import Booking, Payment, Profile, Service, Setting
from services.analytics.constants import PAID_PAYMENT_STATUS
from services.analytics.rows import BookingRow, PaymentRow, ProfileRow
from services.analytics.windows import TimeWindow, localize, to_local_naive


class AnalyticsRepository:
    """Repository for analytics reads over bookings, payments, profiles and settings.

    Every query is parameterised; date filters are half-open ``[start, end)``
    windows in studio local time and an open-ended window has no upper bound.
    Rows come back as plain dataclasses with naive local timestamps.
    """

    def __init__(self, session: AsyncSession, timezone: Optional[str] = None):
        """Initialize repository with database session."""
        self.session = session
        self.timezone = timezone or settings.timezone

    def _local(self, dt: Optional[datetime]) -> Optional[datetime]:
        if dt is None:
            return None
        return to_local_naive(dt, self.timezone)

    def _within(self, query: Select, column, window: Optional[TimeWindow]) -> Select:
        if window is None:
            return query
        # Window bounds are studio wall-clock time; columns hold instants
        query = query.where(column >= localize(window.start, self.timezone))
        if window.end is not None:
            query = query.where(column < localize(window.end, self.timezone))
        return query

    async def fetch_bookings(
        self,
        window: Optional[TimeWindow] = None,
        statuses: Optional[Iterable[str]] = None,
    ) -> list[BookingRow]:
        """Bookings starting in the window, joined with their service."""
        query = (
            select(
                Booking.id,
                Booking.client_id,
                Booking.staff_id,
                Booking.service_id,
                Booking.starts_at,
                Booking.status,
                Booking.total_in_cents,
                Booking.cancellation_reason,
                Service.name.label("service_name"),
                Service.category,
            )
            .select_from(Booking)
            .outerjoin(Service, Booking.service_id == Service.id)
        )
        query = self._within(query, Booking.starts_at, window)
        if statuses is not None:
            query = query.where(Booking.status.in_(list(statuses)))
        query = query.order_by(Booking.starts_at, Booking.id)

        result = await self.session.execute(query)
        return [
            BookingRow(
                id=r.id,
                client_id=r.client_id,
                staff_id=r.staff_id,
                service_id=r.service_id,
                starts_at=self._local(r.starts_at),
                status=r.status,
                total_in_cents=r.total_in_cents or 0,
                cancellation_reason=r.cancellation_reason,
                service_name=r.service_name,
                category=r.category,
            )
            for r in result
        ]

    async def fetch_payments(
        self,
        window: Optional[TimeWindow] = None,
        status: Optional[str] = PAID_PAYMENT_STATUS,
    ) -> list[PaymentRow]:
        """Payments whose paid timestamp falls in the window."""
        query = select(
            Payment.client_id,
            Payment.amount_in_cents,
            Payment.status,
            Payment.paid_at,
            Payment.created_at,
        )
        query = self._within(query, Payment.paid_at, window)
        if status is not None:
            query = query.where(Payment.status == status)
        query = query.order_by(Payment.id)

        result = await self.session.execute(query)
        return [
            PaymentRow(
                client_id=r.client_id,
                amount_in_cents=r.amount_in_cents,
                status=r.status,
                paid_at=self._local(r.paid_at),
                created_at=self._local(r.created_at),
            )
            for r in result
        ]

    async def count_profiles(self, role: str, window: Optional[TimeWindow] = None) -> int:
        """Count profiles of a role created in the window."""
        query = select(func.count(Profile.id)).where(Profile.role == role)
        query = self._within(query, Profile.created_at, window)
        result = await self.session.execute(query)
        return result.scalar() or 0

    async def fetch_profiles(
        self,
        role: Optional[str] = None,
        ids: Optional[Iterable[str]] = None,
        with_source: bool = False,
    ) -> list[ProfileRow]:
        """Profiles filtered by role, id list and presence of a source."""
        query = select(
            Profile.id,
            Profile.role,
            Profile.first_name,
            Profile.last_name,
            Profile.source,
            Profile.created_at,
        )
        if role is not None:
            query = query.where(Profile.role == role)
        if ids is not None:
            ids = list(ids)
            if not ids:
                return []
            query = query.where(Profile.id.in_(ids))
        if with_source:
            query = query.where(Profile.source.isnot(None))

        result = await self.session.execute(query.order_by(Profile.created_at, Profile.id))
        return [
            ProfileRow(
                id=r.id,
                role=r.role,
                first_name=r.first_name,
                last_name=r.last_name,
                source=r.source,
                created_at=self._local(r.created_at),
            )
            for r in result
        ]

    async def fetch_first_booking_times(self, client_ids: Iterable[str]) -> dict[str, datetime]:
        """Earliest booking start per client, any status."""
        client_ids = list(client_ids)
        if not client_ids:
            return {}
        result = await self.session.execute(
            select(Booking.client_id, func.min(Booking.starts_at).label("first_at"))
            .where(Booking.client_id.in_(client_ids))
            .group_by(Booking.client_id)
        )
        return {r.client_id: self._local(r.first_at) for r in result}

    async def get_setting(self, key: str) -> Optional[dict[str, Any]]:
        """JSON value of a settings row, or None when absent."""
        result = await self.session.execute(
            select(Setting.value).where(Setting.key == key)
        )
        return result.scalar_one_or_none()


@asynccontextmanager
async def repository_scope(timezone: Optional[str] = None) -> AsyncIterator[AnalyticsRepository]:
    """Open a dedicated session and yield a repository bound to it."""
    async with async_session_maker() as session:
        try:
            yield AnalyticsRepository(session, timezone=timezone)
        except Exception:
            await session.rollback()
            raise
