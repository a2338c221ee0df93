"""Booking model - represents a client booking."""
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import String, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from database.base import Base, BigIntegerType, UTCDateTime

if TYPE_CHECKING:
    from database.models.profile import Profile
    from database.models.service import Service


class BookingStatus(str, Enum):
    """Booking status enum."""
    SCHEDULED = "scheduled"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    NO_SHOW = "no_show"


class Booking(Base):
    """Booking model."""

    __tablename__ = "bookings"

    # Primary key
    id: Mapped[int] = mapped_column(BigIntegerType, primary_key=True, autoincrement=True)

    # Relationships
    client_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    staff_id: Mapped[str | None] = mapped_column(
        String(64),
        ForeignKey("profiles.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    service_id: Mapped[int | None] = mapped_column(
        BigIntegerType,
        ForeignKey("services.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )

    # Booking details
    starts_at: Mapped[datetime] = mapped_column(UTCDateTime(timezone=True), nullable=False, index=True)
    duration_minutes: Mapped[int] = mapped_column(Integer, default=60, nullable=False)

    # Status
    status: Mapped[str] = mapped_column(
        String(20),
        default=BookingStatus.SCHEDULED.value,
        nullable=False,
        index=True
    )

    # Price listed at booking time
    total_in_cents: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    cancellation_reason: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(UTCDateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    client: Mapped["Profile"] = relationship(
        "Profile",
        back_populates="bookings",
        foreign_keys=[client_id]
    )
    staff: Mapped["Profile | None"] = relationship("Profile", foreign_keys=[staff_id])
    service: Mapped["Service | None"] = relationship("Service", back_populates="bookings")

    def __repr__(self) -> str:
        return (
            f"<Booking(id={self.id}, client_id='{self.client_id}', "
            f"starts_at={self.starts_at}, status='{self.status}')>"
        )
