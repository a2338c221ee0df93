"""Profile model - clients, assistants and the studio owner."""
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from database.base import Base, UTCDateTime

if TYPE_CHECKING:
    from database.models.booking import Booking
    from database.models.payment import Payment


class ProfileRole(str, Enum):
    """Profile role enum."""
    CLIENT = "client"
    ASSISTANT = "assistant"
    ADMIN = "admin"


class Profile(Base):
    """Profile model."""

    __tablename__ = "profiles"

    # Primary key (auth provider user id)
    id: Mapped[str] = mapped_column(String(64), primary_key=True)

    role: Mapped[str] = mapped_column(
        String(20),
        default=ProfileRole.CLIENT.value,
        nullable=False,
        index=True
    )

    # Personal info
    first_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Acquisition channel
    source: Mapped[str | None] = mapped_column(
        String(100),
        nullable=True,
        comment="Source: instagram, referral, google, walk_in, etc."
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        index=True
    )

    # Relationships
    bookings: Mapped[list["Booking"]] = relationship(
        "Booking",
        back_populates="client",
        foreign_keys="Booking.client_id"
    )
    payments: Mapped[list["Payment"]] = relationship("Payment", back_populates="client")

    def __repr__(self) -> str:
        return f"<Profile(id='{self.id}', role='{self.role}', name='{self.first_name} {self.last_name}')>"
