"""Payment model - money received from a client."""
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import String, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from database.base import Base, BigIntegerType, UTCDateTime

if TYPE_CHECKING:
    from database.models.profile import Profile


class PaymentStatus(str, Enum):
    """Payment status enum."""
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"
    FAILED = "failed"


class Payment(Base):
    """Payment model."""

    __tablename__ = "payments"

    # Primary key
    id: Mapped[int] = mapped_column(BigIntegerType, primary_key=True, autoincrement=True)

    client_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    booking_id: Mapped[int | None] = mapped_column(
        BigIntegerType,
        ForeignKey("bookings.id", ondelete="SET NULL"),
        nullable=True
    )

    # Payment details
    amount_in_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        default=PaymentStatus.PENDING.value,
        nullable=False
    )

    # Payment date (when actually paid)
    paid_at: Mapped[datetime | None] = mapped_column(UTCDateTime(timezone=True), nullable=True, index=True)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(UTCDateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    client: Mapped["Profile"] = relationship("Profile", back_populates="payments")

    def __repr__(self) -> str:
        return (
            f"<Payment(id={self.id}, client_id='{self.client_id}', "
            f"amount_in_cents={self.amount_in_cents}, status='{self.status}')>"
        )
