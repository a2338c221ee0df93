"""Service model - represents a studio service offering."""
from enum import Enum
from typing import TYPE_CHECKING

from sqlalchemy import String, Integer, Boolean
from sqlalchemy.orm import Mapped, mapped_column, relationship

from database.base import Base, BigIntegerType

if TYPE_CHECKING:
    from database.models.booking import Booking


class ServiceCategory(str, Enum):
    """Service category enum."""
    LASH = "lash"
    JEWELRY = "jewelry"
    CROCHET = "crochet"
    CONSULTING = "consulting"


class Service(Base):
    """Service model."""

    __tablename__ = "services"

    # Primary key
    id: Mapped[int] = mapped_column(BigIntegerType, primary_key=True, autoincrement=True)

    # Service info
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str | None] = mapped_column(
        String(20),
        nullable=True,
        comment="Category: lash, jewelry, crochet, consulting"
    )

    # Duration and price
    duration_minutes: Mapped[int] = mapped_column(Integer, default=60, nullable=False)
    price_in_cents: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Status
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Relationships
    bookings: Mapped[list["Booking"]] = relationship("Booking", back_populates="service")

    def __repr__(self) -> str:
        return f"<Service(id={self.id}, name='{self.name}', category='{self.category}')>"
