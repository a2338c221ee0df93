"""Plain rows handed from the data store to the aggregators."""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class BookingRow:
    """A booking joined with its service."""
    id: int
    client_id: str
    starts_at: datetime
    status: str
    total_in_cents: int = 0
    staff_id: Optional[str] = None
    service_id: Optional[int] = None
    service_name: Optional[str] = None
    category: Optional[str] = None
    cancellation_reason: Optional[str] = None


@dataclass(frozen=True)
class PaymentRow:
    """A payment as recorded by the till."""
    client_id: str
    amount_in_cents: int
    status: str
    created_at: datetime
    paid_at: Optional[datetime] = None

    @property
    def effective_at(self) -> datetime:
        return self.paid_at or self.created_at


@dataclass(frozen=True)
class ProfileRow:
    id: str
    role: str
    created_at: datetime
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    source: Optional[str] = None
