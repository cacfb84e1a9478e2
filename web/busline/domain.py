"""Store-agnostic records passed between services and store backends."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional


class BookingStatus(str, Enum):
    """Lifecycle of a booking as shown to the traveller."""

    confirmed = "Confirmed"
    pending = "Pending"


class AttendanceStatus(str, Enum):
    """Marks a student can receive for one class on one day."""

    present = "Present"
    absent = "Absent"
    late = "Late"


@dataclass(frozen=True)
class Route:
    id: str
    departure: str
    destination: str
    departure_time: str
    price: Decimal
    total_seats: int
    available_seats: int

    @property
    def seats_taken(self) -> int:
        return self.total_seats - self.available_seats


@dataclass(frozen=True)
class Booking:
    """A confirmed seat reservation.

    ``id``, ``seq`` and ``created_at`` stay ``None`` until the ledger stores
    the booking; the ledger hands back a copy carrying them. ``seq`` is the
    ledger's insertion order and is what history listings sort on, since
    ``created_at`` may tie.
    """

    owner_id: str
    route_id: str
    travel_date: date
    ticket_count: int
    total_price: Decimal
    status: BookingStatus
    departure: str = ""
    destination: str = ""
    departure_time: str = ""
    id: Optional[str] = None
    seq: Optional[int] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Subject:
    owner_id: str
    name: str
    id: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class AttendanceRecord:
    owner_id: str
    subject_id: str
    subject_name: str
    date: date
    status: AttendanceStatus
    id: Optional[str] = None
    seq: Optional[int] = None
    created_at: Optional[datetime] = None
