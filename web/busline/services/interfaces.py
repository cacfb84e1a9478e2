"""Store and collaborator interfaces the services depend on.

Every store backend (SQL, in-memory) implements these; services receive
them through their constructors.
"""

import asyncio
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Optional

from busline.domain import Route, Booking, Subject, AttendanceRecord


class IInventoryStore(ABC):
    """Route and seat-availability records"""

    @abstractmethod
    async def get_route(self, route_id: str) -> Optional[Route]:
        """Return a route by ID, or None if not found."""
        ...

    @abstractmethod
    async def decrement_availability(
        self, route_id: str, amount: int, expected_availability: int
    ) -> Route:
        """Take *amount* seats if availability still equals *expected_availability*.

        Raises:
            AvailabilityConflictError: the stored availability moved on
            RouteNotFoundError: no such route
            StoreUnavailableError: store unreachable
        """
        ...

    @abstractmethod
    async def increment_availability(self, route_id: str, amount: int) -> Route:
        """Give back *amount* seats, capped at the route's total capacity."""
        ...

    @abstractmethod
    async def create_route(
        self,
        *,
        departure: str,
        destination: str,
        departure_time: str,
        price: Decimal,
        total_seats: int,
        route_id: Optional[str] = None,
    ) -> Route:
        """Create a route with every seat available."""
        ...

    @abstractmethod
    async def list_routes(self) -> List[Route]:
        """Return all routes ordered by departure time."""
        ...


class IBookingLedger(ABC):
    """Append-only record of confirmed bookings"""

    @abstractmethod
    async def append(self, booking: Booking) -> Booking:
        """Store *booking*; return it with its generated id and timestamp."""
        ...

    @abstractmethod
    async def list_by_owner(self, owner_id: str) -> List[Booking]:
        """Return the owner's bookings in storage order."""
        ...

    @abstractmethod
    async def list_by_route(self, route_id: str) -> List[Booking]:
        """Return bookings referencing *route_id* in storage order."""
        ...


class ISubjectStore(ABC):

    @abstractmethod
    async def add(self, subject: Subject) -> Subject:
        ...

    @abstractmethod
    async def get(self, subject_id: str) -> Optional[Subject]:
        ...

    @abstractmethod
    async def list_by_owner(self, owner_id: str) -> List[Subject]:
        ...


class IAttendanceLog(ABC):
    """Append-only attendance records"""

    @abstractmethod
    async def append(self, record: AttendanceRecord) -> AttendanceRecord:
        ...

    @abstractmethod
    async def list_by_owner(self, owner_id: str) -> List[AttendanceRecord]:
        ...


class IPaymentProcessor(ABC):
    """Charges a traveller before seats are taken"""

    @abstractmethod
    async def charge(
        self,
        *,
        owner_id: str,
        amount: Decimal,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> None:
        """Complete the charge or raise ReservationCancelledError once *cancel_event* is set."""
        ...
