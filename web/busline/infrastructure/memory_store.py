"""In-process stores for local development and tests.

Each store serialises its own single operations with an ``asyncio.Lock``;
no lock outlives one call, so reservations still race exactly as they would
against a remote store.
"""

from __future__ import annotations

import asyncio
import itertools
import uuid
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Dict, List, Optional

from busline.core import AvailabilityConflictError, ConflictError, NotFoundError, RouteNotFoundError
from busline.domain import Route, Booking, Subject, AttendanceRecord
from busline.services.interfaces import (
    IInventoryStore, IBookingLedger, ISubjectStore, IAttendanceLog
)


class MonotonicClock:
    """UTC timestamps that strictly increase across calls."""

    def __init__(self):
        self._last: Optional[datetime] = None

    def now(self) -> datetime:
        current = datetime.now(timezone.utc)
        if self._last is not None and current <= self._last:
            current = self._last + timedelta(microseconds=1)
        self._last = current
        return current


def _new_id() -> str:
    return uuid.uuid4().hex


class InMemoryInventoryStore(IInventoryStore):

    def __init__(self):
        self._routes: Dict[str, Route] = {}
        self._lock = asyncio.Lock()

    async def get_route(self, route_id: str) -> Optional[Route]:
        return self._routes.get(route_id)

    async def decrement_availability(
        self, route_id: str, amount: int, expected_availability: int
    ) -> Route:
        async with self._lock:
            route = self._routes.get(route_id)
            if route is None:
                raise RouteNotFoundError(route_id)
            if route.available_seats != expected_availability or amount > route.available_seats:
                raise AvailabilityConflictError(route_id, expected_availability)
            updated = replace(route, available_seats=route.available_seats - amount)
            self._routes[route_id] = updated
            return updated

    async def increment_availability(self, route_id: str, amount: int) -> Route:
        async with self._lock:
            route = self._routes.get(route_id)
            if route is None:
                raise RouteNotFoundError(route_id)
            restored = min(route.available_seats + amount, route.total_seats)
            updated = replace(route, available_seats=restored)
            self._routes[route_id] = updated
            return updated

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
        async with self._lock:
            route_id = route_id or _new_id()
            if route_id in self._routes:
                raise ConflictError(f"Route {route_id} already exists")
            route = Route(
                id=route_id,
                departure=departure,
                destination=destination,
                departure_time=departure_time,
                price=Decimal(price),
                total_seats=total_seats,
                available_seats=total_seats,
            )
            self._routes[route_id] = route
            return route

    async def list_routes(self) -> List[Route]:
        return sorted(
            self._routes.values(),
            key=lambda r: (r.departure_time, r.departure, r.id),
        )


class InMemoryBookingLedger(IBookingLedger):

    def __init__(self, clock: Optional[MonotonicClock] = None):
        self._bookings: List[Booking] = []
        self._seq = itertools.count(1)
        self._clock = clock or MonotonicClock()
        self._lock = asyncio.Lock()

    async def append(self, booking: Booking) -> Booking:
        async with self._lock:
            stored = replace(booking, id=_new_id(), seq=next(self._seq), created_at=self._clock.now())
            self._bookings.append(stored)
            return stored

    async def list_by_owner(self, owner_id: str) -> List[Booking]:
        return [b for b in self._bookings if b.owner_id == owner_id]

    async def list_by_route(self, route_id: str) -> List[Booking]:
        return [b for b in self._bookings if b.route_id == route_id]


class InMemorySubjectStore(ISubjectStore):

    def __init__(self, clock: Optional[MonotonicClock] = None):
        self._subjects: Dict[str, Subject] = {}
        self._clock = clock or MonotonicClock()
        self._lock = asyncio.Lock()

    async def add(self, subject: Subject) -> Subject:
        async with self._lock:
            stored = replace(subject, id=_new_id(), created_at=self._clock.now())
            self._subjects[stored.id] = stored
            return stored

    async def get(self, subject_id: str) -> Optional[Subject]:
        return self._subjects.get(subject_id)

    async def list_by_owner(self, owner_id: str) -> List[Subject]:
        return [s for s in self._subjects.values() if s.owner_id == owner_id]


class InMemoryAttendanceLog(IAttendanceLog):

    def __init__(self, subjects: InMemorySubjectStore, clock: Optional[MonotonicClock] = None):
        self._subjects = subjects
        self._records: List[AttendanceRecord] = []
        self._seq = itertools.count(1)
        self._clock = clock or MonotonicClock()
        self._lock = asyncio.Lock()

    async def append(self, record: AttendanceRecord) -> AttendanceRecord:
        async with self._lock:
            if await self._subjects.get(record.subject_id) is None:
                raise NotFoundError("Subject", record.subject_id)
            stored = replace(record, id=_new_id(), seq=next(self._seq), created_at=self._clock.now())
            self._records.append(stored)
            return stored

    async def list_by_owner(self, owner_id: str) -> List[AttendanceRecord]:
        return [r for r in self._records if r.owner_id == owner_id]
