"""SQL-backed stores: one unit of work (and one transaction) per call."""

from __future__ import annotations

import logging
from dataclasses import asdict
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from busline.core import AvailabilityConflictError, NotFoundError, RouteNotFoundError
from busline.domain import Route, Booking, Subject, AttendanceRecord
from busline.services.interfaces import (
    IInventoryStore, IBookingLedger, ISubjectStore, IAttendanceLog
)
from .unit_of_work import get_uow

logger = logging.getLogger(__name__)


def _insertable(record) -> dict:
    """Drop store-assigned fields so the database fills them in."""
    data = asdict(record)
    data.pop("id", None)
    data.pop("seq", None)
    data.pop("created_at", None)
    return data


class SqlInventoryStore(IInventoryStore):

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def get_route(self, route_id: str) -> Optional[Route]:
        async with get_uow(self._session_factory, "inventory") as uow:
            row = await uow.routes.get(route_id)
            return row.to_domain() if row else None

    async def decrement_availability(
        self, route_id: str, amount: int, expected_availability: int
    ) -> Route:
        async with get_uow(self._session_factory, "inventory") as uow:
            applied = await uow.routes.decrement_if_unchanged(route_id, amount, expected_availability)
            if not applied:
                await uow.rollback()
                if await uow.routes.get(route_id) is None:
                    raise RouteNotFoundError(route_id)
                raise AvailabilityConflictError(route_id, expected_availability)
            await uow.commit()
            row = await uow.routes.get_fresh(route_id)
            return row.to_domain()

    async def increment_availability(self, route_id: str, amount: int) -> Route:
        async with get_uow(self._session_factory, "inventory") as uow:
            if not await uow.routes.increment_capped(route_id, amount):
                raise RouteNotFoundError(route_id)
            await uow.commit()
            row = await uow.routes.get_fresh(route_id)
            return row.to_domain()

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
        data = {
            "departure": departure,
            "destination": destination,
            "departure_time": departure_time,
            "price": price,
            "total_seats": total_seats,
            "available_seats": total_seats,
        }
        if route_id:
            data["id"] = route_id
        async with get_uow(self._session_factory, "inventory") as uow:
            row = await uow.routes.create(obj_in=data)
            await uow.commit()
            logger.info("Seeded route %s (%s -> %s, %d seats)", row.id, departure, destination, total_seats)
            return row.to_domain()

    async def list_routes(self) -> List[Route]:
        async with get_uow(self._session_factory, "inventory") as uow:
            return [row.to_domain() for row in await uow.routes.list_ordered()]


class SqlBookingLedger(IBookingLedger):

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def append(self, booking: Booking) -> Booking:
        data = _insertable(booking)
        data["status"] = booking.status.value
        async with get_uow(self._session_factory, "ledger") as uow:
            row = await uow.bookings.create(obj_in=data)
            await uow.commit()
            return row.to_domain()

    async def list_by_owner(self, owner_id: str) -> List[Booking]:
        async with get_uow(self._session_factory, "ledger") as uow:
            return [row.to_domain() for row in await uow.bookings.get_by_owner(owner_id)]

    async def list_by_route(self, route_id: str) -> List[Booking]:
        async with get_uow(self._session_factory, "ledger") as uow:
            return [row.to_domain() for row in await uow.bookings.get_by_route(route_id)]


class SqlSubjectStore(ISubjectStore):

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def add(self, subject: Subject) -> Subject:
        async with get_uow(self._session_factory, "subjects") as uow:
            row = await uow.subjects.create(obj_in=_insertable(subject))
            await uow.commit()
            return row.to_domain()

    async def get(self, subject_id: str) -> Optional[Subject]:
        async with get_uow(self._session_factory, "subjects") as uow:
            row = await uow.subjects.get(subject_id)
            return row.to_domain() if row else None

    async def list_by_owner(self, owner_id: str) -> List[Subject]:
        async with get_uow(self._session_factory, "subjects") as uow:
            return [row.to_domain() for row in await uow.subjects.get_by_owner(owner_id)]


class SqlAttendanceLog(IAttendanceLog):

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def append(self, record: AttendanceRecord) -> AttendanceRecord:
        data = _insertable(record)
        data["status"] = record.status.value
        async with get_uow(self._session_factory, "attendance") as uow:
            if await uow.subjects.get(record.subject_id) is None:
                raise NotFoundError("Subject", record.subject_id)
            row = await uow.attendance.create(obj_in=data)
            await uow.commit()
            return row.to_domain()

    async def list_by_owner(self, owner_id: str) -> List[AttendanceRecord]:
        async with get_uow(self._session_factory, "attendance") as uow:
            return [row.to_domain() for row in await uow.attendance.get_by_owner(owner_id)]
