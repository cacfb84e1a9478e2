from __future__ import annotations
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from busline.core.exceptions import ConflictError, StoreUnavailableError
from .repositories import (
    RouteRepository,
    BookingRepository,
    SubjectRepository,
    AttendanceRepository,
)


class UnitOfWork:
    """Unit of work for managing repository instances and transactions."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.routes = RouteRepository(session)
        self.bookings = BookingRepository(session)
        self.subjects = SubjectRepository(session)
        self.attendance = AttendanceRepository(session)

    async def __aenter__(self) -> UnitOfWork:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            await self.rollback()

    async def commit(self):
        await self.session.commit()

    async def rollback(self):
        await self.session.rollback()


@asynccontextmanager
async def get_uow(
    session_factory: async_sessionmaker[AsyncSession],
    store: str = "sql",
) -> AsyncGenerator[UnitOfWork, None]:
    """Open a session-scoped unit of work.

    Driver failures surface as ``StoreUnavailableError`` and constraint
    violations as ``ConflictError``; callers never see SQLAlchemy errors.
    """
    try:
        async with session_factory() as session:
            uow = UnitOfWork(session)
            try:
                yield uow
            except Exception:
                await uow.rollback()
                raise
    except IntegrityError as exc:
        raise ConflictError(f"Write rejected by {store}: {exc.orig}") from exc
    except (DBAPIError, OSError) as exc:
        raise StoreUnavailableError(store, str(exc)) from exc
