from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from busline.core import Settings
from busline.services.interfaces import (
    IInventoryStore, IBookingLedger, ISubjectStore, IAttendanceLog
)
from .database import create_engine, create_session_factory
from .memory_store import (
    MonotonicClock,
    InMemoryInventoryStore,
    InMemoryBookingLedger,
    InMemorySubjectStore,
    InMemoryAttendanceLog,
)
from .sql_store import SqlInventoryStore, SqlBookingLedger, SqlSubjectStore, SqlAttendanceLog

logger = logging.getLogger(__name__)


@dataclass
class StoreBundle:
    """Every store the services need, wired against one backend."""

    inventory: IInventoryStore
    bookings: IBookingLedger
    subjects: ISubjectStore
    attendance: IAttendanceLog
    engine: Optional[AsyncEngine] = None

    async def ping(self) -> bool:
        """Return True when the backing store answers."""
        if self.engine is None:
            return True
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
        except Exception:
            logger.exception("Store health check failed")
            return False
        return True

    async def close(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()


def memory_stores() -> StoreBundle:
    clock = MonotonicClock()
    subjects = InMemorySubjectStore(clock)
    return StoreBundle(
        inventory=InMemoryInventoryStore(),
        bookings=InMemoryBookingLedger(clock),
        subjects=subjects,
        attendance=InMemoryAttendanceLog(subjects, clock),
    )


def sql_stores(engine: AsyncEngine) -> StoreBundle:
    session_factory = create_session_factory(engine)
    return StoreBundle(
        inventory=SqlInventoryStore(session_factory),
        bookings=SqlBookingLedger(session_factory),
        subjects=SqlSubjectStore(session_factory),
        attendance=SqlAttendanceLog(session_factory),
        engine=engine,
    )


def build_stores(settings: Settings) -> StoreBundle:
    """Build the store bundle selected by ``STORE_BACKEND``"""
    if settings.STORE_BACKEND == "memory":
        logger.warning("Using in-memory stores; data is lost on restart")
        return memory_stores()
    return sql_stores(create_engine(settings))
