from typing import List
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from busline.core import BaseRepository
from busline.models import BookingRow


class BookingRepository(BaseRepository[BookingRow]):
    """Booking ledger repository implementation"""

    def __init__(self, session: AsyncSession):
        super().__init__(BookingRow, session)

    async def get_by_owner(self, owner_id: str) -> List[BookingRow]:
        """Get bookings made by one session identity"""
        query = select(BookingRow).where(BookingRow.owner_id == owner_id).order_by(BookingRow.seq)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_by_route(self, route_id: str) -> List[BookingRow]:
        """Get bookings for a specific route"""
        query = select(BookingRow).where(BookingRow.route_id == route_id).order_by(BookingRow.seq)
        result = await self.session.execute(query)
        return list(result.scalars().all())
