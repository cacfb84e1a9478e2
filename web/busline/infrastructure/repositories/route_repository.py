from typing import Optional, List
from sqlalchemy import select, update, case
from sqlalchemy.ext.asyncio import AsyncSession

from busline.core import BaseRepository
from busline.models import RouteRow


class RouteRepository(BaseRepository[RouteRow]):
    """Route repository implementation"""

    def __init__(self, session: AsyncSession):
        super().__init__(RouteRow, session)

    async def get_fresh(self, route_id: str) -> Optional[RouteRow]:
        """Get route bypassing the identity map (after bulk UPDATEs)"""
        return await self.session.get(RouteRow, route_id, populate_existing=True)

    async def list_ordered(self) -> List[RouteRow]:
        """Get all routes ordered by departure time, then origin"""
        query = select(RouteRow).order_by(RouteRow.departure_time, RouteRow.departure, RouteRow.id)
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def decrement_if_unchanged(self, route_id: str, amount: int, expected: int) -> bool:
        """Take *amount* seats only if availability still equals *expected*.

        Single compare-and-set statement; returns False when no row matched
        (stale token, too few seats or unknown route).
        """
        stmt = (
            update(RouteRow)
            .where(
                RouteRow.id == route_id,
                RouteRow.available_seats == expected,
                RouteRow.available_seats >= amount,
            )
            .values(available_seats=RouteRow.available_seats - amount)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    async def increment_capped(self, route_id: str, amount: int) -> bool:
        """Give back *amount* seats, never exceeding total capacity"""
        restored = RouteRow.available_seats + amount
        stmt = (
            update(RouteRow)
            .where(RouteRow.id == route_id)
            .values(
                available_seats=case(
                    (restored > RouteRow.total_seats, RouteRow.total_seats),
                    else_=restored,
                )
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1
