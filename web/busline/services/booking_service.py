from typing import List

from ..domain import Booking, BookingStatus
from .interfaces import IBookingLedger


class BookingService:
    def __init__(self, ledger: IBookingLedger):
        self.ledger = ledger

    async def list_for_owner(self, owner_id: str) -> List[Booking]:
        """Get all bookings for a session identity, newest first"""
        bookings = await self.ledger.list_by_owner(owner_id)
        return sorted(bookings, key=lambda b: b.seq, reverse=True)

    async def seats_booked(self, route_id: str) -> int:
        """Sum of tickets held by confirmed bookings on a route"""
        return sum(
            b.ticket_count
            for b in await self.ledger.list_by_route(route_id)
            if b.status == BookingStatus.confirmed
        )
