from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import List, Optional

from ..core import ValidationError, RouteNotFoundError
from ..domain import Route
from .interfaces import IInventoryStore

logger = logging.getLogger(__name__)

# Sample timetable offered to fresh installs
DEMO_ROUTES = (
    {"departure": "Hanoi", "destination": "Hai Phong", "departure_time": "07:00", "price": Decimal("12.50"), "total_seats": 40},
    {"departure": "Hanoi", "destination": "Ninh Binh", "departure_time": "08:30", "price": Decimal("9.00"), "total_seats": 30},
    {"departure": "Da Nang", "destination": "Hue", "departure_time": "10:15", "price": Decimal("7.75"), "total_seats": 45},
    {"departure": "Ho Chi Minh City", "destination": "Da Lat", "departure_time": "21:00", "price": Decimal("35.00"), "total_seats": 34},
)


class RouteService:
    """Route catalogue and administrative seeding"""

    def __init__(self, inventory: IInventoryStore):
        self.inventory = inventory

    async def list_routes(self) -> List[Route]:
        return await self.inventory.list_routes()

    async def get_route(self, route_id: str) -> Route:
        route = await self.inventory.get_route(route_id)
        if route is None:
            raise RouteNotFoundError(route_id)
        return route

    async def seed_route(
        self,
        *,
        departure: str,
        destination: str,
        departure_time: str,
        price,
        total_seats: int,
        route_id: Optional[str] = None,
    ) -> Route:
        """Create a route with every seat available"""
        departure = (departure or "").strip()
        destination = (destination or "").strip()
        departure_time = (departure_time or "").strip()

        if not departure:
            raise ValidationError("Departure is required", field="departure")
        if not destination:
            raise ValidationError("Destination is required", field="destination")
        if not departure_time:
            raise ValidationError("Departure time is required", field="departure_time")

        try:
            price = Decimal(str(price))
        except (InvalidOperation, ValueError):
            raise ValidationError("Price must be a number", field="price")
        if not price.is_finite() or price < 0:
            raise ValidationError("Price must not be negative", field="price")

        if isinstance(total_seats, bool) or not isinstance(total_seats, int) or total_seats < 1:
            raise ValidationError("Total seats must be a positive whole number", field="total_seats")

        return await self.inventory.create_route(
            departure=departure,
            destination=destination,
            departure_time=departure_time,
            price=price,
            total_seats=total_seats,
            route_id=route_id,
        )

    async def seed_demo_routes(self) -> List[Route]:
        """Seed the sample timetable unless routes already exist"""
        if await self.inventory.list_routes():
            logger.info("Routes already present; skipping demo seed")
            return []

        created = []
        for spec in DEMO_ROUTES:
            created.append(await self.seed_route(**spec))
        logger.info("Seeded %d demo routes", len(created))
        return created
