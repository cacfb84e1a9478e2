"""
Shared fixtures.

Environment is pinned before anything from ``busline`` is imported so the
cached settings never see a developer's real configuration.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["STORE_BACKEND"] = "memory"
os.environ["PAYMENT_DELAY_SECONDS"] = "0"
os.environ["ADMIN_API_KEY"] = "test-admin-key"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["RESERVATION_MAX_ATTEMPTS"] = "3"

import asyncio
from collections.abc import AsyncGenerator, Generator
from decimal import Decimal
from typing import List, Optional

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import create_async_engine

from busline.core import AvailabilityConflictError, StoreUnavailableError, get_settings
from busline.domain import Booking, Route
from busline.infrastructure import StoreBundle, create_schema, memory_stores, sql_stores
from busline.main import create_app
from busline.services import ReservationCoordinator, SimulatedPayment
from busline.services.interfaces import IInventoryStore, IBookingLedger


# ---------------------------------------------------------------------------
#  Store doubles
# ---------------------------------------------------------------------------

class DelegatingInventory(IInventoryStore):
    """Wraps a real inventory store and counts calls; subclasses add faults."""

    def __init__(self, inner: IInventoryStore):
        self.inner = inner
        self.get_calls = 0
        self.decrement_calls = 0
        self.increment_calls = 0

    async def get_route(self, route_id: str) -> Optional[Route]:
        self.get_calls += 1
        return await self.inner.get_route(route_id)

    async def decrement_availability(self, route_id: str, amount: int, expected_availability: int) -> Route:
        self.decrement_calls += 1
        return await self.inner.decrement_availability(route_id, amount, expected_availability)

    async def increment_availability(self, route_id: str, amount: int) -> Route:
        self.increment_calls += 1
        return await self.inner.increment_availability(route_id, amount)

    async def create_route(self, **kwargs) -> Route:
        return await self.inner.create_route(**kwargs)

    async def list_routes(self) -> List[Route]:
        return await self.inner.list_routes()


class RacingInventory(DelegatingInventory):
    """Lets a competing reservation take seats right before our first write."""

    def __init__(self, inner: IInventoryStore, competing_seats: int, races: int = 1):
        super().__init__(inner)
        self.competing_seats = competing_seats
        self.races = races

    async def decrement_availability(self, route_id: str, amount: int, expected_availability: int) -> Route:
        if self.races > 0:
            self.races -= 1
            current = await self.inner.get_route(route_id)
            await self.inner.decrement_availability(route_id, self.competing_seats, current.available_seats)
        return await super().decrement_availability(route_id, amount, expected_availability)


class SlowInventory(DelegatingInventory):
    """Takes *delay* seconds to apply each conditional write."""

    def __init__(self, inner: IInventoryStore, delay: float):
        super().__init__(inner)
        self.delay = delay

    async def decrement_availability(self, route_id: str, amount: int, expected_availability: int) -> Route:
        await asyncio.sleep(self.delay)
        return await super().decrement_availability(route_id, amount, expected_availability)


class AlwaysConflictingInventory(DelegatingInventory):
    async def decrement_availability(self, route_id: str, amount: int, expected_availability: int) -> Route:
        self.decrement_calls += 1
        raise AvailabilityConflictError(route_id, expected_availability)


class UnreachableInventory(DelegatingInventory):
    async def get_route(self, route_id: str) -> Optional[Route]:
        self.get_calls += 1
        raise StoreUnavailableError("inventory")


class NoGiveBackInventory(DelegatingInventory):
    async def increment_availability(self, route_id: str, amount: int) -> Route:
        self.increment_calls += 1
        raise StoreUnavailableError("inventory")


class UnreachableLedger(IBookingLedger):
    def __init__(self):
        self.append_calls = 0

    async def append(self, booking: Booking) -> Booking:
        self.append_calls += 1
        raise StoreUnavailableError("ledger")

    async def list_by_owner(self, owner_id: str) -> List[Booking]:
        return []

    async def list_by_route(self, route_id: str) -> List[Booking]:
        return []


# ---------------------------------------------------------------------------
#  Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def stores() -> StoreBundle:
    return memory_stores()


@pytest_asyncio.fixture(params=["memory", "sql"])
async def bundle(request, tmp_path) -> AsyncGenerator[StoreBundle, None]:
    """Stores on each backend; SQL runs on a throwaway aiosqlite file"""
    if request.param == "memory":
        yield memory_stores()
        return

    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path}/busline.db")
    await create_schema(engine)
    stores = sql_stores(engine)
    yield stores
    await stores.close()


@pytest.fixture
def coordinator(stores: StoreBundle) -> ReservationCoordinator:
    return ReservationCoordinator(stores.inventory, stores.bookings, SimulatedPayment(0))


async def seed(inventory: IInventoryStore, *, seats: int = 10, price: str = "35.00", route_id: str = "r1") -> Route:
    """Create a route the way an administrator would"""
    return await inventory.create_route(
        departure="Hanoi",
        destination="Hai Phong",
        departure_time="07:00",
        price=Decimal(price),
        total_seats=seats,
        route_id=route_id,
    )


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """API client over fresh in-memory stores"""
    get_settings.cache_clear()
    app = create_app(stores=memory_stores())
    with TestClient(app) as test_client:
        yield test_client
    get_settings.cache_clear()


@pytest.fixture
def guest_headers(client: TestClient) -> dict:
    response = client.post("/api/v1/auth/session")
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def admin_headers(client: TestClient) -> dict:
    response = client.post("/api/v1/auth/admin", headers={"X-Admin-Key": "test-admin-key"})
    assert response.status_code == 201
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
