"""
Contract tests shared by the in-memory and SQL stores

Every test runs against both backends through the ``bundle`` fixture.
"""

from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from busline.core import AvailabilityConflictError, ConflictError, NotFoundError, RouteNotFoundError
from busline.domain import AttendanceRecord, AttendanceStatus, Booking, BookingStatus, Subject
from busline.infrastructure.memory_store import MonotonicClock
from busline.services import AttendanceService, BookingService, ReservationCoordinator, SimulatedPayment

from conftest import seed


def _booking(route_id: str = "r1", owner_id: str = "owner-a", tickets: int = 1) -> Booking:
    return Booking(
        owner_id=owner_id,
        route_id=route_id,
        travel_date=date(2026, 11, 2),
        ticket_count=tickets,
        total_price=Decimal("35.00") * tickets,
        status=BookingStatus.confirmed,
        departure="Hanoi",
        destination="Hai Phong",
        departure_time="07:00",
    )


class TestInventoryStore:
    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_created_route_is_fully_available(self, bundle) -> None:
        route = await seed(bundle.inventory, seats=12, price="35.00")

        fetched = await bundle.inventory.get_route("r1")

        assert route.available_seats == 12
        assert fetched.available_seats == fetched.total_seats == 12
        assert fetched.price == Decimal("35.00")

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_unknown_route_reads_as_none(self, bundle) -> None:
        assert await bundle.inventory.get_route("nope") is None

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_duplicate_route_id_conflicts(self, bundle) -> None:
        await seed(bundle.inventory)

        with pytest.raises(ConflictError):
            await seed(bundle.inventory)

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_decrement_with_current_token(self, bundle) -> None:
        await seed(bundle.inventory, seats=10)

        updated = await bundle.inventory.decrement_availability("r1", 3, expected_availability=10)

        assert updated.available_seats == 7
        assert (await bundle.inventory.get_route("r1")).available_seats == 7

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_decrement_with_stale_token_changes_nothing(self, bundle) -> None:
        # Given: Availability moved from 10 to 8
        await seed(bundle.inventory, seats=10)
        await bundle.inventory.decrement_availability("r1", 2, expected_availability=10)

        # When: A writer still holding the old token tries again
        with pytest.raises(AvailabilityConflictError):
            await bundle.inventory.decrement_availability("r1", 1, expected_availability=10)

        # Then: The row keeps the newer value
        assert (await bundle.inventory.get_route("r1")).available_seats == 8

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_decrement_never_goes_negative(self, bundle) -> None:
        await seed(bundle.inventory, seats=2)

        with pytest.raises(AvailabilityConflictError):
            await bundle.inventory.decrement_availability("r1", 3, expected_availability=2)

        assert (await bundle.inventory.get_route("r1")).available_seats == 2

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_decrement_unknown_route(self, bundle) -> None:
        with pytest.raises(RouteNotFoundError):
            await bundle.inventory.decrement_availability("nope", 1, expected_availability=1)

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_increment_is_capped_at_capacity(self, bundle) -> None:
        await seed(bundle.inventory, seats=5)
        await bundle.inventory.decrement_availability("r1", 2, expected_availability=5)

        restored = await bundle.inventory.increment_availability("r1", 4)

        assert restored.available_seats == 5

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_increment_unknown_route(self, bundle) -> None:
        with pytest.raises(RouteNotFoundError):
            await bundle.inventory.increment_availability("nope", 1)

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_routes_listed_by_departure_time(self, bundle) -> None:
        await bundle.inventory.create_route(
            departure="Da Nang", destination="Hue", departure_time="10:15",
            price=Decimal("7.75"), total_seats=45, route_id="late",
        )
        await bundle.inventory.create_route(
            departure="Hanoi", destination="Ninh Binh", departure_time="08:30",
            price=Decimal("9.00"), total_seats=30, route_id="early",
        )

        assert [r.id for r in await bundle.inventory.list_routes()] == ["early", "late"]


class TestBookingLedger:
    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_append_assigns_id_and_timestamp(self, bundle) -> None:
        await seed(bundle.inventory)

        stored = await bundle.bookings.append(_booking(tickets=2))

        assert stored.id
        assert stored.created_at is not None
        assert stored.status == BookingStatus.confirmed
        assert stored.total_price == Decimal("70.00")
        assert stored.departure == "Hanoi"

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_lists_by_owner_and_route(self, bundle) -> None:
        await seed(bundle.inventory, route_id="r1")
        await seed(bundle.inventory, route_id="r2")
        a1 = await bundle.bookings.append(_booking("r1", "owner-a"))
        a2 = await bundle.bookings.append(_booking("r2", "owner-a"))
        b1 = await bundle.bookings.append(_booking("r1", "owner-b"))

        by_owner = {b.id for b in await bundle.bookings.list_by_owner("owner-a")}
        by_route = {b.id for b in await bundle.bookings.list_by_route("r1")}

        assert by_owner == {a1.id, a2.id}
        assert by_route == {a1.id, b1.id}
        assert await bundle.bookings.list_by_owner("nobody") == []


class TestAttendanceStores:
    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_subject_round_trip(self, bundle) -> None:
        stored = await bundle.subjects.add(Subject(owner_id="owner-a", name="Physics"))

        assert stored.id
        assert await bundle.subjects.get(stored.id) == stored
        assert await bundle.subjects.get("missing") is None
        assert [s.id for s in await bundle.subjects.list_by_owner("owner-a")] == [stored.id]

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_record_needs_existing_subject(self, bundle) -> None:
        record = AttendanceRecord(
            owner_id="owner-a",
            subject_id="missing",
            subject_name="Ghost",
            date=date(2026, 10, 19),
            status=AttendanceStatus.present,
        )

        with pytest.raises(NotFoundError):
            await bundle.attendance.append(record)

        assert await bundle.attendance.list_by_owner("owner-a") == []

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_record_keeps_status_and_label(self, bundle) -> None:
        subject = await bundle.subjects.add(Subject(owner_id="owner-a", name="Physics"))
        record = AttendanceRecord(
            owner_id="owner-a",
            subject_id=subject.id,
            subject_name=subject.name,
            date=date(2026, 10, 19),
            status=AttendanceStatus.late,
        )

        stored = await bundle.attendance.append(record)

        assert stored == replace(record, id=stored.id, seq=stored.seq, created_at=stored.created_at)
        assert [r.id for r in await bundle.attendance.list_by_owner("owner-a")] == [stored.id]


@pytest.mark.unit
def test_clock_strictly_increases() -> None:
    clock = MonotonicClock()

    stamps = [clock.now() for _ in range(100)]

    assert all(earlier < later for earlier, later in zip(stamps, stamps[1:]))


class TestHistoryOrder:
    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_bookings_made_back_to_back_list_newest_first(self, bundle) -> None:
        # Given: Six bookings written within the same clock second
        await seed(bundle.inventory, seats=10)
        coordinator = ReservationCoordinator(bundle.inventory, bundle.bookings, SimulatedPayment(0))
        made = [await coordinator.reserve("r1", "owner-a", 1, date(2026, 11, 2)) for _ in range(6)]

        # When: The owner lists their history
        history = await BookingService(bundle.bookings).list_for_owner("owner-a")

        # Then: Exactly reverse creation order, with strictly increasing sequence
        assert [b.id for b in history] == [b.id for b in reversed(made)]
        assert all(earlier.seq < later.seq for earlier, later in zip(made, made[1:]))

    @pytest.mark.integration
    @pytest.mark.asyncio
    async def test_attendance_marks_list_newest_first(self, bundle) -> None:
        service = AttendanceService(bundle.subjects, bundle.attendance)
        subject = await service.add_subject("owner-a", "Physics")
        marked = [
            await service.mark_attendance("owner-a", subject.id, date(2026, 10, day), AttendanceStatus.present)
            for day in range(1, 7)
        ]

        records = await service.list_records("owner-a")

        assert [r.id for r in records] == [r.id for r in reversed(marked)]
