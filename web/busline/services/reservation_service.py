"""Seat reservation: read, check, pay, conditionally decrement, record.

The only ordering guarantee between concurrent reservations is the
conditional write on route availability. A reservation that read a stale
availability gets its write rejected, re-reads and retries a bounded number
of times instead of overwriting someone else's seats.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Optional, Union

from ..core.exceptions import (
    AvailabilityConflictError,
    ContentionError,
    InsufficientInventoryError,
    InvalidRequestError,
    InventoryInconsistentError,
    RouteNotFoundError,
)
from ..domain import Booking, BookingStatus, Route
from .interfaces import IInventoryStore, IBookingLedger, IPaymentProcessor
from .payment_service import SimulatedPayment

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3


def _report_detached_commit(task: asyncio.Future[Booking]) -> None:
    """Log how a commit ended after its caller stopped waiting for it."""
    if task.cancelled():
        logger.error("Detached reservation commit was cancelled")
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Detached reservation commit failed: %s", exc, exc_info=exc)
        return
    booking = task.result()
    logger.info("Detached reservation commit stored booking %s", booking.id)


class ReservationCoordinator:
    """Orchestrates one reservation against an inventory store and a ledger."""

    def __init__(
        self,
        inventory: IInventoryStore,
        ledger: IBookingLedger,
        payment: Optional[IPaymentProcessor] = None,
        *,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.inventory = inventory
        self.ledger = ledger
        self.payment = payment or SimulatedPayment()
        self.max_attempts = max_attempts

    async def reserve(
        self,
        route_id: str,
        owner_id: str,
        ticket_count: int,
        travel_date: Union[date, str],
        *,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> Booking:
        """Reserve *ticket_count* seats on *route_id* for *owner_id*.

        Returns the stored, confirmed booking.

        A caller whose deadline fires after the commit phase started still
        sees the cancellation, but the commit runs to completion; it should
        re-list its bookings to learn the outcome.

        Raises:
            InvalidRequestError: bad input, nothing touched
            RouteNotFoundError: unknown route
            InsufficientInventoryError: fewer seats left than requested
            ReservationCancelledError: *cancel_event* fired during payment
            ContentionError: conditional write lost every attempt
            StoreUnavailableError: a store could not be reached
            InventoryInconsistentError: seats taken, booking and give-back both failed
        """
        travel_day = self._validate(route_id, owner_id, ticket_count, travel_date)

        route = await self._load(route_id)
        self._ensure_available(route, ticket_count)

        # Price is fixed by this read; the payment authorises exactly this amount
        total_price = route.price * ticket_count
        await self.payment.charge(owner_id=owner_id, amount=total_price, cancel_event=cancel_event)

        # Once seats may be taken the rest must finish even if the caller gives up
        commit = asyncio.ensure_future(
            self._commit(route, owner_id, ticket_count, travel_day, total_price)
        )
        try:
            return await asyncio.shield(commit)
        except asyncio.CancelledError:
            logger.warning(
                "Caller left while committing %d seat(s) on route %s for %s; commit continues",
                ticket_count, route.id, owner_id,
            )
            commit.add_done_callback(_report_detached_commit)
            raise

    # Helper Methods

    @staticmethod
    def _validate(route_id, owner_id, ticket_count, travel_date) -> date:
        if not route_id or not str(route_id).strip():
            raise InvalidRequestError("Route is required", field="route_id")
        if not owner_id or not str(owner_id).strip():
            raise InvalidRequestError("Session identity is not ready", field="owner_id")
        if isinstance(ticket_count, bool) or not isinstance(ticket_count, int):
            raise InvalidRequestError("Ticket count must be a whole number", field="ticket_count")
        if ticket_count < 1:
            raise InvalidRequestError("At least one ticket is required", field="ticket_count")

        if isinstance(travel_date, date):
            return travel_date
        if not travel_date or not str(travel_date).strip():
            raise InvalidRequestError("Travel date is required", field="travel_date")
        try:
            return date.fromisoformat(str(travel_date).strip())
        except ValueError:
            raise InvalidRequestError("Travel date must be YYYY-MM-DD", field="travel_date")

    async def _load(self, route_id: str) -> Route:
        route = await self.inventory.get_route(route_id)
        if route is None:
            raise RouteNotFoundError(route_id)
        return route

    @staticmethod
    def _ensure_available(route: Route, ticket_count: int) -> None:
        if route.available_seats < ticket_count:
            raise InsufficientInventoryError(route.id, route.available_seats, ticket_count)

    async def _take_seats(self, route: Route, ticket_count: int) -> Route:
        """Conditional decrement with bounded re-read/re-check retries"""
        for attempt in range(1, self.max_attempts + 1):
            try:
                return await self.inventory.decrement_availability(
                    route.id, ticket_count, expected_availability=route.available_seats
                )
            except AvailabilityConflictError:
                logger.info(
                    "Availability of route %s moved (attempt %d/%d)",
                    route.id, attempt, self.max_attempts,
                )
                if attempt == self.max_attempts:
                    break
            route = await self._load(route.id)
            self._ensure_available(route, ticket_count)

        raise ContentionError(route.id, self.max_attempts)

    async def _commit(self, route, owner_id, ticket_count, travel_day, total_price) -> Booking:
        route = await self._take_seats(route, ticket_count)

        booking = Booking(
            owner_id=owner_id,
            route_id=route.id,
            travel_date=travel_day,
            ticket_count=ticket_count,
            total_price=total_price,
            status=BookingStatus.confirmed,
            departure=route.departure,
            destination=route.destination,
            departure_time=route.departure_time,
        )
        try:
            stored = await self.ledger.append(booking)
        except Exception:
            await self._give_back(route.id, ticket_count)
            raise

        logger.info(
            "Booked %d seat(s) on route %s for %s (booking %s, %d left)",
            ticket_count, route.id, owner_id, stored.id, route.available_seats,
        )
        return stored

    async def _give_back(self, route_id: str, ticket_count: int) -> None:
        logger.warning("Booking append failed; returning %d seat(s) to route %s", ticket_count, route_id)
        try:
            await self.inventory.increment_availability(route_id, ticket_count)
        except Exception as exc:
            logger.critical(
                "Route %s lost %d seat(s): booking and give-back both failed",
                route_id, ticket_count,
            )
            raise InventoryInconsistentError(route_id, ticket_count) from exc
