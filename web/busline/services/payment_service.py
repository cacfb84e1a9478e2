"""Simulated payment step.

There is no gateway: the charge is a fixed delay that models processing
latency. It touches no store and holds no lock.
"""

from __future__ import annotations

import asyncio
import logging
from decimal import Decimal
from typing import Optional

from ..core.exceptions import ReservationCancelledError
from .interfaces import IPaymentProcessor

logger = logging.getLogger(__name__)


class SimulatedPayment(IPaymentProcessor):
    """Waits *delay_seconds* unless the caller cancels first."""

    def __init__(self, delay_seconds: float = 2.0):
        self.delay_seconds = delay_seconds

    async def charge(
        self,
        *,
        owner_id: str,
        amount: Decimal,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> None:
        if cancel_event is None:
            await asyncio.sleep(self.delay_seconds)
            return

        if cancel_event.is_set():
            raise ReservationCancelledError()

        delay = asyncio.ensure_future(asyncio.sleep(self.delay_seconds))
        cancelled = asyncio.ensure_future(cancel_event.wait())
        try:
            await asyncio.wait({delay, cancelled}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (delay, cancelled):
                if not task.done():
                    task.cancel()

        if cancelled.done() and not cancelled.cancelled():
            logger.info("Payment of %s for %s cancelled by caller", amount, owner_id)
            raise ReservationCancelledError()
        logger.debug("Payment of %s for %s completed", amount, owner_id)
