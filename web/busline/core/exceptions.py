from typing import Any, Optional, Dict


class BaseError(Exception):
    """Base exception class for the application"""

    def __init__(
        self,
        message: str = "An error occurred",
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(BaseError):
    """Exception raised when an entity is not found"""

    def __init__(self, entity: str, id: Any):
        super().__init__(
            message=f"{entity} with id {id} not found",
            status_code=404,
            details={"entity": entity, "id": id}
        )


class ValidationError(BaseError):
    """Exception raised for validation errors"""

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(
            message=message,
            status_code=400,
            details=details
        )


class ConflictError(BaseError):
    """Exception raised for conflict errors"""

    def __init__(self, message: str):
        super().__init__(message=message, status_code=409)


class BusinessLogicError(BaseError):
    """Exception raised for business logic violations"""

    def __init__(self, message: str, rule: Optional[str] = None):
        details = {"rule": rule} if rule else {}
        super().__init__(
            message=message,
            status_code=422,
            details=details
        )


class ExternalServiceError(BaseError):
    """Exception raised when external service fails"""

    def __init__(self, service: str, message: str):
        super().__init__(
            message=f"External service error: {message}",
            status_code=503,
            details={"service": service}
        )


# ---------------------------------------------------------------------------
#  Store signals
# ---------------------------------------------------------------------------

class AvailabilityConflictError(ConflictError):
    """Raised by an inventory store when a conditional write saw a stale token.

    Never surfaced to API callers: the reservation coordinator retries on it.
    """

    def __init__(self, route_id: str, expected: int):
        super().__init__(
            f"Availability of route {route_id} changed (expected {expected})"
        )
        self.route_id = route_id
        self.expected = expected
        self.details = {"route_id": route_id, "expected": expected}


# ---------------------------------------------------------------------------
#  Reservation outcomes
# ---------------------------------------------------------------------------

class ReservationError(BaseError):
    """Common base for every way a seat reservation can fail."""


class InvalidRequestError(ValidationError, ReservationError):
    """Malformed reservation input. Never retried."""


class RouteNotFoundError(NotFoundError, ReservationError):
    """The referenced route does not exist."""

    def __init__(self, route_id: Any):
        super().__init__("Route", route_id)
        self.route_id = route_id


class InsufficientInventoryError(BusinessLogicError, ReservationError):
    """Fewer seats are left than were requested."""

    def __init__(self, route_id: str, available: int, requested: int):
        super().__init__(
            f"Only {available} seat(s) left on route {route_id}, {requested} requested",
            rule="seat_availability"
        )
        self.route_id = route_id
        self.available = available
        self.requested = requested
        self.details.update({
            "route_id": route_id,
            "available": available,
            "requested": requested,
        })


class ContentionError(ConflictError, ReservationError):
    """The conditional write kept losing to concurrent reservations."""

    def __init__(self, route_id: str, attempts: int):
        super().__init__(
            f"Route {route_id} is busy, please retry in a moment"
        )
        self.route_id = route_id
        self.attempts = attempts
        self.details = {"route_id": route_id, "attempts": attempts}


class ReservationCancelledError(ReservationError):
    """The caller aborted the payment step. Inventory is untouched."""

    def __init__(self, route_id: Optional[str] = None):
        super().__init__(
            message="Reservation cancelled before payment completed",
            status_code=409,
            details={"route_id": route_id} if route_id else {}
        )
        self.route_id = route_id


class StoreUnavailableError(ExternalServiceError, ReservationError):
    """The backing store could not be reached."""

    def __init__(self, store: str, message: str = "store unreachable"):
        super().__init__(service=store, message=message)
        self.store = store


class InventoryInconsistentError(ReservationError):
    """Seats were taken but neither booked nor given back.

    The only state that breaks the route/booking balance; operators must
    reconcile it by hand.
    """

    def __init__(self, route_id: str, amount: int):
        super().__init__(
            message=f"Route {route_id} lost {amount} seat(s) without a booking",
            status_code=500,
            details={"route_id": route_id, "amount": amount}
        )
        self.route_id = route_id
        self.amount = amount
