from .reservation_service import ReservationCoordinator
from .payment_service import SimulatedPayment
from .route_service import RouteService
from .booking_service import BookingService
from .attendance_service import AttendanceService

__all__ = [
    "ReservationCoordinator",
    "SimulatedPayment",
    "RouteService",
    "BookingService",
    "AttendanceService",
]
