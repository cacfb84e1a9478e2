from .route_repository import RouteRepository
from .booking_repository import BookingRepository
from .subject_repository import SubjectRepository, AttendanceRepository

__all__ = [
    "RouteRepository",
    "BookingRepository",
    "SubjectRepository",
    "AttendanceRepository",
]
