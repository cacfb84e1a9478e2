from .route_schemas import RouteIn, RouteOut
from .booking_schemas import ReservationIn, BookingOut
from .attendance_schemas import SubjectIn, SubjectOut, AttendanceIn, AttendanceOut
from .auth_schemas import SessionOut, RefreshTokenRequest, RefreshTokenResponse, IdentityOut

__all__ = [
    # Route schemas
    "RouteIn",
    "RouteOut",

    # Booking schemas
    "ReservationIn",
    "BookingOut",

    # Attendance schemas
    "SubjectIn",
    "SubjectOut",
    "AttendanceIn",
    "AttendanceOut",

    # Auth schemas
    "SessionOut",
    "RefreshTokenRequest",
    "RefreshTokenResponse",
    "IdentityOut",
]
