from typing import Annotated
from fastapi import Depends, Request

from busline.core import Settings, get_settings
from busline.infrastructure import StoreBundle
from busline.security import current_user
from busline.services import (
    ReservationCoordinator, SimulatedPayment, RouteService, BookingService, AttendanceService
)


def get_stores(request: Request) -> StoreBundle:
    """Store bundle built once per application in the lifespan hook"""
    return request.app.state.stores


# Type aliases for dependency injection
SettingsDep = Annotated[Settings, Depends(get_settings)]
StoresDep = Annotated[StoreBundle, Depends(get_stores)]
CurrentUserDep = Annotated[dict, Depends(current_user)]


def get_reservation_coordinator(stores: StoresDep, settings: SettingsDep) -> ReservationCoordinator:
    return ReservationCoordinator(
        stores.inventory,
        stores.bookings,
        SimulatedPayment(settings.PAYMENT_DELAY_SECONDS),
        max_attempts=settings.RESERVATION_MAX_ATTEMPTS,
    )


def get_route_service(stores: StoresDep) -> RouteService:
    return RouteService(stores.inventory)


def get_booking_service(stores: StoresDep) -> BookingService:
    return BookingService(stores.bookings)


def get_attendance_service(stores: StoresDep) -> AttendanceService:
    return AttendanceService(stores.subjects, stores.attendance)


CoordinatorDep = Annotated[ReservationCoordinator, Depends(get_reservation_coordinator)]
RouteServiceDep = Annotated[RouteService, Depends(get_route_service)]
BookingServiceDep = Annotated[BookingService, Depends(get_booking_service)]
AttendanceServiceDep = Annotated[AttendanceService, Depends(get_attendance_service)]
