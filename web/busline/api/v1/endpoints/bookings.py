from typing import List
from fastapi import APIRouter, status

from busline.api.v1.schemas.booking_schemas import ReservationIn, BookingOut
from busline.deps import CoordinatorDep, BookingServiceDep, CurrentUserDep
from busline.security import owner_id_of


router = APIRouter()


@router.post("/", response_model=BookingOut, status_code=status.HTTP_201_CREATED)
async def reserve_seats(
    payload: ReservationIn,
    coordinator: CoordinatorDep,
    user: CurrentUserDep,
):
    """Reserve seats on a route for the current session"""
    booking = await coordinator.reserve(
        route_id=payload.route_id,
        owner_id=owner_id_of(user),
        ticket_count=payload.ticket_count,
        travel_date=payload.travel_date,
    )
    return BookingOut.model_validate(booking)


@router.get("/", response_model=List[BookingOut])
async def list_my_bookings(service: BookingServiceDep, user: CurrentUserDep):
    """Bookings made by the current session, newest first"""
    bookings = await service.list_for_owner(owner_id_of(user))
    return [BookingOut.model_validate(b) for b in bookings]
