from typing import Optional
from datetime import datetime, date
from decimal import Decimal
from pydantic import BaseModel, Field

from busline.domain import BookingStatus


class ReservationIn(BaseModel):
    """Schema for reserving seats on a route"""
    route_id: str = Field(..., min_length=1, max_length=64)
    ticket_count: int = Field(..., description="Number of seats to reserve")
    travel_date: date


class BookingOut(BaseModel):
    """Schema for booking responses"""
    id: str
    route_id: str
    travel_date: date
    ticket_count: int
    total_price: Decimal
    status: BookingStatus
    departure: str
    destination: str
    departure_time: str
    created_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True,
    }
