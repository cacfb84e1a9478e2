from typing import Optional
from decimal import Decimal
from pydantic import BaseModel, Field


class RouteIn(BaseModel):
    """Schema for seeding a route"""
    id: Optional[str] = Field(None, min_length=1, max_length=64)
    departure: str = Field(..., min_length=1, max_length=120)
    destination: str = Field(..., min_length=1, max_length=120)
    departure_time: str = Field(..., min_length=1, max_length=32, description="Scheduled time, e.g. 08:30")
    price: Decimal = Field(..., ge=0)
    total_seats: int = Field(..., gt=0)


class RouteOut(BaseModel):
    """Schema for route responses"""
    id: str
    departure: str
    destination: str
    departure_time: str
    price: Decimal
    total_seats: int
    available_seats: int

    model_config = {
        "from_attributes": True,
    }
