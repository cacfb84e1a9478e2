import logging
from typing import List
from fastapi import APIRouter, status

from busline.api.v1.schemas.route_schemas import RouteIn, RouteOut
from busline.deps import RouteServiceDep


router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/routes", response_model=RouteOut, status_code=status.HTTP_201_CREATED)
async def seed_route(payload: RouteIn, service: RouteServiceDep):
    """Create a route with every seat available"""
    route = await service.seed_route(
        departure=payload.departure,
        destination=payload.destination,
        departure_time=payload.departure_time,
        price=payload.price,
        total_seats=payload.total_seats,
        route_id=payload.id,
    )
    return RouteOut.model_validate(route)


@router.post("/routes/demo", response_model=List[RouteOut], status_code=status.HTTP_201_CREATED)
async def seed_demo_routes(service: RouteServiceDep):
    """Seed the sample timetable; no-op when routes already exist"""
    routes = await service.seed_demo_routes()
    return [RouteOut.model_validate(r) for r in routes]
