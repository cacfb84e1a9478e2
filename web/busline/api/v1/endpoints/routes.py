from typing import List
from fastapi import APIRouter

from busline.api.v1.schemas.route_schemas import RouteOut
from busline.deps import RouteServiceDep


router = APIRouter()


@router.get("/", response_model=List[RouteOut])
async def list_routes(service: RouteServiceDep):
    """List all routes with their current seat availability"""
    routes = await service.list_routes()
    return [RouteOut.model_validate(r) for r in routes]


@router.get("/{route_id}", response_model=RouteOut)
async def get_route(route_id: str, service: RouteServiceDep):
    """Get a single route"""
    route = await service.get_route(route_id)
    return RouteOut.model_validate(route)
