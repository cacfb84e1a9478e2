from fastapi import APIRouter, Depends

from busline.roles import Role
from busline.security import role_required
from busline.api.v1.endpoints import auth, routes, admin, bookings, attendance


# Create main API router
api_v1_router = APIRouter()

# Include auth endpoints (public access)
api_v1_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["auth"]
)

# Include route catalogue (public access)
api_v1_router.include_router(
    routes.router,
    prefix="/routes",
    tags=["routes"]
)

# Include admin endpoints (admin access)
api_v1_router.include_router(
    admin.router,
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(role_required(Role.admin))]
)

# Include booking endpoints (session access, checked per endpoint)
api_v1_router.include_router(
    bookings.router,
    prefix="/bookings",
    tags=["bookings"]
)

# Include attendance endpoints (session access, checked per endpoint)
api_v1_router.include_router(
    attendance.router,
    prefix="/attendance",
    tags=["attendance"]
)
