"""API routers for the REST API."""

from floorplan.web.routers.plans import router as plans_router
from floorplan.web.routers.rooms import router as rooms_router

__all__ = [
    "plans_router",
    "rooms_router",
]
