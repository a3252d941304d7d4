"""FastAPI dependency injection for floor plan services."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from floorplan.application.factory import ServiceFactory, get_factory
from floorplan.infrastructure import PlanSerializer
from floorplan.web.room_store import RoomStore


@lru_cache(maxsize=1)
def get_service_factory() -> ServiceFactory:
    """Get cached ServiceFactory instance."""
    return get_factory()


@lru_cache(maxsize=1)
def get_room_store() -> RoomStore:
    """Get the process-wide room store."""
    return RoomStore()


def get_plan_serializer(
    factory: Annotated[ServiceFactory, Depends(get_service_factory)],
) -> PlanSerializer:
    """Dependency for PlanSerializer."""
    return factory.get_plan_serializer()


# Type aliases for cleaner endpoint signatures
ServiceFactoryDep = Annotated[ServiceFactory, Depends(get_service_factory)]
RoomStoreDep = Annotated[RoomStore, Depends(get_room_store)]
PlanSerializerDep = Annotated[PlanSerializer, Depends(get_plan_serializer)]
