"""Saved room outlines and room processing endpoints."""

from fastapi import APIRouter

from floorplan.infrastructure import format_room_for_processing
from floorplan.web.dependencies import RoomStoreDep
from floorplan.web.schemas.requests import ProcessRoomRequest, RoomCreateRequest
from floorplan.web.schemas.responses import (
    ErrorResponseSchema,
    ProcessedRoomSchema,
    ProcessRoomResponse,
    StoredRoomSchema,
)

router = APIRouter(tags=["rooms"])


@router.post("/rooms", response_model=StoredRoomSchema)
async def create_room(request: RoomCreateRequest, store: RoomStoreDep) -> StoredRoomSchema:
    """Store a room outline and assign it the next id."""
    record = store.add(request.model_dump())
    return StoredRoomSchema.model_validate(record)


@router.get("/rooms", response_model=list[StoredRoomSchema])
async def list_rooms(store: RoomStoreDep) -> list[StoredRoomSchema]:
    """List every stored room in creation order."""
    return [StoredRoomSchema.model_validate(r) for r in store.all_rooms()]


@router.get(
    "/rooms/{room_id}",
    response_model=StoredRoomSchema,
    responses={404: {"model": ErrorResponseSchema}},
)
async def get_room(room_id: int, store: RoomStoreDep) -> StoredRoomSchema:
    """Get one stored room.

    Raises:
        RoomNotFoundError: If no room has this id (404).
    """
    return StoredRoomSchema.model_validate(store.get(room_id))


@router.post("/process-room", response_model=ProcessRoomResponse)
async def process_room(request: ProcessRoomRequest) -> ProcessRoomResponse:
    """Shape an outline for 3D processing: rounded points with z and wall lengths."""
    data = format_room_for_processing(request.points)
    return ProcessRoomResponse(data=ProcessedRoomSchema.model_validate(data))
