"""Pydantic schemas for the REST API."""

from floorplan.web.schemas.common import PointSchema
from floorplan.web.schemas.requests import (
    PlanRequest,
    ProcessRoomRequest,
    RoomCreateRequest,
)
from floorplan.web.schemas.responses import (
    ErrorResponseSchema,
    ExportFormatsSchema,
    PlanSummarySchema,
    ProcessedPointSchema,
    ProcessedRoomSchema,
    ProcessedWallSchema,
    ProcessRoomResponse,
    StoredRoomSchema,
)

__all__ = [
    # Common
    "PointSchema",
    # Requests
    "PlanRequest",
    "ProcessRoomRequest",
    "RoomCreateRequest",
    # Responses
    "ErrorResponseSchema",
    "ExportFormatsSchema",
    "PlanSummarySchema",
    "ProcessRoomResponse",
    "ProcessedPointSchema",
    "ProcessedRoomSchema",
    "ProcessedWallSchema",
    "StoredRoomSchema",
]
