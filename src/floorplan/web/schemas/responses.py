"""Pydantic response schemas for the REST API."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from floorplan.web.schemas.common import PointSchema


class StoredRoomSchema(BaseModel):
    """A saved room outline."""

    model_config = ConfigDict(extra="allow")

    id: int = Field(..., description="Sequential room id")
    name: str | None = None
    points: list[PointSchema]
    created_at: datetime
    updated_at: datetime


class ProcessedPointSchema(BaseModel):
    x: int
    y: int
    z: int = 0


class ProcessedWallSchema(BaseModel):
    start: int = Field(..., description="Index of the wall's start point")
    end: int = Field(..., description="Index of the wall's end point")
    length: float = Field(..., description="Wall length in mm")


class ProcessedRoomSchema(BaseModel):
    points: list[ProcessedPointSchema]
    walls: list[ProcessedWallSchema]


class ProcessRoomResponse(BaseModel):
    status: Literal["success"] = "success"
    message: str = "Room processed successfully"
    data: ProcessedRoomSchema


class PlanSummarySchema(BaseModel):
    """Text summary of an imported plan."""

    room_count: int
    run_count: int
    cabinet_count: int
    summary: str


class ExportFormatsSchema(BaseModel):
    formats: list[str] = Field(..., description="Registered export formats")


class ErrorResponseSchema(BaseModel):
    """Body of every error response."""

    error: str
    error_type: str
    details: Any = None
