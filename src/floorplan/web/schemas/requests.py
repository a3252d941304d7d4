"""Pydantic request schemas for the REST API."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from floorplan.web.schemas.common import PointSchema


class RoomCreateRequest(BaseModel):
    """A room outline to store.

    Extra fields are kept and returned with the stored room.
    """

    model_config = ConfigDict(extra="allow")

    name: str | None = Field(default=None, description="Display name")
    points: list[PointSchema] = Field(..., description="Outline points in drawing order")


class ProcessRoomRequest(BaseModel):
    """A closed room outline to shape for 3D processing."""

    points: list[PointSchema] = Field(..., description="Outline points in drawing order")


class PlanRequest(BaseModel):
    """A projectData document to import."""

    project_data: dict[str, Any] = Field(..., description="projectData JSON document")
