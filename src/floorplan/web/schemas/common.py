"""Common Pydantic schemas shared across requests and responses."""

from pydantic import BaseModel, Field


class PointSchema(BaseModel):
    """A plan point in millimetres."""

    x: float = Field(..., description="X coordinate in mm")
    y: float = Field(..., description="Y coordinate in mm")
