"""Data Transfer Objects."""
from __future__ import annotations

from pydantic import BaseModel, Field


class SensorCreate(BaseModel):
    """Sensor creation request."""

    name: str = Field(..., min_length=1, max_length=255)
    unit: str = Field(..., min_length=1, max_length=255)
    id_node: int
    id_hardware: int


class SensorUpdate(BaseModel):
    """Partial sensor update; omitted fields keep their current value."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    unit: str | None = Field(default=None, min_length=1, max_length=255)
