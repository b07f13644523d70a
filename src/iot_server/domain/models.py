"""Pydantic models representing key domain entities."""
from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class User(BaseModel):
    id_user: int
    username: str
    email: str | None = None
    is_admin: bool = False


class Hardware(BaseModel):
    id_hardware: int
    name: str
    type: str
    description: str | None = None


class Node(BaseModel):
    id_node: int
    name: str
    location: str | None = None
    id_user: int
    id_hardware: int | None = None


class Sensor(BaseModel):
    id_sensor: int
    name: str
    unit: str
    id_node: int
    id_hardware: int


class SensorChannel(BaseModel):
    """One reading of a sensor."""

    time: datetime
    value: float
    id_sensor: int


class SensorWithChannel(BaseModel):
    sensor: Sensor
    channel: list[SensorChannel] = Field(default_factory=list)
