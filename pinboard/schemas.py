"""Pydantic schemas for bookings, week windows and collision verdicts."""
from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class BookingBase(BaseModel):
    x: float = Field(..., ge=0, le=100, description="Horizontal position, percent of map width")
    y: float = Field(..., ge=0, le=100, description="Vertical position, percent of map height")
    tenant_name: str = Field(..., min_length=1, max_length=100)
    date_from: date
    date_to: date
    description: str = Field(default="", max_length=1000)


class Surface(BaseModel):
    """Pixel size of the floor plan as currently drawn by the caller."""

    map_width: float = Field(..., gt=0)
    map_height: float = Field(..., gt=0)


class BookingCreate(BookingBase, Surface):
    pass


class BookingUpdate(BaseModel):
    x: Optional[float] = Field(None, ge=0, le=100)
    y: Optional[float] = Field(None, ge=0, le=100)
    tenant_name: Optional[str] = Field(None, min_length=1, max_length=100)
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    description: Optional[str] = Field(None, max_length=1000)
    map_width: Optional[float] = Field(None, gt=0)
    map_height: Optional[float] = Field(None, gt=0)

    @model_validator(mode="after")
    def _surface_is_complete(self) -> "BookingUpdate":
        # Half a surface would be checked against the other default dimension.
        if (self.map_width is None) != (self.map_height is None):
            raise ValueError("map_width and map_height must be sent together")
        return self


class BookingRead(BookingBase):
    id: str

    model_config = {"from_attributes": True}


class CollisionCheck(Surface):
    x: float = Field(..., ge=0, le=100)
    y: float = Field(..., ge=0, le=100)
    date_from: date
    date_to: date
    exclude_id: Optional[str] = None


class CollisionVerdict(BaseModel):
    collision: bool
    conflict: Optional[BookingRead] = None


class WeekWindow(BaseModel):
    id: str
    label: str
    start: date
    end: date

    model_config = {"frozen": True}
