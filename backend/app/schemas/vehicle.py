from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class VehicleBase(BaseModel):
    registration_number: str = Field(..., min_length=1, max_length=32)
    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    fuel_type: Optional[str] = None
    tank_capacity: Optional[float] = Field(default=None, ge=0)
    tags: List[str] = []
    status: str = "active"
    notes: Optional[str] = None


class VehicleCreate(VehicleBase):
    pass


class VehicleUpdate(BaseModel):
    registration_number: Optional[str] = Field(default=None, min_length=1, max_length=32)
    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    fuel_type: Optional[str] = None
    tank_capacity: Optional[float] = Field(default=None, ge=0)
    tags: Optional[List[str]] = None
    status: Optional[str] = None
    notes: Optional[str] = None


class Vehicle(VehicleBase):
    id: int
    tags: Optional[List[str]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
