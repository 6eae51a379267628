from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class TripBase(BaseModel):
    trip_serial_number: Optional[str] = None
    vehicle_id: Optional[int] = None
    driver_id: Optional[int] = None
    trip_start_date: Optional[datetime] = None
    trip_end_date: Optional[datetime] = None
    start_km: float = Field(default=0.0, ge=0)
    end_km: float = Field(default=0.0, ge=0)
    refueling_done: bool = False
    fuel_quantity: Optional[float] = Field(default=None, ge=0)
    short_trip: bool = False
    notes: Optional[str] = None


class TripCreate(TripBase):
    pass


class TripUpdate(BaseModel):
    trip_serial_number: Optional[str] = None
    vehicle_id: Optional[int] = None
    driver_id: Optional[int] = None
    trip_start_date: Optional[datetime] = None
    trip_end_date: Optional[datetime] = None
    start_km: Optional[float] = Field(default=None, ge=0)
    end_km: Optional[float] = Field(default=None, ge=0)
    refueling_done: Optional[bool] = None
    fuel_quantity: Optional[float] = Field(default=None, ge=0)
    short_trip: Optional[bool] = None
    notes: Optional[str] = None


class Trip(TripBase):
    id: int
    calculated_kmpl: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class TripRecord(BaseModel):
    """
    Snapshot of the trip fields the mileage services read.

    Built from stored rows at the storage boundary so the services work on
    plain, typed values instead of live ORM objects.
    """
    id: Optional[int] = None
    trip_serial_number: Optional[str] = None
    vehicle_id: Optional[int] = None
    driver_id: Optional[int] = None
    trip_start_date: Optional[datetime] = None
    trip_end_date: Optional[datetime] = None
    start_km: float = 0.0
    end_km: float = 0.0
    refueling_done: bool = False
    fuel_quantity: Optional[float] = None
    short_trip: bool = False
    calculated_kmpl: Optional[float] = None

    class Config:
        from_attributes = True
