from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class DriverBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    license_number: Optional[str] = None
    phone: Optional[str] = None
    status: str = "active"


class DriverCreate(DriverBase):
    pass


class DriverUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    license_number: Optional[str] = None
    phone: Optional[str] = None
    status: Optional[str] = None


class Driver(DriverBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
