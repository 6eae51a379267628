from sqlalchemy import Column, Integer, String, Float, DateTime, Text, JSON
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..core.database import Base


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, index=True)
    registration_number = Column(String, nullable=False, unique=True, index=True)
    make = Column(String)
    model = Column(String)
    year = Column(Integer)

    # Fuel specs
    fuel_type = Column(String)  # Diesel, Petrol, CNG, etc.
    tank_capacity = Column(Float)  # litres

    # Segment tags used for fleet comparisons, e.g. ["LMV"], ["6W Truck"]
    tags = Column(JSON, default=list)

    status = Column(String, default="active")  # active, maintenance, archived

    notes = Column(Text)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    trips = relationship("Trip", back_populates="vehicle")
