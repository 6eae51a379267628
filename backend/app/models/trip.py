from sqlalchemy import Column, Integer, String, Float, DateTime, Text, ForeignKey, Boolean
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from ..core.database import Base


class Trip(Base):
    __tablename__ = "trips"

    id = Column(Integer, primary_key=True, index=True)
    trip_serial_number = Column(String, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=True, index=True)
    driver_id = Column(Integer, ForeignKey("drivers.id"), nullable=True, index=True)

    trip_start_date = Column(DateTime(timezone=True))
    # Ordering key for mileage reconciliation
    trip_end_date = Column(DateTime(timezone=True), index=True)

    # Odometer readings (km)
    start_km = Column(Float, nullable=False, default=0.0)
    end_km = Column(Float, nullable=False, default=0.0)

    # Refueling
    refueling_done = Column(Boolean, default=False)
    fuel_quantity = Column(Float)  # litres added at this trip's refueling

    # Too short/unreliable for fleet statistics
    short_trip = Column(Boolean, default=False)

    # Tank-to-tank km/L (written by mileage_sync)
    calculated_kmpl = Column(Float, nullable=True)

    notes = Column(Text)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    vehicle = relationship("Vehicle", back_populates="trips")
    driver = relationship("Driver", back_populates="trips")
