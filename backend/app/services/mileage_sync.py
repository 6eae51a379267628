"""
Mileage Sync Service

Bridges stored trips and the pure mileage services: loads a vehicle's trip
history through the request's Session, runs the tank-to-tank calculation and
writes calculated_kmpl back onto the ORM rows. Committing is left to the
caller so a trip save and its mileage update land in one transaction.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from ..models.trip import Trip as TripModel
from ..models.vehicle import Vehicle as VehicleModel
from ..schemas.trip import TripRecord
from .mileage_calculator import calculate_mileage, recalculate_vehicle_mileage

logger = logging.getLogger(__name__)


def to_record(trip: TripModel) -> TripRecord:
    return TripRecord.model_validate(trip)


def load_trip_records(db: Session, vehicle_id: Optional[int] = None) -> List[TripRecord]:
    """Snapshot of all trips, or of one vehicle's trips"""
    query = db.query(TripModel)
    if vehicle_id is not None:
        query = query.filter(TripModel.vehicle_id == vehicle_id)
    return [to_record(trip) for trip in query.order_by(TripModel.trip_end_date).all()]


def load_vehicles(db: Session) -> List[VehicleModel]:
    return db.query(VehicleModel).all()


def update_trip_mileage(db: Session, trip: TripModel) -> Optional[float]:
    """Compute and set calculated_kmpl on a single trip (not committed)"""
    history = load_trip_records(db, trip.vehicle_id) if trip.vehicle_id is not None else []
    trip.calculated_kmpl = calculate_mileage(to_record(trip), history)
    logger.info(f"Trip {trip.id}: calculated_kmpl={trip.calculated_kmpl}")
    return trip.calculated_kmpl


def recalculate_vehicle(db: Session, vehicle_id: int) -> Tuple[int, int]:
    """
    Recompute calculated_kmpl for every trip of a vehicle and stage the rows
    whose value changed. Returns (trips_checked, trips_updated).
    """
    rows = db.query(TripModel).filter(TripModel.vehicle_id == vehicle_id).all()
    records = [to_record(row) for row in rows]
    results = recalculate_vehicle_mileage(vehicle_id, records)

    updated = 0
    for row in rows:
        new_value = results.get(row.id)
        if row.calculated_kmpl != new_value:
            logger.info(f"Updating trip {row.trip_serial_number or row.id}: {row.calculated_kmpl} -> {new_value}")
            row.calculated_kmpl = new_value
            updated += 1

    return len(rows), updated
