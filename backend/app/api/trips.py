import logging
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List, Optional

from ..core.database import get_db
from ..models.trip import Trip as TripModel
from ..models.vehicle import Vehicle as VehicleModel
from ..models.driver import Driver as DriverModel
from ..schemas.trip import Trip, TripCreate, TripUpdate
from ..services.mileage_sync import update_trip_mileage, recalculate_vehicle

logger = logging.getLogger(__name__)

router = APIRouter()


def validate_references(db: Session, vehicle_id: Optional[int], driver_id: Optional[int]) -> None:
    """Reject trips pointing at unknown vehicles or drivers"""
    if vehicle_id is not None:
        if not db.query(VehicleModel.id).filter(VehicleModel.id == vehicle_id).first():
            raise HTTPException(status_code=400, detail=f"Vehicle {vehicle_id} does not exist")
    if driver_id is not None:
        if not db.query(DriverModel.id).filter(DriverModel.id == driver_id).first():
            raise HTTPException(status_code=400, detail=f"Driver {driver_id} does not exist")


@router.post("/", response_model=Trip)
def create_trip(
    trip_data: TripCreate,
    db: Session = Depends(get_db)
):
    """Create a trip and calculate its tank-to-tank mileage"""
    validate_references(db, trip_data.vehicle_id, trip_data.driver_id)

    try:
        trip = TripModel(**trip_data.model_dump())
        db.add(trip)
        db.flush()  # Flush to get ID before calculating mileage

        # A back-dated refueling re-anchors later refuelings of the same vehicle
        if trip.vehicle_id is not None:
            recalculate_vehicle(db, trip.vehicle_id)
        else:
            update_trip_mileage(db, trip)

        db.commit()
        db.refresh(trip)
        return trip
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Failed to create trip: {str(e)}")


@router.get("/", response_model=List[Trip])
def get_trips(
    skip: int = 0,
    limit: int = 100,
    vehicle_id: Optional[int] = None,
    driver_id: Optional[int] = None,
    refueling_only: bool = False,
    db: Session = Depends(get_db)
):
    """Get trips, newest first"""
    query = db.query(TripModel)

    if vehicle_id is not None:
        query = query.filter(TripModel.vehicle_id == vehicle_id)

    if driver_id is not None:
        query = query.filter(TripModel.driver_id == driver_id)

    if refueling_only:
        query = query.filter(TripModel.refueling_done == True)

    return query.order_by(TripModel.trip_end_date.desc(), TripModel.id.desc()).offset(skip).limit(limit).all()


@router.get("/{trip_id}", response_model=Trip)
def get_trip(
    trip_id: int,
    db: Session = Depends(get_db)
):
    """Get trip by ID"""
    trip = db.query(TripModel).filter(TripModel.id == trip_id).first()

    if not trip:
        raise HTTPException(status_code=404, detail="Trip not found")

    return trip


@router.put("/{trip_id}", response_model=Trip)
def update_trip(
    trip_id: int,
    trip_data: TripUpdate,
    db: Session = Depends(get_db)
):
    """
    Update a trip. Edits can move the trip in the refueling chain, so every
    trip of the affected vehicle(s) is recalculated.
    """
    trip = db.query(TripModel).filter(TripModel.id == trip_id).first()

    if not trip:
        raise HTTPException(status_code=404, detail="Trip not found")

    update_data = trip_data.model_dump(exclude_unset=True)
    validate_references(db, update_data.get('vehicle_id'), update_data.get('driver_id'))

    previous_vehicle_id = trip.vehicle_id

    try:
        for field, value in update_data.items():
            setattr(trip, field, value)
        db.flush()

        if trip.vehicle_id is not None:
            recalculate_vehicle(db, trip.vehicle_id)
        else:
            update_trip_mileage(db, trip)

        if previous_vehicle_id is not None and previous_vehicle_id != trip.vehicle_id:
            recalculate_vehicle(db, previous_vehicle_id)

        db.commit()
        db.refresh(trip)
        return trip
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Failed to update trip: {str(e)}")


@router.delete("/{trip_id}")
def delete_trip(
    trip_id: int,
    db: Session = Depends(get_db)
):
    """Delete a trip and recalculate the remaining trips of its vehicle"""
    trip = db.query(TripModel).filter(TripModel.id == trip_id).first()

    if not trip:
        raise HTTPException(status_code=404, detail="Trip not found")

    vehicle_id = trip.vehicle_id

    try:
        db.delete(trip)
        db.flush()

        if vehicle_id is not None:
            checked, updated = recalculate_vehicle(db, vehicle_id)
            logger.info(f"Trip {trip_id} deleted; {updated}/{checked} trips of vehicle {vehicle_id} updated")

        db.commit()
        return {"message": "Trip deleted successfully"}
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Failed to delete trip: {str(e)}")
