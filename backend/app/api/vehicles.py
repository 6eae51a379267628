from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List, Optional

from ..core.database import get_db
from ..models.vehicle import Vehicle as VehicleModel
from ..models.trip import Trip as TripModel
from ..schemas.vehicle import Vehicle, VehicleCreate, VehicleUpdate

router = APIRouter()


def get_vehicle_or_404(db: Session, vehicle_id: int) -> VehicleModel:
    vehicle = db.query(VehicleModel).filter(VehicleModel.id == vehicle_id).first()
    if not vehicle:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    return vehicle


@router.post("/", response_model=Vehicle)
def create_vehicle(
    vehicle_data: VehicleCreate,
    db: Session = Depends(get_db)
):
    """Register a new vehicle"""
    existing = db.query(VehicleModel).filter(
        VehicleModel.registration_number == vehicle_data.registration_number
    ).first()
    if existing:
        raise HTTPException(status_code=400, detail="Registration number already exists")

    try:
        vehicle = VehicleModel(**vehicle_data.model_dump())
        db.add(vehicle)
        db.commit()
        db.refresh(vehicle)
        return vehicle
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Failed to create vehicle: {str(e)}")


@router.get("/", response_model=List[Vehicle])
def get_vehicles(
    skip: int = 0,
    limit: int = 100,
    status: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """Get all vehicles"""
    query = db.query(VehicleModel)

    if status:
        query = query.filter(VehicleModel.status == status)

    return query.order_by(VehicleModel.id).offset(skip).limit(limit).all()


@router.get("/{vehicle_id}", response_model=Vehicle)
def get_vehicle(
    vehicle_id: int,
    db: Session = Depends(get_db)
):
    """Get vehicle by ID"""
    return get_vehicle_or_404(db, vehicle_id)


@router.put("/{vehicle_id}", response_model=Vehicle)
def update_vehicle(
    vehicle_id: int,
    vehicle_data: VehicleUpdate,
    db: Session = Depends(get_db)
):
    """Update vehicle details"""
    vehicle = get_vehicle_or_404(db, vehicle_id)

    try:
        update_data = vehicle_data.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            setattr(vehicle, field, value)

        db.commit()
        db.refresh(vehicle)
        return vehicle
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Failed to update vehicle: {str(e)}")


@router.delete("/{vehicle_id}")
def delete_vehicle(
    vehicle_id: int,
    db: Session = Depends(get_db)
):
    """Delete a vehicle that has no trips; vehicles with history should be archived"""
    vehicle = get_vehicle_or_404(db, vehicle_id)

    trip_count = db.query(TripModel).filter(TripModel.vehicle_id == vehicle_id).count()
    if trip_count:
        raise HTTPException(
            status_code=400,
            detail=f"Vehicle has {trip_count} trips; archive it instead"
        )

    try:
        db.delete(vehicle)
        db.commit()
        return {"message": "Vehicle deleted successfully"}
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Failed to delete vehicle: {str(e)}")
