from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List, Optional

from ..core.database import get_db
from ..models.driver import Driver as DriverModel
from ..schemas.driver import Driver, DriverCreate, DriverUpdate

router = APIRouter()


def get_driver_or_404(db: Session, driver_id: int) -> DriverModel:
    driver = db.query(DriverModel).filter(DriverModel.id == driver_id).first()
    if not driver:
        raise HTTPException(status_code=404, detail="Driver not found")
    return driver


@router.post("/", response_model=Driver)
def create_driver(
    driver_data: DriverCreate,
    db: Session = Depends(get_db)
):
    """Add a driver"""
    try:
        driver = DriverModel(**driver_data.model_dump())
        db.add(driver)
        db.commit()
        db.refresh(driver)
        return driver
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Failed to create driver: {str(e)}")


@router.get("/", response_model=List[Driver])
def get_drivers(
    skip: int = 0,
    limit: int = 100,
    status: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """Get all drivers"""
    query = db.query(DriverModel)
    if status:
        query = query.filter(DriverModel.status == status)
    return query.order_by(DriverModel.id).offset(skip).limit(limit).all()


@router.get("/{driver_id}", response_model=Driver)
def get_driver(
    driver_id: int,
    db: Session = Depends(get_db)
):
    return get_driver_or_404(db, driver_id)


@router.put("/{driver_id}", response_model=Driver)
def update_driver(
    driver_id: int,
    driver_data: DriverUpdate,
    db: Session = Depends(get_db)
):
    driver = get_driver_or_404(db, driver_id)

    try:
        for field, value in driver_data.model_dump(exclude_unset=True).items():
            setattr(driver, field, value)
        db.commit()
        db.refresh(driver)
        return driver
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Failed to update driver: {str(e)}")


@router.delete("/{driver_id}")
def delete_driver(
    driver_id: int,
    db: Session = Depends(get_db)
):
    """Delete a driver; their trips are kept without a driver"""
    driver = get_driver_or_404(db, driver_id)

    try:
        for trip in driver.trips:
            trip.driver_id = None
        db.delete(driver)
        db.commit()
        return {"message": "Driver deleted successfully"}
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Failed to delete driver: {str(e)}")
