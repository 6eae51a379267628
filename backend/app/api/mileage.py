from dataclasses import asdict
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List, Optional

from ..core.config import settings
from ..core.database import get_db
from ..models.vehicle import Vehicle as VehicleModel
from ..schemas.mileage import (
    MileageInsights, MileagePrediction, VehicleAnomalies, VehicleMileageReport,
    DiagnosticSummary, RecalculationResult
)
from ..services.fleet_insights import get_mileage_insights
from ..services.mileage_calculator import predict_mileage
from ..services.mileage_anomalies import detect_mileage_anomalies, group_anomalies_by_vehicle
from ..services.mileage_diagnostics import analyze_vehicle_mileage, analyze_all_trips, log_diagnosis
from ..services.mileage_sync import load_trip_records, load_vehicles, recalculate_vehicle

router = APIRouter()


def ensure_vehicle(db: Session, vehicle_id: int) -> None:
    if not db.query(VehicleModel.id).filter(VehicleModel.id == vehicle_id).first():
        raise HTTPException(status_code=404, detail="Vehicle not found")


@router.get("/insights", response_model=MileageInsights)
def get_insights(
    db: Session = Depends(get_db)
):
    """Fleet mileage summary: average, best/worst performers and savings estimate"""
    insights = get_mileage_insights(
        load_trip_records(db),
        vehicles=load_vehicles(db),
        fuel_price=settings.FUEL_PRICE_PER_UNIT,
        sample_distance=settings.SAVINGS_SAMPLE_DISTANCE,
    )
    return MileageInsights(**asdict(insights))


@router.get("/predict/{vehicle_id}", response_model=MileagePrediction)
def get_prediction(
    vehicle_id: int,
    db: Session = Depends(get_db)
):
    """Predicted km/L from the vehicle's recent trips (null with fewer than 3)"""
    ensure_vehicle(db, vehicle_id)
    trips = load_trip_records(db, vehicle_id)
    return MileagePrediction(vehicle_id=vehicle_id, predicted_kmpl=predict_mileage(vehicle_id, trips))


@router.get("/anomalies", response_model=List[VehicleAnomalies])
def get_anomalies(
    vehicle_id: Optional[int] = None,
    severity: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """Low-efficiency and bad-odometer trips, grouped by vehicle"""
    # Baseline is fleet-wide, so detect over every trip and filter afterwards
    anomalies = detect_mileage_anomalies(load_trip_records(db))

    if vehicle_id is not None:
        anomalies = [a for a in anomalies if a.vehicle_id == vehicle_id]

    if severity:
        anomalies = [a for a in anomalies if a.severity == severity]

    grouped = group_anomalies_by_vehicle(anomalies)
    return [
        VehicleAnomalies(vehicle_id=vid, anomalies=[asdict(a) for a in items])
        for vid, items in grouped.items()
    ]


@router.get("/diagnostics", response_model=DiagnosticSummary)
def get_diagnostics_summary(
    db: Session = Depends(get_db)
):
    """Counts of suspicious refueling figures across the fleet"""
    return DiagnosticSummary(**asdict(analyze_all_trips(load_trip_records(db))))


@router.get("/diagnostics/{vehicle_id}", response_model=VehicleMileageReport)
def get_vehicle_diagnostics(
    vehicle_id: int,
    db: Session = Depends(get_db)
):
    """Per-trip explanation of suspicious mileage figures for one vehicle"""
    ensure_vehicle(db, vehicle_id)
    report = analyze_vehicle_mileage(vehicle_id, load_trip_records(db, vehicle_id))

    for found in report.anomalies:
        if found.severity == 'critical':
            log_diagnosis(found)

    return VehicleMileageReport(**asdict(report))


@router.post("/recalculate/{vehicle_id}", response_model=RecalculationResult)
def recalculate_vehicle_trips(
    vehicle_id: int,
    db: Session = Depends(get_db)
):
    """Recompute and store calculated_kmpl for all trips of a vehicle"""
    ensure_vehicle(db, vehicle_id)

    try:
        checked, updated = recalculate_vehicle(db, vehicle_id)
        db.commit()
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=f"Failed to recalculate mileage: {str(e)}")

    return RecalculationResult(vehicle_id=vehicle_id, trips_checked=checked, trips_updated=updated)
