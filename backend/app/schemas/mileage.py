from pydantic import BaseModel
from typing import Optional, List, Dict


class MileageInsights(BaseModel):
    """Fleet-wide mileage summary for the dashboard"""
    avg_mileage: float = 0.0
    best_vehicle: Optional[int] = None
    best_vehicle_mileage: Optional[float] = None
    best_driver: Optional[int] = None
    best_driver_mileage: Optional[float] = None
    worst_driver: Optional[int] = None
    worst_driver_mileage: Optional[float] = None
    estimated_fuel_saved: float = 0.0
    segment_wise_savings: Dict[str, float] = {}
    segment_total_savings: float = 0.0

    class Config:
        from_attributes = True


class MileagePrediction(BaseModel):
    vehicle_id: int
    predicted_kmpl: Optional[float] = None


class MileageAnomaly(BaseModel):
    trip_id: Optional[int] = None
    vehicle_id: Optional[int] = None
    anomaly_type: str
    severity: str
    mileage: float
    distance: float
    fuel: float
    baseline: Optional[float] = None
    message: str

    class Config:
        from_attributes = True


class VehicleAnomalies(BaseModel):
    """Anomalies grouped under one vehicle"""
    vehicle_id: Optional[int] = None
    anomalies: List[MileageAnomaly]


class TripDiagnosis(BaseModel):
    trip_id: Optional[int] = None
    trip_number: str
    vehicle_id: Optional[int] = None
    issue_type: str
    severity: str
    calculated_mileage: Optional[float] = None
    expected_mileage: Optional[float] = None
    trip_distance: float
    tank_to_tank_distance: float
    fuel_quantity: float
    previous_refuel_end_km: Optional[float] = None
    current_end_km: float
    trips_since_last_refuel: int = 0
    message: str
    suggestion: str

    class Config:
        from_attributes = True


class VehicleMileageReport(BaseModel):
    vehicle_id: int
    total_trips: int
    refueling_trips: int
    average_mileage: float
    mileage_min: float
    mileage_max: float
    anomalies: List[TripDiagnosis]

    class Config:
        from_attributes = True


class DiagnosticSummary(BaseModel):
    total_trips: int
    total_refueling_trips: int
    total_anomalies: int
    critical_anomalies: int
    warning_anomalies: int
    very_high_mileage: int
    extremely_high_mileage: int
    very_low_mileage: int
    partial_refills: int
    negative_distances: int

    class Config:
        from_attributes = True


class RecalculationResult(BaseModel):
    vehicle_id: int
    trips_checked: int
    trips_updated: int
