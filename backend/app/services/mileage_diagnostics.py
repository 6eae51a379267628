"""
Mileage Diagnostics

Explains suspicious calculated_kmpl values on refueling trips: partial
refills, implausibly high or low figures, and odometer readings that go
backwards between refuelings.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional

from .fleet_math import as_trip_list, end_sort_key, to_number, trip_distance
from .mileage_calculator import find_last_refueling_trip, trips_between_refuelings

logger = logging.getLogger(__name__)

# Assumed km/L for commercial vehicles without enough history
DEFAULT_VEHICLE_MILEAGE = 12.0

EXTREME_KMPL = 100
VERY_HIGH_KMPL = 50
ELEVATED_KMPL = 25
VERY_LOW_KMPL = 2


@dataclass
class TripDiagnosis:
    trip_id: Any
    trip_number: str
    vehicle_id: Any
    issue_type: str  # very_high, very_low, partial_fill, negative_distance
    severity: str  # critical, warning
    calculated_mileage: Optional[float]
    trip_distance: float
    tank_to_tank_distance: float
    fuel_quantity: float
    current_end_km: float
    message: str
    suggestion: str
    expected_mileage: Optional[float] = None
    previous_refuel_end_km: Optional[float] = None
    trips_since_last_refuel: int = 0


@dataclass
class VehicleMileageReport:
    vehicle_id: Any
    total_trips: int
    refueling_trips: int
    average_mileage: float
    mileage_min: float = 0.0
    mileage_max: float = 0.0
    anomalies: List[TripDiagnosis] = field(default_factory=list)


@dataclass
class DiagnosticSummary:
    total_trips: int = 0
    total_refueling_trips: int = 0
    total_anomalies: int = 0
    critical_anomalies: int = 0
    warning_anomalies: int = 0
    very_high_mileage: int = 0
    extremely_high_mileage: int = 0
    very_low_mileage: int = 0
    partial_refills: int = 0
    negative_distances: int = 0


def _is_refueling(trip: Any) -> bool:
    return bool(getattr(trip, "refueling_done", False)) and to_number(getattr(trip, "fuel_quantity", None)) > 0


def _trip_number(trip: Any) -> str:
    return getattr(trip, "trip_serial_number", None) or 'Unknown'


def is_partial_refill(trip: Any, all_trips: Any) -> bool:
    """Tank-to-tank distance more than twice the trip's own distance"""
    if not _is_refueling(trip):
        return False
    previous = find_last_refueling_trip(trip, all_trips)
    if previous is None:
        return False
    tank_to_tank = to_number(getattr(trip, "end_km", None)) - to_number(previous.end_km)
    return tank_to_tank > trip_distance(trip) * 2


def diagnose_trip(trip: Any, all_trips: Any, vehicle_average: Optional[float] = None) -> Optional[TripDiagnosis]:
    """Classify one refueling trip; returns None when nothing looks wrong"""
    if not _is_refueling(trip):
        return None

    fuel = to_number(trip.fuel_quantity)
    distance = trip_distance(trip)
    end_km = to_number(getattr(trip, "end_km", None))
    kmpl = getattr(trip, "calculated_kmpl", None)

    previous = find_last_refueling_trip(trip, all_trips)
    previous_end_km = to_number(previous.end_km) if previous is not None else None
    tank_to_tank = end_km - previous_end_km if previous is not None else distance
    logged_trips = len(trips_between_refuelings(trip, all_trips))

    def diagnosis(issue_type, severity, message, suggestion, expected=None):
        return TripDiagnosis(
            trip_id=getattr(trip, "id", None),
            trip_number=_trip_number(trip),
            vehicle_id=getattr(trip, "vehicle_id", None),
            issue_type=issue_type,
            severity=severity,
            calculated_mileage=kmpl,
            trip_distance=distance,
            tank_to_tank_distance=tank_to_tank,
            fuel_quantity=fuel,
            current_end_km=end_km,
            message=message,
            suggestion=suggestion,
            expected_mileage=expected,
            previous_refuel_end_km=previous_end_km,
            trips_since_last_refuel=logged_trips,
        )

    simple_mileage = distance / fuel

    if kmpl is not None and kmpl > EXTREME_KMPL:
        partial = tank_to_tank > distance * 2
        if partial:
            return diagnosis(
                'partial_fill', 'critical',
                f"PARTIAL REFILL: {kmpl:.2f} km/L (traveled {tank_to_tank:.0f} km, added only {fuel:.2f} L)",
                f"Vehicle traveled {tank_to_tank:.0f} km since last refueling but only added {fuel:.2f} L. "
                "Check for unrecorded refuelings, an incorrect fuel quantity or a wrong odometer reading.",
                simple_mileage,
            )
        return diagnosis(
            'very_high', 'critical',
            f"EXTREMELY HIGH: {kmpl:.2f} km/L",
            f"Unrealistic mileage. Verify fuel quantity ({fuel:.2f} L) and odometer readings "
            f"({getattr(trip, 'start_km', None)} -> {getattr(trip, 'end_km', None)} km).",
            simple_mileage,
        )

    if kmpl is not None and kmpl > VERY_HIGH_KMPL:
        partial = tank_to_tank > distance * 1.5
        return diagnosis(
            'partial_fill' if partial else 'very_high', 'warning',
            f"HIGH MILEAGE: {kmpl:.2f} km/L (tank-to-tank: {tank_to_tank:.0f} km)",
            f"Possible partial refill. Verify fuel quantity ({fuel:.2f} L) and check if tank was filled completely."
            if partial else f"High mileage detected. Verify fuel quantity ({fuel:.2f} L).",
            simple_mileage,
        )

    if kmpl is not None and kmpl > ELEVATED_KMPL:
        return diagnosis(
            'very_high', 'warning',
            f"Elevated mileage: {kmpl:.2f} km/L",
            f"Double-check fuel quantity ({fuel:.2f} L) and odometer readings.",
            simple_mileage,
        )

    if kmpl is not None and 0 < kmpl < VERY_LOW_KMPL:
        return diagnosis(
            'very_low', 'critical',
            f"VERY LOW MILEAGE: {kmpl:.2f} km/L",
            f"Check for fuel leak, duplicate refueling entries, or incorrect fuel quantity "
            f"({fuel:.2f} L seems too high for {tank_to_tank:.0f} km).",
            vehicle_average or DEFAULT_VEHICLE_MILEAGE,
        )

    if tank_to_tank <= 0:
        return diagnosis(
            'negative_distance', 'critical',
            f"INVALID DISTANCE: {tank_to_tank:.0f} km",
            f"Odometer readings are incorrect. Previous refuel: "
            f"{previous_end_km if previous_end_km is not None else 'N/A'} km, Current: {end_km} km.",
        )

    return None


def analyze_vehicle_mileage(vehicle_id: Any, all_trips: Any) -> VehicleMileageReport:
    trips = as_trip_list(all_trips)
    vehicle_trips = sorted(
        (t for t in trips if getattr(t, "vehicle_id", None) == vehicle_id),
        key=end_sort_key,
    )
    refueling_trips = [t for t in vehicle_trips if _is_refueling(t)]

    plausible = [
        to_number(t.calculated_kmpl) for t in refueling_trips
        if getattr(t, "calculated_kmpl", None) is not None and 0 < to_number(t.calculated_kmpl) < VERY_HIGH_KMPL
    ]
    average = sum(plausible) / len(plausible) if plausible else DEFAULT_VEHICLE_MILEAGE

    report = VehicleMileageReport(
        vehicle_id=vehicle_id,
        total_trips=len(vehicle_trips),
        refueling_trips=len(refueling_trips),
        average_mileage=average,
        mileage_min=min(plausible) if plausible else 0.0,
        mileage_max=max(plausible) if plausible else 0.0,
    )

    for trip in refueling_trips:
        found = diagnose_trip(trip, trips, average)
        if found:
            report.anomalies.append(found)

    return report


def analyze_all_trips(all_trips: Any) -> DiagnosticSummary:
    trips = as_trip_list(all_trips)
    summary = DiagnosticSummary(
        total_trips=len(trips),
        total_refueling_trips=sum(1 for t in trips if _is_refueling(t)),
    )

    vehicle_ids = list(dict.fromkeys(getattr(t, "vehicle_id", None) for t in trips))
    for vehicle_id in vehicle_ids:
        for anomaly in analyze_vehicle_mileage(vehicle_id, trips).anomalies:
            summary.total_anomalies += 1
            if anomaly.severity == 'critical':
                summary.critical_anomalies += 1
            elif anomaly.severity == 'warning':
                summary.warning_anomalies += 1

            if anomaly.issue_type == 'partial_fill':
                summary.partial_refills += 1
            elif anomaly.issue_type == 'negative_distance':
                summary.negative_distances += 1
            elif anomaly.issue_type == 'very_low':
                summary.very_low_mileage += 1

            if anomaly.calculated_mileage is not None:
                if anomaly.calculated_mileage > EXTREME_KMPL:
                    summary.extremely_high_mileage += 1
                elif anomaly.calculated_mileage > VERY_HIGH_KMPL:
                    summary.very_high_mileage += 1

    return summary


def log_diagnosis(found: TripDiagnosis) -> None:
    logger.warning(
        f"{found.severity.upper()}: trip {found.trip_number} ({found.issue_type}) "
        f"mileage={found.calculated_mileage} trip_km={found.trip_distance:.0f} "
        f"tank_to_tank_km={found.tank_to_tank_distance:.0f} fuel={found.fuel_quantity:.2f} - {found.message}"
    )
