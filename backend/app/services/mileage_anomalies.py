"""
Mileage Anomaly Detection

Flags trips whose fuel efficiency points at a vehicle problem (low km/L
against the fleet baseline) or at bad odometer data. High-efficiency
outliers are never reported as vehicle problems.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .fleet_math import as_trip_list, mean, to_number, trip_distance

logger = logging.getLogger(__name__)

# km/L above this is not a plausible reading and stays out of the baseline
MAX_PLAUSIBLE_KMPL = 30
# A trip below this share of the baseline is poor efficiency
POOR_EFFICIENCY_RATIO = 0.6

CRITICAL_KMPL = 5
HIGH_KMPL = 8

POOR_EFFICIENCY = 'poor_efficiency'
NEGATIVE_DISTANCE = 'negative_distance'

ANOMALY_MESSAGES = {
    POOR_EFFICIENCY: 'Low fuel efficiency - check vehicle condition',
    NEGATIVE_DISTANCE: 'Invalid odometer readings',
}
DEFAULT_ANOMALY_MESSAGE = 'Vehicle performance issue detected'


@dataclass
class MileageAnomaly:
    trip_id: Any
    vehicle_id: Any
    anomaly_type: str
    severity: str
    mileage: float
    distance: float
    fuel: float
    baseline: Optional[float] = None
    message: str = DEFAULT_ANOMALY_MESSAGE


def anomaly_message(anomaly_type: str) -> str:
    return ANOMALY_MESSAGES.get(anomaly_type, DEFAULT_ANOMALY_MESSAGE)


def poor_efficiency_severity(kmpl: float) -> str:
    if kmpl < CRITICAL_KMPL:
        return 'critical'
    if kmpl < HIGH_KMPL:
        return 'high'
    return 'medium'


def efficiency_baseline(trips: Any) -> Optional[float]:
    """Mean km/L over plausible, non-short trips (0 < kmpl <= 30)"""
    values = []
    for trip in as_trip_list(trips):
        kmpl = getattr(trip, "calculated_kmpl", None)
        if kmpl is None or getattr(trip, "short_trip", False):
            continue
        kmpl = to_number(kmpl)
        if 0 < kmpl <= MAX_PLAUSIBLE_KMPL:
            values.append(kmpl)
    return mean(values)


def detect_mileage_anomalies(trips: Any) -> List[MileageAnomaly]:
    """
    One record per trip per triggered rule:

    - poor_efficiency: plausible km/L on a non-short trip below 60% of the
      baseline with fuel recorded (critical < 5, high < 8, otherwise medium)
    - negative_distance: end_km before start_km or negative km/L (high)
    """
    trips = as_trip_list(trips)
    baseline = efficiency_baseline(trips)
    anomalies = []

    for trip in trips:
        kmpl = getattr(trip, "calculated_kmpl", None)
        if kmpl is None:
            continue

        kmpl = to_number(kmpl)
        distance = trip_distance(trip)
        fuel = to_number(getattr(trip, "fuel_quantity", None))

        if (
            baseline is not None
            and not getattr(trip, "short_trip", False)
            and 0 < kmpl <= MAX_PLAUSIBLE_KMPL
            and kmpl < baseline * POOR_EFFICIENCY_RATIO
            and fuel > 0
        ):
            anomalies.append(MileageAnomaly(
                trip_id=getattr(trip, "id", None),
                vehicle_id=getattr(trip, "vehicle_id", None),
                anomaly_type=POOR_EFFICIENCY,
                severity=poor_efficiency_severity(kmpl),
                mileage=kmpl,
                distance=distance,
                fuel=fuel,
                baseline=baseline,
                message=anomaly_message(POOR_EFFICIENCY),
            ))

        if distance < 0 or kmpl < 0:
            anomalies.append(MileageAnomaly(
                trip_id=getattr(trip, "id", None),
                vehicle_id=getattr(trip, "vehicle_id", None),
                anomaly_type=NEGATIVE_DISTANCE,
                severity='high',
                mileage=kmpl,
                distance=distance,
                fuel=fuel,
                baseline=baseline,
                message=anomaly_message(NEGATIVE_DISTANCE),
            ))

    if anomalies:
        logger.info(f"Detected {len(anomalies)} mileage anomalies across {len(trips)} trips")
    return anomalies


def group_anomalies_by_vehicle(anomalies: List[MileageAnomaly]) -> Dict[Any, List[MileageAnomaly]]:
    grouped: Dict[Any, List[MileageAnomaly]] = {}
    for anomaly in anomalies:
        grouped.setdefault(anomaly.vehicle_id, []).append(anomaly)
    return grouped
