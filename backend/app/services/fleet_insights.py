"""
Fleet Insights Service

Fleet-wide mileage statistics for the dashboard: distance-weighted average
km/L, best/worst vehicle and driver, and an estimate of the fuel cost that
the best driver's efficiency would save over a sample distance.

Trips are taken as already reconciled: calculated_kmpl is authoritative and
never recomputed here. Nothing in this module raises for bad data; empty or
malformed input yields the default insight.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .fleet_math import as_trip_list, mean, round_half_up, to_number, trip_distance

logger = logging.getLogger(__name__)

# Currency-agnostic price per fuel unit and sample distance for savings
DEFAULT_FUEL_PRICE_PER_UNIT = 90
DEFAULT_SAMPLE_DISTANCE = 1000

# Vehicle tags that define a comparison segment, in priority order
SEGMENT_TAGS = ['4W Pickup', '6W Truck', '10W Truck', 'LMV', 'HMV', 'Light Truck', 'Heavy Truck']
DEFAULT_SEGMENT = 'All Vehicles'


@dataclass
class MileageInsights:
    avg_mileage: float = 0.0
    best_vehicle: Optional[Any] = None
    best_vehicle_mileage: Optional[float] = None
    best_driver: Optional[Any] = None
    best_driver_mileage: Optional[float] = None
    worst_driver: Optional[Any] = None
    worst_driver_mileage: Optional[float] = None
    estimated_fuel_saved: float = 0.0
    segment_wise_savings: Dict[str, float] = field(default_factory=dict)
    segment_total_savings: float = 0.0


def _ranked_means(groups: Dict[Any, List[float]], descending: bool = True) -> List[Tuple[Any, float]]:
    """(key, mean) pairs ordered by mean; ties keep first-encountered order"""
    means = [(key, mean(values)) for key, values in groups.items() if values]
    return sorted(means, key=lambda item: -item[1] if descending else item[1])


def estimate_fuel_saved(
    best_mileage: Optional[float],
    worst_mileage: Optional[float],
    fuel_price: float = DEFAULT_FUEL_PRICE_PER_UNIT,
    sample_distance: float = DEFAULT_SAMPLE_DISTANCE,
) -> float:
    """Cost difference between best and worst efficiency, scaled by sample_distance"""
    if not best_mileage:
        return 0.0
    fuel_diff = max(0.0, best_mileage - (worst_mileage or 0.0))
    if fuel_diff <= 0:
        return 0.0
    return round_half_up(fuel_diff * sample_distance * fuel_price / best_mileage, 2)


def _vehicle_segment(vehicle: Any) -> Optional[str]:
    tags = getattr(vehicle, "tags", None)
    if not isinstance(tags, (list, tuple)):
        return None
    for tag in tags:
        if tag in SEGMENT_TAGS:
            return tag
    return None


def calculate_segment_savings(
    trips: List[Any],
    vehicles: List[Any],
    fuel_price: float = DEFAULT_FUEL_PRICE_PER_UNIT,
    sample_distance: float = DEFAULT_SAMPLE_DISTANCE,
) -> Dict[str, float]:
    """
    Savings per vehicle segment.

    Active vehicles are grouped by their first segment tag (or a single
    'All Vehicles' segment when none is tagged). Within a segment drivers are
    ranked by total distance / total fuel, and a segment with at least two
    drivers reports the best-vs-worst savings.
    """
    active = [v for v in vehicles if getattr(v, "status", None) != 'archived']

    segment_of = {}
    for vehicle in active:
        segment = _vehicle_segment(vehicle)
        if segment:
            segment_of[getattr(vehicle, "id", None)] = segment

    if not segment_of:
        segment_of = {getattr(v, "id", None): DEFAULT_SEGMENT for v in active}

    # segment -> driver -> [distance, fuel]
    totals: Dict[str, Dict[Any, List[float]]] = {segment: {} for segment in segment_of.values()}

    for trip in trips:
        if getattr(trip, "short_trip", False) or getattr(trip, "calculated_kmpl", None) is None:
            continue
        segment = segment_of.get(getattr(trip, "vehicle_id", None))
        driver_id = getattr(trip, "driver_id", None)
        if segment is None or driver_id is None:
            continue

        distance = trip_distance(trip)
        fuel = to_number(getattr(trip, "fuel_quantity", None))
        if distance > 0 and fuel > 0:
            driver_totals = totals[segment].setdefault(driver_id, [0.0, 0.0])
            driver_totals[0] += distance
            driver_totals[1] += fuel

    savings = {}
    for segment, drivers in totals.items():
        mileages = sorted(
            (distance / fuel for distance, fuel in drivers.values() if fuel > 0 and distance > 0),
            reverse=True,
        )
        if len(mileages) < 2:
            savings[segment] = 0.0
            continue
        savings[segment] = estimate_fuel_saved(mileages[0], mileages[-1], fuel_price, sample_distance)

    return savings


def get_mileage_insights(
    trips: Any,
    vehicles: Any = None,
    fuel_price: float = DEFAULT_FUEL_PRICE_PER_UNIT,
    sample_distance: float = DEFAULT_SAMPLE_DISTANCE,
) -> MileageInsights:
    """Build the fleet mileage summary from trips with a calculated km/L"""
    trips = as_trip_list(trips)

    total_km = 0.0
    total_fuel = 0.0
    mileage_by_vehicle: Dict[Any, List[float]] = {}
    mileage_by_driver: Dict[Any, List[float]] = {}

    for trip in trips:
        kmpl = getattr(trip, "calculated_kmpl", None)
        if getattr(trip, "short_trip", False) or kmpl is None:
            continue

        distance = trip_distance(trip)
        fuel = to_number(getattr(trip, "fuel_quantity", None))
        if distance <= 0 or fuel <= 0:
            continue

        total_km += distance
        total_fuel += fuel

        vehicle_id = getattr(trip, "vehicle_id", None)
        if vehicle_id is not None:
            mileage_by_vehicle.setdefault(vehicle_id, []).append(to_number(kmpl))

        driver_id = getattr(trip, "driver_id", None)
        if driver_id is not None:
            mileage_by_driver.setdefault(driver_id, []).append(to_number(kmpl))

    insights = MileageInsights()
    insights.avg_mileage = round_half_up(total_km / total_fuel, 2) if total_fuel > 0 else 0.0

    vehicles_ranked = _ranked_means(mileage_by_vehicle)
    if vehicles_ranked:
        insights.best_vehicle, insights.best_vehicle_mileage = vehicles_ranked[0]

    drivers_best = _ranked_means(mileage_by_driver)
    if drivers_best:
        insights.best_driver, insights.best_driver_mileage = drivers_best[0]
        insights.worst_driver, insights.worst_driver_mileage = _ranked_means(mileage_by_driver, descending=False)[0]

    insights.estimated_fuel_saved = estimate_fuel_saved(
        insights.best_driver_mileage,
        insights.worst_driver_mileage,
        fuel_price,
        sample_distance,
    )

    vehicles = as_trip_list(vehicles)
    if vehicles:
        insights.segment_wise_savings = calculate_segment_savings(trips, vehicles, fuel_price, sample_distance)
        insights.segment_total_savings = round_half_up(sum(insights.segment_wise_savings.values()), 2)

    logger.debug(
        f"Mileage insights over {len(trips)} trips: avg {insights.avg_mileage}, "
        f"{len(mileage_by_vehicle)} vehicles, {len(mileage_by_driver)} drivers"
    )
    return insights
