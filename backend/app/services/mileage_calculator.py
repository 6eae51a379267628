"""
Mileage Calculator

Tank-to-tank fuel efficiency for trips. A refueling trip's km/L is the
odometer distance covered since the vehicle's previous refueling (anchored
on the two refueling trips' end readings) divided by the fuel added at the
current refueling.

All functions are pure: they read the trip history they are given and never
write to any trip. Persisting the result is the caller's job
(see mileage_sync).
"""

import logging
from typing import Any, Dict, List, Optional

from .fleet_math import (
    as_trip_list,
    end_sort_key,
    ended_before,
    round_half_up,
    to_number,
    trip_distance,
)

logger = logging.getLogger(__name__)

# Prediction window
MIN_PREDICTION_TRIPS = 3
MAX_PREDICTION_TRIPS = 5


def _is_same_trip(trip: Any, current: Any) -> bool:
    if trip is current:
        return True
    current_id = getattr(current, "id", None)
    return current_id is not None and getattr(trip, "id", None) == current_id


def _same_vehicle(trip: Any, current: Any) -> bool:
    return getattr(trip, "vehicle_id", None) == getattr(current, "vehicle_id", None)


def find_last_refueling_trip(current_trip: Any, all_trips: Any) -> Optional[Any]:
    """Most recent refueling trip of the same vehicle that ended before current_trip"""
    previous = [
        trip for trip in as_trip_list(all_trips)
        if _same_vehicle(trip, current_trip)
        and not _is_same_trip(trip, current_trip)
        and getattr(trip, "refueling_done", False)
        and ended_before(trip, current_trip)
    ]
    if not previous:
        return None
    previous.sort(key=end_sort_key, reverse=True)
    return previous[0]


def trips_between_refuelings(current_trip: Any, all_trips: Any) -> List[Any]:
    """
    Trips of the vehicle that ended after the last refueling and no later than
    current_trip, oldest first, short trips excluded.

    Informational only: the efficiency figure never sums these distances.
    """
    trips = as_trip_list(all_trips)
    last_refuel = find_last_refueling_trip(current_trip, trips)
    current_end = end_sort_key(current_trip)

    relevant = []
    for trip in trips:
        if not _same_vehicle(trip, current_trip) or getattr(trip, "short_trip", False):
            continue
        if last_refuel is not None and not ended_before(last_refuel, trip):
            continue
        if _is_same_trip(trip, current_trip) or end_sort_key(trip) <= current_end:
            relevant.append(trip)

    if not any(_is_same_trip(trip, current_trip) for trip in relevant) and not getattr(current_trip, "short_trip", False):
        relevant.append(current_trip)

    relevant.sort(key=end_sort_key)
    return relevant


def calculate_mileage(current_trip: Any, all_trips: Any) -> Optional[float]:
    """
    Calculate km/L for current_trip using the tank-to-tank method.

    Returns None when the figure is not computable: no refueling on the trip,
    non-positive fuel quantity, or non-positive distance.
    """
    if current_trip is None or not getattr(current_trip, "refueling_done", False):
        return None

    fuel_quantity = to_number(getattr(current_trip, "fuel_quantity", None))
    if fuel_quantity <= 0:
        return None

    last_refuel = find_last_refueling_trip(current_trip, all_trips)

    if last_refuel is None:
        # First refueling on record: only this trip's own distance is known
        distance = trip_distance(current_trip)
        if distance <= 0:
            logger.debug(f"Trip {getattr(current_trip, 'id', None)}: non-positive distance {distance}")
            return None
        return round_half_up(distance / fuel_quantity, 2)

    total_distance = (
        to_number(getattr(current_trip, "end_km", None))
        - to_number(last_refuel.end_km)
    )
    if total_distance <= 0:
        logger.debug(
            f"Trip {getattr(current_trip, 'id', None)}: tank-to-tank distance {total_distance} "
            f"since refueling trip {getattr(last_refuel, 'id', None)}"
        )
        return None

    return round_half_up(total_distance / fuel_quantity, 2)


def predict_mileage(vehicle_id: Any, all_trips: Any) -> Optional[float]:
    """
    Predict a vehicle's next km/L as a triangular-weighted average of its most
    recent (up to 5) non-short trips with a calculated figure. The newest trip
    weighs N, the oldest weighs 1. Needs at least 3 trips.
    """
    vehicle_trips = [
        trip for trip in as_trip_list(all_trips)
        if getattr(trip, "vehicle_id", None) == vehicle_id
        and getattr(trip, "calculated_kmpl", None) is not None
        and not getattr(trip, "short_trip", False)
    ]

    if len(vehicle_trips) < MIN_PREDICTION_TRIPS:
        return None

    vehicle_trips.sort(key=end_sort_key, reverse=True)
    window = vehicle_trips[:MAX_PREDICTION_TRIPS]
    count = len(window)
    total_weight = count * (count + 1) / 2

    weighted_sum = 0.0
    for index, trip in enumerate(window):
        weighted_sum += to_number(trip.calculated_kmpl) * (count - index)

    return round_half_up(weighted_sum / total_weight, 2)


def recalculate_vehicle_mileage(vehicle_id: Any, all_trips: Any) -> Dict[Any, Optional[float]]:
    """
    Recompute calculated_kmpl for every trip of a vehicle against the given
    history. Returns {trip_id: kmpl} without touching the trips, so callers can
    diff against stored values and persist only what changed.
    """
    trips = as_trip_list(all_trips)
    vehicle_trips = sorted(
        (trip for trip in trips if getattr(trip, "vehicle_id", None) == vehicle_id),
        key=end_sort_key,
    )

    results = {}
    for trip in vehicle_trips:
        results[getattr(trip, "id", None)] = calculate_mileage(trip, trips)

    logger.info(f"Recalculated mileage for {len(results)} trips of vehicle {vehicle_id}")
    return results
