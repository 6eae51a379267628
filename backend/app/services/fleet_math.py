"""
Fleet Math

Shared numeric and date helpers for the mileage services. Everything here
is pure and tolerant of missing values.
"""

from datetime import datetime, date, timezone
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Any, Iterable, List, Optional


def as_trip_list(trips: Any) -> List[Any]:
    """Normalize a trip collection; anything that is not a list/tuple becomes []"""
    if isinstance(trips, (list, tuple)):
        return list(trips)
    return []


def round_half_up(value: float, places: int = 2) -> Optional[float]:
    """Round using half-up semantics (2.345 -> 2.35), unlike Python's banker's round()"""
    if value is None:
        return None
    try:
        quantum = Decimal(1).scaleb(-places)
        return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))
    except (InvalidOperation, ValueError):
        return None


def to_number(value: Any) -> float:
    """Coerce a possibly-missing numeric field to float (None/garbage -> 0.0)"""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def safe_divide(numerator: float, denominator: float) -> Optional[float]:
    if not denominator:
        return None
    return numerator / denominator


def mean(values: Iterable[float]) -> Optional[float]:
    values = list(values)
    if not values:
        return None
    return sum(values) / len(values)


def as_utc(value: Any) -> Optional[datetime]:
    """
    Normalize a trip timestamp for ordering.

    Naive datetimes are treated as UTC, plain dates as midnight UTC and ISO
    strings are parsed. Unparseable values return None, which never compares
    as earlier or later than anything.
    """
    if value is None:
        return None
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    return None


def ended_before(trip: Any, other: Any) -> bool:
    """True when trip's end date is strictly before other's end date"""
    a = as_utc(getattr(trip, "trip_end_date", None))
    b = as_utc(getattr(other, "trip_end_date", None))
    if a is None or b is None:
        return False
    return a < b


def end_sort_key(trip: Any) -> datetime:
    """Sort key on trip_end_date; undated trips sort as the oldest"""
    return as_utc(getattr(trip, "trip_end_date", None)) or datetime.min.replace(tzinfo=timezone.utc)


def trip_distance(trip: Any) -> float:
    return to_number(getattr(trip, "end_km", None)) - to_number(getattr(trip, "start_km", None))
