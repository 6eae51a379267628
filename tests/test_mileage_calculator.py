"""
Test suite for tank-to-tank mileage calculation and prediction
File: tests/test_mileage_calculator.py
"""

from datetime import datetime, timedelta, timezone

from app.schemas.trip import TripRecord
from app.services.mileage_calculator import (
    calculate_mileage,
    find_last_refueling_trip,
    predict_mileage,
    recalculate_vehicle_mileage,
    trips_between_refuelings,
)

BASE_DATE = datetime(2025, 3, 1, 8, 0, tzinfo=timezone.utc)


def make_trip(trip_id, day, start_km, end_km, fuel=None, vehicle_id=1, short=False, kmpl=None, driver_id=None):
    """Trip ending on BASE_DATE + day; refueling when fuel is given"""
    return TripRecord(
        id=trip_id,
        vehicle_id=vehicle_id,
        driver_id=driver_id,
        trip_start_date=BASE_DATE + timedelta(days=day),
        trip_end_date=BASE_DATE + timedelta(days=day, hours=8),
        start_km=start_km,
        end_km=end_km,
        refueling_done=fuel is not None,
        fuel_quantity=fuel,
        short_trip=short,
        calculated_kmpl=kmpl,
    )


class TestCalculateMileage:
    """Tank-to-tank km/L for a single trip."""

    def test_no_refueling_returns_none(self):
        trip = make_trip(1, 0, 1000, 1400)
        assert calculate_mileage(trip, [trip]) is None

    def test_refueling_flag_without_fuel_returns_none(self):
        trip = make_trip(1, 0, 1000, 1400, fuel=40)
        trip.fuel_quantity = None
        assert calculate_mileage(trip, [trip]) is None

        trip.fuel_quantity = 0
        assert calculate_mileage(trip, [trip]) is None

        trip.fuel_quantity = -5
        assert calculate_mileage(trip, [trip]) is None

    def test_first_refueling_uses_own_distance(self):
        trip = make_trip(1, 0, 1000, 1400, fuel=40)
        assert calculate_mileage(trip, [trip]) == 10.00

    def test_first_refueling_with_no_distance_returns_none(self):
        trip = make_trip(1, 0, 1400, 1400, fuel=40)
        assert calculate_mileage(trip, [trip]) is None

        backwards = make_trip(2, 0, 1400, 1300, fuel=40)
        assert calculate_mileage(backwards, [backwards]) is None

    def test_anchors_on_previous_refueling_end_km(self):
        previous = make_trip(1, 0, 1000, 1400, fuel=40)
        current = make_trip(2, 2, 1700, 1800, fuel=50)
        assert calculate_mileage(current, [previous, current]) == 8.00

    def test_intermediate_trip_distances_are_not_summed(self):
        previous = make_trip(1, 0, 1000, 1400, fuel=40)
        # Overlapping/odd odometer entries between the refuelings
        middle_a = make_trip(2, 1, 1400, 1650)
        middle_b = make_trip(3, 1, 1500, 1900)
        current = make_trip(4, 2, 1650, 1800, fuel=50)

        result = calculate_mileage(current, [previous, middle_a, middle_b, current])
        assert result == 8.00

    def test_non_positive_tank_to_tank_distance_returns_none(self):
        previous = make_trip(1, 0, 1000, 1800, fuel=40)
        current = make_trip(2, 1, 1500, 1700, fuel=20)
        assert calculate_mileage(current, [previous, current]) is None

    def test_uses_most_recent_previous_refueling(self):
        older = make_trip(1, 0, 1000, 1400, fuel=40)
        newer = make_trip(2, 1, 1400, 1600, fuel=20)
        current = make_trip(3, 2, 1600, 1800, fuel=20)

        # Unordered input
        assert calculate_mileage(current, [current, older, newer]) == 10.00

    def test_later_refuelings_are_ignored(self):
        previous = make_trip(1, 0, 1000, 1400, fuel=40)
        current = make_trip(2, 2, 1400, 1800, fuel=50)
        later = make_trip(3, 5, 1800, 2500, fuel=60)
        assert calculate_mileage(current, [later, previous, current]) == 8.00

    def test_other_vehicles_are_ignored(self):
        other_vehicle = make_trip(1, 0, 500, 1300, fuel=40, vehicle_id=2)
        current = make_trip(2, 1, 1000, 1400, fuel=40)
        assert calculate_mileage(current, [other_vehicle, current]) == 10.00

    def test_current_trip_is_excluded_from_history(self):
        # Stored copy of the same trip with an earlier end date
        stored = make_trip(7, 0, 1000, 1200, fuel=40)
        current = make_trip(7, 3, 1000, 1400, fuel=40)
        assert calculate_mileage(current, [stored]) == 10.00

    def test_rounds_half_up(self):
        trip = make_trip(1, 0, 0, 1, fuel=8)
        # 1 / 8 = 0.125
        assert calculate_mileage(trip, [trip]) == 0.13

        third = make_trip(2, 0, 0, 1000, fuel=3)
        assert calculate_mileage(third, [third]) == 333.33

    def test_malformed_history_degrades_to_first_refueling(self):
        trip = make_trip(1, 0, 1000, 1400, fuel=40)
        assert calculate_mileage(trip, None) == 10.00
        assert calculate_mileage(trip, "not a list") == 10.00
        assert calculate_mileage(trip, {"id": 1}) == 10.00

    def test_undated_trip_has_no_previous_refueling(self):
        previous = make_trip(1, 0, 1000, 1400, fuel=40)
        current = make_trip(2, 2, 1500, 1800, fuel=50)
        current.trip_end_date = None

        assert find_last_refueling_trip(current, [previous, current]) is None
        # Only the trip's own distance is usable: 300 / 50
        assert calculate_mileage(current, [previous, current]) == 6.00

    def test_naive_and_aware_dates_compare(self):
        previous = make_trip(1, 0, 1000, 1400, fuel=40)
        previous.trip_end_date = previous.trip_end_date.replace(tzinfo=None)
        current = make_trip(2, 2, 1400, 1800, fuel=50)
        assert calculate_mileage(current, [previous, current]) == 8.00

    def test_is_idempotent_and_pure(self):
        previous = make_trip(1, 0, 1000, 1400, fuel=40)
        middle = make_trip(2, 1, 1400, 1550)
        current = make_trip(3, 2, 1550, 1800, fuel=50)
        trips = [previous, middle, current]
        snapshot = [trip.model_dump() for trip in trips]

        first = calculate_mileage(current, trips)
        second = calculate_mileage(current, trips)

        assert first == second == 8.00
        assert [trip.model_dump() for trip in trips] == snapshot


class TestTripsBetweenRefuelings:
    """Informational trip set between two refuelings."""

    def test_excludes_short_trips_and_previous_refueling(self):
        previous = make_trip(1, 0, 1000, 1400, fuel=40)
        short = make_trip(2, 1, 1400, 1420, short=True)
        regular = make_trip(3, 2, 1420, 1600)
        current = make_trip(4, 3, 1600, 1800, fuel=50)
        after = make_trip(5, 4, 1800, 1900)

        relevant = trips_between_refuelings(current, [after, current, regular, short, previous])
        assert [trip.id for trip in relevant] == [3, 4]

    def test_first_refueling_includes_earlier_trips(self):
        earlier = make_trip(1, 0, 900, 1000)
        current = make_trip(2, 1, 1000, 1400, fuel=40)
        assert [trip.id for trip in trips_between_refuelings(current, [current, earlier])] == [1, 2]


class TestPredictMileage:
    """Triangular-weighted prediction from recent trips."""

    def setup_method(self):
        # Most recent first: 10, 9, 8, 7, 6
        self.trips = [
            make_trip(i, 10 - i, 0, 100, kmpl=kmpl)
            for i, kmpl in enumerate([10, 9, 8, 7, 6])
        ]

    def test_weighted_average_of_five(self):
        assert predict_mileage(1, self.trips) == 8.40

    def test_fewer_than_three_trips(self):
        assert predict_mileage(1, self.trips[:2]) is None
        assert predict_mileage(1, []) is None
        assert predict_mileage(1, None) is None

    def test_three_trips(self):
        trips = [make_trip(i, 5 - i, 0, 100, kmpl=kmpl) for i, kmpl in enumerate([9, 6, 3])]
        # (9*3 + 6*2 + 3*1) / 6
        assert predict_mileage(1, trips) == 7.00

    def test_only_five_most_recent_are_used(self):
        older = [make_trip(10 + i, -i, 0, 100, kmpl=100) for i in range(2)]
        assert predict_mileage(1, older + self.trips) == 8.40

    def test_ignores_short_uncalculated_and_other_vehicle_trips(self):
        noise = [
            make_trip(20, 20, 0, 100, kmpl=50, short=True),
            make_trip(21, 21, 0, 100),
            make_trip(22, 22, 0, 100, kmpl=1, vehicle_id=2),
        ]
        assert predict_mileage(1, noise + self.trips) == 8.40


class TestRecalculateVehicleMileage:
    """Vehicle-wide recalculation after out-of-order edits."""

    def test_recalculates_every_trip(self):
        trips = [
            make_trip(1, 0, 1000, 1400, fuel=40),
            make_trip(2, 1, 1400, 1500),
            make_trip(3, 2, 1500, 1800, fuel=50),
            make_trip(4, 2, 0, 100, fuel=10, vehicle_id=2),
        ]
        assert recalculate_vehicle_mileage(1, trips) == {1: 10.00, 2: None, 3: 8.00}

    def test_inserted_refueling_reanchors_later_trip(self):
        trips = [
            make_trip(1, 0, 1000, 1400, fuel=40),
            make_trip(3, 2, 1600, 1800, fuel=50),
            # Entered late but ended between the two refuelings
            make_trip(2, 1, 1400, 1600, fuel=25),
        ]
        results = recalculate_vehicle_mileage(1, trips)

        assert results == {1: 10.00, 2: 8.00, 3: 4.00}
        assert all(trip.calculated_kmpl is None for trip in trips)
