"""
Test suite for mileage anomaly detection
File: tests/test_mileage_anomalies.py
"""

from app.schemas.trip import TripRecord
from app.services.mileage_anomalies import (
    ANOMALY_MESSAGES,
    NEGATIVE_DISTANCE,
    POOR_EFFICIENCY,
    anomaly_message,
    detect_mileage_anomalies,
    efficiency_baseline,
    group_anomalies_by_vehicle,
    poor_efficiency_severity,
)


def make_trip(trip_id, kmpl, vehicle_id=1, start_km=1000, end_km=1300, fuel=30, short=False):
    return TripRecord(
        id=trip_id,
        vehicle_id=vehicle_id,
        start_km=start_km,
        end_km=end_km,
        refueling_done=True,
        fuel_quantity=fuel,
        short_trip=short,
        calculated_kmpl=kmpl,
    )


def fleet(*values, **kwargs):
    return [make_trip(i + 1, kmpl, **kwargs) for i, kmpl in enumerate(values)]


class TestBaseline:

    def test_mean_of_plausible_values(self):
        trips = fleet(10, 12, 45, -2, 0)
        assert efficiency_baseline(trips) == 11

    def test_short_and_uncalculated_trips_excluded(self):
        trips = fleet(10, 10) + [make_trip(9, 1, short=True), make_trip(10, None)]
        assert efficiency_baseline(trips) == 10

    def test_no_plausible_trips(self):
        assert efficiency_baseline(fleet(45, 60)) is None
        assert efficiency_baseline([]) is None


class TestPoorEfficiency:
    """Low km/L against the fleet baseline."""

    def test_critical(self):
        # baseline (4*12 + 4) / 5 = 10.4, threshold 6.24
        anomalies = detect_mileage_anomalies(fleet(12, 12, 12, 12, 4))
        assert len(anomalies) == 1
        assert anomalies[0].trip_id == 5
        assert anomalies[0].anomaly_type == POOR_EFFICIENCY
        assert anomalies[0].severity == 'critical'
        assert anomalies[0].message == 'Low fuel efficiency - check vehicle condition'

    def test_high(self):
        # baseline 17.4, threshold 10.44
        anomalies = detect_mileage_anomalies(fleet(20, 20, 20, 20, 7))
        assert [(a.trip_id, a.severity) for a in anomalies] == [(5, 'high')]

    def test_medium(self):
        # baseline 21.8, threshold 13.08
        anomalies = detect_mileage_anomalies(fleet(25, 25, 25, 25, 9))
        assert [(a.trip_id, a.severity) for a in anomalies] == [(5, 'medium')]

    def test_within_threshold_not_flagged(self):
        assert detect_mileage_anomalies(fleet(10, 10, 10, 7)) == []

    def test_requires_fuel(self):
        trips = fleet(12, 12, 12, 12) + [make_trip(5, 4, fuel=0)]
        assert detect_mileage_anomalies(trips) == []

    def test_short_trip_not_flagged(self):
        trips = fleet(12, 12, 12, 12) + [make_trip(5, 2, short=True)]
        assert detect_mileage_anomalies(trips) == []

    def test_severity_tiers(self):
        assert poor_efficiency_severity(4.99) == 'critical'
        assert poor_efficiency_severity(5) == 'high'
        assert poor_efficiency_severity(7.99) == 'high'
        assert poor_efficiency_severity(8) == 'medium'


class TestHighMileageNeverFlagged:

    def test_implausible_values_are_not_poor_efficiency(self):
        anomalies = detect_mileage_anomalies(fleet(10, 10, 10, 45, 120))
        assert anomalies == []

    def test_high_outlier_does_not_skew_baseline(self):
        # Without the 45 excluded the baseline would be 18.75 and 10 would be poor
        anomalies = detect_mileage_anomalies(fleet(10, 10, 10, 45))
        assert anomalies == []


class TestNegativeDistance:
    """Odometer data-quality issues."""

    def test_backwards_odometer(self):
        trips = fleet(10, 10) + [make_trip(3, 10, start_km=500, end_km=400)]
        anomalies = detect_mileage_anomalies(trips)
        assert [(a.trip_id, a.anomaly_type, a.severity) for a in anomalies] == [(3, NEGATIVE_DISTANCE, 'high')]
        assert anomalies[0].distance == -100
        assert anomalies[0].message == 'Invalid odometer readings'

    def test_negative_mileage(self):
        anomalies = detect_mileage_anomalies(fleet(10, 10, -3))
        assert [(a.trip_id, a.anomaly_type) for a in anomalies] == [(3, NEGATIVE_DISTANCE)]

    def test_implausible_value_with_bad_odometer_is_data_quality_only(self):
        trips = fleet(10, 10) + [make_trip(3, 45, start_km=500, end_km=400)]
        anomalies = detect_mileage_anomalies(trips)
        assert [a.anomaly_type for a in anomalies] == [NEGATIVE_DISTANCE]

    def test_one_record_per_rule(self):
        trips = fleet(12, 12, 12, 12) + [make_trip(5, 3, start_km=500, end_km=400)]
        anomalies = detect_mileage_anomalies(trips)
        assert sorted(a.anomaly_type for a in anomalies) == [NEGATIVE_DISTANCE, POOR_EFFICIENCY]


class TestGroupingAndMessages:

    def test_group_by_vehicle(self):
        trips = (
            fleet(12, 12, 12, 12)
            + [make_trip(5, 3, vehicle_id=2), make_trip(6, 4, vehicle_id=3), make_trip(7, 2, vehicle_id=2)]
        )
        grouped = group_anomalies_by_vehicle(detect_mileage_anomalies(trips))

        assert set(grouped) == {2, 3}
        assert [a.trip_id for a in grouped[2]] == [5, 7]
        assert [a.trip_id for a in grouped[3]] == [6]

    def test_messages(self):
        assert anomaly_message(POOR_EFFICIENCY) == ANOMALY_MESSAGES[POOR_EFFICIENCY]
        assert anomaly_message('unknown') == 'Vehicle performance issue detected'

    def test_malformed_input(self):
        assert detect_mileage_anomalies(None) == []
        assert detect_mileage_anomalies("trips") == []
