"""
Sample data seeder for testing
"""
import sys
from pathlib import Path
from datetime import datetime, timedelta, timezone

sys.path.append(str(Path(__file__).parent.parent.parent))

from app.core.database import SessionLocal
from app.models.vehicle import Vehicle
from app.models.driver import Driver
from app.models.trip import Trip
from app.services.mileage_sync import recalculate_vehicle


def seed_sample_data():
    """Seed the database with sample data"""
    db = SessionLocal()

    try:
        print("Seeding sample data...")

        pickup = Vehicle(registration_number="KA01AB1234", make="Tata", model="Yodha",
                         fuel_type="Diesel", tank_capacity=45, tags=["4W Pickup"])
        truck = Vehicle(registration_number="KA01CD5678", make="Ashok Leyland", model="Boss 1115",
                        fuel_type="Diesel", tank_capacity=160, tags=["6W Truck"])
        db.add_all([pickup, truck])

        ravi = Driver(name="Ravi Kumar", license_number="KA0120190001234")
        suresh = Driver(name="Suresh Naik", license_number="KA0120170005678")
        db.add_all([ravi, suresh])
        db.flush()

        start = datetime(2025, 1, 6, 6, 0, tzinfo=timezone.utc)

        # (vehicle, driver, start_km, end_km, refuel litres or None)
        legs = [
            (pickup, ravi, 10000, 10320, 30),
            (pickup, ravi, 10320, 10510, None),
            (pickup, suresh, 10510, 10790, 36),
            (pickup, suresh, 10790, 11100, 29),
            (pickup, ravi, 11100, 11420, 28),
            (truck, suresh, 52000, 52450, 95),
            (truck, ravi, 52450, 52800, None),
            (truck, suresh, 52800, 53210, 140),
            (truck, ravi, 53210, 53600, 70),
        ]

        for day, (vehicle, driver, start_km, end_km, litres) in enumerate(legs):
            db.add(Trip(
                trip_serial_number=f"T{day + 1:04d}",
                vehicle_id=vehicle.id,
                driver_id=driver.id,
                trip_start_date=start + timedelta(days=day),
                trip_end_date=start + timedelta(days=day, hours=9),
                start_km=start_km,
                end_km=end_km,
                refueling_done=litres is not None,
                fuel_quantity=litres,
            ))
        db.flush()

        for vehicle in (pickup, truck):
            checked, updated = recalculate_vehicle(db, vehicle.id)
            print(f"  {vehicle.registration_number}: {updated}/{checked} trips with mileage")

        db.commit()
        print("Sample data seeded successfully!")

    except Exception as e:
        print(f"Error seeding data: {e}")
        db.rollback()
    finally:
        db.close()


if __name__ == "__main__":
    seed_sample_data()
