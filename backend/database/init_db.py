"""
Database initialization script
Creates all tables for vehicles, drivers and trips
"""
import sys
from pathlib import Path

# Add parent directory to path to import app modules
sys.path.append(str(Path(__file__).parent.parent))

from sqlalchemy import text
from app.core.database import engine, Base
from app.models import Vehicle, Driver, Trip  # noqa: F401  (register tables)


def init_db():
    """Initialize database and create all tables"""
    print("Initializing database...")

    Base.metadata.create_all(bind=engine)
    print("All tables created successfully!")

    # Composite index for loading a vehicle's trip history in order
    with engine.connect() as conn:
        try:
            conn.execute(text("""
                CREATE INDEX IF NOT EXISTS idx_trips_vehicle_end_date
                ON trips (vehicle_id, trip_end_date);
            """))
            conn.commit()
            print("Indexes created successfully!")
        except Exception as e:
            print(f"Warning: Could not create indexes: {e}")

    print("\nDatabase initialization complete!")
    print("You can now start the API server with: uvicorn app.main:app --reload")


if __name__ == "__main__":
    init_db()
