import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.config import settings
from .api import vehicles, drivers, trips, mileage

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title=settings.APP_NAME,
    description="Fleet vehicle, driver and trip tracking API with tank-to-tank mileage analytics",
    version="1.0.0",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(vehicles.router, prefix="/api/vehicles", tags=["Vehicles"])
app.include_router(drivers.router, prefix="/api/drivers", tags=["Drivers"])
app.include_router(trips.router, prefix="/api/trips", tags=["Trips"])
app.include_router(mileage.router, prefix="/api/mileage", tags=["Mileage"])


@app.get("/api/health")
async def health_check():
    return {"status": "healthy", "service": "fleettrack-api"}


@app.get("/")
async def root():
    return {
        "app": settings.APP_NAME,
        "message": "Welcome to the FleetTrack API",
        "version": "1.0.0"
    }


@app.get("/api/version")
async def get_version():
    from .version import __version__
    return {"version": __version__}
