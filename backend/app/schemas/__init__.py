from .vehicle import Vehicle, VehicleCreate, VehicleUpdate
from .driver import Driver, DriverCreate, DriverUpdate
from .trip import Trip, TripCreate, TripUpdate, TripRecord
from .mileage import MileageInsights, MileagePrediction, MileageAnomaly, VehicleAnomalies

__all__ = [
    "Vehicle",
    "VehicleCreate",
    "VehicleUpdate",
    "Driver",
    "DriverCreate",
    "DriverUpdate",
    "Trip",
    "TripCreate",
    "TripUpdate",
    "TripRecord",
    "MileageInsights",
    "MileagePrediction",
    "MileageAnomaly",
    "VehicleAnomalies",
]
