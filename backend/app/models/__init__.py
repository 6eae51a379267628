from .vehicle import Vehicle
from .driver import Driver
from .trip import Trip

__all__ = [
    "Vehicle",
    "Driver",
    "Trip",
]
