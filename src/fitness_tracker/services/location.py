"""Current-position lookup for tagging workouts."""

import logging
import os
from typing import Protocol, runtime_checkable

from ..models.workout import Coordinate

logger = logging.getLogger(__name__)

LATITUDE_ENV = "FITNESS_TRACKER_LATITUDE"
LONGITUDE_ENV = "FITNESS_TRACKER_LONGITUDE"


@runtime_checkable
class LocationService(Protocol):
    """Source of the device's current position."""

    def request_access(self) -> bool:
        ...

    def current_coordinate(self) -> Coordinate | None:
        ...


class FixedLocationService:
    """Reports a configured position, or none if it was not configured."""

    def __init__(self, coordinate: Coordinate | None = None):
        self.coordinate = coordinate

    @classmethod
    def from_env(cls) -> "FixedLocationService":
        """Read the position from the environment, if both parts are set."""
        latitude = os.environ.get(LATITUDE_ENV)
        longitude = os.environ.get(LONGITUDE_ENV)
        if not latitude or not longitude:
            return cls()
        try:
            return cls(Coordinate(latitude=float(latitude), longitude=float(longitude)))
        except ValueError:
            logger.warning("Ignoring invalid position %s, %s", latitude, longitude)
            return cls()

    def request_access(self) -> bool:
        return self.coordinate is not None

    def current_coordinate(self) -> Coordinate | None:
        return self.coordinate
