"""Geolocation capability: request position -> Coordinate or failure."""

from enum import StrEnum
from typing import Protocol

from skycast.config.schema import LocationConfig
from skycast.models.location import Coordinate


class GeolocationFailure(StrEnum):
    PERMISSION_DENIED = "permission-denied"
    UNAVAILABLE = "unavailable"
    OTHER = "other"


class GeolocationError(Exception):
    def __init__(self, reason: GeolocationFailure, message: str = ""):
        super().__init__(message or reason.value)
        self.reason = reason


class Geolocator(Protocol):
    def locate(self) -> Coordinate: ...


class StaticGeolocator:
    """Reports a fixed, configured position."""

    def __init__(self, coordinate: Coordinate | None):
        self.coordinate = coordinate

    @classmethod
    def from_config(cls, location: LocationConfig) -> "StaticGeolocator":
        if not location.is_set:
            return cls(None)
        return cls(Coordinate(location.latitude, location.longitude))

    def locate(self) -> Coordinate:
        if self.coordinate is None:
            raise GeolocationError(
                GeolocationFailure.UNAVAILABLE, "No location configured"
            )
        return self.coordinate


class DeniedGeolocator:
    """Behaves like a host where the user refused location access."""

    def locate(self) -> Coordinate:
        raise GeolocationError(GeolocationFailure.PERMISSION_DENIED)
