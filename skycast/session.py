"""Weather session: owns current conditions and forecast for one location.

A location is chosen by geolocation, by a city suggestion, or by a free
text city name. Current weather is fetched first; the forecast is a
dependent fetch whose failure is logged and never shown to the user.
"""

import logging

from skycast.ingest.errors import FetchError
from skycast.ingest.geolocation import GeolocationError, GeolocationFailure, Geolocator
from skycast.ingest.weather_client import WEATHER_FALLBACK_MESSAGE, WeatherClient
from skycast.models.location import CitySuggestion, Coordinate
from skycast.models.weather import CurrentWeather, ForecastReport

logger = logging.getLogger(__name__)

LOCATION_FAILED_MESSAGE = "Failed to get your location"
PERMISSION_DENIED_MESSAGE = (
    "Location permission denied. Please enable location access or search for a city."
)


class WeatherSession:
    def __init__(self, client: WeatherClient, geolocator: Geolocator | None = None):
        self.client = client
        self.geolocator = geolocator

        self.current: CurrentWeather | None = None
        self.forecast: ForecastReport | None = None
        self.error: str | None = None
        self.loading = False
        self.loading_forecast = False
        self.location_allowed: bool | None = None

    # --- Location sources ---

    def start(self) -> bool:
        """Initial geolocation attempt.

        Permission denial is not an error here: the caller should offer
        manual search instead.
        """
        return self._locate(report_denied=False)

    def use_location(self) -> bool:
        """Explicit "use my location" request; denial is reported."""
        self.error = None
        return self._locate(report_denied=True)

    def select_city(self, city: CitySuggestion) -> bool:
        self.error = None
        return self.load_coordinate(city.coordinate)

    def search_city_name(self, name: str) -> bool:
        self.error = None
        return self._load(lambda: self.client.get_current_by_city_name(name))

    def load_coordinate(self, coord: Coordinate) -> bool:
        return self._load(lambda: self.client.get_current_by_coordinate(coord))

    # --- Internals ---

    def _locate(self, report_denied: bool) -> bool:
        if self.geolocator is None:
            self.location_allowed = False
            self.error = "Geolocation is not supported"
            return False

        self.loading = True
        try:
            coord = self.geolocator.locate()
        except GeolocationError as e:
            self.loading = False
            self.location_allowed = False
            logger.info("Geolocation failed: %s", e.reason)
            if e.reason == GeolocationFailure.PERMISSION_DENIED:
                if report_denied:
                    self.error = PERMISSION_DENIED_MESSAGE
            else:
                self.error = LOCATION_FAILED_MESSAGE
            return False

        self.location_allowed = True
        return self.load_coordinate(coord)

    def _load(self, fetch) -> bool:
        self.loading = True
        try:
            current = fetch()
        except FetchError as e:
            self.error = e.message or WEATHER_FALLBACK_MESSAGE
            return False
        finally:
            self.loading = False

        self.current = current
        self.forecast = None
        self.error = None
        self._load_forecast(current.coordinate)
        return True

    def _load_forecast(self, coord: Coordinate) -> None:
        self.loading_forecast = True
        try:
            self.forecast = self.client.get_forecast_by_coordinate(coord)
        except FetchError:
            logger.exception(
                "Failed to fetch forecast for %.2f,%.2f",
                coord.latitude, coord.longitude,
            )
        finally:
            self.loading_forecast = False
