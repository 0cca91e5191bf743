"""OpenWeatherMap and Nominatim client."""

import logging

import httpx

from skycast.config.schema import GeocodingConfig, ProviderConfig
from skycast.ingest.errors import MalformedResponse, NetworkError, UpstreamError
from skycast.ingest.parsers import (
    parse_city_suggestions,
    parse_current_weather,
    parse_forecast,
)
from skycast.models.location import CitySuggestion, Coordinate
from skycast.models.weather import CurrentWeather, ForecastReport

logger = logging.getLogger(__name__)

MIN_QUERY_LENGTH = 2
WEATHER_FALLBACK_MESSAGE = "Failed to fetch weather data"
FORECAST_FALLBACK_MESSAGE = "Failed to fetch forecast data"


class WeatherClient:
    """Thin wrapper around the current-weather, forecast and geocoding APIs.

    Configuration is injected at construction; nothing is read from module
    globals. Weather calls raise FetchError subclasses. City search never
    raises and degrades to an empty list.
    """

    def __init__(
        self,
        provider: ProviderConfig | None = None,
        geocoding: GeocodingConfig | None = None,
    ):
        self.provider = provider or ProviderConfig()
        self.geocoding = geocoding or GeocodingConfig()

    # --- Current weather ---

    def get_current_by_coordinate(self, coord: Coordinate) -> CurrentWeather:
        raw = self._get_weather(
            "/weather",
            {"lat": coord.latitude, "lon": coord.longitude},
            WEATHER_FALLBACK_MESSAGE,
        )
        return parse_current_weather(raw)

    def get_current_by_city_name(self, name: str) -> CurrentWeather:
        raw = self._get_weather("/weather", {"q": name}, WEATHER_FALLBACK_MESSAGE)
        return parse_current_weather(raw)

    # --- Forecast ---

    def get_forecast_by_coordinate(self, coord: Coordinate) -> ForecastReport:
        raw = self._get_weather(
            "/forecast",
            {"lat": coord.latitude, "lon": coord.longitude},
            FORECAST_FALLBACK_MESSAGE,
        )
        return parse_forecast(raw)

    def get_forecast_by_city_name(self, name: str) -> ForecastReport:
        raw = self._get_weather("/forecast", {"q": name}, FORECAST_FALLBACK_MESSAGE)
        return parse_forecast(raw)

    # --- Geocoding ---

    def search_cities(self, query: str, limit: int = 5) -> list[CitySuggestion]:
        """Free-text city search. Returns [] on any failure."""
        query = query.strip()
        if len(query) < MIN_QUERY_LENGTH:
            return []

        url = f"{self.geocoding.base_url}/search"
        params = {
            "format": "json",
            "q": query,
            "limit": limit,
            "addressdetails": 1,
        }
        headers = {"User-Agent": self.geocoding.user_agent}
        try:
            resp = httpx.get(
                url, params=params, headers=headers, timeout=self.geocoding.timeout
            )
            if resp.is_error:
                logger.warning(
                    "Geocoding search for %r returned %d", query, resp.status_code
                )
                return []
            data = resp.json()
        except (httpx.RequestError, ValueError):
            logger.exception("Error fetching city suggestions for %r", query)
            return []
        return parse_city_suggestions(data, limit)

    # --- Internals ---

    def _get_weather(self, endpoint: str, params: dict, fallback: str) -> dict:
        url = f"{self.provider.base_url}{endpoint}"
        params = {
            **params,
            "appid": self.provider.api_key,
            "units": self.provider.units.value,
        }
        try:
            resp = httpx.get(url, params=params, timeout=self.provider.timeout)
        except httpx.RequestError as e:
            logger.error("Weather request failed: %s -> %s", endpoint, e)
            raise NetworkError(f"{fallback}: {e}") from e

        if resp.is_error:
            message = _upstream_message(resp) or fallback
            logger.error(
                "Weather API %d: %s -> %s", resp.status_code, endpoint, message
            )
            raise UpstreamError(message, resp.status_code)

        try:
            data = resp.json()
        except ValueError as e:
            raise MalformedResponse(f"{fallback}: invalid JSON") from e
        if not isinstance(data, dict):
            raise MalformedResponse(f"{fallback}: expected a JSON object")
        return data


def _upstream_message(resp: httpx.Response) -> str:
    """Extract the provider's error message from a failed response, if any."""
    try:
        body = resp.json()
    except ValueError:
        return ""
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str):
            return message
    return ""
