"""Map raw OpenWeatherMap and Nominatim payloads onto model dataclasses."""

import logging

from skycast.ingest.errors import MalformedResponse
from skycast.models.location import CitySuggestion, Coordinate
from skycast.models.weather import (
    Condition,
    CurrentWeather,
    ForecastPoint,
    ForecastReport,
)

logger = logging.getLogger(__name__)

PLACE_TYPES = frozenset({"city", "town", "administrative"})


def parse_current_weather(raw: dict) -> CurrentWeather:
    try:
        main = raw["main"]
        coord = raw["coord"]
        return CurrentWeather(
            name=raw.get("name", ""),
            coordinate=Coordinate(float(coord["lat"]), float(coord["lon"])),
            temp=float(main["temp"]),
            feels_like=float(main["feels_like"]),
            humidity=int(main["humidity"]),
            pressure=int(main["pressure"]),
            wind_speed=float(raw.get("wind", {}).get("speed", 0.0)),
            conditions=_parse_conditions(raw.get("weather")),
        )
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise MalformedResponse(f"Unexpected weather payload: {e}") from e


def parse_forecast(raw: dict) -> ForecastReport:
    try:
        items = raw["list"]
        if not isinstance(items, list):
            raise TypeError("forecast 'list' is not an array")
        city = raw.get("city") or {}
        coord = city.get("coord")
        return ForecastReport(
            city_name=city.get("name", ""),
            country=city.get("country", ""),
            coordinate=(
                Coordinate(float(coord["lat"]), float(coord["lon"]))
                if coord else None
            ),
            points=[_parse_forecast_point(item) for item in items],
        )
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise MalformedResponse(f"Unexpected forecast payload: {e}") from e


def parse_city_suggestions(raw: object, limit: int) -> list[CitySuggestion]:
    """Filter Nominatim results to place-like records and map them.

    Anything but a JSON array yields no suggestions.
    """
    if not isinstance(raw, list):
        logger.warning("Geocoding payload is not an array: %s", type(raw).__name__)
        return []

    places = [
        item for item in raw
        if isinstance(item, dict) and item.get("type") in PLACE_TYPES
    ]
    suggestions: list[CitySuggestion] = []
    for item in places[:limit]:
        suggestion = _parse_city(item)
        if suggestion is not None:
            suggestions.append(suggestion)
    return suggestions


def _parse_city(item: dict) -> CitySuggestion | None:
    address = item.get("address") or {}
    name = item.get("name") or (item.get("display_name") or "").split(",")[0]
    try:
        coordinate = Coordinate(float(item["lat"]), float(item["lon"]))
    except (KeyError, TypeError, ValueError):
        logger.debug("Skipping place without usable coordinates: %s", name)
        return None
    return CitySuggestion(
        name=name.strip(),
        country=address.get("country", ""),
        state=address.get("state") or address.get("region") or "",
        coordinate=coordinate,
    )


def _parse_forecast_point(item: dict) -> ForecastPoint:
    main = item["main"]
    return ForecastPoint(
        dt=int(item["dt"]),
        temp=float(main["temp"]),
        feels_like=float(main["feels_like"]),
        humidity=int(main["humidity"]),
        pressure=int(main["pressure"]),
        temp_min=float(main.get("temp_min", main["temp"])),
        temp_max=float(main.get("temp_max", main["temp"])),
        conditions=_parse_conditions(item.get("weather")),
        wind_speed=float(item.get("wind", {}).get("speed", 0.0)),
        dt_txt=item.get("dt_txt", ""),
    )


def _parse_conditions(raw: object) -> tuple[Condition, ...]:
    if not isinstance(raw, list) or not raw:
        raise ValueError("at least one weather condition is required")
    return tuple(
        Condition(
            main=w.get("main", ""),
            description=w.get("description", ""),
            icon=w.get("icon", ""),
        )
        for w in raw
    )
