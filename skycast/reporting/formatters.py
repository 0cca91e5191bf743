"""Output formatters for current conditions and forecasts."""

import json

from skycast.config.schema import Units
from skycast.models.forecast import DailyBucket, ForecastSummary, HourlySlot
from skycast.models.location import CitySuggestion
from skycast.models.weather import CurrentWeather

ICON_BASE_URL = "https://openweathermap.org/img/wn"

TEMP_SUFFIX = {Units.METRIC: "°C", Units.IMPERIAL: "°F", Units.STANDARD: " K"}
WIND_SUFFIX = {Units.METRIC: "m/s", Units.IMPERIAL: "mph", Units.STANDARD: "m/s"}


def icon_url(icon: str, large: bool = False) -> str:
    suffix = "@2x" if large else ""
    return f"{ICON_BASE_URL}/{icon}{suffix}.png"


def format_current_text(w: CurrentWeather, units: Units = Units.METRIC) -> str:
    """Plain text current-conditions card."""
    t = TEMP_SUFFIX[units]
    lines = [
        f"=== {w.name} ===",
        f"{w.coordinate.latitude:.2f}°, {w.coordinate.longitude:.2f}°",
        f"{round(w.temp)}{t}, {w.primary.description.capitalize()}",
        f"Feels like: {round(w.feels_like)}{t} | Humidity: {w.humidity}%",
        f"Wind: {w.wind_speed:.1f} {WIND_SUFFIX[units]} | Pressure: {w.pressure} hPa",
    ]
    return "\n".join(lines)


def format_daily_text(days: list[DailyBucket], units: Units = Units.METRIC) -> str:
    t = TEMP_SUFFIX[units]
    lines = [f"{len(days)}-Day Forecast"]
    for day in days:
        f = day.representative
        month_day = "/".join(day.date.split("-")[1:])
        lines.append(
            f"  {day.label:<12} {month_day}  "
            f"{round(day.max_temp):>3}{t} / {round(day.min_temp):>3}{t}  "
            f"{f.primary.description.capitalize()} "
            f"(Humidity: {f.humidity}% | Wind: {f.wind_speed:.1f} {WIND_SUFFIX[units]})"
        )
    return "\n".join(lines)


def format_hourly_text(hourly: list[HourlySlot], units: Units = Units.METRIC) -> str:
    lines = ["24-Hour Forecast"]
    for slot in hourly:
        lines.append(
            f"  {slot.day_label:<9} {slot.time_label:>8}  "
            f"{round(slot.point.temp):>3}{TEMP_SUFFIX[units]}  {slot.point.primary.main}"
        )
    return "\n".join(lines)


def format_forecast_text(summary: ForecastSummary, units: Units = Units.METRIC) -> str:
    if not summary.days:
        return "Forecast data unavailable"
    return (
        format_daily_text(summary.days, units)
        + "\n\n"
        + format_hourly_text(summary.hourly, units)
    )


def format_suggestions_text(
    suggestions: list[CitySuggestion], selected_index: int = -1
) -> str:
    if not suggestions:
        return "No matching cities"
    lines = []
    for i, city in enumerate(suggestions):
        marker = ">" if i == selected_index else " "
        lines.append(f"{marker} {i + 1}. {city.label}")
    return "\n".join(lines)


def current_to_dict(w: CurrentWeather) -> dict:
    return {
        "name": w.name,
        "lat": w.coordinate.latitude,
        "lon": w.coordinate.longitude,
        "temp": w.temp,
        "feels_like": w.feels_like,
        "humidity": w.humidity,
        "pressure": w.pressure,
        "wind_speed": w.wind_speed,
        "description": w.primary.description,
        "icon_url": icon_url(w.primary.icon, large=True),
    }


def forecast_to_dict(summary: ForecastSummary) -> dict:
    return {
        "days": [
            {
                "date": d.date,
                "label": d.label,
                "min_temp": d.min_temp,
                "max_temp": d.max_temp,
                "description": d.representative.primary.description,
                "humidity": d.representative.humidity,
                "wind_speed": d.representative.wind_speed,
                "icon_url": icon_url(d.representative.primary.icon),
            }
            for d in summary.days
        ],
        "hourly": [
            {
                "dt": s.point.dt,
                "day": s.day_label,
                "time": s.time_label,
                "temp": s.point.temp,
                "main": s.point.primary.main,
                "icon_url": icon_url(s.point.primary.icon),
            }
            for s in summary.hourly
        ],
    }


def suggestions_to_dict(suggestions: list[CitySuggestion]) -> list[dict]:
    return [
        {
            "label": c.label,
            "name": c.name,
            "state": c.state,
            "country": c.country,
            "lat": c.coordinate.latitude,
            "lon": c.coordinate.longitude,
        }
        for c in suggestions
    ]


def format_json(data: dict | list) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)
