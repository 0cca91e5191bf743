"""OpenWeatherMap current conditions and forecast models."""

from dataclasses import dataclass

from skycast.models.location import Coordinate


@dataclass(frozen=True)
class Condition:
    main: str  # short code, e.g. "Clouds"
    description: str
    icon: str


@dataclass(frozen=True)
class CurrentWeather:
    name: str
    coordinate: Coordinate
    temp: float
    feels_like: float
    humidity: int
    pressure: int
    wind_speed: float
    conditions: tuple[Condition, ...]

    @property
    def primary(self) -> Condition:
        return self.conditions[0]


@dataclass(frozen=True)
class ForecastPoint:
    dt: int  # epoch seconds
    temp: float
    feels_like: float
    humidity: int
    pressure: int
    temp_min: float
    temp_max: float
    conditions: tuple[Condition, ...]
    wind_speed: float
    dt_txt: str  # "YYYY-MM-DD HH:MM:SS", UTC

    @property
    def primary(self) -> Condition:
        return self.conditions[0]


@dataclass(frozen=True)
class ForecastReport:
    city_name: str
    country: str
    coordinate: Coordinate | None
    points: list[ForecastPoint]
