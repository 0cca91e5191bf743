"""Location models: coordinates and city search suggestions."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"longitude out of range: {self.longitude}")


@dataclass(frozen=True)
class CitySuggestion:
    name: str
    country: str
    coordinate: Coordinate
    state: str = ""

    @property
    def label(self) -> str:
        """Canonical "Name, State, Country" label; state omitted when empty."""
        if self.state:
            return f"{self.name}, {self.state}, {self.country}"
        return f"{self.name}, {self.country}"
