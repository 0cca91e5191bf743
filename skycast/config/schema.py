"""Pydantic v2 configuration schema with strict validation."""

from enum import StrEnum

from pydantic import BaseModel, Field, model_validator


class Units(StrEnum):
    METRIC = "metric"
    IMPERIAL = "imperial"
    STANDARD = "standard"


class ProviderConfig(BaseModel):
    model_config = {"extra": "forbid"}

    api_key: str = ""
    base_url: str = "https://api.openweathermap.org/data/2.5"
    units: Units = Units.METRIC
    timeout: float = Field(default=10.0, gt=0.0)


class GeocodingConfig(BaseModel):
    model_config = {"extra": "forbid"}

    base_url: str = "https://nominatim.openstreetmap.org"
    user_agent: str = "skycast/0.1.0"  # Nominatim rejects anonymous clients
    timeout: float = Field(default=10.0, gt=0.0)


class AutocompleteConfig(BaseModel):
    model_config = {"extra": "forbid"}

    debounce_ms: int = Field(default=300, ge=0)
    min_query_length: int = Field(default=2, ge=1)
    max_suggestions: int = Field(default=5, ge=1, le=50)


class ForecastConfig(BaseModel):
    model_config = {"extra": "forbid"}

    max_days: int = Field(default=5, ge=1, le=5)
    hourly_points: int = Field(default=8, ge=1, le=40)


class LocationConfig(BaseModel):
    model_config = {"extra": "forbid"}

    latitude: float | None = Field(default=None, ge=-90.0, le=90.0)
    longitude: float | None = Field(default=None, ge=-180.0, le=180.0)

    @model_validator(mode="after")
    def _both_or_neither(self) -> "LocationConfig":
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must be set together")
        return self

    @property
    def is_set(self) -> bool:
        return self.latitude is not None and self.longitude is not None


class SkycastConfig(BaseModel):
    model_config = {"extra": "forbid"}

    provider: ProviderConfig = ProviderConfig()
    geocoding: GeocodingConfig = GeocodingConfig()
    autocomplete: AutocompleteConfig = AutocompleteConfig()
    forecast: ForecastConfig = ForecastConfig()
    location: LocationConfig = LocationConfig()
