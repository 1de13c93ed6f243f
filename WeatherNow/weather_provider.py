"""Weather provider abstraction - allows swapping different weather APIs."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


@dataclass
class Observation:
    """Raw current conditions as reported by a provider, before validation."""
    temp_c: float
    last_updated: datetime
    name: str
    region: Optional[str] = None
    country: Optional[str] = None

    @property
    def display_location(self) -> str:
        return f"{self.name}, {self.region or self.country}"


class WeatherProviderBase(ABC):
    """Abstract base class for weather data providers."""

    @abstractmethod
    def get_current(self, location: str) -> Observation:
        """
        Fetch current conditions for a location.

        Args:
            location: Free-form location query (city name, "lat,lon", postcode...)

        Returns:
            Observation: Conditions as reported upstream

        Raises:
            UpstreamRequestFailed: If the provider fails to fetch data
        """
        pass


class ErrorKind(str, Enum):
    UPSTREAM_REQUEST_FAILED = "weatherApiRequestFailed"
    TEMPERATURE_OUT_OF_RANGE = "temperatureOutOfRange"
    NO_CACHED_DATA_AVAILABLE = "noCachedDataAvailable"


class WeatherProviderError(Exception):
    """Base exception for weather lookups. Subclasses set ``kind``."""
    kind: ErrorKind


class UpstreamRequestFailed(WeatherProviderError):
    """The provider was unreachable, answered non-2xx, or sent an unusable payload."""
    kind = ErrorKind.UPSTREAM_REQUEST_FAILED


class TemperatureOutOfRange(WeatherProviderError):
    """The provider reported a physically implausible temperature."""
    kind = ErrorKind.TEMPERATURE_OUT_OF_RANGE

    def __init__(self, temp_c: float):
        super().__init__(f"Temperature {temp_c}°C outside plausible range")
        self.temp_c = temp_c


class NoCachedDataAvailable(WeatherProviderError):
    """Cached data was requested but nothing has been fetched yet."""
    kind = ErrorKind.NO_CACHED_DATA_AVAILABLE

    def __init__(self, message: str = "No cached weather data available"):
        super().__init__(message)
