"""Weather domain model - pure data structures independent of any API."""
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum


class TemperatureUnit(str, Enum):
    CELSIUS = "celsius"
    FAHRENHEIT = "fahrenheit"


class ConnectionStatus(str, Enum):
    """Freshness label attached to a reading for display purposes."""
    ONLINE = "online"  # live fetch
    OFFLINE = "offline"  # served from a recent cache entry
    OUTDATED = "outdated"  # served from an old cache entry


def round1(value: float) -> float:
    """Round to one decimal place, half away from zero on the exact binary value."""
    return float(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def to_utc_iso(value: datetime) -> str:
    """ISO-8601 in UTC with a ``Z`` suffix, e.g. ``2024-06-01T11:45:00.000Z``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


@dataclass
class WeatherReading:
    """Normalized current conditions for one location."""
    temperature: float
    temperature_unit: TemperatureUnit
    location: str  # e.g., "London, City of London, Greater London"
    last_update: datetime  # provider observation time, UTC (naive values are taken as UTC)
    connection_status: ConnectionStatus

    def to_dict(self) -> dict:
        """Serialize using the JSON field names exposed by the API."""
        return {
            "temperature": self.temperature,
            "temperatureUnit": self.temperature_unit.value,
            "location": self.location,
            "lastUpdate": to_utc_iso(self.last_update),
            "connectionStatus": self.connection_status.value,
        }


@dataclass
class CachedReading(WeatherReading):
    """A reading plus the time this process stored it."""
    cached_at: datetime

    def to_reading(self, connection_status: ConnectionStatus) -> WeatherReading:
        fields = asdict(self)
        fields.pop("cached_at")
        fields["connection_status"] = connection_status
        return WeatherReading(**fields)
