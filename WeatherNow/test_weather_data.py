"""Tests for weather_data module."""
from datetime import datetime, timedelta, timezone

from weather_data import (
    CachedReading,
    ConnectionStatus,
    TemperatureUnit,
    WeatherReading,
    round1,
    to_utc_iso,
)


def test_round1_half_up():
    """Test one-decimal rounding rounds halves away from zero."""
    assert round1(21.25) == 21.3
    assert round1(-3.75) == -3.8
    assert round1(12.04) == 12.0
    assert round1(7) == 7.0


def test_weather_reading_to_dict():
    """Test serialization uses the API field names."""
    reading = WeatherReading(
        temperature=18.4,
        temperature_unit=TemperatureUnit.CELSIUS,
        location="Paris, Ile-de-France",
        last_update=datetime(2024, 5, 1, 14, 30),
        connection_status=ConnectionStatus.ONLINE,
    )

    assert reading.to_dict() == {
        "temperature": 18.4,
        "temperatureUnit": "celsius",
        "location": "Paris, Ile-de-France",
        "lastUpdate": "2024-05-01T14:30:00.000Z",
        "connectionStatus": "online",
    }


def test_cached_reading_to_reading():
    """Test stripping the cache timestamp and replacing the status."""
    cached = CachedReading(
        temperature=-2.0,
        temperature_unit=TemperatureUnit.CELSIUS,
        location="Oslo, Oslo",
        last_update=datetime(2024, 1, 3, 8, 0),
        connection_status=ConnectionStatus.ONLINE,
        cached_at=datetime(2024, 1, 3, 8, 5, tzinfo=timezone.utc),
    )

    reading = cached.to_reading(ConnectionStatus.OUTDATED)

    assert type(reading) is WeatherReading
    assert reading.connection_status is ConnectionStatus.OUTDATED
    assert reading.temperature == -2.0
    assert reading.location == "Oslo, Oslo"
    # source is untouched
    assert cached.connection_status is ConnectionStatus.ONLINE


def test_to_utc_iso_converts_offsets():
    """Test timestamps with an offset are sent as UTC with a Z suffix."""
    paris_summer = timezone(timedelta(hours=2))

    assert to_utc_iso(datetime(2024, 6, 1, 13, 45, 30, 250000, tzinfo=paris_summer)) == "2024-06-01T11:45:30.250Z"
    assert to_utc_iso(datetime(2024, 6, 1, 11, 45, tzinfo=timezone.utc)) == "2024-06-01T11:45:00.000Z"
