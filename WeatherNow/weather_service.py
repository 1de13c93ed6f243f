"""Weather service with a single-slot cache and offline fallback."""
import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from weather_data import (
    CachedReading,
    ConnectionStatus,
    TemperatureUnit,
    WeatherReading,
    round1,
)
from weather_provider import (
    NoCachedDataAvailable,
    TemperatureOutOfRange,
    UpstreamRequestFailed,
    WeatherProviderBase,
)

MIN_PLAUSIBLE_TEMP_C = -90.0
MAX_PLAUSIBLE_TEMP_C = 60.0

OFFLINE_MAX_AGE = timedelta(hours=1)
OUTDATED_MAX_AGE = timedelta(hours=24)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def convert_temperature(value: float, from_unit: TemperatureUnit, to_unit: TemperatureUnit) -> float:
    """
    Convert a temperature between Celsius and Fahrenheit.

    The result is always rounded to one decimal place, including when no
    conversion is needed.
    """
    if from_unit == to_unit:
        return round1(value)

    if from_unit == TemperatureUnit.CELSIUS and to_unit == TemperatureUnit.FAHRENHEIT:
        return round1(value * 9 / 5 + 32)

    if from_unit == TemperatureUnit.FAHRENHEIT and to_unit == TemperatureUnit.CELSIUS:
        return round1((value - 32) * 5 / 9)

    return round1(value)


class WeatherService:
    """
    Service that wraps a weather provider with a single-slot cache.

    Every successful fetch overwrites the slot. When a fetch fails and
    something is cached, the cached reading is returned instead, labelled
    ``offline`` or ``outdated`` depending on its age.
    """

    convert_temperature = staticmethod(convert_temperature)

    def __init__(
        self,
        provider: WeatherProviderBase,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize weather service.

        Args:
            provider: Weather provider to use
            clock: Returns the current time; cache ages are measured against it
        """
        self.provider = provider
        self.clock = clock

        self._lock = threading.Lock()
        self._cached: Optional[CachedReading] = None

    def fetch_weather_data(self, location: str) -> WeatherReading:
        """
        Fetch live weather for a location, falling back to the cache on failure.

        Returns:
            WeatherReading: ``online`` reading, or the cached one if the fetch failed

        Raises:
            UpstreamRequestFailed: If the provider failed and nothing is cached
            TemperatureOutOfRange: If the reading was implausible and nothing is cached
        """
        logging.info(f"Fetching weather data for {location!r}...")
        try:
            observation = self.provider.get_current(location)

            if observation.temp_c < MIN_PLAUSIBLE_TEMP_C or observation.temp_c > MAX_PLAUSIBLE_TEMP_C:
                logging.error(f"Rejecting implausible temperature {observation.temp_c}°C for {location!r}")
                raise TemperatureOutOfRange(observation.temp_c)

            reading = WeatherReading(
                temperature=round1(observation.temp_c),
                temperature_unit=TemperatureUnit.CELSIUS,
                location=observation.display_location,
                last_update=observation.last_updated,
                connection_status=ConnectionStatus.ONLINE,
            )
        except (UpstreamRequestFailed, TemperatureOutOfRange) as e:
            if not self.has_cached_data():
                logging.error(f"Weather fetch failed for {location!r}, no cache available: {e}")
                raise
            logging.warning(f"Weather fetch failed for {location!r}, using cached data: {e}")
            try:
                return self.get_cached_weather_data()
            except NoCachedDataAvailable:
                # cleared between the check and the read
                raise e

        with self._lock:
            self._cached = CachedReading(
                temperature=reading.temperature,
                temperature_unit=reading.temperature_unit,
                location=reading.location,
                last_update=reading.last_update,
                connection_status=reading.connection_status,
                cached_at=self.clock(),
            )
        logging.info(f"Weather fetch successful: {reading.temperature}°C at {reading.location}")
        return reading

    def get_cached_weather_data(self) -> WeatherReading:
        """
        Return the cached reading with a status reflecting its age.

        Raises:
            NoCachedDataAvailable: If nothing has been fetched (or the cache was cleared)
        """
        with self._lock:
            cached = self._cached
        if cached is None:
            raise NoCachedDataAvailable()

        cache_age = self.clock() - cached.cached_at

        status = ConnectionStatus.OFFLINE
        if cache_age > OUTDATED_MAX_AGE:
            status = ConnectionStatus.OUTDATED
        elif cache_age > OFFLINE_MAX_AGE:
            # TODO: confirm with product whether the 24h tier should get its own label
            status = ConnectionStatus.OUTDATED

        logging.debug(f"Serving cached weather (age: {cache_age.total_seconds():.1f}s, status: {status.value})")
        return cached.to_reading(status)

    def has_cached_data(self) -> bool:
        with self._lock:
            return self._cached is not None

    def clear_cache(self) -> None:
        with self._lock:
            self._cached = None
        logging.info("Weather cache cleared")
