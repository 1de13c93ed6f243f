"""WeatherAPI.com current conditions provider implementation."""
import logging
from datetime import datetime, timezone

import requests

from weather_provider import Observation, WeatherProviderBase, UpstreamRequestFailed


class WeatherApiProvider(WeatherProviderBase):
    """
    Weather provider using the WeatherAPI.com Current Weather endpoint.

    See https://www.weatherapi.com/docs/ - only ``current.json`` is used.
    """

    DEFAULT_BASE_URL = "https://api.weatherapi.com/v1"
    LAST_UPDATED_FORMAT = "%Y-%m-%d %H:%M"

    def __init__(self, api_key: str, base_url: str = DEFAULT_BASE_URL, timeout: int = 10):
        """
        Initialize WeatherAPI provider.

        Args:
            api_key: WeatherAPI.com API key
            base_url: API root, without the trailing ``/current.json``
            timeout: HTTP request timeout in seconds
        """
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    @property
    def current_url(self) -> str:
        return f"{self.base_url}/current.json"

    def get_current(self, location: str) -> Observation:
        """
        Fetch current conditions from WeatherAPI.com.

        Returns:
            Observation: Current conditions, temperature not yet validated

        Raises:
            UpstreamRequestFailed: If the request fails or the payload can't be parsed
        """
        params = {"key": self.api_key, "q": location}

        try:
            logging.info(f"Making WeatherAPI request: {self.current_url} (q={location!r})")
            response = requests.get(self.current_url, params=params, timeout=self.timeout)
            logging.info(f"API response status: {response.status_code}")

            if not response.ok:
                logging.error(f"API request failed with status {response.status_code}")
                self._handle_error_response(response)

            data = response.json()
            logging.debug(f"API response (truncated): {str(data)[:500]}...")

            if not isinstance(data, dict):
                logging.error(f"Response is not a JSON object: {type(data).__name__}")
                raise UpstreamRequestFailed("Response is not a JSON object")

            current = data.get("current")
            if not current:
                raise UpstreamRequestFailed("Response missing 'current' block")
            place = data.get("location")
            if not place:
                raise UpstreamRequestFailed("Response missing 'location' block")

            observation = Observation(
                temp_c=float(current["temp_c"]),
                last_updated=self._parse_last_updated(current),
                name=place["name"],
                region=place.get("region"),
                country=place.get("country"),
            )

            logging.info(f"Successfully parsed weather data: {observation.temp_c}°C at {observation.display_location}")
            return observation

        except requests.exceptions.RequestException as e:
            logging.error(f"Network error during API request: {e}")
            raise UpstreamRequestFailed(f"Network error: {str(e)}") from e
        except (KeyError, ValueError, TypeError, AttributeError) as e:
            logging.error(f"Failed to parse API response: {e}", exc_info=True)
            raise UpstreamRequestFailed(f"Failed to parse response: {str(e)}") from e

    def _parse_last_updated(self, current: dict) -> datetime:
        """
        Return the observation time as an aware UTC datetime.

        ``last_updated_epoch`` is preferred. The ``last_updated`` string is in
        the location's local time and is only used when the epoch is missing;
        without an offset it is taken as UTC.
        """
        epoch = current.get("last_updated_epoch")
        if epoch is not None:
            return datetime.fromtimestamp(int(epoch), tz=timezone.utc)

        value = current["last_updated"]
        try:
            parsed = datetime.strptime(value, self.LAST_UPDATED_FORMAT)
        except ValueError:
            parsed = datetime.fromisoformat(value)
        if parsed.tzinfo is None:
            return parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)

    def _handle_error_response(self, response: requests.Response) -> None:
        """Parse and raise error from a WeatherAPI error response."""
        try:
            error_data = response.json()
        except ValueError:
            # Not JSON, use HTTP status
            logging.error(f"Non-JSON error response: HTTP {response.status_code}, body: {response.text[:500]}")
            raise UpstreamRequestFailed(f"HTTP {response.status_code}: {response.text[:200]}")

        logging.error(f"WeatherAPI error response: {error_data}")
        error = error_data.get("error") or {}
        code = error.get("code", response.status_code)
        message = error.get("message", "Unknown error")
        raise UpstreamRequestFailed(f"WeatherAPI error {code} (HTTP {response.status_code}): {message}")
