"""WeatherNow backend API server."""
import argparse
import logging
import os
import sys
from typing import Optional, Tuple

from dotenv import load_dotenv
from flask import Flask

from api import create_app
from weather_service import WeatherService
from weatherapi_provider import WeatherApiProvider

DEFAULT_PORT = 3000


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser("WeatherNow backend API")
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=None, help="Defaults to $PORT or 3000")
    parser.add_argument("--timeout", type=int, default=10, help="Upstream HTTP timeout in seconds")
    parser.add_argument("--log-file", default=None)
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def setup_logging(log_file: Optional[str], verbose: bool) -> None:
    log_level = logging.DEBUG if verbose else logging.INFO
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=handlers,
    )


def load_config() -> Tuple[str, str, int]:
    load_dotenv()
    api_key = os.getenv("WEATHER_API_KEY")
    api_url = os.getenv("WEATHER_API_URL", WeatherApiProvider.DEFAULT_BASE_URL)
    port = os.getenv("PORT", str(DEFAULT_PORT))

    if not api_key:
        raise SystemExit("Missing WEATHER_API_KEY in environment")

    try:
        port_val = int(port)
    except ValueError as exc:
        raise SystemExit(f"Invalid PORT: {exc}") from exc

    logging.info("Configuration loaded: api_url=%s port=%s", api_url, port_val)
    return api_key, api_url, port_val


def build_app(api_key: str, api_url: str, args: argparse.Namespace) -> Flask:
    provider = WeatherApiProvider(api_key=api_key, base_url=api_url, timeout=args.timeout)
    service = WeatherService(provider=provider)
    logging.info("Weather service ready (upstream timeout=%ss)", args.timeout)
    return create_app(service, debug=args.verbose)


def main(argv=None) -> None:
    args = parse_args(argv)
    setup_logging(args.log_file, args.verbose)
    api_key, api_url, port = load_config()

    app = build_app(api_key, api_url, args)
    port = args.port or port

    logging.info("WeatherNow API running on %s:%s", args.host, port)
    try:
        app.run(host=args.host, port=port, threaded=True)
    finally:
        logging.info("Server stopped")


if __name__ == "__main__":
    main()
