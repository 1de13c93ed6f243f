"""HTTP endpoints for the weather dashboard backend."""
import logging
import traceback
from datetime import datetime, timezone

from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from envelopes import error_response, success_response
from weather_data import TemperatureUnit
from weather_provider import ErrorKind, TemperatureOutOfRange, WeatherProviderError
from weather_service import WeatherService

SERVICE_NAME = "WeatherNow API"
WEATHER_PREFIX = "/api/v1/external/weather"
CACHE_PREFIX = "/api/v1/internal/weather"


def create_app(service: WeatherService, debug: bool = False) -> Flask:
    """
    Build the Flask app around a weather service.

    Args:
        service: Shared weather service; its cache is used by every request
        debug: Include tracebacks in 500 responses
    """
    app = Flask(__name__)
    app.config["WEATHER_SERVICE"] = service
    app.config["DEBUG_ERRORS"] = debug

    @app.get("/health")
    def health():
        return jsonify({
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "service": SERVICE_NAME,
        })

    @app.get(f"{WEATHER_PREFIX}/current")
    def current_weather():
        location = request.args.get("location", "").strip()
        unit = request.args.get("unit", TemperatureUnit.CELSIUS.value)

        if not location:
            return jsonify(error_response("locationRequired")), 400
        try:
            unit = TemperatureUnit(unit)
        except ValueError:
            return jsonify(error_response("invalidUnit")), 400

        try:
            reading = service.fetch_weather_data(location)
        except WeatherProviderError as e:
            logging.warning(f"No weather available for {location!r}: {e}")
            return jsonify(error_response(ErrorKind.UPSTREAM_REQUEST_FAILED.value)), 503

        if unit != reading.temperature_unit:
            reading.temperature = service.convert_temperature(reading.temperature, reading.temperature_unit, unit)
            reading.temperature_unit = unit

        return jsonify(success_response(reading.to_dict()))

    @app.post(f"{WEATHER_PREFIX}/refresh")
    def refresh_weather():
        body = request.get_json(silent=True) or {}
        location = body.get("location")

        if not location or not isinstance(location, str):
            return jsonify(error_response("locationRequired")), 400

        try:
            reading = service.fetch_weather_data(location)
        except TemperatureOutOfRange as e:
            logging.warning(f"Refresh for {location!r} rejected: {e}")
            return jsonify(error_response(e.kind.value)), 400
        except WeatherProviderError as e:
            logging.warning(f"Refresh for {location!r} failed: {e}")
            return jsonify(error_response(ErrorKind.UPSTREAM_REQUEST_FAILED.value)), 503

        return jsonify(success_response(reading.to_dict()))

    @app.get(f"{CACHE_PREFIX}/cache")
    def cache_status():
        return jsonify(success_response({"hasCachedData": service.has_cached_data()}))

    @app.delete(f"{CACHE_PREFIX}/cache")
    def clear_cache():
        service.clear_cache()
        return jsonify(success_response({"cleared": True}))

    @app.errorhandler(404)
    def not_found(_error):
        return jsonify(error_response("notFound", details={"path": request.path})), 404

    @app.errorhandler(Exception)
    def unhandled(error):
        if isinstance(error, HTTPException):
            return jsonify(error_response(error.name)), error.code
        logging.exception(f"Unhandled error on {request.method} {request.path}: {error}")
        details = None
        if app.config["DEBUG_ERRORS"]:
            details = {"stack": traceback.format_exc()}
        return jsonify(error_response("Internal Server Error", details=details)), 500

    return app
