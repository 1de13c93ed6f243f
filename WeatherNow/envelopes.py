"""Standard JSON envelopes returned by every API endpoint."""
from datetime import datetime, timezone
from typing import Any, Optional


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def success_response(data: Any, **metadata: Any) -> dict:
    return {
        "success": True,
        "data": data,
        "metadata": {"timestamp": _timestamp(), **metadata},
    }


def error_response(message: str, code: Optional[str] = None, details: Any = None) -> dict:
    error = {"message": message}
    if code:
        error["code"] = code
    if details:
        error["details"] = details
    return {"success": False, "error": error, "timestamp": _timestamp()}
