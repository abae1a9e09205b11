from __future__ import annotations
from datetime import datetime, timezone
from typing import Any
from fastapi.responses import JSONResponse


CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type, Authorization, X-API-Key",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
}

def utc_timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")

def envelope(
    status_code: int,
    version: str,
    *,
    data: dict[str, Any] | None = None,
    error: str | None = None,
    details: Any = None,
) -> JSONResponse:
    """Build the ``{success, data?, error?, details?, version, timestamp}`` response."""
    body: dict[str, Any] = {"success": 200 <= status_code < 300}
    if data is not None:
        body["data"] = data
    if error is not None:
        body["error"] = error
    if details is not None:
        body["details"] = details
    body["version"] = version
    body["timestamp"] = utc_timestamp()
    return JSONResponse(status_code=status_code, content=body, headers=CORS_HEADERS)
