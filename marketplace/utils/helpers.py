from datetime import datetime
from enum import Enum
from typing import Any, Optional

from fastapi.responses import JSONResponse


def serialize_payload(payload):
    """Recursively convert datetimes, enums and pydantic models for JSON."""
    if payload is None:
        return payload

    if hasattr(payload, "model_dump"):
        return serialize_payload(payload.model_dump())

    if isinstance(payload, (list, tuple)):
        return [serialize_payload(p) for p in payload]

    if isinstance(payload, dict):
        clean = {}
        for k, v in payload.items():
            key = k.value if isinstance(k, Enum) else k
            if isinstance(v, datetime):
                clean[key] = v.isoformat()
            elif isinstance(v, Enum):
                clean[key] = v.value
            elif isinstance(v, (dict, list, tuple)) or hasattr(v, "model_dump"):
                clean[key] = serialize_payload(v)
            else:
                clean[key] = v
        return clean

    if isinstance(payload, datetime):
        return payload.isoformat()
    if isinstance(payload, Enum):
        return payload.value

    return payload


def success_response(
    data: Optional[Any] = None,
    message: str = "Success",
    code: int = 200,
) -> JSONResponse:
    """Standard success JSON response."""
    content = {"success": True, "message": message}
    if data is not None:
        content["data"] = serialize_payload(data)
    return JSONResponse(status_code=code, content=content)


def error_response(
    message: str,
    code: int = 400,
    data: Optional[Any] = None,
) -> JSONResponse:
    """Standard error JSON response."""
    content = {"success": False, "error": {"code": code, "message": message}}
    if data is not None:
        content["data"] = serialize_payload(data)
    return JSONResponse(status_code=code, content=content)
