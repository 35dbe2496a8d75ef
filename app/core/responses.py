"""Response envelope helpers — {"data": ..., "meta": {"duration": ...}}."""

import time
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.encoders import jsonable_encoder


def request_duration(request: Request) -> str:
    start = getattr(request.state, "start_time", None)
    if start is None:
        return "0ms"
    return f"{(time.perf_counter() - start) * 1000:.3f}ms"


def envelope(request: Request, data: Any = None, **meta: Any) -> Dict[str, Any]:
    return {
        "data": jsonable_encoder(data),
        "meta": {"duration": request_duration(request), **meta},
    }


def error_envelope(
    request: Request,
    code: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    return {
        "error": {
            "code": code,
            "message": message,
            "details": jsonable_encoder(details or {}),
            "path": request.url.path,
        },
        "meta": {"duration": request_duration(request)},
    }
