"""Unified API response envelope.

Every endpoint returns:
{
    "code": 0,           // 0=success, otherwise an AppError code
    "message": "success",
    "data": { ... },     // null on error
    "timestamp": "...",
    "request_id": "..."
}
"""

import uuid
from typing import Any

from fastapi import Request
from pydantic import BaseModel, Field

from src.bk_common.datetime_utils import utc_now


def new_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:12]}"


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    timestamp: str = Field(default_factory=lambda: utc_now().isoformat())
    request_id: str = Field(default_factory=new_request_id)


def success_response(
    data: Any = None,
    request: Request | None = None,
    message: str = "success",
) -> ApiResponse:
    """Wrap ``data``; reuse the request id set by RequestLogMiddleware when available."""
    resp = ApiResponse(code=0, message=message, data=data)
    if request is not None:
        resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


def error_response(code: int, message: str, request_id: str | None = None) -> ApiResponse:
    resp = ApiResponse(code=code, message=message, data=None)
    if request_id is not None:
        resp.request_id = request_id
    return resp
