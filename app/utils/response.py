"""
Standard response envelope: {status, code, message, data?, meta?}
"""
import math
from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from app.schemas.movie import PaginationMeta


def _envelope(status: str, code: int, message: str, data: Any = None, meta: Any = None) -> dict:
    body = {"status": status, "code": code, "message": message}
    if data is not None:
        body["data"] = data
    if meta is not None:
        body["meta"] = meta
    return body


def success_response(code: int, message: str, data: Any = None, meta: Any = None) -> JSONResponse:
    """Success envelope; data/meta are omitted when None"""
    return JSONResponse(
        status_code=code,
        content=jsonable_encoder(_envelope("success", code, message, data, meta)),
    )


def error_response(code: int, message: str, data: Any = None) -> JSONResponse:
    """Error envelope: 'error' for client errors, 'fail' for server errors"""
    status = "fail" if code >= 500 else "error"
    return JSONResponse(
        status_code=code,
        content=jsonable_encoder(_envelope(status, code, message, data)),
    )


def create_pagination_meta(page: int, limit: int, total: int) -> PaginationMeta:
    total_pages = math.ceil(total / limit) if limit > 0 else 0
    if total_pages == 0:
        total_pages = 1

    return PaginationMeta(
        page=page,
        limit=limit,
        total=total,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_previous=page > 1,
    )


def message_from_detail(detail: Optional[Any], default: str = "Request failed") -> str:
    """Flatten an HTTPException detail into the envelope message"""
    if detail is None:
        return default
    if isinstance(detail, str):
        return detail
    return str(detail)
