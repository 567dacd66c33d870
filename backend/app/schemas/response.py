"""
Uniform JSON response envelope:

    {"success": true,  "data": ..., "meta": {...}}
    {"success": false, "error": {"code", "message", "details"}, "meta": {...}}
"""
from pydantic import BaseModel
from typing import Optional, Any, Dict
from datetime import datetime

from app.core.config import settings
from app.core.exceptions import ICMSError, error_response
from app.core.logging_config import get_request_id


class ApiMeta(BaseModel):
    timestamp: str
    version: str
    request_id: Optional[str] = None


def _meta() -> Dict[str, Any]:
    return ApiMeta(
        timestamp=datetime.utcnow().isoformat() + "Z",
        version=settings.APP_VERSION,
        request_id=get_request_id() or None,
    ).model_dump()


def _dump(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json")
    if isinstance(data, list):
        return [_dump(item) for item in data]
    return data


class ApiResponse:
    """Builders for the response envelope"""

    @staticmethod
    def success(data: Any) -> Dict[str, Any]:
        return {"success": True, "data": _dump(data), "meta": _meta()}

    @staticmethod
    def error(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        return {
            "success": False,
            "error": {"code": code, "message": message, "details": details or {}},
            "meta": _meta(),
        }

    @staticmethod
    def from_exception(exc: ICMSError) -> Dict[str, Any]:
        body = error_response(exc)
        body["meta"] = _meta()
        return body
