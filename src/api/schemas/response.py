"""Response envelope shared by every endpoint

Success: {"success": true, "data": ..., "message": ...}
Failure: {"success": false, "error": {"code", "message", "details"?}}
"""

from typing import Any, Dict, Generic, Optional, TypeVar
from pydantic import BaseModel
from libs.result import Error

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None


def success_response(data: Any = None, message: Optional[str] = None) -> Dict[str, Any]:
    return {"success": True, "data": data, "message": message}


def error_body(error: Error, include_details: bool = False) -> Dict[str, Any]:
    body = {"code": error.code, "message": error.message}
    if include_details and error.reason:
        body["details"] = error.reason
    return {"success": False, "error": body}
