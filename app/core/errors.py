# ============================================================================
# FILE: app/core/errors.py
# HTTP-boundary translation of service results
# ============================================================================
from typing import Any, List, Optional
from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from app.core.result import Err, Result
import logging

logger = logging.getLogger(__name__)


class ApiError(HTTPException):
    """HTTP error carrying the response envelope message"""

    def __init__(self, status_code: int, message: str = "Something went wrong", errors: Optional[List[Any]] = None):
        super().__init__(status_code=status_code, detail=message)
        self.message = message
        self.errors = errors or []

    @classmethod
    def from_err(cls, err: Err) -> "ApiError":
        return cls(err.kind.status_code, err.message)


def unwrap_or_raise(result: Result) -> Any:
    """Return the success value or raise the matching ApiError"""
    if isinstance(result, Err):
        raise ApiError.from_err(result)
    return result.value


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "statusCode": exc.status_code,
            "data": None,
            "message": exc.message,
            "success": False,
            "errors": exc.errors,
        },
        headers=exc.headers,
    )
