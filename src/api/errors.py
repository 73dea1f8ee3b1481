"""
Uniform error bodies.

Every error the API returns has the same shape, {"message": ..., "status": ...},
and never includes internal detail.
"""

from fastapi.responses import JSONResponse
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    message: str
    status: int


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message, status=status_code).model_dump(),
    )
