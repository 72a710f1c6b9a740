from __future__ import annotations

from enum import Enum

from fastapi import Request
from fastapi.responses import JSONResponse


class ErrorCode(Enum):
    """Application error catalogue: (code, HTTP status, message)."""

    INVALID_HEADER_VALUE = (40000, 400, "Missing or invalid request header")
    UNAUTHORIZED = (40100, 401, "Authentication required")
    NOT_FOUND_USER = (40400, 404, "User not found")
    FILE_TOO_LARGE = (41300, 413, "Upload too large")
    INTERNAL_SERVER_ERROR = (50000, 500, "Internal server error")
    S3_UPLOAD_ERROR = (50200, 502, "Error uploading file to S3")

    def __init__(self, code: int, http_status: int, message: str) -> None:
        self.code = code
        self.http_status = http_status
        self.message = message


class CommonException(Exception):
    def __init__(self, error_code: ErrorCode) -> None:
        self.error_code = error_code
        super().__init__(error_code.message)

    @property
    def message(self) -> str:
        return self.error_code.message


async def common_exception_handler(request: Request, exc: CommonException) -> JSONResponse:
    code = exc.error_code
    return JSONResponse({"code": code.code, "message": code.message}, status_code=code.http_status)
