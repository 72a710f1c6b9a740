from __future__ import annotations

import os

from fastapi import Request

from .exceptions import CommonException, ErrorCode


def _api_key() -> str | None:
    return os.environ.get("API_KEY") or None


async def require_user(request: Request) -> int:
    """Resolve the calling user from ``X-User-Id``, gated by ``x-api-key`` when API_KEY is set."""
    key = _api_key()
    if key and request.headers.get("x-api-key") != key:
        raise CommonException(ErrorCode.UNAUTHORIZED)

    raw = request.headers.get("x-user-id")
    if not raw:
        raise CommonException(ErrorCode.INVALID_HEADER_VALUE)
    try:
        user_id = int(raw)
    except ValueError:
        raise CommonException(ErrorCode.INVALID_HEADER_VALUE) from None
    if user_id <= 0:
        raise CommonException(ErrorCode.INVALID_HEADER_VALUE)
    return user_id
