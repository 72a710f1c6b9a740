import os
from fastapi import Request

from .exceptions import CommonException, ErrorCode


def _max_upload_bytes() -> int:
    return int(os.environ.get("MAX_UPLOAD_MB", "25")) * 1024 * 1024


async def enforce_max_upload_size(request: Request) -> None:
    cl = request.headers.get("content-length")
    if not cl:
        return
    try:
        size = int(cl)
    except ValueError:
        return
    if size > _max_upload_bytes():
        raise CommonException(ErrorCode.FILE_TOO_LARGE)
