from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

import requests


class RemoteError(Exception):
    pass


@dataclass(frozen=True)
class ImagePayload:
    content: bytes
    filename: str
    content_type: Optional[str] = None


def _default_timeout() -> Optional[float]:
    raw = os.environ.get("AI_SERVER_TIMEOUT", "")
    return float(raw) if raw else None


class RemoteFitting:
    """Client for the AI fitting server: two images in, one PNG out."""

    def __init__(self, url: Optional[str] = None, timeout: Optional[float] = None, session: Optional[requests.Session] = None) -> None:
        self.url = (url or os.environ.get("AI_SERVER_URL", "")).rstrip("/")
        if not self.url:
            raise RemoteError("AI_SERVER_URL not configured")
        self.timeout = timeout if timeout is not None else _default_timeout()
        self._http = session or requests

    def fit(self, clothes: ImagePayload, body: ImagePayload) -> bytes:
        # The server only accepts PNG parts regardless of what was uploaded.
        files = {
            "clothesImage": (clothes.filename, clothes.content, "image/png"),
            "bodyImage": (body.filename, body.content, "image/png"),
        }
        r = self._http.post(self.url + "/fitting", files=files, timeout=self.timeout)
        r.raise_for_status()
        if not r.content:
            raise RemoteError("AI server returned an empty body")
        return r.content
