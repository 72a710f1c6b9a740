from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class KakaoTokenResponse(BaseModel):
    """Token payload returned by the Kakao OAuth token endpoint."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    token_type: Optional[str] = None
    access_token: Optional[str] = None
    id_token: Optional[str] = None
    expires_in: Optional[str] = None
    refresh_token: Optional[str] = None
    refresh_token_expires_in: Optional[str] = None
    scope: Optional[str] = Field(default=None, repr=False)

    @classmethod
    def parse(cls, payload: dict[str, Any] | str | bytes) -> "KakaoTokenResponse":
        if isinstance(payload, (str, bytes)):
            return cls.model_validate_json(payload)
        return cls.model_validate(payload)
