from __future__ import annotations

import io
import logging
import os
import uuid
from typing import Any, BinaryIO, Optional

import boto3
from botocore.client import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from .config import settings


S3_BUCKET = os.environ.get("S3_BUCKET") or settings.get("cloud.aws.s3.bucket")
S3_REGION = os.environ.get("S3_REGION") or settings.get("cloud.aws.s3.region")
S3_ENDPOINT_URL = os.environ.get("S3_ENDPOINT_URL")
S3_ACCESS_KEY_ID = os.environ.get("S3_ACCESS_KEY_ID")
S3_SECRET_ACCESS_KEY = os.environ.get("S3_SECRET_ACCESS_KEY")
S3_PREFIX = os.environ.get("S3_PREFIX", "")
CDN_BASE_URL = os.environ.get("CDN_BASE_URL")

logger = logging.getLogger(__name__)


def _s3_client():
    session = boto3.session.Session()
    return session.client(
        "s3",
        region_name=S3_REGION,
        endpoint_url=S3_ENDPOINT_URL,
        aws_access_key_id=S3_ACCESS_KEY_ID,
        aws_secret_access_key=S3_SECRET_ACCESS_KEY,
        config=BotoConfig(signature_version="s3v4"),
    )


def user_image_key(filename: Optional[str]) -> str:
    return f"{uuid.uuid4()}-{filename or 'upload.bin'}"


def result_image_key(task_id: str) -> str:
    return f"result-{task_id}.png"


class ObjectStore:
    """Thin wrapper over an S3 bucket that returns public URLs for stored objects."""

    def __init__(
        self,
        client: Any = None,
        bucket: Optional[str] = None,
        prefix: Optional[str] = None,
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        cdn_base_url: Optional[str] = None,
    ) -> None:
        self.bucket = bucket or S3_BUCKET
        if not self.bucket:
            raise ValueError("S3 bucket not configured")
        self.prefix = S3_PREFIX if prefix is None else prefix
        self.region = region or S3_REGION or "us-east-1"
        self.endpoint_url = endpoint_url if endpoint_url is not None else S3_ENDPOINT_URL
        self.cdn_base_url = cdn_base_url if cdn_base_url is not None else CDN_BASE_URL
        self._client = client or _s3_client()

    def _full_key(self, key: str) -> str:
        if not self.prefix:
            return key
        return self.prefix.rstrip("/") + "/" + key

    def url_for(self, key: str) -> str:
        full = self._full_key(key)
        if self.cdn_base_url:
            return f"{self.cdn_base_url.rstrip('/')}/{full}"
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}/{full}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{full}"

    def put_stream(self, key: str, stream: BinaryIO, content_type: Optional[str], content_length: Optional[int]) -> str:
        extra: dict[str, Any] = {}
        if content_type:
            extra["ContentType"] = content_type
        if content_length is not None:
            extra["ContentLength"] = content_length
        full = self._full_key(key)
        self._client.put_object(Bucket=self.bucket, Key=full, Body=stream, **extra)
        logger.debug("Stored object", extra={"key": full})
        return self.url_for(key)

    def put_bytes(self, key: str, data: bytes, content_type: str = "image/png") -> str:
        return self.put_stream(key, io.BytesIO(data), content_type, len(data))

    def upload_user_image(self, stream: BinaryIO, filename: Optional[str], content_type: Optional[str], size: Optional[int]) -> str:
        """Store a user-submitted image under ``<uuid>-<filename>``.

        Storage client failures surface as ``IOError`` with the SDK error chained.
        """
        key = user_image_key(filename)
        try:
            return self.put_stream(key, stream, content_type, size)
        except (BotoCoreError, ClientError) as e:
            raise IOError("Error uploading file to S3") from e

    def upload_result_image(self, data: bytes, task_id: str) -> str:
        return self.put_bytes(result_image_key(task_id), data, "image/png")
