"""Shared fixtures: a mocked S3 client, a SQLite repository and a small worker pool."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from lookit.app.db import FittingRepository, init_db, make_engine
from lookit.app.fitting_service import FittingService
from lookit.app.queue import FittingWorkers
from lookit.app.storage import ObjectStore
from providers.fitting_remote import ImagePayload, RemoteFitting


@pytest.fixture
def s3_client() -> MagicMock:
    return MagicMock(name="s3")


@pytest.fixture
def store(s3_client: MagicMock) -> ObjectStore:
    return ObjectStore(
        client=s3_client,
        bucket="lookit-test",
        prefix="",
        region="ap-northeast-2",
        endpoint_url="",
        cdn_base_url="https://store",
    )


@pytest.fixture
def repository(tmp_path) -> FittingRepository:
    engine = make_engine(f"sqlite:///{tmp_path / 'lookit.sqlite3'}")
    init_db(engine)
    return FittingRepository(engine)


@pytest.fixture
def remote() -> MagicMock:
    mock = MagicMock(spec=RemoteFitting)
    mock.fit.return_value = b"\x89PNG" + b"\x00" * 46
    return mock


@pytest.fixture
def workers():
    pool = FittingWorkers(workers=2, queue_size=10)
    yield pool
    pool.shutdown(wait=True)


@pytest.fixture
def service(store, remote, repository, workers) -> FittingService:
    return FittingService(store=store, remote=remote, repository=repository, workers=workers)


@pytest.fixture
def clothes() -> ImagePayload:
    return ImagePayload(content=b"clothes-bytes", filename="clothes.png", content_type="image/png")


@pytest.fixture
def body() -> ImagePayload:
    return ImagePayload(content=b"body-bytes", filename="body.png", content_type="image/png")
