"""HTTP surface: submission, history, direct uploads and error codes."""

from __future__ import annotations

import asyncio
import io
import threading
import time

import pytest
from botocore.exceptions import ClientError
from fastapi import UploadFile
from fastapi.testclient import TestClient

from lookit.app.fitting_service import FittingService, get_fitting_service
from lookit.app.main import app, request_fitting
from lookit.app.queue import FittingWorkers


@pytest.fixture
def client(service):
    app.dependency_overrides[get_fitting_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


def _images():
    return {
        "clothesImage": ("clothes.png", b"clothes", "image/png"),
        "bodyImage": ("body.png", b"body", "image/png"),
    }


def test_health_returns_ok(client) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_request_fitting_returns_task_id(client, service, remote) -> None:
    response = client.post("/v1/fittings", files=_images(), headers={"X-User-Id": "42"})

    assert response.status_code == 202
    task_id = response.json()["task_id"]
    service.workers.join()

    clothes, body = remote.fit.call_args.args
    assert clothes.content == b"clothes"
    assert clothes.filename == "clothes.png"
    assert body.content == b"body"

    listed = client.get("/v1/fittings", headers={"X-User-Id": "42"})
    assert listed.status_code == 200
    (item,) = listed.json()
    assert item["result_image_url"] == f"https://store/result-{task_id}.png"
    assert set(item) == {"id", "result_image_url", "created_at"}


def test_request_fitting_succeeds_even_when_pipeline_fails(client, service, remote) -> None:
    remote.fit.side_effect = ConnectionError("ai server down")

    response = client.post("/v1/fittings", files=_images(), headers={"X-User-Id": "42"})
    service.workers.join()

    assert response.status_code == 202
    assert client.get("/v1/fittings", headers={"X-User-Id": "42"}).json() == []


@pytest.mark.parametrize("header", [None, "abc", "0", "-3"])
def test_invalid_user_header(client, header) -> None:
    headers = {"X-User-Id": header} if header is not None else {}

    response = client.get("/v1/fittings", headers=headers)

    assert response.status_code == 400
    assert response.json() == {"code": 40000, "message": "Missing or invalid request header"}


def test_api_key_required_when_configured(client, monkeypatch) -> None:
    monkeypatch.setenv("API_KEY", "secret")

    denied = client.get("/v1/fittings", headers={"X-User-Id": "1"})
    allowed = client.get("/v1/fittings", headers={"X-User-Id": "1", "x-api-key": "secret"})

    assert denied.status_code == 401
    assert denied.json()["code"] == 40100
    assert allowed.status_code == 200


def test_upload_too_large(client, monkeypatch) -> None:
    monkeypatch.setenv("MAX_UPLOAD_MB", "0")

    response = client.post("/v1/images", files={"file": ("a.png", b"x" * 10, "image/png")}, headers={"X-User-Id": "1"})

    assert response.status_code == 413
    assert response.json()["code"] == 41300


def test_upload_image_returns_url(client, s3_client) -> None:
    response = client.post("/v1/images", files={"file": ("a.png", b"abc", "image/png")}, headers={"X-User-Id": "1"})

    assert response.status_code == 201
    key = s3_client.put_object.call_args.kwargs["Key"]
    assert key.endswith("-a.png")
    assert response.json() == {"url": f"https://store/{key}"}


def test_upload_image_storage_failure(client, s3_client) -> None:
    s3_client.put_object.side_effect = ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject")

    response = client.post("/v1/images", files={"file": ("a.png", b"abc", "image/png")}, headers={"X-User-Id": "1"})

    assert response.status_code == 502
    assert response.json() == {"code": 50200, "message": "Error uploading file to S3"}


def test_metrics_endpoint_exposes_fitting_counters(client) -> None:
    response = client.get("/metrics/")

    assert response.status_code == 200
    assert "lookit_fittings_submitted_total" in response.text
    assert "lookit_fittings_in_queue" in response.text


def test_openapi_documents_error_body(client) -> None:
    schema = client.get("/openapi.json").json()

    responses = schema["paths"]["/v1/images"]["post"]["responses"]
    assert responses["502"]["content"]["application/json"]["schema"]["$ref"].endswith("/ErrorResponse")
    assert "400" in schema["paths"]["/v1/fittings"]["get"]["responses"]


def _upload(name: str) -> UploadFile:
    return UploadFile(file=io.BytesIO(b"image-bytes"), filename=name)


@pytest.mark.asyncio
async def test_full_queue_does_not_stall_event_loop(store, remote, repository) -> None:
    release = threading.Event()
    remote.fit.side_effect = lambda *_args: release.wait(5) and b"png"
    workers = FittingWorkers(workers=1, queue_size=1)
    service = FittingService(store=store, remote=remote, repository=repository, workers=workers)

    async def submit():
        return await request_fitting(
            clothesImage=_upload("clothes.png"),
            bodyImage=_upload("body.png"),
            user_id=1,
            _lim=None,
            service=service,
        )

    submissions = asyncio.gather(*(submit() for _ in range(3)))

    longest_gap = 0.0
    last = time.monotonic()
    for _ in range(10):
        await asyncio.sleep(0.05)
        now = time.monotonic()
        longest_gap = max(longest_gap, now - last)
        last = now

    release.set()
    responses = await asyncio.wait_for(submissions, timeout=5)
    await asyncio.to_thread(workers.shutdown)

    assert longest_gap < 0.5
    assert len({r.task_id for r in responses}) == 3
    assert len(service.list_results(1)) == 3
