from __future__ import annotations

import logging
import uuid
from concurrent.futures import Future
from typing import Any, Optional

from providers.fitting_remote import ImagePayload, RemoteFitting

from .db import FittingRepository, VirtualFittingORM, utcnow
from .metrics import fittings_completed, fittings_failed, fittings_submitted
from .queue import FittingWorkers
from .storage import ObjectStore


logger = logging.getLogger(__name__)

PERSISTED = "persisted"
FAILED = "failed"


class FittingService:
    """Coordinates the virtual fitting pipeline.

    ``submit`` hands back a task id straight away; inference, result upload and
    persistence happen on a pool worker. A failed pipeline leaves no row and is
    visible only in the logs and on the future returned by ``submit_task``.
    """

    def __init__(
        self,
        store: ObjectStore,
        remote: RemoteFitting,
        repository: FittingRepository,
        workers: FittingWorkers,
    ) -> None:
        self.store = store
        self.remote = remote
        self.repository = repository
        self.workers = workers

    def submit(self, user_id: int, clothes_image: ImagePayload, body_image: ImagePayload) -> str:
        task_id, _ = self.submit_task(user_id, clothes_image, body_image)
        return task_id

    def submit_task(self, user_id: int, clothes_image: ImagePayload, body_image: ImagePayload) -> tuple[str, Future]:
        task_id = str(uuid.uuid4())
        future = self.workers.enqueue(self.run_pipeline, task_id, user_id, clothes_image, body_image)
        fittings_submitted.inc()
        logger.info("Fitting submitted", extra={"task_id": task_id, "user_id": user_id})
        return task_id, future

    def run_pipeline(self, task_id: str, user_id: int, clothes_image: ImagePayload, body_image: ImagePayload) -> str:
        try:
            result_image = self.remote.fit(clothes_image, body_image)
            result_image_url = self.store.upload_result_image(result_image, task_id)
            self.repository.save(
                VirtualFittingORM(
                    user_id=user_id,
                    result_image_url=result_image_url,
                    created_at=utcnow(),
                )
            )
        except Exception as e:  # noqa: BLE001
            fittings_failed.inc()
            logger.error(
                "Fitting async process failed for task %s: %s",
                task_id,
                e,
                exc_info=True,
                extra={"task_id": task_id, "user_id": user_id},
            )
            return FAILED
        fittings_completed.inc()
        logger.info("Fitting result stored at %s", result_image_url, extra={"task_id": task_id, "user_id": user_id})
        return PERSISTED

    def upload_user_image(self, upload: Any) -> str:
        return self.store.upload_user_image(
            upload.file,
            upload.filename,
            upload.content_type,
            getattr(upload, "size", None),
        )

    def list_results(self, user_id: int) -> list[VirtualFittingORM]:
        return self.repository.find_all_by_user_id(user_id)


_service: Optional[FittingService] = None


def get_fitting_service() -> FittingService:
    global _service
    if _service is None:
        from .config import settings
        from .queue import get_workers

        _service = FittingService(
            store=ObjectStore(),
            remote=RemoteFitting(
                url=settings.get("ai_server.url"),
                timeout=settings.get_float("ai_server.timeout"),
            ),
            repository=FittingRepository(),
            workers=get_workers(),
        )
    return _service
