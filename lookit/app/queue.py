import logging
import threading
from concurrent.futures import Future
from dataclasses import dataclass, field
from queue import Queue, Empty
from typing import Any, Callable, Optional

from .metrics import fittings_in_queue


logger = logging.getLogger(__name__)


@dataclass
class Job:
    func: Callable[..., Any]
    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = field(default_factory=dict)
    future: Future = field(default_factory=Future)


class FittingWorkers:
    """Fixed pool of daemon threads draining a bounded job queue.

    ``enqueue`` blocks while the queue is full. Each job's outcome lands on the
    returned future; nothing else tracks it.
    """

    def __init__(self, workers: int = 4, queue_size: int = 100) -> None:
        if workers < 1:
            raise ValueError("workers must be >= 1")
        self.workers = workers
        self._queue: "Queue[Job]" = Queue(maxsize=max(queue_size, 0))
        self._threads: list[threading.Thread] = []
        self._lock = threading.Lock()
        self._submit_lock = threading.Lock()
        self._stop = threading.Event()
        self._closed = False

    def enqueue(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Future:
        job = Job(func=func, args=args, kwargs=kwargs)
        # Closed check and put stay under one lock; put blocks while the queue is full.
        with self._submit_lock:
            if self._closed:
                raise RuntimeError("worker pool is shut down")
            self.ensure_workers()
            fittings_in_queue.inc()
            self._queue.put(job)
        return job.future

    def ensure_workers(self) -> None:
        with self._lock:
            self._threads = [t for t in self._threads if t.is_alive()]
            for i in range(len(self._threads), self.workers):
                t = threading.Thread(target=self._worker_loop, name=f"fitting-worker-{i}", daemon=True)
                t.start()
                self._threads.append(t)

    def _worker_loop(self) -> None:
        while True:
            try:
                job = self._queue.get(timeout=0.5)
            except Empty:
                if self._stop.is_set():
                    return
                continue
            try:
                if not job.future.set_running_or_notify_cancel():
                    continue
                try:
                    result = job.func(*job.args, **job.kwargs)
                except BaseException as e:  # noqa: BLE001
                    logger.debug("Job raised %r", e)
                    job.future.set_exception(e)
                else:
                    job.future.set_result(result)
            finally:
                fittings_in_queue.dec()
                self._queue.task_done()

    def join(self) -> None:
        """Block until every queued job has finished."""
        self._queue.join()

    def shutdown(self, wait: bool = True) -> None:
        with self._submit_lock:
            self._closed = True
        if wait:
            self._queue.join()
        self._stop.set()
        if wait:
            for t in self._threads:
                t.join()


_workers: Optional[FittingWorkers] = None


def get_workers() -> FittingWorkers:
    global _workers
    if _workers is None:
        from .config import settings

        _workers = FittingWorkers(
            workers=settings.get_int("fitting.workers", 4),
            queue_size=settings.get_int("fitting.queue_size", 100),
        )
    return _workers
