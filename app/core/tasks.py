"""Bounded background task queue for fire-and-forget work (audit logs, last-login bumps).

Callers enqueue and return immediately. When the queue is full the oldest
pending task is dropped to make room, so a stalled database can never
grow memory without bound or block a request. Task failures are logged
and swallowed.
"""

import queue
import threading
from typing import Callable, List, Optional

import structlog

logger = structlog.get_logger(__name__)

Task = Callable[[], None]

_STOP = object()


class TaskQueue:
    """Fixed pool of worker threads draining a bounded FIFO queue."""

    def __init__(self, maxsize: int = 1000, workers: int = 2, name: str = "tasks"):
        self.name = name
        self.workers = max(1, workers)
        self._queue: "queue.Queue" = queue.Queue(maxsize=max(1, maxsize))
        self._threads: List[threading.Thread] = []
        self._lock = threading.Lock()
        self.dropped = 0

    @property
    def running(self) -> bool:
        return any(t.is_alive() for t in self._threads)

    def start(self) -> None:
        with self._lock:
            if self.running:
                return
            self._threads = [
                threading.Thread(target=self._worker, name=f"{self.name}-{i}", daemon=True)
                for i in range(self.workers)
            ]
            for thread in self._threads:
                thread.start()
        logger.info("Task queue started", queue=self.name, workers=self.workers)

    def submit(self, task: Task) -> None:
        """Enqueue a task without blocking. Drops the oldest pending task on overflow."""
        while True:
            try:
                self._queue.put_nowait(task)
                return
            except queue.Full:
                try:
                    self._queue.get_nowait()
                except queue.Empty:
                    continue
                self._queue.task_done()
                self.dropped += 1
                logger.warning("Task queue full, dropped oldest task", queue=self.name, dropped=self.dropped)

    def join(self) -> None:
        """Block until every queued task has been processed."""
        self._queue.join()

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        """Drain pending work, then stop the workers."""
        if not self.running:
            return
        self.join()
        for _ in self._threads:
            self._queue.put(_STOP)
        for thread in self._threads:
            thread.join(timeout=timeout)
        self._threads = []
        logger.info("Task queue stopped", queue=self.name, dropped=self.dropped)

    def _worker(self) -> None:
        while True:
            task = self._queue.get()
            try:
                if task is _STOP:
                    return
                task()
            except Exception:
                logger.exception("Background task failed", queue=self.name)
            finally:
                self._queue.task_done()
