"""Fixed pool of worker threads running queued tasks."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable

from netproc.cpu import count_cpu
from netproc.task_queue import TaskQueue

DEFAULT_NUM_WORKERS = 3

# How long close() waits for each worker to finish its current task.
_JOIN_TIMEOUT = 5.0

_log = logging.getLogger(__name__)


class ThreadPool:
    """Runs tasks on background threads; pending tasks are dropped on close."""

    def __init__(self, num_workers: int = 0) -> None:
        if num_workers < 0:
            raise ValueError("number of workers must not be negative")
        if not num_workers:
            num_workers = count_cpu() - 1
            if num_workers <= 0:
                num_workers = DEFAULT_NUM_WORKERS

        self.num_workers = num_workers
        self._cond = threading.Condition()
        self._queue = TaskQueue(None)
        self._stopping = False
        self._threads = [
            threading.Thread(target=self._work, name=f"netproc-worker-{n}", daemon=True)
            for n in range(num_workers)
        ]
        for thread in self._threads:
            thread.start()

    def _work(self) -> None:
        while True:
            with self._cond:
                while not self._stopping and not self._queue:
                    self._cond.wait()
                if self._stopping:
                    return
                func, args = self._queue.dequeue()
            try:
                func(*args)
            except Exception:
                _log.exception("task %r failed", func)

    def add_task(self, func: Callable[..., Any], *args: Any) -> None:
        """Queue ``func(*args)`` to run on a worker thread."""
        with self._cond:
            if self._stopping:
                raise RuntimeError("thread pool is closed")
            self._queue.enqueue((func, args))
            self._cond.notify()

    def close(self) -> None:
        """Stop the workers and discard tasks that have not started."""
        with self._cond:
            if self._stopping:
                return
            self._stopping = True
            self._cond.notify_all()
        for thread in self._threads:
            thread.join(_JOIN_TIMEOUT)
        with self._cond:
            self._queue.destroy()

    def __enter__(self) -> "ThreadPool":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()