"""Thread-safe registry of named, shared workers."""

from __future__ import annotations

import threading

from threadpin.config import WorkerConfig
from threadpin.worker import WorkerThread


class WorkerRegistry:
    """Hands out one shared :class:`WorkerThread` per name.

    Useful when several components must agree on the thread that talks to
    a given resource, e.g. one worker per debugged process. A worker that
    has been closed is replaced by a fresh one on the next :meth:`get`.

    Example::

        registry = WorkerRegistry()
        worker = registry.get("target-4711")
        worker.run(attach)

        registry.close()
    """

    __slots__ = ("_lock", "_workers")

    def __init__(self) -> None:
        self._workers: dict[str, WorkerThread] = {}
        self._lock = threading.Lock()

    def get(self, name: str = "default", config: WorkerConfig | None = None) -> WorkerThread:
        """Return the live worker registered under *name*, creating it if needed.

        *config* is only used when a new worker is created. When omitted the
        worker thread is named ``threadpin-<name>``.
        """
        with self._lock:
            worker = self._workers.get(name)
            if worker is None or worker.closed:
                worker = WorkerThread(config or WorkerConfig(name=f"threadpin-{name}"))
                self._workers[name] = worker
            return worker

    def names(self) -> list[str]:
        """Names of the registered workers that are still open."""
        with self._lock:
            return sorted(name for name, worker in self._workers.items() if not worker.closed)

    def close(self, timeout: float = 5.0) -> None:
        """Close every registered worker and wait up to *timeout* for each to exit."""
        with self._lock:
            workers = list(self._workers.values())
            self._workers.clear()

        for worker in workers:
            worker.close()
        for worker in workers:
            worker.join(timeout)

    def __len__(self) -> int:
        with self._lock:
            return len(self._workers)


# Module-level registry backing get_worker() and @pinned
_default_registry = WorkerRegistry()


def get_worker(name: str = "default", config: WorkerConfig | None = None) -> WorkerThread:
    """Return the shared worker registered under *name* in the default registry."""
    return _default_registry.get(name, config)


def close_all(timeout: float = 5.0) -> None:
    """Close every worker in the default registry."""
    _default_registry.close(timeout)
