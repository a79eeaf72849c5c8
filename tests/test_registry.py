"""Tests for WorkerRegistry and the module-level helpers."""

import threading

from threadpin.config import WorkerConfig
from threadpin.registry import WorkerRegistry, close_all, get_worker
from threadpin.worker import WorkerThread


class TestWorkerRegistry:
    def test_get_creates_worker(self):
        registry = WorkerRegistry()
        try:
            w = registry.get("proc-1")
            assert isinstance(w, WorkerThread)
            assert w.name == "threadpin-proc-1"
            assert registry.names() == ["proc-1"]
        finally:
            registry.close()

    def test_get_returns_same_worker(self):
        registry = WorkerRegistry()
        try:
            assert registry.get("a") is registry.get("a")
            assert registry.get("a") is not registry.get("b")
            assert len(registry) == 2
        finally:
            registry.close()

    def test_get_uses_config(self):
        registry = WorkerRegistry()
        try:
            w = registry.get("custom", WorkerConfig(poll_interval=0.01, name="dbg"))
            assert w.name == "dbg"
            assert w.config.poll_interval == 0.01
        finally:
            registry.close()

    def test_closed_worker_is_replaced(self):
        registry = WorkerRegistry()
        try:
            first = registry.get("a")
            first.close()
            assert registry.names() == []
            second = registry.get("a")
            assert second is not first
            assert second.closed is False
        finally:
            registry.close()

    def test_close_stops_all_workers(self):
        registry = WorkerRegistry()
        workers = [registry.get("a"), registry.get("b")]
        registry.close(timeout=2.0)
        assert len(registry) == 0
        assert all(not w.is_alive for w in workers)

    def test_concurrent_get_returns_one_worker(self):
        registry = WorkerRegistry()
        seen: list[WorkerThread] = []
        lock = threading.Lock()

        def getter():
            w = registry.get("shared")
            with lock:
                seen.append(w)

        threads = [threading.Thread(target=getter) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=2.0)
        try:
            assert len({id(w) for w in seen}) == 1
        finally:
            registry.close()


class TestDefaultRegistry:
    def test_get_worker_is_shared(self):
        try:
            assert get_worker("default-test") is get_worker("default-test")
        finally:
            close_all()

    def test_close_all(self):
        w = get_worker("default-test")
        close_all(timeout=2.0)
        assert w.closed is True
        assert not w.is_alive
