"""Tests for the @pinned decorator."""

import threading

import pytest

from threadpin.config import WorkerConfig
from threadpin.decorator import pinned
from threadpin.registry import close_all, get_worker
from threadpin.worker import WorkerThread


@pytest.fixture(autouse=True)
def _close_shared_workers():
    yield
    close_all(timeout=2.0)


class TestPinnedDecorator:
    def test_without_parentheses_uses_default_worker(self):
        @pinned
        def where() -> int:
            return threading.get_ident()

        assert where() == get_worker().ident
        assert where.resolve_worker() is get_worker()  # type: ignore[attr-defined]

    def test_explicit_worker(self, worker):
        @pinned(worker=worker)
        def where() -> int:
            return threading.get_ident()

        assert where() == worker.ident
        assert where.resolve_worker() is worker  # type: ignore[attr-defined]

    def test_named_shared_worker(self):
        @pinned(name="dbg")
        def where() -> int:
            return threading.get_ident()

        assert where() == get_worker("dbg").ident

    def test_passes_arguments_and_returns_result(self, worker):
        @pinned(worker=worker)
        def add(a: int, b: int, *, scale: int = 1) -> int:
            return (a + b) * scale

        assert add(1, 2) == 3
        assert add(1, 2, scale=10) == 30

    def test_propagates_exception(self, worker):
        @pinned(worker=worker)
        def fail() -> None:
            raise LookupError("no such breakpoint")

        with pytest.raises(LookupError, match="no such breakpoint"):
            fail()

    def test_async_function_raises(self):
        with pytest.raises(TypeError, match="only supports plain"):

            @pinned
            async def handler() -> None:
                pass

    def test_preserves_function_name(self, worker):
        @pinned(worker=worker)
        def attach_process() -> None:
            pass

        assert attach_process.__name__ == "attach_process"

    def test_closed_worker_is_replaced_for_shared(self):
        @pinned(name="recycled")
        def where() -> int:
            return threading.get_ident()

        first = get_worker("recycled")
        where()
        first.close()
        assert first.join(timeout=2.0)
        assert where() == get_worker("recycled").ident
        assert get_worker("recycled") is not first

    def test_explicit_closed_worker_raises(self):
        w = WorkerThread(WorkerConfig(poll_interval=0.01))

        @pinned(worker=w)
        def noop() -> None:
            pass

        w.close()
        with pytest.raises(RuntimeError):
            noop()
        w.join(timeout=2.0)
