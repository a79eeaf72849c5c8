"""WorkerThread: the main entry point of the library."""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Callable
from typing import Any, TypeVar

import structlog

from threadpin.config import AsyncErrorPolicy, WorkerConfig
from threadpin.errors import ReentrantSubmitError, WorkerClosedError
from threadpin.mailbox import QUIT, Claim, ClaimResult, Mailbox, Operation

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def _ensure_operation(operation: Any) -> None:
    if operation is None or not callable(operation):
        raise TypeError(f"operation must be a callable, got {operation!r}")


def _describe(operation: Operation) -> str:
    return getattr(operation, "__qualname__", None) or repr(operation)


class WorkerThread:
    """Runs submitted operations one at a time on a single dedicated thread.

    Some APIs (native debugger APIs, many GUI and embedded-runtime APIs)
    require every call to come from the same thread. ``WorkerThread`` owns
    that thread: any other thread hands it a zero-argument callable and
    either waits for it (:meth:`run`) or returns as soon as it has been
    accepted (:meth:`run_async`). There is exactly one slot; a submission
    made while another operation is pending waits for the slot to clear.

    Args:
        config: Worker configuration. Defaults to ``WorkerConfig()``.
        on_error: Receives exceptions from ``run_async`` operations when
                  the policy is ``AsyncErrorPolicy.CALLBACK``.
        pump: Called on the worker thread once per loop iteration, at least
              every ``config.poll_interval`` seconds while idle. Use it to
              service events that must also be handled on this thread.

    Example::

        worker = WorkerThread()
        worker.run(lambda: native.attach(pid))
        regs = worker.call(native.read_registers, tid)
        worker.close()
    """

    __slots__ = ("_config", "_mailbox", "_on_error", "_pump", "_thread")

    def __init__(
        self,
        config: WorkerConfig | None = None,
        *,
        on_error: Callable[[BaseException], None] | None = None,
        pump: Callable[[], None] | None = None,
    ) -> None:
        self._config = config or WorkerConfig()
        if self._config.async_errors is AsyncErrorPolicy.CALLBACK and on_error is None:
            raise ValueError("async_errors=CALLBACK requires an on_error callable")

        self._on_error = on_error
        self._pump = pump
        self._mailbox = Mailbox()
        self._thread = threading.Thread(
            target=self._run_loop,
            name=self._config.name,
            daemon=self._config.daemon,
        )
        self._thread.start()
        logger.debug("worker_started", worker=self.name)

    @property
    def config(self) -> WorkerConfig:
        return self._config

    @property
    def name(self) -> str:
        return self._config.name

    @property
    def closed(self) -> bool:
        """True once shutdown has been requested; no new work is accepted."""
        return self._mailbox.closed

    @property
    def is_alive(self) -> bool:
        return self._thread.is_alive()

    @property
    def ident(self) -> int | None:
        """Thread identifier of the worker thread."""
        return self._thread.ident

    def on_worker_thread(self) -> bool:
        return threading.current_thread() is self._thread

    def run(self, operation: Operation) -> None:
        """Run *operation* on the worker thread and wait for it to finish.

        Any exception raised by the operation is re-raised here.

        Raises:
            TypeError: *operation* is None or not callable.
            WorkerClosedError: the worker has been closed.
        """
        _ensure_operation(operation)

        if self.on_worker_thread():
            # The caller already holds the slot.
            if self._mailbox.closed:
                raise WorkerClosedError(f"{self.name} is closed")
            operation()
            return

        claim = self._submit(operation, synchronous=True)
        if claim is None:
            return
        claim.done.wait()
        if claim.error is not None:
            raise claim.error

    def run_async(self, operation: Operation) -> None:
        """Hand *operation* to the worker and return once it is accepted.

        Exceptions raised by the operation are handled according to
        ``config.async_errors``; they never reach the caller.
        """
        _ensure_operation(operation)

        if self.on_worker_thread():
            raise ReentrantSubmitError(
                f"cannot queue work on {self.name} from its own thread while an operation is running"
            )

        self._submit(operation, synchronous=False)

    def call(self, fn: Callable[..., T], /, *args: Any, **kwargs: Any) -> T:
        """Call ``fn(*args, **kwargs)`` on the worker thread and return its result."""
        result: list[T] = []

        def operation() -> None:
            result.append(fn(*args, **kwargs))

        operation.__qualname__ = _describe(fn)
        self.run(operation)
        return result[0]

    async def arun(self, operation: Operation) -> None:
        """Awaitable :meth:`run` that does not block the event loop."""
        _ensure_operation(operation)
        await asyncio.to_thread(self.run, operation)

    async def acall(self, fn: Callable[..., T], /, *args: Any, **kwargs: Any) -> T:
        """Awaitable :meth:`call` that does not block the event loop."""
        return await asyncio.to_thread(self.call, fn, *args, **kwargs)

    def close(self) -> None:
        """Stop accepting work and let the worker exit (idempotent).

        Returns once shutdown is queued. An operation that is already
        running is allowed to finish. Called from an operation on the
        worker thread, the worker exits after that operation returns.
        """
        if self.on_worker_thread():
            self._mailbox.request_close()
            logger.debug("close_requested", worker=self.name)
            return

        self._submit(QUIT, synchronous=False)

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the worker thread to exit. Returns True if it has."""
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def _submit(self, operation: Operation, *, synchronous: bool) -> Claim | None:
        while True:
            ticket = self._mailbox.try_claim(operation, synchronous)
            if ticket.result is ClaimResult.ACCEPTED:
                return ticket.claim
            if ticket.result is ClaimResult.CLOSED:
                raise WorkerClosedError(f"{self.name} is closed")
            self._mailbox.wait_idle()

    def _run_loop(self) -> None:
        mailbox = self._mailbox
        while True:
            if self._pump is not None:
                self._pump_events()

            claim = mailbox.wait_armed(self._config.poll_interval)
            if claim is None:
                continue

            self._execute(claim)

            if mailbox.complete(claim):
                break

        logger.debug("worker_stopped", worker=self.name)

    def _execute(self, claim: Claim) -> None:
        try:
            claim.operation()
        except BaseException as exc:
            if claim.synchronous:
                claim.error = exc
            else:
                self._report_async_error(claim.operation, exc)

    def _report_async_error(self, operation: Operation, exc: BaseException) -> None:
        policy = self._config.async_errors
        if policy is AsyncErrorPolicy.DISCARD:
            return

        if policy is AsyncErrorPolicy.CALLBACK:
            assert self._on_error is not None
            try:
                self._on_error(exc)
            except Exception:
                logger.exception("error_callback_failed", worker=self.name)
            return

        logger.error(
            "async_operation_failed",
            worker=self.name,
            operation=_describe(operation),
            exc_info=exc,
        )
        if policy is AsyncErrorPolicy.STOP:
            self._mailbox.request_close()

    def _pump_events(self) -> None:
        assert self._pump is not None
        try:
            self._pump()
        except Exception:
            logger.exception("pump_failed", worker=self.name)

    def __enter__(self) -> WorkerThread:
        return self

    def __exit__(self, *_: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"WorkerThread(name={self.name!r}, closed={self.closed}, alive={self.is_alive})"
