"""Decorator API for pinning plain functions to a worker thread."""

import inspect
from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar, cast, overload

from threadpin.registry import get_worker
from threadpin.worker import WorkerThread

F = TypeVar("F", bound=Callable[..., Any])


@overload
def pinned(
    func: F,
    /,
) -> F: ...


@overload
def pinned(
    *,
    worker: WorkerThread | None = None,
    name: str = "default",
) -> Callable[[F], F]: ...


def pinned(
    func: F | None = None,
    /,
    *,
    worker: WorkerThread | None = None,
    name: str = "default",
) -> F | Callable[[F], F]:
    """Decorator that runs every call of a function on a worker thread.

    The decorated function keeps its signature. Each call blocks until the
    function has run on the worker and returns its result, or re-raises
    whatever it raised.

    Args:
        func: The function to decorate (when used without parentheses).
        worker: The worker to run on. Defaults to the shared worker
                registered under *name* (see :func:`threadpin.get_worker`).
        name: Name of the shared worker used when *worker* is omitted.

    Examples:
    ```python
        # Shared default worker
        @pinned
        def read_memory(address: int, size: int) -> bytes:
            return native.read(address, size)

        # Explicit worker
        @pinned(worker=debugger_thread)
        def set_breakpoint(address: int) -> None:
            native.set_bp(address)
    ```
    """

    def decorator(fn: F) -> F:
        if inspect.iscoroutinefunction(fn):
            raise TypeError("@pinned only supports plain (non-async) functions.")

        def resolve_worker() -> WorkerThread:
            return worker if worker is not None else get_worker(name)

        @wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            return resolve_worker().call(fn, *args, **kwargs)

        wrapper.resolve_worker = resolve_worker  # type: ignore[attr-defined]

        return cast("F", wrapper)

    if func is not None:
        return decorator(func)

    return decorator
