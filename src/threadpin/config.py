"""Configuration types for the threadpin library."""

from dataclasses import dataclass
from enum import StrEnum


class AsyncErrorPolicy(StrEnum):
    """What the worker does when a non-blocking operation raises.

    LOG:      Log the exception with its traceback and keep running.
    CALLBACK: Hand the exception to the ``on_error`` callable.
    STOP:     Log the exception, then close the worker once the
              failing operation has returned.
    DISCARD:  Drop the exception silently.
    """

    LOG = "log"
    CALLBACK = "callback"
    STOP = "stop"
    DISCARD = "discard"


@dataclass(frozen=True, slots=True)
class WorkerConfig:
    """Configuration for a WorkerThread instance.

    Attributes:
        poll_interval: Seconds the worker waits for an operation before
                       looping again. Bounds how long a ``pump`` hook can
                       go without being called while the worker is idle.
        name: Thread name given to the worker thread.
        daemon: Whether the worker thread is a daemon thread.
        async_errors: Policy for exceptions raised by operations
                      submitted with ``run_async``.
    """

    poll_interval: float = 0.1
    name: str = "threadpin-worker"
    daemon: bool = True
    async_errors: AsyncErrorPolicy = AsyncErrorPolicy.LOG

    def __post_init__(self) -> None:
        if self.poll_interval <= 0:
            raise ValueError(f"poll_interval must be positive, got {self.poll_interval}")

        if not self.name:
            raise ValueError("name must be a non-empty string")
