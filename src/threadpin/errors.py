"""Exceptions raised by the threadpin library."""


class ThreadPinError(Exception):
    """Base exception for all threadpin errors."""


class WorkerClosedError(ThreadPinError, RuntimeError):
    """Raised when work is submitted to a worker that has been closed.

    ``close()`` itself never raises this; calling it again is a no-op.
    """


class ReentrantSubmitError(ThreadPinError, RuntimeError):
    """Raised when an operation queues non-blocking work on its own worker.

    The running operation holds the only slot, so the submission could
    never be accepted.
    """
