"""threadpin: run callables on one dedicated thread, one at a time.

For APIs that must always be called from the same thread (native
debugger APIs, GUI toolkits, embedded runtimes). Any thread can submit
work; a single worker thread executes it, never two operations at once.

Basic usage:

    from threadpin import WorkerThread

    with WorkerThread() as worker:
        worker.run(lambda: native.attach(pid))      # blocks, re-raises errors
        worker.run_async(native.resume)             # returns once accepted
        regs = worker.call(native.get_registers, tid)

Decorator usage:

    from threadpin import pinned

    @pinned
    def read_memory(address: int, size: int) -> bytes:
        return native.read(address, size)
"""

from threadpin.config import AsyncErrorPolicy, WorkerConfig
from threadpin.decorator import pinned
from threadpin.errors import ReentrantSubmitError, ThreadPinError, WorkerClosedError
from threadpin.registry import WorkerRegistry, close_all, get_worker
from threadpin.worker import WorkerThread

__all__ = [
    "AsyncErrorPolicy",
    "ReentrantSubmitError",
    "ThreadPinError",
    "WorkerClosedError",
    "WorkerConfig",
    "WorkerRegistry",
    "WorkerThread",
    "close_all",
    "get_worker",
    "pinned",
]

__version__ = "0.1.0"
