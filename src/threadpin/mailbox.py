"""Single-slot mailbox shared by submitting threads and the worker thread."""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple

Operation = Callable[[], None]


def _quit() -> None:
    """Shutdown sentinel. Compared by identity, never carries real work."""


QUIT: Operation = _quit


class ClaimResult(Enum):
    ACCEPTED = "accepted"
    BUSY = "busy"
    CLOSED = "closed"


@dataclass(eq=False, slots=True)
class Claim:
    """One accepted submission and the outcome the worker records for it."""

    operation: Operation
    synchronous: bool
    error: BaseException | None = None
    done: threading.Event = field(default_factory=threading.Event)


class Ticket(NamedTuple):
    """Result of a claim attempt."""

    result: ClaimResult
    claim: Claim | None = None


class Mailbox:
    """Holds at most one pending operation and the handshake signals.

    Submitting threads call :meth:`try_claim`; the worker thread calls
    :meth:`wait_armed` and :meth:`complete`. A single lock covers the slot,
    both signals and the close request, so a check-and-set in one method
    is never interleaved with another.

    Signals:
        idle:  set while the slot is free (and after shutdown, so waiting
               submitters wake up and see the mailbox closed).
        armed: set while a claimed operation waits for the worker.
    """

    __slots__ = ("_armed", "_claim", "_close_requested", "_idle", "_lock")

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._claim: Claim | None = None
        self._close_requested = False
        self._idle = threading.Event()
        self._idle.set()
        self._armed = threading.Event()

    @property
    def pending(self) -> Operation | None:
        """The claimed operation, or None while the slot is free."""
        with self._lock:
            return self._claim.operation if self._claim is not None else None

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._is_closed()

    def try_claim(self, operation: Operation, synchronous: bool) -> Ticket:
        """Try to place *operation* in the slot.

        Returns ACCEPTED with the new claim when the slot was free, BUSY when
        another operation holds it, CLOSED when the worker has shut down.
        Claiming :data:`QUIT` on a closed mailbox is ACCEPTED without a claim.
        """
        with self._lock:
            if self._close_requested:
                if operation is QUIT:
                    return Ticket(ClaimResult.ACCEPTED)
                return Ticket(ClaimResult.CLOSED)

            current = self._claim
            if current is None:
                claim = Claim(operation, synchronous)
                self._claim = claim
                self._idle.clear()
                self._armed.set()
                return Ticket(ClaimResult.ACCEPTED, claim)

            if current.operation is QUIT:
                if operation is QUIT:
                    return Ticket(ClaimResult.ACCEPTED)
                return Ticket(ClaimResult.CLOSED)

            return Ticket(ClaimResult.BUSY)

    def wait_idle(self, timeout: float | None = None) -> bool:
        """Block until the slot is released (or the mailbox is closed)."""
        return self._idle.wait(timeout)

    def wait_armed(self, timeout: float) -> Claim | None:
        """Wait up to *timeout* seconds for a claim; None if none arrived."""
        if not self._armed.wait(timeout):
            return None
        with self._lock:
            return self._claim

    def complete(self, claim: Claim) -> bool:
        """Release the slot after *claim* ran. Returns True if the worker must exit."""
        with self._lock:
            is_quit = claim.operation is QUIT or self._close_requested
            if not is_quit:
                self._claim = None
            elif claim.operation is not QUIT:
                self._claim = Claim(QUIT, synchronous=False)

            self._armed.clear()
            self._idle.set()
            claim.done.set()
        return is_quit

    def request_close(self) -> None:
        """Close the mailbox from the worker thread.

        With the slot free, QUIT is claimed right away. While an operation
        runs, the worker exits once that operation completes.
        """
        with self._lock:
            if self._claim is None:
                self._claim = Claim(QUIT, synchronous=False)
                self._idle.clear()
                self._armed.set()
                return
            self._close_requested = True

    def _is_closed(self) -> bool:
        if self._close_requested:
            return True
        return self._claim is not None and self._claim.operation is QUIT

    def __repr__(self) -> str:
        with self._lock:
            pending = self._claim.operation if self._claim is not None else None
            closed = self._is_closed()
        return f"Mailbox(pending={pending!r}, closed={closed})"
