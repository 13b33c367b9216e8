"""Bounded hand-off queue between commit extractors and a consumer.

Lifecycle:
    A new queue is CLOSED and has never been opened. The consumer opens it
    before extraction starts and closes it once no more commits will be
    produced. Closing keeps buffered commits, so the consumer drains until
    is_open() turns false. A closed queue cannot be reopened.

Usage:
    queue = CommitQueue(capacity=10)
    queue.open()
    # producers: queue.put_wait(commit)
    queue.close()
    for commit in queue.drain():
        ...

Thread Safety:
    One condition variable guards the buffer and the state, so the capacity
    check and the insertion are atomic for any number of producers.
"""

import threading
import time
from collections import deque
from collections.abc import Iterator
from enum import Enum

from common.logger import get_logger

from .models import Commit

logger = get_logger(__name__)


class QueueState(str, Enum):
    """State of a CommitQueue."""

    OPEN = "open"
    CLOSED = "closed"


class QueueStateError(RuntimeError):
    """Raised for a state transition the queue does not allow."""


class CommitQueue:
    """Fixed-capacity FIFO buffer of commits with an OPEN/CLOSED lifecycle."""

    def __init__(self, capacity: int):
        """Initialize an empty, not yet opened queue.

        Args:
            capacity: Maximum number of buffered, not yet consumed commits

        Raises:
            ValueError: If capacity is not a positive integer
        """
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 1:
            raise ValueError(f"Queue capacity must be a positive integer, got {capacity!r}")

        self.capacity = capacity
        self._buffer: deque[Commit] = deque()
        self._state = QueueState.CLOSED
        self._was_opened = False
        self._condition = threading.Condition()

    @property
    def state(self) -> QueueState:
        with self._condition:
            return self._state

    def __len__(self) -> int:
        with self._condition:
            return len(self._buffer)

    def open(self) -> None:
        """Allow producers to insert commits.

        Raises:
            QueueStateError: If the queue was already closed after being opened
        """
        with self._condition:
            if self._state is QueueState.OPEN:
                return
            if self._was_opened:
                raise QueueStateError("A closed commit queue cannot be reopened")
            self._state = QueueState.OPEN
            self._was_opened = True
            logger.debug("Commit queue opened")
            self._condition.notify_all()

    def close(self) -> None:
        """Stop accepting commits; buffered commits stay available to get()."""
        with self._condition:
            if self._state is QueueState.CLOSED:
                return
            self._state = QueueState.CLOSED
            logger.debug(f"Commit queue closed with {len(self._buffer)} buffered commit(s)")
            self._condition.notify_all()

    def is_open(self) -> bool:
        """Whether a consumer should keep draining.

        Returns:
            False only once the queue is CLOSED and its buffer is empty
        """
        with self._condition:
            return self._is_open()

    def put(self, commit: Commit) -> bool:
        """Insert a commit without blocking.

        Returns:
            True if the queue is OPEN and below capacity, False otherwise
        """
        with self._condition:
            return self._try_put(commit)

    def put_wait(
        self,
        commit: Commit,
        timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> bool:
        """Insert a commit, waiting for the queue to be opened or to have space.

        Args:
            commit: Commit to insert
            timeout: Maximum seconds to wait, or None to wait indefinitely
            cancel_event: Event that aborts the wait once set. Whoever sets
                it must call wake_waiters() so the wait re-checks it.

        Returns:
            True if inserted; False on timeout, cancellation, or if the queue
            was closed after being opened
        """
        deadline = None if timeout is None else time.monotonic() + timeout

        with self._condition:
            while not self._try_put(commit):
                if self._was_opened and self._state is QueueState.CLOSED:
                    return False
                if cancel_event is not None and cancel_event.is_set():
                    return False

                wait_time = None
                if deadline is not None:
                    wait_time = deadline - time.monotonic()
                    if wait_time <= 0:
                        return False
                self._condition.wait(wait_time)
            return True

    def wake_waiters(self) -> None:
        """Wake every blocked put_wait and get_wait so they re-check their conditions."""
        with self._condition:
            self._condition.notify_all()

    def get(self) -> Commit | None:
        """Remove and return the oldest commit, or None if the buffer is empty."""
        with self._condition:
            return self._try_get()

    def get_wait(self, timeout: float | None = None) -> Commit | None:
        """Remove and return the oldest commit, waiting while the queue is OPEN and empty.

        Args:
            timeout: Maximum seconds to wait, or None to wait indefinitely

        Returns:
            The oldest commit, or None once the queue is drained or the timeout expired
        """
        deadline = None if timeout is None else time.monotonic() + timeout

        with self._condition:
            while not self._buffer and self._state is QueueState.OPEN:
                wait_time = None
                if deadline is not None:
                    wait_time = deadline - time.monotonic()
                    if wait_time <= 0:
                        return None
                self._condition.wait(wait_time)
            return self._try_get()

    def drain(self) -> Iterator[Commit]:
        """Yield commits in insertion order until the queue is closed and empty."""
        while True:
            commit = self.get_wait()
            if commit is None:
                if not self.is_open():
                    return
                continue
            yield commit

    def _is_open(self) -> bool:
        return self._state is QueueState.OPEN or bool(self._buffer)

    def _try_put(self, commit: Commit) -> bool:
        if self._state is not QueueState.OPEN or len(self._buffer) >= self.capacity:
            return False
        self._buffer.append(commit)
        self._condition.notify_all()
        return True

    def _try_get(self) -> Commit | None:
        if not self._buffer:
            return None
        commit = self._buffer.popleft()
        self._condition.notify_all()
        return commit
