"""Thread-safe FIFO of IRC messages with an end-of-stream flag."""

import threading
from collections import deque


class IRCMessageQueue:
    """Queue shared between the receiving thread and the protocol handler."""

    def __init__(self):
        self._lock = threading.Lock()
        self._queue = deque()
        self._eof = threading.Event()

    @property
    def is_eof(self):
        """True once the producer has signalled that no more messages will come."""
        return self._eof.is_set()

    def signal_eof(self):
        self._eof.set()

    def message_available(self):
        with self._lock:
            return bool(self._queue)

    def put(self, message):
        with self._lock:
            self._queue.append(message)

    def get(self):
        """Remove and return the oldest message, or None if the queue is empty."""
        with self._lock:
            return self._queue.popleft() if self._queue else None

    def peek(self):
        """Return the oldest message without removing it, or None if empty."""
        with self._lock:
            return self._queue[0] if self._queue else None

    def __len__(self):
        with self._lock:
            return len(self._queue)