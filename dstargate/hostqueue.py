"""A simple FIFO queue and the host record carried through it."""

from collections import deque
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass
class Host:
    name: str = ""
    addr: str = ""
    port: int = 0


class TQueue(Generic[T]):
    """First-in, first-out queue."""

    def __init__(self):
        self._items = deque()

    def push(self, item):
        self._items.append(item)

    def pop(self):
        if not self._items:
            raise IndexError("pop from an empty queue")
        return self._items.popleft()

    def empty(self):
        return not self._items

    def clear(self):
        self._items.clear()

    def __len__(self):
        return len(self._items)


HostQueue = TQueue[Host]