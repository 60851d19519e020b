"""A double-ended queue guarded by a lock."""
from __future__ import annotations

import threading
from collections import deque
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ThreadSafeQueue(Generic[T]):
    """Deque whose operations are each atomic; pops on empty return None."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._items: deque[T] = deque()

    def push_back(self, item: T) -> None:
        with self._lock:
            self._items.append(item)

    def push_front(self, item: T) -> None:
        with self._lock:
            self._items.appendleft(item)

    def pop_front(self) -> Optional[T]:
        with self._lock:
            return self._items.popleft() if self._items else None

    def pop_back(self) -> Optional[T]:
        with self._lock:
            return self._items.pop() if self._items else None

    def front(self) -> T:
        with self._lock:
            if not self._items:
                raise IndexError("front of empty queue")
            return self._items[0]

    def back(self) -> T:
        with self._lock:
            if not self._items:
                raise IndexError("back of empty queue")
            return self._items[-1]

    def empty(self) -> bool:
        with self._lock:
            return not self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)