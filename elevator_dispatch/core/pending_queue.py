import threading
from collections import deque
from typing import Deque, List, Optional

from .request import Request


class PendingQueue:
    """
    Unbounded FIFO of requests that no car has claimed yet.

    This is the only structure shared between cars. The emptiness check
    and the removal are done together under one lock, so two claimers
    can never receive the same request, even from separate OS threads.
    """

    def __init__(self):
        self._requests: Deque[Request] = deque()
        self._lock = threading.Lock()

    def submit(self, request: Request):
        """Append a request at the tail. Never blocks."""
        with self._lock:
            self._requests.append(request)

    def try_claim(self) -> Optional[Request]:
        """
        Remove and return the head request, or None if the queue is empty.
        """
        with self._lock:
            if not self._requests:
                return None
            return self._requests.popleft()

    def snapshot(self) -> List[Request]:
        """Copy of the queued requests in FIFO order"""
        with self._lock:
            return list(self._requests)

    def __len__(self):
        with self._lock:
            return len(self._requests)

    def __bool__(self):
        return len(self) > 0
