"""Bounded, closable channels between the receive loop and its consumers."""

from __future__ import annotations

import logging
import threading
from queue import Empty, Queue
from typing import Generic, Iterator, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Marks the end of a closed channel
_CLOSED = object()


class ChannelClosed(Exception):
    """Raised by :meth:`Channel.get` once a closed channel has been drained."""


class Channel(Generic[T]):
    """A bounded FIFO that drops its oldest item instead of blocking the producer.

    The receive loop must never stall on a slow consumer, so ``put()`` always
    succeeds: when the channel is full the oldest item is discarded. After
    ``close()`` consumers still receive everything already queued, then
    :class:`ChannelClosed`.

    Examples:
        ```python
        channel = Channel(maxsize=2, name="messages")
        channel.put(1)
        channel.put(2)
        channel.put(3)          # drops 1
        channel.close()
        list(channel)           # [2, 3]
        ```
    """

    def __init__(self, maxsize: int, name: str = "channel") -> None:
        if maxsize <= 0:
            raise ValueError(f"maxsize must be > 0, got {maxsize}")
        self.name = name
        self.maxsize = maxsize
        # One extra slot so the close marker always fits
        self._queue: Queue[object] = Queue(maxsize + 1)
        self._lock = threading.Lock()
        self._closed = False
        self.dropped = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def put(self, item: T) -> bool:
        """Queue an item, dropping the oldest one if the channel is full.

        Returns:
            False if the channel is closed and the item was discarded
        """
        with self._lock:
            if self._closed:
                return False
            while self._queue.qsize() >= self.maxsize:
                try:
                    self._queue.get_nowait()
                except Empty:
                    break
                self.dropped += 1
                logger.warning(
                    "%s channel full, dropped oldest item (%d dropped so far)", self.name, self.dropped
                )
            self._queue.put_nowait(item)
            return True

    def get(self, block: bool = True, timeout: Optional[float] = None) -> T:
        """Remove and return the next item.

        Raises:
            ChannelClosed: If the channel is closed and empty
            queue.Empty: If nothing arrived within ``timeout`` (or ``block`` is False)
        """
        item = self._queue.get(block, timeout)
        if item is _CLOSED:
            # Leave the marker for any other consumer
            self._queue.put_nowait(_CLOSED)
            raise ChannelClosed(f"{self.name} channel is closed")
        return item  # type: ignore[return-value]

    def get_nowait(self) -> T:
        return self.get(block=False)

    def close(self) -> None:
        """Close the channel. Safe to call more than once."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._queue.put_nowait(_CLOSED)
        logger.debug("%s channel closed", self.name)

    def qsize(self) -> int:
        """Approximate number of queued items."""
        size = self._queue.qsize()
        return size - 1 if self._closed and size > 0 else size

    def __iter__(self) -> Iterator[T]:
        while True:
            try:
                yield self.get()
            except ChannelClosed:
                return
