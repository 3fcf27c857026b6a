"""
live — hot, replay-latest value streams shared between threads.

A LiveStream holds one current value and fans every change out to its
subscribers.  Each Subscription is an independent cursor holding at most one
undelivered value: publishing replaces that slot instead of queueing, so a
slow reader only ever sees the newest state and never blocks the publisher.

Public API
──────────
LiveStream      — publish / subscribe / close; publishing an equal value is a no-op
Subscription    — per-subscriber cursor: get(timeout), poll(), iteration, cancel()
Combined        — derived stream fed by a background thread
combine_latest  — build a Combined from two streams and a pure function

Usage::

    term = LiveStream("")
    sub = term.subscribe()
    sub.get()            # -> ""  (replayed current value)
    term.publish("bob")
    sub.get(timeout=1)   # -> "bob"
    sub.cancel()
"""

import logging
import threading
from typing import Any, Callable, Generic, Iterator, Optional, TypeVar, Union

from student_manager.exceptions import StreamClosedError

__all__ = ["LiveStream", "Subscription", "Combined", "combine_latest"]

logger = logging.getLogger(__name__)

T = TypeVar("T")
L = TypeVar("L")
R = TypeVar("R")

# Sentinel for "no value published yet"
_UNSET: Any = object()


class Subscription(Generic[T]):
    """
    One subscriber's view of a LiveStream.

    *on_ready* is called from the publishing thread after every offer and on
    close.  It must be cheap and must not block (typically Event.set).
    """

    def __init__(self, stream: "LiveStream[T]",
                 on_ready: Optional[Callable[[], None]] = None) -> None:
        self._stream   = stream
        self._on_ready = on_ready
        self._cond     = threading.Condition()
        self._value    = _UNSET
        self._pending  = False
        self._closed   = False

    # ── Called by LiveStream ──────────────────────────────────────────────

    def _offer(self, value: T) -> None:
        with self._cond:
            if self._closed:
                return
            self._value = value
            self._pending = True
            self._cond.notify_all()
            on_ready = self._on_ready
        if on_ready is not None:
            on_ready()

    def _close(self) -> None:
        with self._cond:
            if self._closed:
                return
            self._closed = True
            self._pending = False
            self._cond.notify_all()
            on_ready = self._on_ready
        if on_ready is not None:
            on_ready()

    # ── Public API ────────────────────────────────────────────────────────

    def set_listener(self, on_ready: Optional[Callable[[], None]]) -> None:
        """Replace the readiness callback; fires at once if a value is already waiting."""
        with self._cond:
            self._on_ready = on_ready
            fire = on_ready is not None and (self._pending or self._closed)
        if fire:
            on_ready()

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    @property
    def pending(self) -> bool:
        """True iff a value has arrived that get()/poll() has not returned yet."""
        with self._cond:
            return self._pending

    def get(self, timeout: Optional[float] = None) -> T:
        """
        Block until an undelivered value is available and return it.

        Raises:
            TimeoutError:      nothing new arrived within *timeout* seconds.
            StreamClosedError: the subscription was cancelled or the stream closed.
        """
        with self._cond:
            ready = self._cond.wait_for(lambda: self._pending or self._closed, timeout)
            if self._closed:
                raise StreamClosedError(f"subscription to {self._stream.name!r} is closed")
            if not ready:
                raise TimeoutError(
                    f"no new value on {self._stream.name!r} within {timeout}s"
                )
            self._pending = False
            return self._value

    def poll(self, default: Any = None) -> Any:
        """Return the undelivered value if there is one, else *default*. Never blocks."""
        with self._cond:
            if not self._pending:
                return default
            self._pending = False
            return self._value

    def cancel(self) -> None:
        """Detach from the stream; no further values are delivered."""
        self._stream._detach(self)
        self._close()

    def __iter__(self) -> Iterator[T]:
        """Yield values until the subscription is cancelled or the stream closes."""
        while True:
            try:
                yield self.get()
            except StreamClosedError:
                return

    def __enter__(self) -> "Subscription[T]":
        return self

    def __exit__(self, *exc_info) -> None:
        self.cancel()


class LiveStream(Generic[T]):
    """
    Multi-subscriber stream that replays its current value to new subscribers.

    Values are compared with ``==``; publishing a value equal to the current
    one does not notify anybody.
    """

    def __init__(self, initial: Any = _UNSET, name: str = "stream") -> None:
        self.name = name
        self._lock = threading.Lock()
        self._value = initial
        self._subscribers: list[Subscription[T]] = []
        self._closed = False

    @property
    def has_value(self) -> bool:
        with self._lock:
            return self._value is not _UNSET

    @property
    def value(self) -> T:
        """The current value. Raises LookupError before the first publish."""
        with self._lock:
            if self._value is _UNSET:
                raise LookupError(f"stream {self.name!r} has no value yet")
            return self._value

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._closed

    def publish(self, value: T) -> bool:
        """
        Make *value* the current value and offer it to every subscriber.

        Returns:
            True if subscribers were notified, False if *value* equals the
            current value.
        """
        with self._lock:
            if self._closed:
                raise StreamClosedError(f"stream {self.name!r} is closed")
            if self._value is not _UNSET and self._value == value:
                return False
            self._value = value
            # Offered under the lock so concurrent publishers cannot reorder values
            for sub in self._subscribers:
                sub._offer(value)
        return True

    def subscribe(self, on_ready: Optional[Callable[[], None]] = None) -> Subscription[T]:
        """Attach a new subscriber; the current value (if any) is pending immediately."""
        sub: Subscription[T] = Subscription(self, on_ready)
        with self._lock:
            if self._closed:
                raise StreamClosedError(f"stream {self.name!r} is closed")
            self._subscribers.append(sub)
            count = len(self._subscribers)
            if self._value is not _UNSET:
                sub._offer(self._value)
        logger.debug("Subscribed to %s (%d subscribers)", self.name, count)
        return sub

    def close(self) -> None:
        """Close the stream and every subscription attached to it. Idempotent."""
        with self._lock:
            self._closed = True
            subscribers, self._subscribers = self._subscribers, []
        for sub in subscribers:
            sub._close()

    def _detach(self, sub: Subscription[T]) -> None:
        with self._lock:
            try:
                self._subscribers.remove(sub)
            except ValueError:
                return
        logger.debug("Unsubscribed from %s", self.name)


def _attach(source: Union[LiveStream[Any], Subscription[Any]],
            on_ready: Callable[[], None]) -> Subscription[Any]:
    if isinstance(source, LiveStream):
        return source.subscribe(on_ready=on_ready)
    source.set_listener(on_ready)
    return source


class Combined(Generic[R]):
    """
    Derived stream: ``fn(latest_left, latest_right)`` recomputed on a daemon
    thread whenever either input changes.

    Each input is a LiveStream (subscribed here) or a Subscription the caller
    already holds; either way the Combined owns the resulting cursor and
    cancels it on close.  Recomputations coalesce: if several inputs change
    while *fn* runs, only the latest pair is computed next.  Nothing is
    published until both inputs have a value.
    """

    def __init__(self, left: Union[LiveStream[L], Subscription[L]],
                 right: Union[LiveStream[Any], Subscription[Any]],
                 fn: Callable[[L, Any], R], name: str = "combined") -> None:
        self.output: LiveStream[R] = LiveStream(name=name)
        self._fn = fn
        self._wake = threading.Event()
        self._left = _attach(left, self._wake.set)
        self._right = _attach(right, self._wake.set)
        self._thread = threading.Thread(
            target=self._run, name=f"combine-{name}", daemon=True
        )
        self._thread.start()

    def _run(self) -> None:
        left = right = _UNSET
        while True:
            self._wake.wait()
            self._wake.clear()
            if self._left.closed or self._right.closed:
                break
            left = self._left.poll(left)
            right = self._right.poll(right)
            if left is _UNSET or right is _UNSET:
                continue
            try:
                self.output.publish(self._fn(left, right))
            except StreamClosedError:
                break
            except Exception:  # noqa: BLE001
                logger.exception("Recomputing %s failed", self.output.name)
        self._left.cancel()
        self._right.cancel()
        self.output.close()
        logger.debug("Combined stream %s stopped", self.output.name)

    @property
    def value(self) -> R:
        return self.output.value

    def subscribe(self, on_ready: Optional[Callable[[], None]] = None) -> Subscription[R]:
        return self.output.subscribe(on_ready)

    def close(self, timeout: float = 2.0) -> None:
        """Stop recomputing and close the output stream."""
        self._left.cancel()
        self._right.cancel()
        self._thread.join(timeout)
        self.output.close()


def combine_latest(left: Union[LiveStream[L], Subscription[L]],
                   right: Union[LiveStream[Any], Subscription[Any]],
                   fn: Callable[[L, Any], R], name: str = "combined") -> Combined[R]:
    """Return a Combined stream of ``fn(latest left, latest right)``."""
    return Combined(left, right, fn, name=name)
