"""Single-threaded readiness event loop over file descriptors."""

from __future__ import annotations

import abc
import select
import selectors
import socket
import threading
import time
from dataclasses import dataclass
from enum import IntFlag
from typing import Callable

__all__ = [
    "MAX_FDS",
    "EventType",
    "has_event",
    "EventHandler",
    "ReactorConfig",
    "Reactor",
]

# Largest file descriptor number (exclusive) the reactor accepts.
MAX_FDS = 65536


class EventType(IntFlag):
    """Readiness events; bit values follow the common poll convention."""

    NONE = 0
    READ = 1
    WRITE = 2
    READ_WRITE = 3
    DISCONNECT = 4
    PRIORITIZED = 8


def has_event(events: EventType, check: EventType) -> bool:
    """True when ``events`` shares any bit with ``check``."""
    return (int(events) & int(check)) != 0


class EventHandler(abc.ABC):
    """Object that owns a descriptor and reacts to its readiness."""

    @abc.abstractmethod
    def on_readable(self) -> None:
        """Called when the descriptor is readable."""

    @abc.abstractmethod
    def on_writable(self) -> None:
        """Called when the descriptor is writable."""

    @abc.abstractmethod
    def on_error(self, error_code: int) -> None:
        """Called when polling the descriptor fails."""

    @abc.abstractmethod
    def on_close(self) -> None:
        """Called when the peer hangs up."""

    @abc.abstractmethod
    def fileno(self) -> int:
        """The descriptor to watch."""


@dataclass(frozen=True)
class ReactorConfig:
    max_events: int = 1024  # hint for concurrent handlers
    epoll_timeout_ms: int = 100  # kept for compatibility
    use_edge_trigger: bool = True  # events are level-triggered regardless


@dataclass
class _Registration:
    handler: EventHandler
    events: EventType


def _selector_mask(events: EventType) -> int:
    mask = 0
    if has_event(events, EventType.READ):
        mask |= selectors.EVENT_READ
    if has_event(events, EventType.WRITE):
        mask |= selectors.EVENT_WRITE
    return mask


class Reactor:
    """Dispatches readiness events to handlers and runs posted callbacks.

    ``post`` and ``stop`` may be called from any thread; everything else
    belongs to the thread running the loop.
    """

    def __init__(self, config: ReactorConfig | None = None) -> None:
        self.config = config if config is not None else ReactorConfig()
        self._selector = selectors.DefaultSelector()
        self._wake_r, self._wake_w = socket.socketpair()
        self._wake_r.setblocking(False)
        self._wake_w.setblocking(False)
        self._selector.register(self._wake_r, selectors.EVENT_READ, None)
        self._handlers: dict[int, _Registration] = {}
        self._running = False
        self._closed = False
        self._now_ms = 0
        self._posted_lock = threading.Lock()
        self._posted: list[Callable[[], None]] = []
        self._update_time()

    def __enter__(self) -> Reactor:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    @property
    def running(self) -> bool:
        return self._running

    @property
    def now_ms(self) -> int:
        """Monotonic time in milliseconds, cached once per loop iteration."""
        return self._now_ms

    @property
    def handler_count(self) -> int:
        return len(self._handlers)

    def add(self, handler: EventHandler, events: EventType) -> None:
        """Start watching the handler's descriptor for ``events``."""
        if self._closed:
            raise RuntimeError("reactor is closed")
        fd = handler.fileno()
        if fd < 0 or fd >= MAX_FDS:
            raise ValueError(f"file descriptor {fd} out of range")
        if fd in self._handlers:
            raise ValueError(f"file descriptor {fd} already registered")
        self._sync_selector(fd, events)
        self._handlers[fd] = _Registration(handler, events)

    def modify(self, handler: EventHandler, events: EventType) -> None:
        """Change the events watched for a registered handler."""
        fd = handler.fileno()
        registration = self._handlers.get(fd)
        if registration is None:
            raise KeyError(f"file descriptor {fd} is not registered")
        self._sync_selector(fd, events)
        registration.events = events

    def remove(self, handler: EventHandler) -> bool:
        """Stop watching the handler; False if it was not registered."""
        fd = handler.fileno()
        if fd not in self._handlers:
            return False
        self._drop(fd)
        return True

    def contains(self, fd: int) -> bool:
        return fd in self._handlers

    def run(self) -> None:
        """Run until stop() is called."""
        self._running = True
        while self._running:
            self._update_time()
            self._process_posted()
            self._poll(None)
            self._update_time()

    def run_once(self) -> None:
        """Run posted callbacks and dispatch events that are ready now."""
        self._update_time()
        self._process_posted()
        self._poll(0)
        self._update_time()

    def run_for(self, timeout_ms: int) -> None:
        """Run until stop() is called or ``timeout_ms`` elapses."""
        self._running = True
        deadline = time.monotonic() + timeout_ms / 1000
        while self._running:
            self._update_time()
            self._process_posted()
            if not self._running:
                break
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                self._running = False
                break
            self._poll(remaining)
            self._update_time()

    def stop(self) -> None:
        """Ask the loop to exit, waking it if it is blocked."""
        self._running = False
        self._wake()

    def post(self, callback: Callable[[], None]) -> None:
        """Schedule a callback on the loop thread."""
        with self._posted_lock:
            self._posted.append(callback)
        self._wake()

    def close(self) -> None:
        """Release every registration and the loop's resources."""
        if self._closed:
            return
        for fd in list(self._handlers):
            self._drop(fd)
        self._selector.close()
        self._wake_r.close()
        self._wake_w.close()
        self._closed = True
        self._running = False

    def _update_time(self) -> None:
        self._now_ms = int(time.monotonic() * 1000)

    def _wake(self) -> None:
        if self._closed:
            return
        try:
            self._wake_w.send(b"\0")
        except OSError:
            pass  # pipe full or closing: a wakeup is already pending

    def _drain_wakeup(self) -> None:
        while True:
            try:
                if not self._wake_r.recv(4096):
                    return
            except OSError:
                return

    def _process_posted(self) -> None:
        with self._posted_lock:
            callbacks, self._posted = self._posted, []
        for callback in callbacks:
            callback()

    def _sync_selector(self, fd: int, events: EventType) -> None:
        mask = _selector_mask(events)
        try:
            self._selector.get_key(fd)
            registered = True
        except KeyError:
            registered = False
        if mask == 0:
            if registered:
                self._selector.unregister(fd)
        elif registered:
            self._selector.modify(fd, mask, fd)
        else:
            self._selector.register(fd, mask, fd)

    def _drop(self, fd: int) -> None:
        self._handlers.pop(fd, None)
        try:
            self._selector.unregister(fd)
        except (KeyError, ValueError, OSError):
            pass

    def _poll(self, timeout: float | None) -> None:
        try:
            ready = self._selector.select(timeout)
        except OSError as exc:
            self._report_bad_handlers(exc)
            return
        for key, mask in ready:
            if key.data is None:
                self._drain_wakeup()
                self._process_posted()
                continue
            fd = key.data
            registration = self._handlers.get(fd)
            if registration is None:
                continue
            if mask & selectors.EVENT_READ:
                registration.handler.on_readable()
            if mask & selectors.EVENT_WRITE and self._handlers.get(fd) is registration:
                registration.handler.on_writable()

    def _report_bad_handlers(self, exc: OSError) -> None:
        failed = False
        for fd, registration in list(self._handlers.items()):
            try:
                select.select([fd], [], [], 0)
            except (OSError, ValueError) as err:
                failed = True
                self._drop(fd)
                code = getattr(err, "errno", None) or exc.errno or 0
                registration.handler.on_error(code)
        if not failed:
            raise exc