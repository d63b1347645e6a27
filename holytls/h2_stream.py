"""HTTP/2 request headers and per-stream response state."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Callable, Optional

from holytls.chrome_header_profile import HeaderEntry
from holytls.io_buffer import IoBuffer
from holytls.packed_headers import PackedHeaders

__all__ = ["H2StreamState", "H2Headers", "H2StreamCallbacks", "H2Stream"]


class H2StreamState(Enum):
    IDLE = auto()
    OPEN = auto()
    HALF_CLOSED_LOCAL = auto()  # we sent END_STREAM
    HALF_CLOSED_REMOTE = auto()  # peer sent END_STREAM
    CLOSED = auto()


@dataclass
class H2Headers:
    """Request pseudo-headers plus ordered regular headers."""

    method: str = ""
    scheme: str = ""
    authority: str = ""
    path: str = ""
    status: str = ""
    headers: list[HeaderEntry] = field(default_factory=list)

    @classmethod
    def for_request(cls, method: str, url: str) -> H2Headers:
        """Split ``scheme://authority/path`` into pseudo-headers (https and / by default)."""
        scheme, sep, rest = url.partition("://")
        if not sep:
            scheme, rest = "https", url
        authority, slash, tail = rest.partition("/")
        path = slash + tail if slash else "/"
        return cls(method=method, scheme=scheme, authority=authority, path=path or "/")

    def add(self, name: str, value: str) -> None:
        self.headers.append(HeaderEntry(name, value))

    def get(self, name: str) -> str:
        """First value for an exact header name, or "" if absent."""
        return next((h.value for h in self.headers if h.name == name), "")

    def has(self, name: str) -> bool:
        return any(h.name == name for h in self.headers)


@dataclass
class H2StreamCallbacks:
    """Optional hooks for a stream's response events."""

    on_headers: Optional[Callable[[int, PackedHeaders], None]] = None
    on_data: Optional[Callable[[int, bytes], None]] = None
    on_close: Optional[Callable[[int, int], None]] = None


class H2Stream:
    """One request/response exchange on an HTTP/2 connection."""

    def __init__(self, stream_id: int, callbacks: H2StreamCallbacks | None = None) -> None:
        self.stream_id = stream_id
        self._callbacks = callbacks if callbacks is not None else H2StreamCallbacks()
        self._state = H2StreamState.OPEN
        self._response_headers = PackedHeaders()
        self._response_body = IoBuffer()

    @property
    def state(self) -> H2StreamState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state is H2StreamState.OPEN

    @property
    def is_closed(self) -> bool:
        return self._state is H2StreamState.CLOSED

    @property
    def response_headers(self) -> PackedHeaders:
        return self._response_headers

    @property
    def response_body(self) -> IoBuffer:
        return self._response_body

    @property
    def status_code(self) -> int:
        return self._response_headers.status_code

    def on_headers_received(self, headers: PackedHeaders) -> None:
        self._response_headers = headers
        if self._callbacks.on_headers:
            self._callbacks.on_headers(self.stream_id, headers)

    def on_data_received(self, data: bytes) -> None:
        self._response_body.append(data)
        if self._callbacks.on_data:
            self._callbacks.on_data(self.stream_id, bytes(data))

    def on_stream_close(self, error_code: int) -> None:
        self._state = H2StreamState.CLOSED
        if self._callbacks.on_close:
            self._callbacks.on_close(self.stream_id, error_code)

    def mark_local_closed(self) -> None:
        """Record that our side sent END_STREAM."""
        if self._state is H2StreamState.OPEN:
            self._state = H2StreamState.HALF_CLOSED_LOCAL
        elif self._state is H2StreamState.HALF_CLOSED_REMOTE:
            self._state = H2StreamState.CLOSED