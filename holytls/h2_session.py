"""HTTP/2 client session that opens connections with Chrome's fingerprint."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Callable, Optional

import h2.events
from h2.config import H2Configuration
from h2.connection import ConnectionState, H2Connection
from h2.exceptions import H2Error
from h2.settings import Settings

from holytls.chrome_h2_profile import ChromeH2Profile
from holytls.h2_stream import H2Headers, H2Stream, H2StreamCallbacks
from holytls.io_buffer import IoBuffer
from holytls.packed_headers import PackedHeadersBuilder

__all__ = ["CONNECTION_PREFACE", "H2SessionError", "H2SessionCallbacks", "H2Session"]

CONNECTION_PREFACE = b"PRI * HTTP/2.0\r\n\r\nSM\r\n\r\n"

_FRAME_TYPE_SETTINGS = 0x4


class H2SessionError(Exception):
    """Raised when the session cannot carry out an operation."""


@dataclass
class H2SessionCallbacks:
    """Optional hooks for session-level events."""

    on_error: Optional[Callable[[int, str], None]] = None
    on_goaway: Optional[Callable[[int, int], None]] = None


def _settings_frame(entries: list[tuple[int, int]]) -> bytes:
    payload = b"".join(struct.pack(">HI", int(code), value) for code, value in entries)
    header = struct.pack(">I", len(payload))[1:] + bytes([_FRAME_TYPE_SETTINGS, 0])
    return header + struct.pack(">I", 0) + payload


class H2Session:
    """Client HTTP/2 session multiplexing many streams over one connection.

    Outgoing bytes collect in a send buffer that the transport drains with
    pending_data() and data_sent(); incoming bytes are fed in with receive().
    """

    def __init__(
        self, profile: ChromeH2Profile, callbacks: H2SessionCallbacks | None = None
    ) -> None:
        self._profile = profile
        self._callbacks = callbacks if callbacks is not None else H2SessionCallbacks()
        self._conn: H2Connection | None = None
        self._streams: dict[int, H2Stream] = {}
        self._pending_bodies: dict[int, memoryview] = {}
        self._send_buffer = IoBuffer()
        self._fatal_error = False
        self._goaway_received = False
        self._last_error = ""

    @property
    def profile(self) -> ChromeH2Profile:
        return self._profile

    @property
    def is_alive(self) -> bool:
        return not self._fatal_error

    @property
    def last_error(self) -> str:
        return self._last_error

    @property
    def active_stream_count(self) -> int:
        return len(self._streams)

    def initialize(self) -> None:
        """Create the connection and queue the preface, SETTINGS and WINDOW_UPDATE."""
        if self._conn is not None:
            raise H2SessionError("session already initialized")
        settings = self._profile.settings
        entries = settings.entries()

        conn = H2Connection(
            config=H2Configuration(client_side=True, header_encoding="utf-8")
        )
        # Make the connection's own view of our settings match what we announce.
        conn.local_settings = Settings(client=True, initial_values=dict(entries))
        conn.decoder.max_allowed_table_size = settings.header_table_size
        conn.decoder.max_header_list_size = settings.max_header_list_size
        conn.max_inbound_frame_size = conn.local_settings.max_frame_size
        self._conn = conn

        try:
            conn.initiate_connection()
            conn.data_to_send()  # replaced by our exactly ordered SETTINGS frame
            self._send_buffer.append(CONNECTION_PREFACE + _settings_frame(entries))
            conn.increment_flow_control_window(self._profile.connection_window_update)
        except H2Error as exc:
            raise self._fail(f"Failed to initialize session: {exc}") from exc
        self._pump()

    def header_list(self, headers: H2Headers) -> list[tuple[str, str]]:
        """Return the request header block, pseudo-headers in the profile's order."""
        pseudo = {
            ":method": headers.method,
            ":authority": headers.authority,
            ":scheme": headers.scheme,
            ":path": headers.path,
        }
        block = [(name, pseudo[name]) for name in self._profile.pseudo_header_order.names]
        block.extend((entry.name, entry.value) for entry in headers.headers)
        return block

    def submit_request(
        self,
        headers: H2Headers,
        stream_callbacks: H2StreamCallbacks | None = None,
        body: bytes | None = None,
    ) -> int:
        """Open a stream for a request and return its stream id."""
        conn = self._require_usable()
        try:
            stream_id = conn.get_next_available_stream_id()
            conn.send_headers(stream_id, self.header_list(headers), end_stream=not body)
        except H2Error as exc:
            raise self._fail(f"Failed to submit request: {exc}") from exc

        stream = H2Stream(stream_id, stream_callbacks)
        self._streams[stream_id] = stream
        if body:
            self._pending_bodies[stream_id] = memoryview(bytes(body))
            self._flush_body(stream_id)
        else:
            stream.mark_local_closed()
        return stream_id

    def receive(self, data: bytes) -> int:
        """Feed bytes from the transport; returns the number of bytes consumed."""
        conn = self._require_usable()
        try:
            events = conn.receive_data(bytes(data))
            for event in events:
                self._handle_event(event)
        except H2Error as exc:
            raise self._fail(f"Failed to process received data: {exc}") from exc
        return len(data)

    def pending_data(self) -> bytes:
        """Return buffered bytes ready to send (may be a prefix of all pending data)."""
        if self._conn is None:
            return b""
        self._pump()
        return bytes(self._send_buffer.peek())

    def data_sent(self, length: int) -> None:
        """Discard ``length`` bytes the transport has written."""
        self._send_buffer.skip(length)

    def wants_write(self) -> bool:
        if self._conn is None or self._fatal_error:
            return False
        self._pump()
        return bool(self._send_buffer)

    def can_submit_request(self) -> bool:
        conn = self._conn
        if conn is None or self._fatal_error or self._goaway_received:
            return False
        if conn.state_machine.state is ConnectionState.CLOSED:
            return False
        return conn.open_outbound_streams < conn.remote_settings.max_concurrent_streams

    def get_stream(self, stream_id: int) -> H2Stream | None:
        return self._streams.get(stream_id)

    def _require_usable(self) -> H2Connection:
        if self._conn is None:
            raise H2SessionError("session not initialized")
        if self._fatal_error:
            raise H2SessionError(f"session failed: {self._last_error}")
        return self._conn

    def _pump(self) -> None:
        if self._conn is None:
            return
        data = self._conn.data_to_send()
        if data:
            self._send_buffer.append(data)

    def _fail(self, message: str) -> H2SessionError:
        self._fatal_error = True
        self._last_error = message
        if self._callbacks.on_error:
            self._callbacks.on_error(-1, message)
        return H2SessionError(message)

    def _flush_body(self, stream_id: int) -> None:
        conn = self._conn
        remaining = self._pending_bodies.get(stream_id)
        if conn is None or remaining is None:
            return
        while remaining:
            size = min(
                conn.local_flow_control_window(stream_id),
                conn.max_outbound_frame_size,
                len(remaining),
            )
            if size <= 0:
                break
            end = size == len(remaining)
            conn.send_data(stream_id, remaining[:size].tobytes(), end_stream=end)
            remaining = remaining[size:]
        if remaining:
            self._pending_bodies[stream_id] = remaining
            return
        del self._pending_bodies[stream_id]
        stream = self._streams.get(stream_id)
        if stream is not None:
            stream.mark_local_closed()

    def _close_stream(self, stream_id: int, error_code: int) -> None:
        self._pending_bodies.pop(stream_id, None)
        stream = self._streams.get(stream_id)
        if stream is not None:
            stream.on_stream_close(error_code)
            self._streams.pop(stream_id, None)

    def _handle_event(self, event: h2.events.Event) -> None:
        if isinstance(
            event,
            (
                h2.events.ResponseReceived,
                h2.events.InformationalResponseReceived,
                h2.events.TrailersReceived,
            ),
        ):
            stream = self._streams.get(event.stream_id)
            if stream is not None:
                builder = PackedHeadersBuilder()
                for name, value in event.headers:
                    if name == ":status":
                        builder.set_status(value)
                    elif not name.startswith(":"):
                        builder.add(name, value)
                stream.on_headers_received(builder.build())
        elif isinstance(event, h2.events.DataReceived):
            stream = self._streams.get(event.stream_id)
            if stream is not None:
                stream.on_data_received(event.data)
            assert self._conn is not None
            self._conn.acknowledge_received_data(
                event.flow_controlled_length, event.stream_id
            )
        elif isinstance(event, h2.events.StreamEnded):
            self._close_stream(event.stream_id, 0)
        elif isinstance(event, h2.events.StreamReset):
            self._close_stream(event.stream_id, int(event.error_code))
        elif isinstance(event, h2.events.WindowUpdated):
            for stream_id in list(self._pending_bodies):
                self._flush_body(stream_id)
        elif isinstance(event, h2.events.ConnectionTerminated):
            self._goaway_received = True
            if self._callbacks.on_goaway:
                self._callbacks.on_goaway(
                    int(event.last_stream_id or 0), int(event.error_code or 0)
                )