"""Chunked byte buffer for network I/O."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Union

__all__ = ["DEFAULT_CHUNK_SIZE", "IoBuffer"]

# Sized for TLS records (at most 16 KiB of plaintext each).
DEFAULT_CHUNK_SIZE = 16384


@dataclass
class _Chunk:
    buf: bytearray
    start: int = 0  # read position
    end: int = 0  # write position

    @classmethod
    def allocate(cls, size: int) -> _Chunk:
        return cls(bytearray(size))

    @property
    def capacity(self) -> int:
        return len(self.buf)

    @property
    def readable_size(self) -> int:
        return self.end - self.start

    @property
    def writable_size(self) -> int:
        return self.capacity - self.end

    @property
    def empty(self) -> bool:
        return self.start >= self.end

    def readable(self) -> memoryview:
        return memoryview(self.buf)[self.start : self.end]


class IoBuffer:
    """FIFO byte buffer stored as a queue of fixed-size chunks.

    Bytes are appended at the back and consumed from the front; a chunk is
    released once everything in it has been consumed.
    """

    def __init__(self, initial_capacity: int = 0) -> None:
        self._chunks: deque[_Chunk] = deque()
        self._size = 0
        self._capacity = 0
        if initial_capacity > 0:
            self._ensure_capacity(initial_capacity)

    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return self._size > 0

    @property
    def capacity(self) -> int:
        """Total bytes allocated across all chunks."""
        return self._capacity

    @property
    def empty(self) -> bool:
        return self._size == 0

    def append(self, data: Union[bytes, bytearray, memoryview, str, IoBuffer]) -> None:
        """Append bytes, text (UTF-8 encoded) or the readable contents of another buffer."""
        if isinstance(data, IoBuffer):
            for view in data.readable_views():
                self._append_bytes(view)
            return
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._append_bytes(memoryview(data).cast("B"))

    def _append_bytes(self, src: memoryview) -> None:
        offset = 0
        remaining = len(src)
        while remaining > 0:
            chunk = self._write_chunk()
            to_write = min(remaining, chunk.writable_size)
            chunk.buf[chunk.end : chunk.end + to_write] = src[offset : offset + to_write]
            chunk.end += to_write
            offset += to_write
            remaining -= to_write
            self._size += to_write

    def reserve(self, length: int) -> memoryview:
        """Return a contiguous writable region of ``length`` bytes; follow with commit()."""
        if length <= 0:
            return memoryview(bytearray())
        self._ensure_capacity(length)
        chunk = self._write_chunk()
        if chunk.writable_size < length:
            chunk = _Chunk.allocate(max(length, DEFAULT_CHUNK_SIZE))
            self._capacity += chunk.capacity
            self._chunks.append(chunk)
        return memoryview(chunk.buf)[chunk.end : chunk.end + length]

    def commit(self, length: int) -> None:
        """Mark up to ``length`` bytes written into the last reserved region as data."""
        if length <= 0 or not self._chunks:
            return
        chunk = self._chunks[-1]
        actual = min(length, chunk.writable_size)
        chunk.end += actual
        self._size += actual

    def read(self, max_len: int | None = None) -> bytes:
        """Consume and return up to ``max_len`` bytes (all of them when None)."""
        if max_len is None:
            max_len = self._size
        if max_len <= 0 or self._size == 0:
            return b""
        parts: list[bytes] = []
        total = 0
        while total < max_len and self._chunks:
            chunk = self._chunks[0]
            to_read = min(chunk.readable_size, max_len - total)
            parts.append(bytes(chunk.buf[chunk.start : chunk.start + to_read]))
            chunk.start += to_read
            total += to_read
            if chunk.empty:
                self._capacity -= chunk.capacity
                self._chunks.popleft()
        self._size -= total
        return b"".join(parts)

    def peek(self) -> memoryview:
        """Return the readable bytes of the first chunk without consuming them."""
        if not self._chunks:
            return memoryview(b"")
        return self._chunks[0].readable()

    def skip(self, length: int) -> None:
        """Consume up to ``length`` bytes without copying them."""
        remaining = min(length, self._size)
        while remaining > 0 and self._chunks:
            chunk = self._chunks[0]
            to_skip = min(remaining, chunk.readable_size)
            chunk.start += to_skip
            remaining -= to_skip
            self._size -= to_skip
            if chunk.empty:
                self._capacity -= chunk.capacity
                self._chunks.popleft()

    def readable_views(self) -> list[memoryview]:
        """Views over all readable data, chunk by chunk; valid until the next change."""
        return [chunk.readable() for chunk in self._chunks if chunk.readable_size > 0]

    def writable_views(self, length: int) -> list[memoryview]:
        """Views over free space totalling ``length`` bytes, allocating if needed."""
        self._ensure_capacity(length)
        views: list[memoryview] = []
        remaining = length
        for chunk in self._chunks:
            if remaining == 0:
                break
            if chunk.writable_size > 0:
                take = min(chunk.writable_size, remaining)
                views.append(memoryview(chunk.buf)[chunk.end : chunk.end + take])
                remaining -= take
        return views

    def clear(self) -> None:
        self._chunks.clear()
        self._size = 0
        self._capacity = 0

    def shrink_to_fit(self) -> None:
        """Drop consumed chunks and consolidate when much capacity is unused."""
        while self._chunks and self._chunks[0].empty:
            self._capacity -= self._chunks.popleft().capacity
        if self._capacity > self._size + 2 * DEFAULT_CHUNK_SIZE:
            consolidated = IoBuffer(self._size)
            for view in self.readable_views():
                consolidated._append_bytes(view)
            self._chunks = consolidated._chunks
            self._size = consolidated._size
            self._capacity = consolidated._capacity

    def is_contiguous(self) -> bool:
        return len(self._chunks) <= 1

    def data(self) -> memoryview:
        """Return all readable data as one view; the buffer must be contiguous."""
        if not self.is_contiguous():
            raise ValueError("buffer spans several chunks")
        return self.peek()

    def _ensure_capacity(self, additional: int) -> None:
        available = self._capacity - self._size
        if available >= additional:
            return
        chunk = _Chunk.allocate(max(additional - available, DEFAULT_CHUNK_SIZE))
        self._capacity += chunk.capacity
        self._chunks.append(chunk)

    def _write_chunk(self) -> _Chunk:
        if not self._chunks or self._chunks[-1].writable_size == 0:
            chunk = _Chunk.allocate(DEFAULT_CHUNK_SIZE)
            self._capacity += chunk.capacity
            self._chunks.append(chunk)
        return self._chunks[-1]