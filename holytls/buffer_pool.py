"""Pool of reusable byte buffers in three size classes."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

__all__ = [
    "SMALL_BUFFER_SIZE",
    "MEDIUM_BUFFER_SIZE",
    "LARGE_BUFFER_SIZE",
    "BufferPoolConfig",
    "BufferPoolStats",
    "PooledBuffer",
    "BufferPool",
    "actual_size",
]

SMALL_BUFFER_SIZE = 4096  # headers, small responses
MEDIUM_BUFFER_SIZE = 16384  # TLS records
LARGE_BUFFER_SIZE = 65536  # large responses


def actual_size(requested_size: int) -> int:
    """Size of the buffer a request of ``requested_size`` bytes is served with."""
    for size in (SMALL_BUFFER_SIZE, MEDIUM_BUFFER_SIZE, LARGE_BUFFER_SIZE):
        if requested_size <= size:
            return size
    return requested_size


@dataclass(frozen=True)
class BufferPoolConfig:
    """Number of buffers pre-allocated in each size class."""

    small_count: int = 256
    medium_count: int = 64
    large_count: int = 16


@dataclass(frozen=True)
class BufferPoolStats:
    """Snapshot of free buffers and acquisition counters."""

    small_available: int
    medium_available: int
    large_available: int
    acquisitions: int
    pool_hits: int
    pool_misses: int
    fallback_allocations: int


@dataclass
class _SizeClass:
    buffer_size: int
    initial_count: int
    free_list: list[bytearray] = field(default_factory=list)
    lock: threading.Lock = field(default_factory=threading.Lock)

    @classmethod
    def filled(cls, buffer_size: int, count: int) -> _SizeClass:
        return cls(buffer_size, count, [bytearray(buffer_size) for _ in range(count)])

    def available(self) -> int:
        with self.lock:
            return len(self.free_list)


class PooledBuffer:
    """A buffer borrowed from a pool; release() hands it back.

    Buffers allocated outside the pool (because it was exhausted or the
    request was too large) are simply dropped on release.
    """

    def __init__(self, data: bytearray, pool: BufferPool | None = None) -> None:
        self._data: bytearray | None = data
        self._pool = pool
        self.size = len(data)

    @property
    def data(self) -> bytearray:
        if self._data is None:
            raise ValueError("buffer has been released")
        return self._data

    @property
    def pooled(self) -> bool:
        """True when the buffer goes back to a pool on release."""
        return self._pool is not None

    @property
    def released(self) -> bool:
        return self._data is None

    def __len__(self) -> int:
        return self.size

    def release(self) -> None:
        """Return the buffer to its pool; further calls do nothing."""
        data, self._data = self._data, None
        if data is not None and self._pool is not None:
            self._pool.release(data)

    def __enter__(self) -> PooledBuffer:
        return self

    def __exit__(self, *args: object) -> None:
        self.release()


class BufferPool:
    """Thread-safe pool of pre-allocated byte buffers."""

    def __init__(self, config: BufferPoolConfig | None = None) -> None:
        config = config if config is not None else BufferPoolConfig()
        self._small = _SizeClass.filled(SMALL_BUFFER_SIZE, config.small_count)
        self._medium = _SizeClass.filled(MEDIUM_BUFFER_SIZE, config.medium_count)
        self._large = _SizeClass.filled(LARGE_BUFFER_SIZE, config.large_count)
        self._classes = {sc.buffer_size: sc for sc in (self._small, self._medium, self._large)}
        self._stats_lock = threading.Lock()
        self._acquisitions = 0
        self._pool_hits = 0
        self._pool_misses = 0
        self._fallback_allocations = 0

    def acquire(self, min_size: int) -> PooledBuffer:
        """Return a buffer of at least ``min_size`` bytes.

        Falls through to larger size classes when a class is empty, and to a
        fresh allocation when every suitable class is exhausted.
        """
        with self._stats_lock:
            self._acquisitions += 1

        for size_class in (self._small, self._medium, self._large):
            if min_size <= size_class.buffer_size:
                buffer = self._acquire_from(size_class)
                if buffer is not None:
                    return buffer

        with self._stats_lock:
            self._fallback_allocations += 1
            self._pool_misses += 1
        return PooledBuffer(bytearray(max(min_size, LARGE_BUFFER_SIZE)))

    def _acquire_from(self, size_class: _SizeClass) -> PooledBuffer | None:
        with size_class.lock:
            data = size_class.free_list.pop() if size_class.free_list else None
        with self._stats_lock:
            if data is None:
                self._pool_misses += 1
            else:
                self._pool_hits += 1
        return PooledBuffer(data, self) if data is not None else None

    def release(self, buffer: bytearray) -> None:
        """Take a buffer back; it is kept only if its size matches a class
        and that class holds fewer than twice its initial count."""
        size_class = self._classes.get(len(buffer))
        if size_class is None:
            return
        with size_class.lock:
            if len(size_class.free_list) < size_class.initial_count * 2:
                size_class.free_list.append(buffer)

    def stats(self) -> BufferPoolStats:
        with self._stats_lock:
            counters = (
                self._acquisitions,
                self._pool_hits,
                self._pool_misses,
                self._fallback_allocations,
            )
        return BufferPoolStats(
            self._small.available(),
            self._medium.available(),
            self._large.available(),
            *counters,
        )