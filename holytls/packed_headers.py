"""Compact, immutable HTTP header collections with interned names."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterator, NamedTuple, Union

from holytls.header_ids import HeaderId, header_id_to_name, lookup_header_id

__all__ = ["MAX_PACKED_HEADERS", "PackedHeaders", "PackedHeadersBuilder"]

MAX_PACKED_HEADERS = 64

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _parse_status(status: str) -> int:
    """Parse a leading integer the lenient way a status line allows; 0 if none."""
    match = _LEADING_INT.match(status)
    return int(match.group(1)) if match else 0


class _Entry(NamedTuple):
    header_id: HeaderId
    name: str  # only set for CUSTOM headers
    value: str


@dataclass(frozen=True)
class PackedHeaders:
    """Ordered response headers; known names are stored as HeaderId."""

    entries: tuple[_Entry, ...] = ()
    status_code: int = 0

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[tuple[str, str]]:
        for index in range(len(self.entries)):
            yield self.name(index), self.value(index)

    def get(self, key: Union[HeaderId, str]) -> str:
        """Return the first value for a HeaderId or a name, or "" if absent."""
        if isinstance(key, HeaderId):
            if key is HeaderId.CUSTOM:
                return ""
            return next((e.value for e in self.entries if e.header_id is key), "")

        header_id = lookup_header_id(key)
        if header_id is not HeaderId.CUSTOM:
            return self.get(header_id)
        return next(
            (
                e.value
                for e in self.entries
                if e.header_id is HeaderId.CUSTOM and e.name == key
            ),
            "",
        )

    def has(self, name: str) -> bool:
        """True when the header is present with a non-empty value."""
        return bool(self.get(name))

    def _entry(self, index: int) -> _Entry | None:
        if 0 <= index < len(self.entries):
            return self.entries[index]
        return None

    def header_id(self, index: int) -> HeaderId:
        entry = self._entry(index)
        return entry.header_id if entry else HeaderId.CUSTOM

    def name(self, index: int) -> str:
        entry = self._entry(index)
        if entry is None:
            return ""
        if entry.header_id is not HeaderId.CUSTOM:
            return header_id_to_name(entry.header_id)
        return entry.name

    def value(self, index: int) -> str:
        entry = self._entry(index)
        return entry.value if entry else ""


@dataclass
class PackedHeadersBuilder:
    """Accumulates headers and a status, then produces PackedHeaders."""

    _pending: list[_Entry] = field(default_factory=list)
    _status: str = ""

    def __bool__(self) -> bool:
        return bool(self._pending) or bool(self._status)

    def add(self, name: str, value: str) -> None:
        """Add a header; headers beyond the limit are dropped."""
        if len(self._pending) >= MAX_PACKED_HEADERS:
            return
        header_id = lookup_header_id(name)
        stored_name = name if header_id is HeaderId.CUSTOM else ""
        self._pending.append(_Entry(header_id, stored_name, value))

    def set_status(self, status: str) -> None:
        self._status = status

    def clear(self) -> None:
        self._pending = []
        self._status = ""

    def build(self) -> PackedHeaders:
        """Build the headers; the builder is cleared when headers were added."""
        status_code = _parse_status(self._status) if self._status else 0
        if not self._pending:
            return PackedHeaders(status_code=status_code)
        result = PackedHeaders(entries=tuple(self._pending), status_code=status_code)
        self.clear()
        return result