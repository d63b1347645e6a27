"""Interned identifiers for common HTTP header names."""

from __future__ import annotations

from enum import IntEnum

__all__ = ["HeaderId", "KNOWN_COUNT", "lookup_header_id", "header_id_to_name"]


class HeaderId(IntEnum):
    """Well-known header names; CUSTOM marks a name stored verbatim."""

    # General headers
    CACHE_CONTROL = 0
    CONNECTION = 1
    DATE = 2
    KEEP_ALIVE = 3
    VIA = 4
    WARNING = 5

    # Request headers
    ACCEPT = 6
    ACCEPT_CHARSET = 7
    ACCEPT_ENCODING = 8
    ACCEPT_LANGUAGE = 9
    AUTHORIZATION = 10
    COOKIE = 11
    HOST = 12
    IF_MATCH = 13
    IF_MODIFIED_SINCE = 14
    IF_NONE_MATCH = 15
    IF_RANGE = 16
    IF_UNMODIFIED_SINCE = 17
    ORIGIN = 18
    RANGE = 19
    REFERER = 20
    USER_AGENT = 21

    # Response headers
    ACCEPT_RANGES = 22
    AGE = 23
    ETAG = 24
    EXPIRES = 25
    LAST_MODIFIED = 26
    LOCATION = 27
    RETRY_AFTER = 28
    SERVER = 29
    SET_COOKIE = 30
    VARY = 31
    WWW_AUTHENTICATE = 32

    # Entity headers
    ALLOW = 33
    CONTENT_DISPOSITION = 34
    CONTENT_ENCODING = 35
    CONTENT_LANGUAGE = 36
    CONTENT_LENGTH = 37
    CONTENT_LOCATION = 38
    CONTENT_RANGE = 39
    CONTENT_TYPE = 40

    # CORS headers
    ACCESS_CONTROL_ALLOW_CREDENTIALS = 41
    ACCESS_CONTROL_ALLOW_HEADERS = 42
    ACCESS_CONTROL_ALLOW_METHODS = 43
    ACCESS_CONTROL_ALLOW_ORIGIN = 44
    ACCESS_CONTROL_EXPOSE_HEADERS = 45
    ACCESS_CONTROL_MAX_AGE = 46
    ACCESS_CONTROL_REQUEST_HEADERS = 47
    ACCESS_CONTROL_REQUEST_METHOD = 48

    # Security headers
    STRICT_TRANSPORT_SECURITY = 49
    X_CONTENT_TYPE_OPTIONS = 50
    X_FRAME_OPTIONS = 51
    X_XSS_PROTECTION = 52
    CONTENT_SECURITY_POLICY = 53

    # Other common headers
    TRANSFER_ENCODING = 54
    UPGRADE = 55
    ALT_SVC = 56
    LINK = 57
    PRAGMA = 58

    CUSTOM = 0xFF


_ID_TO_NAME: dict[HeaderId, str] = {
    member: member.name.lower().replace("_", "-")
    for member in HeaderId
    if member is not HeaderId.CUSTOM
}

_NAME_TO_ID: dict[str, HeaderId] = {name: hid for hid, name in _ID_TO_NAME.items()}

KNOWN_COUNT = len(_ID_TO_NAME)


def lookup_header_id(name: str) -> HeaderId:
    """Return the id for a header name (ASCII case-insensitive), or CUSTOM."""
    if not name or not name.isascii():
        return HeaderId.CUSTOM
    return _NAME_TO_ID.get(name.lower(), HeaderId.CUSTOM)


def header_id_to_name(header_id: HeaderId) -> str:
    """Return the canonical lowercase name for an id, or "" for CUSTOM."""
    try:
        return _ID_TO_NAME.get(HeaderId(header_id), "")
    except ValueError:
        return ""