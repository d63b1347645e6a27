"""Chrome request header profiles and ordered header construction."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Iterable, NamedTuple

from holytls.sec_ch_ua import generate_sec_ch_ua, get_mobile

__all__ = [
    "ChromeVersion",
    "RequestType",
    "FetchSite",
    "FetchMode",
    "FetchDest",
    "ChromeHeaderProfile",
    "HeaderEntry",
    "get_chrome_header_profile",
    "build_chrome_headers",
    "CHROME143_SETTINGS_HEADER_TABLE_SIZE",
    "CHROME143_SETTINGS_ENABLE_PUSH",
    "CHROME143_SETTINGS_INITIAL_WINDOW_SIZE",
    "CHROME143_SETTINGS_MAX_HEADER_LIST_SIZE",
    "CHROME143_CONNECTION_WINDOW_INCREMENT",
]


class ChromeVersion(IntEnum):
    """Supported Chrome versions; the value is the major version number."""

    CHROME_120 = 120
    CHROME_125 = 125
    CHROME_130 = 130
    CHROME_131 = 131
    CHROME_143 = 143
    LATEST = 143


class RequestType(Enum):
    """Kind of request; affects which headers are sent."""

    NAVIGATION = "navigation"
    SUBRESOURCE = "subresource"
    XHR = "xhr"
    WEBSOCKET = "websocket"


class FetchSite(Enum):
    """Sec-Fetch-Site values."""

    NONE = "none"
    SAME_ORIGIN = "same-origin"
    SAME_SITE = "same-site"
    CROSS_SITE = "cross-site"


class FetchMode(Enum):
    """Sec-Fetch-Mode values."""

    NAVIGATE = "navigate"
    CORS = "cors"
    NO_CORS = "no-cors"
    SAME_ORIGIN = "same-origin"
    WEBSOCKET = "websocket"


class FetchDest(Enum):
    """Sec-Fetch-Dest values."""

    DOCUMENT = "document"
    EMBED = "embed"
    FONT = "font"
    IMAGE = "image"
    MANIFEST = "manifest"
    MEDIA = "media"
    OBJECT = "object"
    SCRIPT = "script"
    STYLE = "style"
    WORKER = "worker"
    XSLT = "xslt"
    EMPTY = "empty"


@dataclass(frozen=True)
class ChromeHeaderProfile:
    """Default header values for one Chrome version."""

    version: ChromeVersion
    user_agent: str
    accept_navigation: str
    accept_xhr: str
    accept_encoding: str
    accept_language: str
    sec_ch_ua_platform: str
    sec_ch_ua_mobile: bool
    full_version: str


class HeaderEntry(NamedTuple):
    """One header in an ordered header list."""

    name: str
    value: str


# HTTP/2 connection preface values Chrome 143 sends.
CHROME143_SETTINGS_HEADER_TABLE_SIZE = 65536
CHROME143_SETTINGS_ENABLE_PUSH = 0
CHROME143_SETTINGS_INITIAL_WINDOW_SIZE = 6291456
CHROME143_SETTINGS_MAX_HEADER_LIST_SIZE = 262144
CHROME143_CONNECTION_WINDOW_INCREMENT = 15663105

_ACCEPT_NAVIGATION = (
    "text/html,application/xhtml+xml,application/xml;q=0.9,"
    "image/avif,image/webp,image/apng,*/*;q=0.8,"
    "application/signed-exchange;v=b3;q=0.7"
)


def _profile(version: ChromeVersion, full_version: str, encoding: str) -> ChromeHeaderProfile:
    return ChromeHeaderProfile(
        version=version,
        user_agent=(
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            f"(KHTML, like Gecko) Chrome/{int(version)}.0.0.0 Safari/537.36"
        ),
        accept_navigation=_ACCEPT_NAVIGATION,
        accept_xhr="*/*",
        accept_encoding=encoding,
        accept_language="en-US,en;q=0.9",
        sec_ch_ua_platform='"Windows"',
        sec_ch_ua_mobile=False,
        full_version=full_version,
    )


_WITH_ZSTD = "gzip, deflate, br, zstd"
_WITHOUT_ZSTD = "gzip, deflate, br"  # zstd arrived in Chrome 123

_PROFILES: dict[int, ChromeHeaderProfile] = {
    ChromeVersion.CHROME_120: _profile(ChromeVersion.CHROME_120, "120.0.6099.109", _WITHOUT_ZSTD),
    ChromeVersion.CHROME_125: _profile(ChromeVersion.CHROME_125, "125.0.6422.112", _WITHOUT_ZSTD),
    ChromeVersion.CHROME_130: _profile(ChromeVersion.CHROME_130, "130.0.6723.116", _WITH_ZSTD),
    ChromeVersion.CHROME_131: _profile(ChromeVersion.CHROME_131, "131.0.6778.139", _WITH_ZSTD),
    ChromeVersion.CHROME_143: _profile(ChromeVersion.CHROME_143, "143.0.7499.192", _WITH_ZSTD),
}


def get_chrome_header_profile(version: ChromeVersion) -> ChromeHeaderProfile:
    """Return the header profile for a version; unknown versions get the latest."""
    return _PROFILES.get(version, _PROFILES[ChromeVersion.CHROME_143])


def build_chrome_headers(
    profile: ChromeHeaderProfile,
    request_type: RequestType,
    fetch_site: FetchSite,
    fetch_mode: FetchMode,
    fetch_dest: FetchDest,
    user_activated: bool,
    custom_headers: Iterable[tuple[str, str]] = (),
) -> list[HeaderEntry]:
    """Return request headers in Chrome's wire order, custom headers last."""
    navigation = request_type is RequestType.NAVIGATION

    headers = [
        HeaderEntry("sec-ch-ua", generate_sec_ch_ua(int(profile.version))),
        HeaderEntry("sec-ch-ua-mobile", get_mobile(profile.sec_ch_ua_mobile)),
        HeaderEntry("sec-ch-ua-platform", profile.sec_ch_ua_platform),
    ]
    if navigation:
        headers.append(HeaderEntry("upgrade-insecure-requests", "1"))
    headers.append(HeaderEntry("user-agent", profile.user_agent))
    headers.append(
        HeaderEntry(
            "accept", profile.accept_navigation if navigation else profile.accept_xhr
        )
    )
    headers.append(HeaderEntry("sec-fetch-site", fetch_site.value))
    headers.append(HeaderEntry("sec-fetch-mode", fetch_mode.value))
    if navigation and user_activated:
        headers.append(HeaderEntry("sec-fetch-user", "?1"))
    headers.append(HeaderEntry("sec-fetch-dest", fetch_dest.value))
    headers.append(HeaderEntry("accept-encoding", profile.accept_encoding))
    headers.append(HeaderEntry("accept-language", profile.accept_language))

    headers.extend(HeaderEntry(name, value) for name, value in custom_headers)
    return headers