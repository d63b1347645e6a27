"""HTTP/2 connection fingerprint profiles for Chrome versions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from h2.settings import SettingCodes

from holytls.chrome_header_profile import ChromeVersion

__all__ = [
    "ChromeH2Settings",
    "PseudoHeaderOrder",
    "ChromeH2Profile",
    "CHROME120_H2_SETTINGS",
    "CHROME143_H2_SETTINGS",
    "get_chrome_h2_profile",
]


@dataclass(frozen=True)
class ChromeH2Settings:
    """Values for the initial SETTINGS frame and which optional ones to send."""

    header_table_size: int = 65536
    enable_push: int = 0
    max_concurrent_streams: int = 1000
    initial_window_size: int = 6291456
    max_frame_size: int = 16384
    max_header_list_size: int = 262144
    send_max_concurrent_streams: bool = True
    send_max_frame_size: bool = True

    def entries(self) -> list[tuple[SettingCodes, int]]:
        """Return the settings to send, in Chrome's order."""
        entries = [
            (SettingCodes.HEADER_TABLE_SIZE, self.header_table_size),
            (SettingCodes.ENABLE_PUSH, self.enable_push),
        ]
        if self.send_max_concurrent_streams:
            entries.append((SettingCodes.MAX_CONCURRENT_STREAMS, self.max_concurrent_streams))
        entries.append((SettingCodes.INITIAL_WINDOW_SIZE, self.initial_window_size))
        if self.send_max_frame_size:
            entries.append((SettingCodes.MAX_FRAME_SIZE, self.max_frame_size))
        entries.append((SettingCodes.MAX_HEADER_LIST_SIZE, self.max_header_list_size))
        return entries


class PseudoHeaderOrder(Enum):
    """Order of request pseudo-headers on the wire."""

    MASP = (":method", ":authority", ":scheme", ":path")  # Chrome
    MPAS = (":method", ":path", ":authority", ":scheme")  # Firefox
    MSPA = (":method", ":scheme", ":path", ":authority")  # Safari

    @property
    def names(self) -> tuple[str, str, str, str]:
        return self.value


# Chrome 120-131 send all six settings.
CHROME120_H2_SETTINGS = ChromeH2Settings()

# Chrome 143+ omits MAX_CONCURRENT_STREAMS and MAX_FRAME_SIZE.
CHROME143_H2_SETTINGS = ChromeH2Settings(
    send_max_concurrent_streams=False,
    send_max_frame_size=False,
)


@dataclass(frozen=True)
class ChromeH2Profile:
    """HTTP/2 fingerprint for one Chrome version."""

    version: ChromeVersion
    settings: ChromeH2Settings = field(default_factory=ChromeH2Settings)
    # Connection-level WINDOW_UPDATE increment: 15663105 + 65535 = 15 MiB window.
    connection_window_update: int = 15663105
    pseudo_header_order: PseudoHeaderOrder = PseudoHeaderOrder.MASP
    send_priority_frames: bool = False
    default_priority_weight: int = 256


_PROFILES: dict[int, ChromeH2Profile] = {
    ChromeVersion.CHROME_120: ChromeH2Profile(ChromeVersion.CHROME_120, CHROME120_H2_SETTINGS),
    ChromeVersion.CHROME_125: ChromeH2Profile(ChromeVersion.CHROME_125, CHROME120_H2_SETTINGS),
    ChromeVersion.CHROME_130: ChromeH2Profile(ChromeVersion.CHROME_130, CHROME120_H2_SETTINGS),
    ChromeVersion.CHROME_131: ChromeH2Profile(ChromeVersion.CHROME_131, CHROME120_H2_SETTINGS),
    ChromeVersion.CHROME_143: ChromeH2Profile(ChromeVersion.CHROME_143, CHROME143_H2_SETTINGS),
}


def get_chrome_h2_profile(version: ChromeVersion) -> ChromeH2Profile:
    """Return the profile for a version; unknown versions get the latest."""
    return _PROFILES.get(version, _PROFILES[ChromeVersion.CHROME_143])