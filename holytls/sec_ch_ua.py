"""Sec-CH-UA header values with Chrome-style GREASE brands."""

from __future__ import annotations

import random

__all__ = [
    "GREASE_CHARS",
    "PRIMARY_GREASE_VERSION",
    "ALTERNATE_GREASE_VERSION",
    "SecChUaGenerator",
    "get_mobile",
    "generate_sec_ch_ua",
]

# Characters substituted into the "Not?A_Brand" template.
GREASE_CHARS = ("(", ")", ":", ";", "=", "?", "_")

PRIMARY_GREASE_VERSION = 24
ALTERNATE_GREASE_VERSION = 99

# Percentage chance of using the primary GREASE version.
_PRIMARY_VERSION_WEIGHT = 80

_GREASE, _CHROMIUM, _GOOGLE_CHROME = 0, 1, 2


class SecChUaGenerator:
    """Produces sec-ch-ua values for one Chrome major version.

    The GREASE brand, its version and the brand order are chosen once at
    construction and stay fixed for the lifetime of the generator.
    """

    def __init__(self, major_version: int, rng: random.Random | None = None) -> None:
        self.major_version = major_version
        self._rng = rng if rng is not None else random.Random()

        self._grease_brand = self._generate_grease_brand()
        roll = self._rng.randint(1, 100)
        self._grease_version = (
            PRIMARY_GREASE_VERSION
            if roll <= _PRIMARY_VERSION_WEIGHT
            else ALTERNATE_GREASE_VERSION
        )
        order = [_GREASE, _CHROMIUM, _GOOGLE_CHROME]
        self._rng.shuffle(order)
        self._brand_order = tuple(order)
        self._sec_ch_ua = self._build(str(major_version))

    @property
    def grease_brand(self) -> str:
        """The generated GREASE brand, e.g. "Not(A:Brand"."""
        return self._grease_brand

    @property
    def grease_version(self) -> int:
        """The GREASE brand version (24 or 99)."""
        return self._grease_version

    @property
    def brand_order(self) -> tuple[int, int, int]:
        """Brand permutation: 0 is GREASE, 1 Chromium, 2 Google Chrome."""
        return self._brand_order

    def get(self) -> str:
        """Return the sec-ch-ua header value (stable for this instance)."""
        return self._sec_ch_ua

    def full_version_list(self, full_version: str) -> str:
        """Return sec-ch-ua-full-version-list using the full version string."""
        return self._build(full_version)

    def _generate_grease_brand(self) -> str:
        first = self._rng.choice(GREASE_CHARS)
        second = self._rng.choice(GREASE_CHARS)
        return f"Not{first}A{second}Brand"

    def _build(self, version: str) -> str:
        entries = {
            _GREASE: f'"{self._grease_brand}";v="{self._grease_version}"',
            _CHROMIUM: f'"Chromium";v="{version}"',
            _GOOGLE_CHROME: f'"Google Chrome";v="{version}"',
        }
        return ", ".join(entries[index] for index in self._brand_order)


def get_mobile(is_mobile: bool) -> str:
    """Return the sec-ch-ua-mobile header value."""
    return "?1" if is_mobile else "?0"


def generate_sec_ch_ua(major_version: int) -> str:
    """Generate a sec-ch-ua value with a fresh GREASE brand on every call."""
    return SecChUaGenerator(major_version).get()