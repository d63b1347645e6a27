"""Fluent builder for request headers in Chrome's exact wire order."""

from __future__ import annotations

from dataclasses import dataclass

from holytls.chrome_header_profile import (
    ChromeHeaderProfile,
    FetchDest,
    FetchMode,
    FetchSite,
    HeaderEntry,
    RequestType,
)
from holytls.sec_ch_ua import SecChUaGenerator, get_mobile

__all__ = ["AcceptChHints", "parse_accept_ch", "ChromeHeaderBuilder"]

_ASCII_WHITESPACE = " \t\n\r\f\v"


@dataclass
class AcceptChHints:
    """High-entropy client hints requested through an Accept-CH header."""

    full_version_list: bool = False
    arch: bool = False
    bitness: bool = False
    model: bool = False
    wow64: bool = False
    form_factors: bool = False


_HINT_FIELDS = {
    "sec-ch-ua-full-version-list": "full_version_list",
    "sec-ch-ua-arch": "arch",
    "sec-ch-ua-bitness": "bitness",
    "sec-ch-ua-model": "model",
    "sec-ch-ua-wow64": "wow64",
    "sec-ch-ua-form-factors": "form_factors",
}


def parse_accept_ch(accept_ch: str) -> AcceptChHints:
    """Parse a comma-separated Accept-CH value; unknown hints are ignored."""
    hints = AcceptChHints()
    for raw in accept_ch.split(","):
        hint = raw.strip(_ASCII_WHITESPACE)
        if not hint.isascii():
            continue
        field_name = _HINT_FIELDS.get(hint.lower())
        if field_name is not None:
            setattr(hints, field_name, True)
    return hints


# Base headers in Chrome 143 order; the order is part of the fingerprint.
_METHOD = ":method"
_AUTHORITY = ":authority"
_SCHEME = ":scheme"
_PATH = ":path"
_SEC_CH_UA = "sec-ch-ua"
_SEC_CH_UA_MOBILE = "sec-ch-ua-mobile"
_SEC_CH_UA_PLATFORM = "sec-ch-ua-platform"
_UPGRADE_INSECURE_REQUESTS = "upgrade-insecure-requests"
_USER_AGENT = "user-agent"
_ACCEPT = "accept"
_SEC_FETCH_SITE = "sec-fetch-site"
_SEC_FETCH_MODE = "sec-fetch-mode"
_SEC_FETCH_USER = "sec-fetch-user"
_SEC_FETCH_DEST = "sec-fetch-dest"
_ACCEPT_ENCODING = "accept-encoding"
_ACCEPT_LANGUAGE = "accept-language"


class ChromeHeaderBuilder:
    """Builds a request header list, pseudo-headers first, in Chrome's order."""

    def __init__(self, profile: ChromeHeaderProfile, sec_ch_ua: SecChUaGenerator) -> None:
        self._profile = profile
        self._sec_ch_ua = sec_ch_ua
        self._values: dict[str, str] = {
            _METHOD: "",
            _AUTHORITY: "",
            _SCHEME: "https",
            _PATH: "",
            _SEC_CH_UA: sec_ch_ua.get(),
            _SEC_CH_UA_MOBILE: get_mobile(profile.sec_ch_ua_mobile),
            _SEC_CH_UA_PLATFORM: profile.sec_ch_ua_platform,
            _UPGRADE_INSECURE_REQUESTS: "",
            _USER_AGENT: profile.user_agent,
            _ACCEPT: profile.accept_navigation,
            _SEC_FETCH_SITE: "",
            _SEC_FETCH_MODE: "",
            _SEC_FETCH_USER: "",
            _SEC_FETCH_DEST: "",
            _ACCEPT_ENCODING: profile.accept_encoding,
            _ACCEPT_LANGUAGE: profile.accept_language,
        }
        self._include_upgrade_insecure_requests = False
        self._include_sec_fetch_user = False
        self._request_type = RequestType.NAVIGATION
        self._high_entropy_headers: list[HeaderEntry] = []
        self._custom_headers: list[HeaderEntry] = []

    def set_method(self, method: str) -> ChromeHeaderBuilder:
        self._values[_METHOD] = method
        return self

    def set_authority(self, authority: str) -> ChromeHeaderBuilder:
        self._values[_AUTHORITY] = authority
        return self

    def set_path(self, path: str) -> ChromeHeaderBuilder:
        self._values[_PATH] = path
        return self

    def set_scheme(self, scheme: str) -> ChromeHeaderBuilder:
        self._values[_SCHEME] = scheme
        return self

    def set_request_type(self, request_type: RequestType) -> ChromeHeaderBuilder:
        """Set the request kind; this selects the accept value and upgrade header."""
        self._request_type = request_type
        if request_type is RequestType.NAVIGATION:
            self._values[_ACCEPT] = self._profile.accept_navigation
            self._include_upgrade_insecure_requests = True
        else:
            self._values[_ACCEPT] = self._profile.accept_xhr
            self._include_upgrade_insecure_requests = False
        return self

    def set_fetch_metadata(
        self, site: FetchSite, mode: FetchMode, dest: FetchDest
    ) -> ChromeHeaderBuilder:
        self._values[_SEC_FETCH_SITE] = site.value
        self._values[_SEC_FETCH_MODE] = mode.value
        self._values[_SEC_FETCH_DEST] = dest.value
        return self

    def set_user_activated(self, activated: bool) -> ChromeHeaderBuilder:
        """Send sec-fetch-user only for user-activated navigations."""
        self._include_sec_fetch_user = (
            activated and self._request_type is RequestType.NAVIGATION
        )
        if self._include_sec_fetch_user:
            self._values[_SEC_FETCH_USER] = "?1"
        return self

    def add_high_entropy_headers(self, hints: AcceptChHints) -> ChromeHeaderBuilder:
        """Add the client hints a server asked for, in Chrome's order."""
        added = self._high_entropy_headers
        if hints.full_version_list:
            added.append(
                HeaderEntry(
                    "sec-ch-ua-full-version-list",
                    self._sec_ch_ua.full_version_list(self._profile.full_version),
                )
            )
        if hints.arch:
            added.append(HeaderEntry("sec-ch-ua-arch", '"x86"'))
        if hints.bitness:
            added.append(HeaderEntry("sec-ch-ua-bitness", '"64"'))
        if hints.model:
            added.append(HeaderEntry("sec-ch-ua-model", '""'))
        if hints.wow64:
            added.append(HeaderEntry("sec-ch-ua-wow64", "?0"))
        if hints.form_factors:
            added.append(HeaderEntry("sec-ch-ua-form-factors", '"Desktop"'))
        return self

    def set_user_agent(self, user_agent: str) -> ChromeHeaderBuilder:
        self._values[_USER_AGENT] = user_agent
        return self

    def set_accept(self, accept: str) -> ChromeHeaderBuilder:
        self._values[_ACCEPT] = accept
        return self

    def set_accept_language(self, language: str) -> ChromeHeaderBuilder:
        self._values[_ACCEPT_LANGUAGE] = language
        return self

    def add_custom_header(self, name: str, value: str) -> ChromeHeaderBuilder:
        """Append a header after all standard Chrome headers."""
        self._custom_headers.append(HeaderEntry(name, value))
        return self

    def header_count(self) -> int:
        """Number of headers build() will return."""
        count = 4 + 3 + 1 + 1 + 3 + 2
        count += int(self._include_upgrade_insecure_requests)
        count += int(self._include_sec_fetch_user)
        return count + len(self._high_entropy_headers) + len(self._custom_headers)

    def build(self) -> list[HeaderEntry]:
        """Return the header list in wire order."""
        values = self._values

        def entry(name: str) -> HeaderEntry:
            return HeaderEntry(name, values[name])

        headers = [
            entry(_METHOD),
            entry(_AUTHORITY),
            entry(_SCHEME),
            entry(_PATH),
            entry(_SEC_CH_UA),
            entry(_SEC_CH_UA_MOBILE),
            entry(_SEC_CH_UA_PLATFORM),
        ]
        headers.extend(self._high_entropy_headers)
        if self._include_upgrade_insecure_requests:
            values[_UPGRADE_INSECURE_REQUESTS] = "1"
            headers.append(entry(_UPGRADE_INSECURE_REQUESTS))
        headers.append(entry(_USER_AGENT))
        headers.append(entry(_ACCEPT))
        headers.append(entry(_SEC_FETCH_SITE))
        headers.append(entry(_SEC_FETCH_MODE))
        if self._include_sec_fetch_user:
            headers.append(entry(_SEC_FETCH_USER))
        headers.append(entry(_SEC_FETCH_DEST))
        headers.append(entry(_ACCEPT_ENCODING))
        headers.append(entry(_ACCEPT_LANGUAGE))
        headers.extend(self._custom_headers)
        return headers