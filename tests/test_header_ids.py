import pytest

from holytls.header_ids import (
    KNOWN_COUNT,
    HeaderId,
    header_id_to_name,
    lookup_header_id,
)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("content-encoding", HeaderId.CONTENT_ENCODING),
        ("Content-Encoding", HeaderId.CONTENT_ENCODING),
        ("CACHE-CONTROL", HeaderId.CACHE_CONTROL),
        ("www-authenticate", HeaderId.WWW_AUTHENTICATE),
        ("x-xss-protection", HeaderId.X_XSS_PROTECTION),
        ("Alt-Svc", HeaderId.ALT_SVC),
        ("set-cookie", HeaderId.SET_COOKIE),
        ("access-control-allow-credentials", HeaderId.ACCESS_CONTROL_ALLOW_CREDENTIALS),
    ],
)
def test_lookup_known(name, expected):
    assert lookup_header_id(name) is expected


@pytest.mark.parametrize("name", ["", "x-custom", "content", "accept-", "ａccept"])
def test_lookup_unknown_is_custom(name):
    assert lookup_header_id(name) is HeaderId.CUSTOM


def test_round_trip_all_known():
    known = [h for h in HeaderId if h is not HeaderId.CUSTOM]
    assert len(known) == KNOWN_COUNT
    for hid in known:
        name = header_id_to_name(hid)
        assert name == name.lower()
        assert lookup_header_id(name) is hid
        assert lookup_header_id(name.upper()) is hid


def test_names_are_unique():
    names = {header_id_to_name(h) for h in HeaderId if h is not HeaderId.CUSTOM}
    assert len(names) == KNOWN_COUNT


def test_custom_has_no_name():
    assert header_id_to_name(HeaderId.CUSTOM) == ""


def test_fixed_values():
    assert HeaderId.CACHE_CONTROL == 0
    assert HeaderId.CUSTOM == 0xFF
    assert header_id_to_name(HeaderId.USER_AGENT) == "user-agent"