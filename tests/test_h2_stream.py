import pytest

from holytls.h2_stream import H2Headers, H2Stream, H2StreamCallbacks, H2StreamState
from holytls.packed_headers import PackedHeadersBuilder


def test_for_request_full_url():
    headers = H2Headers.for_request("GET", "https://example.com/a/b?q=1")
    assert headers.method == "GET"
    assert headers.scheme == "https"
    assert headers.authority == "example.com"
    assert headers.path == "/a/b?q=1"


@pytest.mark.parametrize(
    "url, scheme, authority",
    [
        ("example.com", "https", "example.com"),
        ("http://example.com:8080", "http", "example.com:8080"),
    ],
)
def test_for_request_defaults_path(url, scheme, authority):
    headers = H2Headers.for_request("POST", url)
    assert headers.scheme == scheme
    assert headers.authority == authority
    assert headers.path == "/"


def test_headers_add_get_has():
    headers = H2Headers()
    headers.add("x-one", "1")
    headers.add("x-one", "2")
    assert headers.get("x-one") == "1"
    assert headers.has("x-one")
    assert not headers.has("X-One")
    assert headers.get("missing") == ""
    assert [h.value for h in headers.headers] == ["1", "2"]


def test_stream_starts_open_and_half_closes():
    stream = H2Stream(1)
    assert stream.is_open
    stream.mark_local_closed()
    assert stream.state is H2StreamState.HALF_CLOSED_LOCAL
    stream.mark_local_closed()
    assert stream.state is H2StreamState.HALF_CLOSED_LOCAL


def test_data_is_buffered_and_reported():
    seen = []
    stream = H2Stream(3, H2StreamCallbacks(on_data=lambda sid, d: seen.append((sid, d))))
    stream.on_data_received(b"abc")
    stream.on_data_received(b"def")
    assert seen == [(3, b"abc"), (3, b"def")]
    assert stream.response_body.read() == b"abcdef"


def test_headers_received_sets_status():
    builder = PackedHeadersBuilder()
    builder.set_status("200")
    builder.add("content-type", "text/html")
    packed = builder.build()
    seen = []
    stream = H2Stream(5, H2StreamCallbacks(on_headers=lambda sid, h: seen.append((sid, h))))
    stream.on_headers_received(packed)
    assert stream.status_code == 200
    assert stream.response_headers.get("content-type") == "text/html"
    assert seen == [(5, packed)]


def test_close_reports_error_code():
    closed = []
    stream = H2Stream(7, H2StreamCallbacks(on_close=lambda sid, code: closed.append((sid, code))))
    stream.on_stream_close(8)
    assert stream.is_closed
    assert closed == [(7, 8)]
    stream.mark_local_closed()
    assert stream.state is H2StreamState.CLOSED


def test_stream_without_callbacks():
    stream = H2Stream(9)
    stream.on_data_received(b"x")
    stream.on_stream_close(0)
    assert stream.is_closed
    assert stream.status_code == 0
    assert stream.response_body.read() == b"x"