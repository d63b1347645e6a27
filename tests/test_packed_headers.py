from holytls.header_ids import HeaderId
from holytls.packed_headers import (
    MAX_PACKED_HEADERS,
    PackedHeaders,
    PackedHeadersBuilder,
)


def _build(pairs, status=None):
    builder = PackedHeadersBuilder()
    if status is not None:
        builder.set_status(status)
    for name, value in pairs:
        builder.add(name, value)
    return builder.build()


def test_empty_headers():
    headers = PackedHeaders()
    assert len(headers) == 0
    assert list(headers) == []
    assert headers.status_code == 0
    assert headers.get("content-type") == ""


def test_get_by_id_and_name():
    headers = _build([("Content-Type", "text/html"), ("x-trace", "abc")], "200")
    assert headers.status_code == 200
    assert headers.get(HeaderId.CONTENT_TYPE) == "text/html"
    assert headers.get("content-type") == "text/html"
    assert headers.get("CONTENT-TYPE") == "text/html"
    assert headers.get("x-trace") == "abc"
    assert headers.get(HeaderId.CUSTOM) == ""


def test_custom_lookup_is_case_sensitive():
    headers = _build([("X-Trace", "abc")])
    assert headers.get("X-Trace") == "abc"
    assert headers.get("x-trace") == ""


def test_first_value_wins():
    headers = _build([("set-cookie", "a=1"), ("set-cookie", "b=2")])
    assert headers.get("set-cookie") == "a=1"
    assert len(headers) == 2


def test_has_requires_non_empty_value():
    headers = _build([("etag", ""), ("vary", "accept")])
    assert headers.has("vary")
    assert not headers.has("etag")
    assert not headers.has("missing")


def test_iteration_uses_canonical_names_in_order():
    pairs = [("Server", "nginx"), ("X-Custom", "1"), ("DATE", "today")]
    headers = _build(pairs)
    assert list(headers) == [("server", "nginx"), ("X-Custom", "1"), ("date", "today")]
    assert headers.header_id(0) is HeaderId.SERVER
    assert headers.header_id(1) is HeaderId.CUSTOM


def test_out_of_range_index():
    headers = _build([("server", "nginx")])
    assert headers.name(5) == ""
    assert headers.value(5) == ""
    assert headers.header_id(5) is HeaderId.CUSTOM
    assert headers.name(-1) == ""


def test_status_only_build():
    headers = _build([], "204")
    assert len(headers) == 0
    assert headers.status_code == 204


def test_status_parsing_is_lenient():
    assert _build([("a", "b")], " 404x").status_code == 404
    assert _build([("a", "b")], "abc").status_code == 0


def test_limit_on_header_count():
    pairs = [(f"x-h{i}", str(i)) for i in range(MAX_PACKED_HEADERS + 10)]
    headers = _build(pairs)
    assert len(headers) == MAX_PACKED_HEADERS
    assert headers.get(f"x-h{MAX_PACKED_HEADERS}") == ""


def test_builder_cleared_after_build():
    builder = PackedHeadersBuilder()
    builder.set_status("200")
    builder.add("server", "nginx")
    assert builder
    first = builder.build()
    assert not builder
    second = builder.build()
    assert len(first) == 1
    assert len(second) == 0
    assert second.status_code == 0


def test_clear():
    builder = PackedHeadersBuilder()
    builder.add("server", "nginx")
    builder.set_status("500")
    builder.clear()
    assert not builder
    assert builder.build() == PackedHeaders()


def test_copies_compare_equal():
    a = _build([("server", "nginx"), ("x-a", "1")], "200")
    b = _build([("server", "nginx"), ("x-a", "1")], "200")
    assert a == b