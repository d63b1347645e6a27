# holytls

Building blocks for an HTTP/2 client that presents itself the way Chrome does.
It puts headers in Chrome's wire order and generates GREASE-randomised
`sec-ch-ua` client hints. It also supplies Chrome's SETTINGS and WINDOW_UPDATE
values. Around these it provides the session, stream, buffer and event-loop
plumbing.

## Install

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Modules

- `holytls.chrome_header_profile`: header profiles for each version.
  - `ChromeVersion` covers 120, 125, 130, 131 and 143. `LATEST` is 143.
  - `get_chrome_header_profile` looks up a profile. Unknown versions fall back
    to 143.
  - `build_chrome_headers` returns the ordered `HeaderEntry` list for a
    request, with custom headers last.
  - The fetch metadata enums are `RequestType`, `FetchSite`, `FetchMode` and
    `FetchDest`.
- `holytls.chrome_header_builder`:
  - `ChromeHeaderBuilder` is a fluent builder for the full header list. The
    list starts with pseudo-headers and can include high-entropy client hints.
  - `parse_accept_ch` turns an `Accept-CH` value into `AcceptChHints`.
- `holytls.sec_ch_ua`:
  - `SecChUaGenerator` chooses a GREASE brand, a GREASE version (24 or 99) and
    a brand order once per instance.
  - `generate_sec_ch_ua` makes a fresh generator on every call.
  - `get_mobile` gives the `sec-ch-ua-mobile` value.
- `holytls.chrome_h2_profile`:
  - `ChromeH2Settings` holds the settings. Its `entries()` method lists them in
    Chrome's SETTINGS order.
  - `ChromeH2Profile` and `get_chrome_h2_profile` give the profile for a
    version.
  - Chrome 143 omits `MAX_CONCURRENT_STREAMS` and `MAX_FRAME_SIZE`.
- `holytls.h2_session`: `H2Session` runs the client side of an HTTP/2
  connection with the `h2` library.
  - It writes the connection preface, an exactly ordered SETTINGS frame and the
    profile's connection WINDOW_UPDATE.
  - Pseudo-headers follow the profile's `PseudoHeaderOrder`.
  - Failures raise `H2SessionError`.
  - `H2SessionCallbacks` reports errors and GOAWAY.
- `holytls.h2_stream`:
  - `H2Headers` has `for_request` for splitting a URL.
  - `H2Stream` keeps the response headers, body and state of one stream.
  - `H2StreamCallbacks` delivers the `on_headers`, `on_data` and `on_close`
    events.
- `holytls.header_ids` and `holytls.packed_headers`:
  - `HeaderId`, `lookup_header_id` and `header_id_to_name` intern common header
    names.
  - `PackedHeadersBuilder` and `PackedHeaders` form an immutable response
    header collection. Each collection holds at most 64 headers.
- `holytls.io_buffer`: `IoBuffer` is a FIFO byte buffer that stores data in
  16 KiB chunks.
- `holytls.buffer_pool`: `BufferPool` is a thread-safe pool of 4 KiB, 16 KiB
  and 64 KiB buffers. Use it with `PooledBuffer`. `stats()` returns counters.
- `holytls.timer`: `TimerWheel` is a min-heap of one-shot timers with
  cancellation. `TimerGuard` cancels its timer when its `with` block ends.
- `holytls.reactor`: `Reactor` is a `selectors`-based readiness loop that
  dispatches to `EventHandler` objects. Use `post` and `stop` to interact with
  it from other threads.

## Examples

Ordered request headers for a navigation:

```python
from holytls.chrome_header_profile import (
    ChromeVersion, FetchDest, FetchMode, FetchSite, RequestType,
    build_chrome_headers, get_chrome_header_profile,
)

profile = get_chrome_header_profile(ChromeVersion.CHROME_143)
headers = build_chrome_headers(
    profile, RequestType.NAVIGATION, FetchSite.NONE,
    FetchMode.NAVIGATE, FetchDest.DOCUMENT, True, [],
)
for entry in headers:
    print(entry.name, entry.value)
```

Driving an `H2Session`. You move the bytes yourself:

```python
from holytls.chrome_h2_profile import get_chrome_h2_profile
from holytls.chrome_header_profile import ChromeVersion
from holytls.h2_session import H2Session
from holytls.h2_stream import H2Headers, H2StreamCallbacks

session = H2Session(get_chrome_h2_profile(ChromeVersion.CHROME_143))
session.initialize()

request = H2Headers.for_request("GET", "https://example.com/")
callbacks = H2StreamCallbacks(on_close=lambda sid, code: print("closed", sid, code))
stream_id = session.submit_request(request, callbacks)

while session.wants_write():
    chunk = session.pending_data()
    # write `chunk` to your TLS transport here
    session.data_sent(len(chunk))

# feed bytes read from the transport with session.receive(data)
```

## What this package does not do

The package does not open sockets, resolve names or perform TLS handshakes.
It has no connection pool, no high-level HTTP client and no response
decompression. `H2Session` only produces and consumes HTTP/2 bytes. You have to
connect it to an encrypted transport of your own, for example by registering
a socket handler with `Reactor`. The package also has no command-line tool.