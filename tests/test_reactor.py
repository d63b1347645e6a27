import socket
import threading
import time

import pytest

from holytls.reactor import (
    MAX_FDS,
    EventHandler,
    EventType,
    Reactor,
    has_event,
)


class RecordingHandler(EventHandler):
    def __init__(self, sock=None, fd=None):
        self.sock = sock
        self.fd = fd
        self.events = []

    def on_readable(self):
        self.events.append("read")
        if self.sock is not None:
            self.sock.recv(4096)

    def on_writable(self):
        self.events.append("write")

    def on_error(self, error_code):
        self.events.append(("error", error_code))

    def on_close(self):
        self.events.append("close")

    def fileno(self):
        return self.fd if self.fd is not None else self.sock.fileno()


@pytest.fixture
def reactor():
    r = Reactor()
    yield r
    r.close()


@pytest.fixture
def pair():
    a, b = socket.socketpair()
    yield a, b
    a.close()
    b.close()


def test_has_event():
    assert has_event(EventType.READ_WRITE, EventType.READ)
    assert has_event(EventType.READ_WRITE, EventType.WRITE)
    assert not has_event(EventType.READ, EventType.WRITE)
    assert not has_event(EventType.NONE, EventType.READ)
    assert EventType.READ | EventType.WRITE == EventType.READ_WRITE


def test_add_contains_and_remove(reactor, pair):
    handler = RecordingHandler(pair[0])
    reactor.add(handler, EventType.READ)
    assert reactor.contains(pair[0].fileno())
    assert reactor.handler_count == 1
    assert reactor.remove(handler) is True
    assert not reactor.contains(pair[0].fileno())
    assert reactor.remove(handler) is False
    assert reactor.handler_count == 0


def test_add_twice_raises(reactor, pair):
    handler = RecordingHandler(pair[0])
    reactor.add(handler, EventType.READ)
    with pytest.raises(ValueError):
        reactor.add(handler, EventType.WRITE)


@pytest.mark.parametrize("fd", [-1, MAX_FDS])
def test_add_out_of_range_fd_raises(reactor, fd):
    with pytest.raises(ValueError):
        reactor.add(RecordingHandler(fd=fd), EventType.READ)
    assert reactor.handler_count == 0


def test_modify_unregistered_raises(reactor, pair):
    with pytest.raises(KeyError):
        reactor.modify(RecordingHandler(pair[0]), EventType.WRITE)


def test_readable_event_dispatched(reactor, pair):
    a, b = pair
    handler = RecordingHandler(a)
    reactor.add(handler, EventType.READ)
    b.send(b"hello")
    reactor.run_once()
    assert handler.events == ["read"]


def test_read_then_write_order(reactor, pair):
    a, b = pair
    handler = RecordingHandler(a)
    reactor.add(handler, EventType.READ_WRITE)
    b.send(b"x")
    reactor.run_once()
    assert handler.events == ["read", "write"]


def test_modify_to_none_stops_events(reactor, pair):
    a, _ = pair
    handler = RecordingHandler(a)
    reactor.add(handler, EventType.WRITE)
    reactor.run_once()
    assert handler.events == ["write"]
    reactor.modify(handler, EventType.NONE)
    reactor.run_once()
    assert handler.events == ["write"]
    assert reactor.contains(a.fileno())


def test_posted_callback_runs(reactor):
    calls = []
    reactor.post(lambda: calls.append(1))
    reactor.run_once()
    assert calls == [1]


def test_run_for_times_out(reactor):
    start = time.monotonic()
    reactor.run_for(50)
    elapsed = time.monotonic() - start
    assert elapsed >= 0.05
    assert reactor.running is False


def test_stop_from_posted_callback_ends_run(reactor):
    calls = []

    def callback():
        calls.append("ran")
        reactor.stop()

    reactor.post(callback)
    reactor.run()
    assert calls == ["ran"]
    assert reactor.running is False


def test_stop_from_other_thread(reactor):
    started = threading.Event()
    reactor.post(started.set)
    thread = threading.Thread(target=reactor.run)
    thread.start()
    assert started.wait(5)
    reactor.stop()
    thread.join(5)
    assert not thread.is_alive()


def test_post_from_other_thread_wakes_loop(reactor):
    done = threading.Event()
    thread = threading.Thread(target=reactor.run)
    thread.start()
    try:
        reactor.post(done.set)
        assert done.wait(5)
    finally:
        reactor.stop()
        thread.join(5)
    assert not thread.is_alive()


def test_now_ms_advances(reactor):
    before = reactor.now_ms
    time.sleep(0.02)
    reactor.run_once()
    assert reactor.now_ms > before


def test_close_drops_handlers_and_rejects_add(pair):
    reactor = Reactor()
    handler = RecordingHandler(pair[0])
    reactor.add(handler, EventType.READ)
    reactor.close()
    assert reactor.handler_count == 0
    with pytest.raises(RuntimeError):
        reactor.add(handler, EventType.READ)