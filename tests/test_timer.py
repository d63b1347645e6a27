from holytls.timer import MAX_DELAY_MS, TimerGuard, TimerWheel


def test_empty_wheel():
    wheel = TimerWheel()
    assert len(wheel) == 0
    assert wheel.next_deadline_ms(0) == -1
    assert wheel.process_expired(1000) == 0


def test_fires_in_deadline_order():
    wheel = TimerWheel()
    fired = []
    wheel.schedule_at(30, lambda: fired.append("c"))
    wheel.schedule_at(10, lambda: fired.append("a"))
    wheel.schedule_at(20, lambda: fired.append("b"))
    assert wheel.process_expired(25) == 2
    assert fired == ["a", "b"]
    assert len(wheel) == 1
    assert wheel.process_expired(30) == 1
    assert fired == ["a", "b", "c"]


def test_equal_deadlines_fire_in_schedule_order():
    wheel = TimerWheel()
    fired = []
    for name in ["x", "y", "z"]:
        wheel.schedule(5, lambda name=name: fired.append(name))
    wheel.process_expired(5)
    assert fired == ["x", "y", "z"]


def test_ids_are_distinct_and_increasing():
    wheel = TimerWheel()
    ids = [wheel.schedule(1, lambda: None) for _ in range(5)]
    assert ids == sorted(ids)
    assert len(set(ids)) == 5


def test_next_deadline():
    wheel = TimerWheel()
    wheel.schedule_at(100, lambda: None)
    assert wheel.next_deadline_ms(100) == 0
    assert wheel.next_deadline_ms(150) == 0
    assert wheel.next_deadline_ms(40) == 100 - 40


def test_next_deadline_is_clamped():
    wheel = TimerWheel()
    wheel.schedule_at(2**40, lambda: None)
    assert wheel.next_deadline_ms(0) == MAX_DELAY_MS


def test_cancel_prevents_firing():
    wheel = TimerWheel()
    fired = []
    timer_id = wheel.schedule_at(10, lambda: fired.append(1))
    assert wheel.cancel(timer_id) is True
    assert len(wheel) == 1
    assert wheel.process_expired(10) == 0
    assert fired == []
    assert len(wheel) == 0


def test_cancel_unknown_or_twice():
    wheel = TimerWheel()
    timer_id = wheel.schedule_at(10, lambda: None)
    assert wheel.cancel(timer_id + 100) is False
    assert wheel.cancel(timer_id) is True
    assert wheel.cancel(timer_id) is False


def test_cancel_after_firing_fails():
    wheel = TimerWheel()
    timer_id = wheel.schedule_at(1, lambda: None)
    wheel.process_expired(1)
    assert wheel.cancel(timer_id) is False


def test_guard_cancels_on_exit():
    wheel = TimerWheel()
    fired = []
    with TimerGuard(wheel, wheel.schedule_at(5, lambda: fired.append(1))) as guard:
        assert guard.valid
    assert not guard.valid
    assert guard.id == 0
    assert wheel.process_expired(5) == 0
    assert fired == []


def test_guard_release_keeps_timer():
    wheel = TimerWheel()
    fired = []
    timer_id = wheel.schedule_at(5, lambda: fired.append(1))
    guard = TimerGuard(wheel, timer_id)
    assert guard.release() == timer_id
    guard.cancel()
    assert wheel.process_expired(5) == 1
    assert fired == [1]


def test_default_guard_is_invalid():
    guard = TimerGuard()
    assert not guard.valid
    assert guard.release() == 0