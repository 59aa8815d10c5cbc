from webgrabber.services.progress_broadcaster import ProgressBroadcaster


def test_broadcast_reaches_every_subscriber_in_order():
    b = ProgressBroadcaster()
    s1, s2 = b.subscribe(), b.subscribe()
    b.broadcast("one")
    b.broadcast("two")
    assert [s1.get_nowait(), s1.get_nowait()] == ["one", "two"]
    assert [s2.get_nowait(), s2.get_nowait()] == ["one", "two"]


def test_no_replay_for_late_subscribers():
    b = ProgressBroadcaster()
    b.broadcast("early")
    late = b.subscribe()
    assert late.get_nowait() is None


def test_unsubscribe_stops_delivery():
    b = ProgressBroadcaster()
    s = b.subscribe()
    b.unsubscribe(s)
    b.unsubscribe(s)
    b.broadcast("x")
    assert s.get_nowait() is None
    assert b.subscriber_count == 0


def test_full_buffer_drops_without_blocking():
    b = ProgressBroadcaster(max_buffer=2)
    s = b.subscribe()
    for i in range(5):
        b.broadcast(str(i))
    assert s.dropped == 3
    assert [s.get_nowait(), s.get_nowait(), s.get_nowait()] == ["0", "1", None]


def test_broadcast_without_subscribers_is_noop():
    ProgressBroadcaster().broadcast("nobody listening")


def test_get_nowait_returns_none_when_empty():
    b = ProgressBroadcaster()
    s = b.subscribe()
    assert s.get_nowait() is None
    b.broadcast("Saved page: https://site.test/")
    assert s.get_nowait() == "Saved page: https://site.test/"
    assert s.get_nowait() is None
