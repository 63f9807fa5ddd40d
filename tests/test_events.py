from persistent_settings.core import Event, EventBus, EventType


def test_publish_reaches_subscribers_of_that_type_only():
    bus = EventBus()
    saved, loaded = [], []
    bus.subscribe(EventType.SETTINGS_SAVED, saved.append)
    bus.subscribe(EventType.SETTINGS_LOADED, loaded.append)

    bus.publish(Event(EventType.SETTINGS_SAVED, data="/tmp/a.dat"))

    assert [e.data for e in saved] == ["/tmp/a.dat"]
    assert loaded == []


def test_subscribe_twice_delivers_once_and_unsubscribe_stops_delivery():
    bus = EventBus()
    received = []
    bus.subscribe(EventType.SETTINGS_RESET, received.append)
    bus.subscribe(EventType.SETTINGS_RESET, received.append)

    bus.publish(Event(EventType.SETTINGS_RESET))
    assert len(received) == 1

    bus.unsubscribe(EventType.SETTINGS_RESET, received.append)
    bus.unsubscribe(EventType.SETTINGS_RESET, received.append)
    bus.publish(Event(EventType.SETTINGS_RESET))
    assert len(received) == 1


def test_failing_handler_does_not_block_others():
    bus = EventBus()
    received = []

    def broken(event):
        raise RuntimeError("boom")

    bus.subscribe(EventType.SETTINGS_DELETED, broken)
    bus.subscribe(EventType.SETTINGS_DELETED, received.append)

    bus.publish(Event(EventType.SETTINGS_DELETED))

    assert len(received) == 1
