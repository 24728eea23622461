from sumstack.events.bus import EventBus


def test_event_bus_emit_subscribe():
    bus = EventBus()
    received = {}

    def handler(sender, **kwargs):
        received.update(kwargs)

    bus.subscribe("test", handler)
    bus.emit("test", value=42, msg="hello")

    assert received["value"] == 42
    assert received["msg"] == "hello"


def test_event_bus_emit_without_subscribers_is_noop():
    bus = EventBus()
    bus.emit("nobody_listens", value=1)


def test_event_bus_delivers_in_subscription_order():
    bus = EventBus()
    order = []
    bus.subscribe("ordered", lambda sender, **kw: order.append("first"))
    bus.subscribe("ordered", lambda sender, **kw: order.append("second"))

    bus.emit("ordered")

    assert order == ["first", "second"]


def test_event_bus_unsubscribe_stops_delivery():
    bus = EventBus()
    calls = []

    def handler(sender, **kwargs):
        calls.append(kwargs)

    bus.subscribe("once", handler)
    bus.emit("once", n=1)
    bus.unsubscribe("once", handler)
    bus.emit("once", n=2)

    assert calls == [{"n": 1}]
