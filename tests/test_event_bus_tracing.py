from eventmap.services.event_bus import EventBus


def test_tracing_disabled_by_default():
    bus = EventBus()
    bus.publish("a")
    assert bus.recent_traces() == []
    assert bus.tracing_enabled is False


def test_enable_tracing_and_capture():
    bus = EventBus()
    bus.enable_tracing(True)
    for i in range(3):
        bus.publish("evt", f"k{i}", i)
    traces = bus.recent_traces()
    assert len(traces) == 3
    names = [t[0] for t in traces]
    assert names == ["evt", "evt", "evt"]
    assert [t[2] for t in traces] == ["k0=0", "k1=1", "k2=2"]


def test_tracing_capacity_ring_buffer():
    bus = EventBus()
    bus.enable_tracing(True, capacity=5)
    for i in range(12):
        bus.publish(f"evt{i}")
    traces = bus.recent_traces()
    assert len(traces) == 5
    # Should retain only last 5 events
    last_names = [t[0] for t in traces]
    assert last_names == [f"evt{i}" for i in range(7, 12)]


def test_disable_tracing_stops_new_entries():
    bus = EventBus()
    bus.enable_tracing(True)
    bus.publish("one")
    bus.enable_tracing(False)
    bus.publish("two")
    names = [t[0] for t in bus.recent_traces()]
    assert names == ["one"]


def test_long_payload_summary_truncated():
    bus = EventBus()
    bus.enable_tracing(True)
    bus.publish("set", "k", "x" * 100)
    summary = bus.recent_trace_entries()[0].summary
    assert len(summary) == 40
    assert summary.startswith("k=xxx")
    assert summary.endswith("...")


def test_clear_traces():
    bus = EventBus()
    bus.enable_tracing(True)
    bus.publish("one")
    bus.clear_traces()
    assert bus.recent_traces() == []
