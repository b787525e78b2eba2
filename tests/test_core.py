"""Tests for core utilities."""

import pytest


def test_unique_id_never_repeats():
    """Test unique_id returns distinct tokens with the given prefix."""
    from pyqt_graphviews.core import unique_id

    ids = {unique_id("graph-root") for _ in range(100)}
    assert len(ids) == 100
    assert all(token.startswith("graph-root-") for token in ids)


def test_subscription_dispose_is_idempotent():
    """Test Subscription releases exactly once."""
    from pyqt_graphviews.core import Subscription

    released = []
    handle = Subscription(lambda: released.append(1), "test")
    assert handle.active

    handle.dispose()
    handle.dispose()
    assert released == [1]
    assert not handle.active


def test_subscription_context_manager():
    """Test Subscription disposes on block exit."""
    from pyqt_graphviews.core import EventEmitter

    emitter = EventEmitter()
    received = []
    with emitter.on("value", received.append):
        emitter.emit("value", 1)
    emitter.emit("value", 2)

    assert received == [1]
    assert emitter.listener_count("value") == 0


def test_subscription_set_releases_in_reverse_order():
    """Test SubscriptionSet.dispose_all releases newest first."""
    from pyqt_graphviews.core import Subscription, SubscriptionSet

    order = []
    subscriptions = SubscriptionSet()
    for name in ("first", "second", "third"):
        subscriptions.add(Subscription(lambda name=name: order.append(name)))

    assert len(subscriptions) == 3
    assert subscriptions.dispose_all() == 3
    assert order == ["third", "second", "first"]
    assert not subscriptions
    assert subscriptions.dispose_all() == 0


def test_event_emitter_delivers_in_registration_order():
    """Test EventEmitter calls listeners in order with the payload."""
    from pyqt_graphviews.core import EventEmitter

    emitter = EventEmitter()
    calls = []
    emitter.on("node", lambda payload: calls.append(("one", payload)))
    emitter.on("node", lambda payload: calls.append(("two", payload)))
    emitter.on("other", lambda payload: calls.append(("other", payload)))

    emitter.emit("node", 42)
    assert calls == [("one", 42), ("two", 42)]


def test_event_emitter_same_callback_registered_twice():
    """Test the same callable can hold two independent subscriptions."""
    from pyqt_graphviews.core import EventEmitter

    emitter = EventEmitter()
    received = []
    first = emitter.on("value", received.append)
    emitter.on("value", received.append)

    first.dispose()
    emitter.emit("value", "x")
    assert received == ["x"]


def test_event_emitter_dispose_during_dispatch():
    """Test a listener disposed mid-dispatch is not called."""
    from pyqt_graphviews.core import EventEmitter

    emitter = EventEmitter()
    calls = []
    handles = {}

    def first(payload):
        calls.append("first")
        handles["second"].dispose()

    emitter.on("value", first)
    handles["second"] = emitter.on("value", lambda payload: calls.append("second"))

    emitter.emit("value")
    assert calls == ["first"]
    assert emitter.listener_count() == 1


def test_event_emitter_listener_errors_propagate():
    """Test listener exceptions reach the emitter's caller."""
    from pyqt_graphviews.core import EventEmitter

    emitter = EventEmitter()

    def broken(payload):
        raise RuntimeError("boom")

    emitter.on("value", broken)
    with pytest.raises(RuntimeError, match="boom"):
        emitter.emit("value")


def test_deferred_pulse_applies_then_clears(qapp):
    """Test DeferredPulse applies now and clears on a later event loop turn."""
    from PyQt6.QtTest import QTest
    from pyqt_graphviews.core import DeferredPulse

    log = []
    pulse = DeferredPulse(apply=lambda: log.append("apply"), clear=lambda: log.append("clear"))

    pulse.fire()
    assert log == ["apply"]
    assert pulse.pending

    QTest.qWait(20)
    assert log == ["apply", "clear"]
    assert not pulse.pending


def test_deferred_pulse_cancel_and_force(qapp):
    """Test DeferredPulse cancel drops the clear and force runs it now."""
    from PyQt6.QtTest import QTest
    from pyqt_graphviews.core import DeferredPulse

    log = []
    pulse = DeferredPulse(apply=lambda: log.append("apply"), clear=lambda: log.append("clear"), delay_ms=10)

    pulse.fire()
    pulse.cancel()
    QTest.qWait(30)
    assert log == ["apply"]

    pulse.fire()
    pulse.force()
    assert log == ["apply", "apply", "clear"]
    assert not pulse.pending


def test_exceptions_hierarchy():
    """Test custom exceptions extend the matching builtins."""
    from pyqt_graphviews.core import MissingBindingError, SubscriptionError

    assert issubclass(MissingBindingError, ValueError)
    assert issubclass(SubscriptionError, RuntimeError)
