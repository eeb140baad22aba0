"""Tests of LifecycleBroadcaster and the EventNotifier mixin."""

import logging
import pytest
from iotile_transport_nrfble.adapter import NrfAdapter
from iotile_transport_nrfble.broadcaster import LifecycleBroadcaster
from iotile_transport_nrfble.drivers import DriverGeneration
from iotile_transport_nrfble.exceptions import ArgumentError
from iotile_transport_nrfble.notifications import EventNotifier
from iotile_transport_nrfble.registry import ReconcileResult
from util.fake_drivers import FakeDriverAdapter


class _Engine(EventNotifier):
    SUPPORTED_EVENTS = frozenset(['added', 'removed', 'adapter_opened', 'adapter_closed', 'error'])

    def __init__(self, loop):
        super(_Engine, self).__init__(loop)
        self._logger = logging.getLogger(__name__)
        self.events = []
        self.register_monitor(self.SUPPORTED_EVENTS, lambda name, event: self.events.append((name, event)))


def _adapter(loop, instance_id="680123456"):
    return NrfAdapter(DriverGeneration.V2, FakeDriverAdapter(), instance_id, "COM1", instance_id, loop=loop)


def test_forwarding(loop):
    engine = _Engine(loop)
    broadcaster = LifecycleBroadcaster(engine)
    adapter = _adapter(loop)

    broadcaster.attach(adapter)
    assert broadcaster.is_attached(adapter)

    loop.run_coroutine(adapter.open())
    loop.run_coroutine(adapter.close())
    assert engine.events == [('adapter_opened', adapter), ('adapter_closed', adapter)]

    broadcaster.detach(adapter)
    assert not broadcaster.is_attached(adapter)
    assert list(adapter.iter_monitors()) == []

    loop.run_coroutine(adapter.open())
    assert len(engine.events) == 2


def test_detach_stale_adapter(loop):
    """Detaching an old adapter does not unhook a newer one with the same id."""

    engine = _Engine(loop)
    broadcaster = LifecycleBroadcaster(engine)
    old = _adapter(loop)
    new = _adapter(loop)

    broadcaster.attach(old)
    broadcaster.detach(old)
    broadcaster.attach(new)
    broadcaster.detach(old)

    assert broadcaster.is_attached(new)
    loop.run_coroutine(new.open())
    assert engine.events == [('adapter_opened', new)]


def test_publish(loop):
    engine = _Engine(loop)
    broadcaster = LifecycleBroadcaster(engine)

    result = ReconcileResult()
    added = _adapter(loop, "680000001")
    removed = _adapter(loop, "680000002")
    error = ArgumentError("bad device")
    result.added.append(added)
    result.removed.append(removed)
    result.errors.append(error)

    loop.run_coroutine(broadcaster.publish(result))
    assert engine.events == [('error', error), ('added', added), ('removed', removed)]


def test_adapter_state_checks(loop):
    adapter = _adapter(loop)

    with pytest.raises(ArgumentError):
        loop.run_coroutine(adapter.close())

    loop.run_coroutine(adapter.open())
    with pytest.raises(ArgumentError):
        loop.run_coroutine(adapter.open())

    assert adapter.driver_adapter.open_count == 1


def test_unknown_event(loop):
    engine = _Engine(loop)

    with pytest.raises(ArgumentError):
        engine.register_monitor(['opened'], lambda name, event: None)


def _notify(loop, engine, name, event):
    async def _notify_inside():
        await engine.notify_event(name, event)

    loop.run_coroutine(_notify_inside())


def test_callback_errors_are_contained(loop):
    """A raising callback is logged and the remaining callbacks still run."""

    engine = _Engine(loop)

    def _bad(name, event):
        raise ValueError("callback bug")

    engine.register_monitor(['error'], _bad)
    _notify(loop, engine, 'error', 1)

    assert engine.events == [('error', 1)]


def test_notify_from_outside_loop(loop):
    """Outside the loop notify_event returns a future that can be waited on."""

    engine = _Engine(loop)

    engine.notify_event('added', 1).result(timeout=2.0)
    assert engine.events == [('added', 1)]


def test_changes_during_notification(loop):
    """Monitors removed inside a callback stop after the current notification."""

    engine = _Engine(loop)
    calls = []

    def _once(name, event):
        calls.append(event)
        engine.remove_monitor(handle)

    handle = engine.register_monitor(['added'], _once)

    _notify(loop, engine, 'added', 1)
    _notify(loop, engine, 'added', 2)
    assert calls == [1]

    async def _async_monitor(name, event):
        calls.append(name)

    handle2 = engine.register_monitor(['removed'], _async_monitor)
    engine.adjust_monitor(handle2, 'add', ['error'])
    _notify(loop, engine, 'error', None)
    engine.adjust_monitor(handle2, 'remove', ['error'])
    _notify(loop, engine, 'error', None)

    assert calls == [1, 'error']


def test_monitors_use_event_source(loop):
    """Adapter monitors are keyed by the adapter's instance id."""

    adapter = _adapter(loop, "680000009")
    handle = adapter.register_monitor(['opened'], lambda name, event: None)

    assert adapter.event_source == "680000009"
    assert list(adapter.iter_monitors()) == [('opened', handle)]
