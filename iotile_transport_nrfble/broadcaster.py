"""Forward adapter lifecycle changes to the engine's public event stream."""

import logging

ADAPTER_EVENTS = {
    'opened': 'adapter_opened',
    'closed': 'adapter_closed'
}


class LifecycleBroadcaster:
    """Wire managed adapters into an engine's events.

    Each attached adapter's ``opened`` and ``closed`` notifications are sent
    again on ``engine`` as ``adapter_opened`` and ``adapter_closed`` with the
    adapter as the event.  Detaching an adapter removes its monitor and any
    notification still in flight for it is dropped.

    Args:
        engine (EventNotifier): Where events are published.  It must support
            ``added``, ``removed``, ``adapter_opened``, ``adapter_closed``
            and ``error``.
    """

    def __init__(self, engine):
        self._engine = engine
        self._monitors = {}
        self._logger = logging.getLogger(__name__)

    def attach(self, adapter):
        if adapter.instance_id in self._monitors:
            self._logger.warning("Adapter %s attached twice, replacing previous monitor", adapter.instance_id)
            self.detach(adapter)

        async def _forward(name, event):
            current = self._monitors.get(adapter.instance_id)
            if current is None or current[0] is not adapter:
                self._logger.debug("Dropping %s from detached adapter %s", name, adapter.instance_id)
                return

            await self._engine.notify_event(ADAPTER_EVENTS[name], event)

        handle = adapter.register_monitor(ADAPTER_EVENTS.keys(), _forward)
        self._monitors[adapter.instance_id] = (adapter, handle)

    def detach(self, adapter):
        current = self._monitors.get(adapter.instance_id)
        if current is None or current[0] is not adapter:
            return

        del self._monitors[adapter.instance_id]
        adapter.remove_monitor(current[1])

    def is_attached(self, adapter) -> bool:
        current = self._monitors.get(adapter.instance_id)
        return current is not None and current[0] is adapter

    async def publish(self, result):
        """Send ``error``, ``added`` and ``removed`` events for a ReconcileResult."""

        for error in result.errors:
            await self._engine.notify_event('error', error)

        for adapter in result.added:
            await self._engine.notify_event('added', adapter)

        for adapter in result.removed:
            await self._engine.notify_event('removed', adapter)
