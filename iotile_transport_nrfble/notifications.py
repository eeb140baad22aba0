"""Device independent events built on iotile-core's notification mixin."""

from iotile.core.hw.transport.adapter import BasicNotificationMixin


class EventNotifier(BasicNotificationMixin):
    """Let callers subscribe to named discovery events.

    BasicNotificationMixin routes every event through a connection string.
    Discovery events do not belong to a connected device, so each notifier
    sends all of its events under one fixed source name and monitors are
    always registered for that source.

    Classes that use this mixin list the events they can emit in
    ``SUPPORTED_EVENTS`` and must have a ``_logger`` attribute.  Callbacks
    are called as ``callback(name, event)`` and may be coroutine functions.
    A callback that raises is logged and the other callbacks still run.

    Registration is only safe from inside the BackgroundEventLoop that
    sends the notifications.  Changes requested from inside a callback take
    effect once the current notification has finished.

    Args:
        loop (BackgroundEventLoop): The loop used to send notifications.
        source (str): The name events are sent under.
    """

    SUPPORTED_EVENTS = frozenset()

    def __init__(self, loop, source='nrfble'):
        super(EventNotifier, self).__init__(loop)
        self._event_source = source

    @property
    def event_source(self) -> str:
        return self._event_source

    def register_monitor(self, events, callback):
        """Register ``callback(name, event)`` for one or more events.

        Returns:
            str: An opaque handle for adjust_monitor() and remove_monitor().
        """

        def _monitor(_conn_string, _conn_id, name, event):
            return callback(name, event)

        return super(EventNotifier, self).register_monitor([self._event_source], events, _monitor)

    def adjust_monitor(self, handle, action, events):
        """Add or remove events from a previously registered monitor."""

        super(EventNotifier, self).adjust_monitor(handle, action, [self._event_source], events)

    def iter_monitors(self):
        """Iterate over all registered (event, handle) pairs."""

        for _source, event, handle in super(EventNotifier, self).iter_monitors():
            yield (event, handle)

    def notify_event(self, name, event):
        """Send an event to every monitor registered for it.

        Returns:
            awaitable: Resolves once every callback has finished.  Outside of
            the loop this is a concurrent Future.
        """

        return super(EventNotifier, self).notify_event(self._event_source, name, event)

    def notify_event_nowait(self, name, event):
        """Send an event in the background without waiting for the callbacks."""

        super(EventNotifier, self).notify_event_nowait(self._event_source, name, event)

    def _get_conn_id(self, conn_string):
        return None
