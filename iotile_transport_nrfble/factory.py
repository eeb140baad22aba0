"""The process wide adapter discovery engine.

There is exactly one AdapterFactory per process.  It is created lazily by
:meth:`AdapterFactory.get_instance` and from then on polls for attached nRF5
adapters every ``nrfble:update-interval`` seconds, keeping its registry of
:class:`NrfAdapter` objects up to date and publishing what changed.

Events
======

Register a monitor with :meth:`AdapterFactory.register_monitor` to receive
these events.  The callback is called as ``callback(name, event)``:

    added
        A new adapter was found.  The event is the NrfAdapter.

    removed
        An adapter disappeared.  The event is the same NrfAdapter object that
        was sent with ``added``.

    adapter_opened
        A managed adapter was opened.  The event is the NrfAdapter.

    adapter_closed
        A managed adapter was closed.  The event is the NrfAdapter.

    error
        A device could not be classified or enumeration failed.  The event is
        an AdapterDiscoveryError.
"""

import asyncio
import logging
import threading
from iotile.core.dev.config import ConfigManager
from iotile.core.utilities.async_tools import BackgroundEventLoop, SharedLoop
from .broadcaster import LifecycleBroadcaster
from .classifier import AdapterClassifier
from .advisories import PlatformAdvisories
from .drivers import DriverRegistry, DriverGeneration
from .exceptions import DuplicateConstructionError, EnumerationError
from .notifications import EventNotifier
from .registry import AdapterRegistry
from .scheduler import DiscoveryScheduler

_CONSTRUCTION_TOKEN = object()


class AdapterFactory(EventNotifier):
    """Keeps track of every nRF5 adapter attached to this computer.

    Do not construct this class directly, use :meth:`get_instance`.

    Args:
        token (object): Private construction token.
        drivers (DriverRegistry): The driver backends to use.
        loop (BackgroundEventLoop): The loop all discovery work runs on.
        update_interval (float): Seconds between discovery cycles.  Defaults
            to the ``nrfble:update-interval`` config variable.
        classifier (AdapterClassifier): Optional replacement classification rules.
        advisories (PlatformAdvisories): Optional replacement platform notices.
    """

    SUPPORTED_EVENTS = frozenset(['added', 'removed', 'adapter_opened', 'adapter_closed', 'error'])

    _instance = None
    _instance_lock = threading.Lock()

    #pylint:disable=too-many-arguments;This class is only constructed by get_instance
    def __init__(self, token, drivers: DriverRegistry, loop: BackgroundEventLoop = SharedLoop,
                 update_interval: float = None, classifier: AdapterClassifier = None,
                 advisories: PlatformAdvisories = None):
        if token is not _CONSTRUCTION_TOKEN:
            raise DuplicateConstructionError("Cannot instantiate AdapterFactory directly, use get_instance()")

        super(AdapterFactory, self).__init__(loop, source='adapter_factory')

        if update_interval is None:
            config = ConfigManager()
            update_interval = config.get('nrfble:update-interval')

        self._logger = logging.getLogger(__name__)
        self._logger.addHandler(logging.NullHandler())

        self._drivers = drivers
        self._broadcaster = LifecycleBroadcaster(self)
        self._registry = AdapterRegistry(drivers, classifier, advisories, self._broadcaster, loop=loop)
        self._scheduler = DiscoveryScheduler(self._run_cycle, update_interval, loop=loop)

    @classmethod
    def get_instance(cls, drivers=None, loop=None, **kwargs):
        """Get the process wide AdapterFactory, creating it on first use.

        Arguments are only used when the instance is created.  If no drivers
        are given, one backend per driver generation is loaded from installed
        plugins and devices are listed through the generation named by the
        ``nrfble:enumeration-driver`` config variable.

        Args:
            drivers (DriverRegistry): The driver backends to use.
            loop (BackgroundEventLoop): Defaults to the SharedLoop.
            **kwargs: ``update_interval``, ``classifier`` and ``advisories``
                overrides.

        Returns:
            AdapterFactory: The single instance.
        """

        with cls._instance_lock:
            if cls._instance is not None:
                if drivers is not None or loop is not None or len(kwargs) > 0:
                    ignored = sorted(kwargs)
                    if drivers is not None:
                        ignored.append('drivers')
                    if loop is not None:
                        ignored.append('loop')

                    logging.getLogger(__name__).warning("AdapterFactory already exists, ignoring new arguments %s",
                                                        ignored)

                return cls._instance

            if loop is None:
                loop = SharedLoop

            if drivers is None:
                config = ConfigManager()
                enumerator = DriverGeneration.from_tag(config.get('nrfble:enumeration-driver'))
                drivers = DriverRegistry.from_entry_points(enumerator=enumerator)

            instance = cls(_CONSTRUCTION_TOKEN, drivers, loop=loop, **kwargs)
            instance.start()
            cls._instance = instance

        return instance

    @classmethod
    def shutdown_instance(cls):
        """Stop the process wide instance's timer and forget it.

        Must be called from outside the event loop.  The next call to
        get_instance() creates a fresh instance.
        """

        with cls._instance_lock:
            instance = cls._instance
            cls._instance = None

        if instance is not None:
            instance.stop_sync()

    def start(self):
        """Start periodic discovery."""

        self._scheduler.start()

    async def stop(self):
        """Stop periodic discovery.  Adapters already found stay registered."""

        await self._scheduler.stop()

    def stop_sync(self):
        """Stop periodic discovery from outside the event loop."""

        self._scheduler.stop_threadsafe()

    @property
    def update_interval(self) -> float:
        return self._scheduler.interval

    @property
    def adapters(self):
        """A snapshot of the adapters found so far, keyed by instance id.

        This does not trigger discovery.
        """

        return self._registry.snapshot()

    async def get_adapters(self):
        """Look for adapters now and return all that are present.

        This has exactly the same effects as a timer triggered cycle,
        including the events it sends.  If a cycle is already running, this
        waits for one more cycle after it.

        Returns:
            dict: Instance id to NrfAdapter.  The dict is a snapshot owned by
            the caller.

        Raises:
            EnumerationError: The driver could not list devices.
        """

        return await self._scheduler.request()

    def get_adapters_sync(self):
        """Blocking version of :meth:`get_adapters` for use outside the loop."""

        return self._loop.run_coroutine(self.get_adapters())

    def request_adapters(self, callback):
        """Callback version of :meth:`get_adapters`.

        ``callback(error, adapters)`` is called exactly once from inside the
        event loop, either with an exception and None or with None and the
        adapter dict.
        """

        async def _request():
            try:
                adapters = await self.get_adapters()
            except Exception as err:  #pylint:disable=broad-except;The error is handed to the callback
                callback(err, None)
            else:
                callback(None, adapters)

        self._loop.log_coroutine(_request)

    async def _run_cycle(self):
        try:
            descriptors = await self._drivers.enumerate()
        except asyncio.CancelledError:
            raise
        except Exception as err:  #pylint:disable=broad-except;Any driver failure aborts only this cycle
            error = EnumerationError("Failed to enumerate attached adapters", error=str(err))
            self._logger.warning("Adapter enumeration failed: %s", err)
            await self.notify_event('error', error)
            raise error from err

        self._logger.debug("Enumerated %d devices", len(descriptors))

        result = self._registry.reconcile(descriptors)
        await self._broadcaster.publish(result)

        return self._registry.snapshot()
