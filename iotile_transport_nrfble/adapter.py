"""The logical adapter handle for one physical nRF5 device."""

import logging
from typing import Optional
from iotile.core.utilities.async_tools import BackgroundEventLoop, SharedLoop
from .drivers import DriverGeneration
from .exceptions import ArgumentError
from .notifications import EventNotifier


class NrfAdapter(EventNotifier):
    """One physical adapter bound to one driver generation.

    Adapters are created and destroyed by the AdapterRegistry, never by
    users.  Apart from its open/closed state an adapter never changes after
    it is created.

    Two events are sent, both with the adapter itself as the event object:

    opened
        The driver adapter was opened successfully.

    closed
        The driver adapter was closed.

    Args:
        generation: The driver generation backing this adapter.
        driver_adapter: The opaque object built by the driver backend.  It
            must provide blocking ``open(port, **options)`` and ``close()``
            methods.
        instance_id: The stable id of the device.
        port: The serial port the device is attached to.
        serial_number: The device's serial number.
        not_supported_message: An optional advisory for this platform.
        loop: The loop used for notifications and blocking driver calls.
    """

    SUPPORTED_EVENTS = frozenset(['opened', 'closed'])

    #pylint:disable=too-many-arguments;Adapters are only constructed by the registry
    def __init__(self, generation: DriverGeneration, driver_adapter, instance_id: str,
                 port: Optional[str], serial_number: Optional[str],
                 not_supported_message: Optional[str] = None, loop: BackgroundEventLoop = SharedLoop):
        super(NrfAdapter, self).__init__(loop, source=instance_id)

        self._generation = generation
        self._driver_adapter = driver_adapter
        self._instance_id = instance_id
        self._port = port
        self._serial_number = serial_number
        self._not_supported_message = not_supported_message
        self._is_open = False

        self._logger = logging.getLogger(__name__)

    @property
    def generation(self) -> DriverGeneration:
        return self._generation

    @property
    def driver_adapter(self):
        return self._driver_adapter

    @property
    def instance_id(self) -> str:
        return self._instance_id

    @property
    def port(self) -> Optional[str]:
        return self._port

    @property
    def serial_number(self) -> Optional[str]:
        return self._serial_number

    @property
    def not_supported_message(self) -> Optional[str]:
        """A human readable advisory about this adapter on this platform, or None."""

        return self._not_supported_message

    @property
    def is_open(self) -> bool:
        return self._is_open

    async def open(self, **options):
        """Open the underlying driver adapter and notify ``opened``.

        The driver call blocks so it runs on an executor thread.

        Raises:
            ArgumentError: The adapter is already open.
        """

        if self._is_open:
            raise ArgumentError("Adapter is already open", instance_id=self._instance_id)

        await self._loop.run_in_executor(self._driver_adapter.open, self._port, **options)
        self._is_open = True

        self._logger.debug("Opened adapter %s on %s", self._instance_id, self._port)
        await self.notify_event('opened', self)

    async def close(self):
        """Close the underlying driver adapter and notify ``closed``.

        Raises:
            ArgumentError: The adapter is not open.
        """

        if not self._is_open:
            raise ArgumentError("Adapter is not open", instance_id=self._instance_id)

        await self._loop.run_in_executor(self._driver_adapter.close)
        self._is_open = False

        self._logger.debug("Closed adapter %s", self._instance_id)
        await self.notify_event('closed', self)

    def __repr__(self):
        return "<NrfAdapter %s (%s) on %s>" % (self._instance_id, self._generation.value, self._port)
