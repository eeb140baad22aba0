"""Native driver generations and the glue needed to talk to them.

There are exactly two generations of the pc-ble-driver native library, one
per SoftDevice API version.  Which one a given adapter needs is decided by
:mod:`iotile_transport_nrfble.classifier`; this module only knows how to
enumerate devices and construct the opaque driver level adapter objects.

Driver backends can be supplied directly to :class:`DriverRegistry` or be
installed as plugins under the ``iotile_transport_nrfble.driver`` entry point
group, named by their generation tag (``v2`` or ``v3``).  Each entry point
must point to a callable that returns a backend when called with no
arguments.
"""

import enum
import logging
from typing import Callable, Dict, List, Optional
from typing_extensions import Protocol
import entrypoints
import serial.tools.list_ports
from iotile.core.utilities.async_tools import BackgroundEventLoop, SharedLoop
from .descriptor import RawDeviceDescriptor
from .exceptions import ArgumentError, ExternalError

DRIVER_ENTRY_POINT = 'iotile_transport_nrfble.driver'


class DriverGeneration(enum.Enum):
    """The native driver variant that must back an adapter."""

    V2 = "v2"
    V3 = "v3"

    @classmethod
    def from_tag(cls, tag: str) -> 'DriverGeneration':
        """Look up a generation by its tag, raising ArgumentError if unknown."""

        try:
            return cls(tag)
        except ValueError:
            raise ArgumentError("Unknown driver generation", tag=tag,
                                known=[x.value for x in cls]) from None


class DriverBackend(Protocol):
    """What the discovery engine needs from one driver generation."""

    async def enumerate(self) -> List[RawDeviceDescriptor]:
        """List all devices currently attached to this computer.

        Raise any exception to report that enumeration failed.
        """

    def create_adapter(self) -> object:
        """Synchronously construct an opaque driver adapter object."""


class DriverRegistry:
    """The set of driver backends, one per driver generation.

    Args:
        backends: A backend for every DriverGeneration.
        enumerator: The generation whose backend is used to list devices.
            Any generation can see every attached device so only one of them
            is asked.
    """

    def __init__(self, backends: Dict[DriverGeneration, DriverBackend],
                 enumerator: DriverGeneration = DriverGeneration.V2):
        missing = [gen.value for gen in DriverGeneration if gen not in backends]
        if len(missing) > 0:
            raise ArgumentError("A driver backend is required for every generation", missing=missing)

        if not isinstance(enumerator, DriverGeneration):
            enumerator = DriverGeneration.from_tag(enumerator)

        self._backends = dict(backends)
        self.enumerator = enumerator

    @classmethod
    def from_entry_points(cls, group: str = DRIVER_ENTRY_POINT,
                          enumerator: DriverGeneration = DriverGeneration.V2) -> 'DriverRegistry':
        """Load one backend per generation from installed plugins.

        Raises:
            ExternalError: A plugin could not be loaded, had an unknown name
                or a generation has no plugin installed.
        """

        logger = logging.getLogger(__name__)
        backends = {}

        for entry in entrypoints.get_group_all(group):
            try:
                generation = DriverGeneration.from_tag(entry.name)
            except ArgumentError:
                raise ExternalError("Driver plugin registered under an unknown generation",
                                    name=entry.name, group=group) from None

            if generation in backends:
                raise ExternalError("The same driver generation was installed twice", name=entry.name)

            try:
                factory = entry.load()
                backends[generation] = factory()
            except (ImportError, AttributeError, TypeError, ValueError) as exc:
                raise ExternalError("Error loading driver plugin", name=entry.name, error=str(exc)) from exc

            logger.debug("Loaded driver backend %s from %s", generation.value, entry)

        missing = [gen.value for gen in DriverGeneration if gen not in backends]
        if len(missing) > 0:
            raise ExternalError("No driver plugin installed for some generations", missing=missing, group=group)

        return cls(backends, enumerator)

    def backend(self, generation: DriverGeneration) -> DriverBackend:
        """Get the backend for a driver generation."""

        return self._backends[generation]

    async def enumerate(self) -> List[RawDeviceDescriptor]:
        """List attached devices through the enumerator generation's backend."""

        return list(await self._backends[self.enumerator].enumerate())

    def create_adapter(self, generation: DriverGeneration) -> object:
        """Construct an opaque driver adapter object for the given generation."""

        return self._backends[generation].create_adapter()


class CallbackDriverBackend:
    """Wrap a callback based native binding as a DriverBackend.

    The pc-ble-driver bindings expose ``get_adapters(callback)``, which calls
    ``callback(err, devices)`` exactly once from an arbitrary thread, and an
    ``Adapter`` class.  This class turns that into a coroutine.

    Args:
        binding: The native binding module or an object with the same shape.
        loop: The loop that enumeration results are delivered to.
    """

    def __init__(self, binding, loop: BackgroundEventLoop = SharedLoop):
        self._binding = binding
        self._loop = loop
        self._logger = logging.getLogger(__name__)

    async def enumerate(self) -> List[RawDeviceDescriptor]:
        future = self._loop.create_future()
        asyncio_loop = self._loop.get_loop()

        def _resolve(err, devices):
            if future.done():
                self._logger.warning("Ignoring extra enumeration callback from %s", self._binding)
                return

            if err:
                if not isinstance(err, BaseException):
                    err = ExternalError("Native driver failed to list adapters", error=err)

                future.set_exception(err)
            else:
                future.set_result(devices or [])

        def _on_adapters(err, devices=None):
            asyncio_loop.call_soon_threadsafe(_resolve, err, devices)

        self._binding.get_adapters(_on_adapters)
        devices = await future

        return [_as_descriptor(x) for x in devices]

    def create_adapter(self) -> object:
        return self._binding.Adapter()


class SerialPortBackend:
    """A DriverBackend that enumerates serial ports with pyserial.

    Useful when the native library can build adapters but does not offer its
    own enumeration.  ``comports()`` blocks so it is run on an executor
    thread.

    Args:
        adapter_factory: Called with no arguments to build a driver adapter.
        loop: The loop whose executor performs the blocking enumeration.
        list_ports: Replacement for ``serial.tools.list_ports.comports``.
    """

    def __init__(self, adapter_factory: Callable[[], object], loop: BackgroundEventLoop = SharedLoop,
                 list_ports: Optional[Callable[[], list]] = None):
        if list_ports is None:
            list_ports = serial.tools.list_ports.comports

        self._adapter_factory = adapter_factory
        self._list_ports = list_ports
        self._loop = loop

    async def enumerate(self) -> List[RawDeviceDescriptor]:
        ports = await self._loop.run_in_executor(self._list_ports)
        return [RawDeviceDescriptor.from_port_info(port) for port in ports]

    def create_adapter(self) -> object:
        return self._adapter_factory()


def _as_descriptor(device) -> RawDeviceDescriptor:
    if isinstance(device, RawDeviceDescriptor):
        return device

    if isinstance(device, dict):
        return RawDeviceDescriptor.from_dict(device)

    return RawDeviceDescriptor.from_port_info(device)
