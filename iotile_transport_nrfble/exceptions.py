"""Exceptions raised while discovering and managing nRF5 adapters.

All exceptions carry a message plus keyword parameters describing what went
wrong, following the IOTileException convention.  Generic argument,
environment and internal errors are the ones iotile-core defines.
"""

from iotile.core.exceptions import IOTileException
from iotile.core.exceptions import ArgumentError, ExternalError, InternalError  # pylint:disable=unused-import;Reexported


class AdapterDiscoveryError(IOTileException):
    """Base class for all errors reported by the discovery engine."""

    pass


class ClassificationError(AdapterDiscoveryError):
    """A single enumerated device could not be bound to a driver generation.

    Classification errors are per-device and never abort a discovery cycle.
    The device is left out of that cycle's results and the error is emitted
    as an ``error`` event.
    """

    pass


class MissingInstanceIdError(ClassificationError):
    """The device reported neither a serial number nor a port name."""

    pass


class UnknownAdapterVendorError(ClassificationError):
    """The serial number does not look like any supported debug probe."""

    pass


class UnsupportedHardwareError(ClassificationError):
    """The serial number encodes a development kit revision we have no driver for."""

    pass


class AdapterCreationError(AdapterDiscoveryError):
    """The driver could not construct its adapter object for a classified device."""

    pass


class EnumerationError(AdapterDiscoveryError):
    """The driver layer failed to list connected devices.

    This aborts the current discovery cycle without touching the registry.
    The next timer tick tries again.
    """

    pass


class DuplicateConstructionError(AdapterDiscoveryError):
    """The discovery engine was constructed directly instead of through get_instance()."""

    pass
