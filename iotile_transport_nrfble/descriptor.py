"""What the operating system tells us about a connected device."""

from typing import Optional
from .exceptions import MissingInstanceIdError


class RawDeviceDescriptor:
    """An enumerated device as reported by the driver layer.

    These objects are ephemeral, a new one is produced for every device on
    every enumeration.  Empty strings are normalized to None.

    Args:
        serial_number: The USB serial number of the device, if known.
        port: The serial port name (``COM3``, ``/dev/ttyACM0``), if known.
        manufacturer: The USB manufacturer string, if known.
    """

    __slots__ = ['serial_number', 'port', 'manufacturer']

    def __init__(self, serial_number: Optional[str] = None, port: Optional[str] = None,
                 manufacturer: Optional[str] = None):
        self.serial_number = serial_number or None
        self.port = port or None
        self.manufacturer = manufacturer or None

    @classmethod
    def from_dict(cls, data: dict) -> 'RawDeviceDescriptor':
        """Build a descriptor from a dictionary.

        Both python style keys (``serial_number``, ``port``) and the keys used
        by the native pc-ble-driver bindings (``serialNumber``, ``comName``)
        are understood.
        """

        serial_number = data.get('serial_number', data.get('serialNumber'))
        port = data.get('port', data.get('comName'))
        return cls(serial_number, port, data.get('manufacturer'))

    @classmethod
    def from_port_info(cls, info) -> 'RawDeviceDescriptor':
        """Build a descriptor from a pyserial ListPortInfo object."""

        return cls(getattr(info, 'serial_number', None), getattr(info, 'device', None),
                   getattr(info, 'manufacturer', None))

    def __eq__(self, other):
        if not isinstance(other, RawDeviceDescriptor):
            return NotImplemented

        return (self.serial_number, self.port, self.manufacturer) == \
            (other.serial_number, other.port, other.manufacturer)

    def __hash__(self):
        return hash((self.serial_number, self.port, self.manufacturer))

    def __repr__(self):
        return "RawDeviceDescriptor(serial_number=%r, port=%r, manufacturer=%r)" % \
            (self.serial_number, self.port, self.manufacturer)


def get_instance_id(descriptor: RawDeviceDescriptor) -> str:
    """Get the stable identity of a device across enumerations.

    This is the serial number if there is one, otherwise the port name.

    Raises:
        MissingInstanceIdError: The device has neither.
    """

    if descriptor.serial_number:
        return descriptor.serial_number

    if descriptor.port:
        return descriptor.port

    raise MissingInstanceIdError("Failed to get adapter instance id", descriptor=descriptor)
