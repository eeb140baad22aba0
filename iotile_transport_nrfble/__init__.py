"""Discovery and lifecycle tracking for nRF5 Bluetooth Low Energy adapters.

This package finds nRF5 development kits attached to this computer, decides
which generation of the pc-ble-driver native library each one needs, and
keeps an event driven registry of the adapters that are present.  The entry
point is :meth:`AdapterFactory.get_instance`.
"""

from .adapter import NrfAdapter
from .classifier import AdapterClassifier, Classification, classify_device
from .descriptor import RawDeviceDescriptor, get_instance_id
from .drivers import DriverGeneration, DriverRegistry, CallbackDriverBackend, SerialPortBackend
from .factory import AdapterFactory
from .gatt import Characteristic

__all__ = ['AdapterFactory', 'NrfAdapter', 'AdapterClassifier', 'Classification', 'classify_device',
           'RawDeviceDescriptor', 'get_instance_id', 'DriverGeneration', 'DriverRegistry',
           'CallbackDriverBackend', 'SerialPortBackend', 'Characteristic']
