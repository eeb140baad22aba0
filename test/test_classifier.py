"""Tests of driver generation classification."""

import pytest
from iotile_transport_nrfble.classifier import AdapterClassifier, classify_device
from iotile_transport_nrfble.descriptor import RawDeviceDescriptor, get_instance_id
from iotile_transport_nrfble.drivers import DriverGeneration
from iotile_transport_nrfble.exceptions import (ClassificationError, MissingInstanceIdError,
                                                UnknownAdapterVendorError, UnsupportedHardwareError)


@pytest.mark.parametrize("serial, generation", [
    ("680123456", DriverGeneration.V2),
    ("681999999", DriverGeneration.V2),
    ("682000000", DriverGeneration.V3),
    ("683654321", DriverGeneration.V3),
    ("000683654321", DriverGeneration.V3),
])
def test_revision_table(serial, generation):
    """Make sure the development kit digit picks the right driver."""

    result = classify_device(RawDeviceDescriptor(serial_number=serial))

    assert result.instance_id == serial
    assert result.generation is generation


@pytest.mark.parametrize("serial", ["684123456", "689000000"])
def test_unsupported_revision(serial):
    with pytest.raises(UnsupportedHardwareError):
        classify_device(RawDeviceDescriptor(serial_number=serial))


@pytest.mark.parametrize("serial", ["12345", "68012345", "6801234567a", "FTDI1234"])
def test_unknown_vendor(serial):
    with pytest.raises(UnknownAdapterVendorError):
        classify_device(RawDeviceDescriptor(serial_number=serial))


def test_instance_id_fallback():
    """The port name is used when there is no serial number."""

    desc = RawDeviceDescriptor(port="/dev/ttyACM0")
    assert get_instance_id(desc) == "/dev/ttyACM0"

    desc = RawDeviceDescriptor(serial_number="680123456", port="/dev/ttyACM0")
    assert get_instance_id(desc) == "680123456"

    # A port name is not a Segger serial number
    with pytest.raises(UnknownAdapterVendorError):
        classify_device(RawDeviceDescriptor(port="/dev/ttyACM0"))


def test_missing_instance_id():
    with pytest.raises(MissingInstanceIdError) as excinfo:
        classify_device(RawDeviceDescriptor(serial_number="", port=None))

    assert isinstance(excinfo.value, ClassificationError)


def test_custom_table():
    """Classification rules can be supplied as data."""

    classifier = AdapterClassifier(pattern=r'^NRF([0-9])$', revisions={5: DriverGeneration.V3})

    assert classifier.classify(RawDeviceDescriptor(serial_number="NRF5")).generation is DriverGeneration.V3

    with pytest.raises(UnsupportedHardwareError):
        classifier.classify(RawDeviceDescriptor(serial_number="NRF0"))


def test_descriptor_builders():
    """Descriptors can be built from native binding dicts and pyserial ports."""

    desc = RawDeviceDescriptor.from_dict({'serialNumber': '680123456', 'comName': 'COM3',
                                          'manufacturer': 'SEGGER'})
    assert desc == RawDeviceDescriptor('680123456', 'COM3', 'SEGGER')

    desc = RawDeviceDescriptor.from_dict({'serial_number': '680123456', 'port': 'COM3'})
    assert desc.manufacturer is None
    assert desc.port == 'COM3'

    class _PortInfo:
        device = '/dev/ttyACM1'
        serial_number = None
        manufacturer = 'MBED'

    desc = RawDeviceDescriptor.from_port_info(_PortInfo())
    assert desc == RawDeviceDescriptor(None, '/dev/ttyACM1', 'MBED')
