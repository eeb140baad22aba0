"""Decide which driver generation an attached device needs.

nRF5 development kits ship with a Segger J-Link OB debug probe whose serial
number has the form ``...68Dxxxxxx``.  The digit ``D`` right after ``68``
identifies the development kit, and therefore which SoftDevice API (and
which pc-ble-driver generation) the connectivity firmware speaks.

The pattern and the digit table are data, not logic, so they can be
replaced when new hardware is supported.
"""

import re
from collections import namedtuple
from typing import Dict, Optional
from .descriptor import RawDeviceDescriptor, get_instance_id
from .drivers import DriverGeneration
from .exceptions import UnknownAdapterVendorError, UnsupportedHardwareError

SEGGER_SERIAL_PATTERN = r'^.*68([0-9])[0-9]{6}$'

DEFAULT_REVISION_TABLE = {
    0: DriverGeneration.V2,
    1: DriverGeneration.V2,
    2: DriverGeneration.V3,
    3: DriverGeneration.V3
}

Classification = namedtuple("Classification", ['instance_id', 'generation'])


class AdapterClassifier:
    """Map an enumerated device to the driver generation it needs.

    This is a pure function of its rule table, it does no I/O and keeps no
    state between calls.

    Args:
        pattern: Regular expression with one capture group holding the
            development kit revision digit.
        revisions: Maps the captured digit to a DriverGeneration.
    """

    def __init__(self, pattern: str = SEGGER_SERIAL_PATTERN,
                 revisions: Optional[Dict[int, DriverGeneration]] = None):
        if revisions is None:
            revisions = DEFAULT_REVISION_TABLE

        self._pattern = re.compile(pattern)
        self._revisions = dict(revisions)

    def classify(self, descriptor: RawDeviceDescriptor) -> Classification:
        """Classify a device.

        Returns:
            Classification: The device's instance id and driver generation.

        Raises:
            MissingInstanceIdError: The device has no serial number or port.
            UnknownAdapterVendorError: The instance id is not a Segger serial number.
            UnsupportedHardwareError: The development kit revision has no driver.
        """

        instance_id = get_instance_id(descriptor)
        return Classification(instance_id, self.generation_for(instance_id))

    def generation_for(self, instance_id: str) -> DriverGeneration:
        """Classify a bare instance id."""

        match = self._pattern.match(instance_id)
        if match is None:
            raise UnknownAdapterVendorError("Not able to determine version of pc-ble-driver to use",
                                            instance_id=instance_id)

        revision = int(match.group(1), 10)
        generation = self._revisions.get(revision)
        if generation is None:
            raise UnsupportedHardwareError("Unsupported nRF5 development kit",
                                           instance_id=instance_id, revision=revision)

        return generation


_DEFAULT_CLASSIFIER = AdapterClassifier()


def classify_device(descriptor: RawDeviceDescriptor) -> Classification:
    """Classify a device with the default Segger rule table."""

    return _DEFAULT_CLASSIFIER.classify(descriptor)
