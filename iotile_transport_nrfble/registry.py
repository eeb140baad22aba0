"""The authoritative mapping from device instance id to live adapter."""

import logging
from typing import Dict, List, Optional
from .adapter import NrfAdapter
from .advisories import PlatformAdvisories
from iotile.core.utilities.async_tools import BackgroundEventLoop, SharedLoop
from .classifier import AdapterClassifier
from .descriptor import RawDeviceDescriptor, get_instance_id
from .drivers import DriverRegistry
from .exceptions import AdapterCreationError, AdapterDiscoveryError, ClassificationError


class ReconcileResult:
    """The outcome of one reconciliation.

    Attributes:
        added (list of NrfAdapter): Adapters created by this pass.
        removed (list of NrfAdapter): Adapters destroyed by this pass.
        errors (list of AdapterDiscoveryError): Per-device failures.
    """

    def __init__(self):
        self.added = []  #type: List[NrfAdapter]
        self.removed = []  #type: List[NrfAdapter]
        self.errors = []  #type: List[AdapterDiscoveryError]

    @property
    def changed(self) -> bool:
        return len(self.added) > 0 or len(self.removed) > 0


class _NullLifecycle:
    def attach(self, adapter):
        pass

    def detach(self, adapter):
        pass


class AdapterRegistry:
    """Keep exactly one NrfAdapter per attached device.

    The mapping is only changed by :meth:`reconcile`, which must run inside
    the BackgroundEventLoop so that two passes never interleave.

    Args:
        drivers: Used to construct driver adapter objects.
        classifier: Decides the driver generation of new devices.
        advisories: Supplies platform notices for new adapters.
        lifecycle: Object with ``attach(adapter)`` and ``detach(adapter)``
            that is told when adapters are created and destroyed.
        loop: The loop new adapters send their notifications on.
    """

    #pylint:disable=too-many-arguments;All arguments have sane defaults
    def __init__(self, drivers: DriverRegistry, classifier: Optional[AdapterClassifier] = None,
                 advisories: Optional[PlatformAdvisories] = None, lifecycle=None,
                 loop: BackgroundEventLoop = SharedLoop):
        if classifier is None:
            classifier = AdapterClassifier()

        if advisories is None:
            advisories = PlatformAdvisories()

        if lifecycle is None:
            lifecycle = _NullLifecycle()

        self._drivers = drivers
        self._classifier = classifier
        self._advisories = advisories
        self._lifecycle = lifecycle
        self._loop = loop
        self._adapters = {}  #type: Dict[str, NrfAdapter]

        self._logger = logging.getLogger(__name__)
        self._logger.addHandler(logging.NullHandler())

    def reconcile(self, descriptors: List[RawDeviceDescriptor]) -> ReconcileResult:
        """Bring the registry in line with a fresh enumeration.

        Devices whose id is already known survive untouched.  New devices are
        classified and get a new adapter.  Known devices that are missing from
        ``descriptors`` have their adapter destroyed.  A device that fails to
        be identified, classified or constructed is reported in the result's
        errors and skipped, it never aborts the pass.

        Returns:
            ReconcileResult: What changed.
        """

        result = ReconcileResult()
        candidates_for_removal = set(self._adapters)

        for descriptor in descriptors:
            try:
                instance_id = get_instance_id(descriptor)
            except ClassificationError as err:
                self._logger.warning("Skipping device %r: %s", descriptor, err)
                result.errors.append(err)
                continue

            if instance_id in self._adapters:
                candidates_for_removal.discard(instance_id)
                continue

            try:
                adapter = self._create_adapter(instance_id, descriptor)
            except AdapterDiscoveryError as err:
                self._logger.warning("Skipping device %s: %s", instance_id, err)
                result.errors.append(err)
                continue

            self._adapters[instance_id] = adapter
            self._lifecycle.attach(adapter)
            result.added.append(adapter)
            self._logger.info("Added adapter %s using driver %s", instance_id, adapter.generation.value)

        for instance_id in candidates_for_removal:
            adapter = self._adapters[instance_id]
            self._lifecycle.detach(adapter)
            del self._adapters[instance_id]
            result.removed.append(adapter)
            self._logger.info("Removed adapter %s", instance_id)

        return result

    def _create_adapter(self, instance_id, descriptor):
        generation = self._classifier.generation_for(instance_id)

        try:
            driver_adapter = self._drivers.create_adapter(generation)
        except Exception as err:  #pylint:disable=broad-except;Native driver failures are reported per device
            raise AdapterCreationError("Driver could not create adapter", instance_id=instance_id,
                                       generation=generation.value, error=str(err)) from err

        message = self._advisories.lookup(descriptor.manufacturer)
        return NrfAdapter(generation, driver_adapter, instance_id, descriptor.port, descriptor.serial_number,
                          message, loop=self._loop)

    def snapshot(self) -> Dict[str, NrfAdapter]:
        """Get a copy of the current mapping that later passes will not change."""

        return dict(self._adapters)

    def get(self, instance_id: str) -> Optional[NrfAdapter]:
        return self._adapters.get(instance_id)

    def __contains__(self, instance_id):
        return instance_id in self._adapters

    def __len__(self):
        return len(self._adapters)
