"""Plain value objects describing a remote GATT database."""

import itertools

_characteristic_counter = itertools.count(1)


class Characteristic:
    """A characteristic found on a remote device.

    Each characteristic gets an instance id that is unique within the process
    and prefixed by the instance id of the service that contains it.

    Args:
        service_instance_id (str): Instance id of the parent service.
        uuid (str): The characteristic UUID.
        properties (dict): The permitted operations, e.g. ``{'read': True}``.
        value (bytes): The last known value.
    """

    def __init__(self, service_instance_id, uuid, properties, value):
        self._instance_id = "%s.%d" % (service_instance_id, next(_characteristic_counter))
        self._service_instance_id = service_instance_id
        self._name = None
        self.uuid = uuid
        self.properties = properties
        self.value = value

    @property
    def instance_id(self):
        return self._instance_id

    @property
    def service_instance_id(self):
        """The instance id of the GATT service this characteristic belongs to."""

        return self._service_instance_id

    @property
    def name(self):
        """A human readable name, falling back to the uuid."""

        if self._name:
            return self._name

        return self.uuid

    @name.setter
    def name(self, name):
        self._name = name

    def __repr__(self):
        return "<Characteristic %s uuid=%s>" % (self._instance_id, self.uuid)
