#
# Copyright (C) 2026  Red Hat, Inc.
#
# This copyrighted material is made available to anyone wishing to use,
# modify, copy, or redistribute it subject to the terms and conditions of
# the GNU General Public License v.2, or (at your option) any later version.
# This program is distributed in the hope that it will be useful, but WITHOUT
# ANY WARRANTY expressed or implied, including the implied warranties of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU General
# Public License for more details.  You should have received a copy of the
# GNU General Public License along with this program; if not, write to the
# Free Software Foundation, Inc., 31 Milk Street #960789 Boston, MA
# 02196 USA.  Any Red Hat trademarks that are incorporated in the
# source code or documentation are not subject to the GNU General Public
# License and may only be used or replicated with the express permission of
# Red Hat, Inc.
#
from pyautoinst.autoinst_loggers import get_module_logger
from pyautoinst.core.i18n import P_
from pyautoinst.modules.common.errors.storage import UnknownDeviceError

log = get_module_logger(__name__)

__all__ = ["AutoinstCreatorResult", "CreatorResult"]


class CreatorResult(object):
    """Result of creating planned devices in a storage.

    The result owns the storage with the created devices and
    maps names of the created devices to their planned devices.
    """

    def __init__(self, storage, devices_map=None):
        """Create a new result.

        :param storage: a storage object with the created devices
        :param devices_map: a dictionary of device names and planned devices
        """
        self._storage = storage
        self._devices_map = dict(devices_map or {})

    @property
    def storage(self):
        """The storage object with the created devices."""
        return self._storage

    @property
    def devices_map(self):
        """Names of the created devices and their planned devices.

        :return: a dictionary of names and planned devices
        """
        return dict(self._devices_map)

    def created_names(self, predicate=None):
        """Get names of the created devices.

        :param predicate: a function that accepts a planned device or None
        :return: a list of device names
        """
        return [
            name for name, planned in self._devices_map.items()
            if predicate is None or predicate(planned)
        ]

    def merge(self, other):
        """Merge this result with a result of a later step.

        The storage of the other result was derived from the storage
        of this result, so it is used as the merged storage. It has to
        contain all devices created by both results.

        :param other: an instance of CreatorResult
        :return: a new instance of CreatorResult
        :raise: UnknownDeviceError if a created device is missing
        """
        devices_map = dict(self._devices_map)
        devices_map.update(other._devices_map)

        missing = [
            name for name in devices_map
            if other.storage.devicetree.get_device_by_name(name) is None
        ]

        if missing:
            raise UnknownDeviceError(P_(
                "The created device {} is missing in the merged storage.",
                "The created devices {} are missing in the merged storage.",
                len(missing)
            ).format(", ".join(missing)))

        return CreatorResult(other.storage, devices_map)

    def replace_planned_devices(self, replacements):
        """Replace the planned devices of the result.

        :param replacements: a list of pairs of the old and the new planned device
        :return: a new instance of CreatorResult
        """
        new_devices = {id(old): new for old, new in replacements}
        devices_map = {
            name: new_devices.get(id(planned), planned)
            for name, planned in self._devices_map.items()
        }
        return CreatorResult(self._storage, devices_map)

    def __repr__(self):
        return "CreatorResult(devices={})".format(list(self._devices_map))


class AutoinstCreatorResult(object):
    """Result of the unattended proposal."""

    def __init__(self, creator_result, planned_devices, degraded_devices=None):
        """Create a new result.

        :param creator_result: the final instance of CreatorResult
        :param planned_devices: a list of all placed planned devices
        :param degraded_devices: a list of planned devices placed with flexible sizes
        """
        self._creator_result = creator_result
        self._planned_devices = list(planned_devices)
        self._degraded_devices = list(degraded_devices or [])

    @property
    def creator_result(self):
        """The final creator result."""
        return self._creator_result

    @property
    def storage(self):
        """The final storage object."""
        return self._creator_result.storage

    @property
    def devices_map(self):
        """Names of the created devices and their planned devices."""
        return self._creator_result.devices_map

    @property
    def planned_devices(self):
        """All created and reused planned devices.

        Logical volumes are part of their volume groups.
        """
        return list(self._planned_devices)

    @property
    def degraded_devices(self):
        """Planned devices that were placed only with flexible sizes."""
        return list(self._degraded_devices)

    @property
    def shrunk_devices(self):
        """Planned devices created smaller than their minimal size."""
        shrunk = []

        for name, planned in self._creator_result.devices_map.items():
            device = self.storage.devicetree.get_device_by_name(name)

            if device is not None and device.size < planned.min_size:
                shrunk.append(planned)

        return shrunk

    def __repr__(self):
        return "AutoinstCreatorResult(devices={}, degraded={})".format(
            list(self._creator_result.devices_map), self._degraded_devices
        )
