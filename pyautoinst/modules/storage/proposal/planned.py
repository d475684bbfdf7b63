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
from pyautoinst.core.i18n import _
from pyautoinst.modules.common.errors.storage import UnknownDeviceError

log = get_module_logger(__name__)

__all__ = [
    "DevicesCollection",
    "LvmLv",
    "LvmVg",
    "Md",
    "Partition",
    "PlannedDevice",
    "StrayBlkDevice",
]


class PlannedDevice(object):
    """A base class of the planned devices.

    A planned device describes a device that should exist in the final
    storage. It is reused if it has a name of an existing device to reuse.
    Otherwise, it should be created.

    Sizes are numbers of bytes. The maximal size None means unlimited.
    The weight is taken into account only for flexible sizes.

    The planned device is processed with a storage object that provides:

        copy()
        devicetree.get_device_by_name(name)
        resize_device(device, size)
        format_device(device, format_type, mount_point=None)
        mount_device(device, mount_point)

    """

    def __init__(self, reuse_name=None, min_size=0, max_size=None, weight=0,
                 mount_point=None, format_type=None, reformat=False, resize=False,
                 raid_name=None, lvm_volume_group_name=None):
        """Create a new planned device.

        :param reuse_name: a name of the device to reuse or None
        :param min_size: a minimal size in bytes
        :param max_size: a maximal size in bytes or None
        :param weight: a weight of the device
        :param mount_point: a mount point or None
        :param format_type: a type of the format or None
        :param reformat: should be the reused device formatted?
        :param resize: should be the reused device resized to the maximal size?
        :param raid_name: a name of the MD RAID the device is a member of
        :param lvm_volume_group_name: a name of the volume group the device is a PV of
        """
        if max_size is not None and max_size < min_size:
            raise ValueError(
                "The maximal size {} is smaller than the minimal size {}.".format(
                    max_size, min_size
                )
            )

        self.reuse_name = reuse_name
        self.min_size = min_size
        self.max_size = max_size
        self.weight = weight
        self.mount_point = mount_point
        self.format_type = format_type
        self.reformat = reformat
        self.resize = resize
        self.raid_name = raid_name
        self.lvm_volume_group_name = lvm_volume_group_name

    @property
    def reuse(self):
        """Should be an existing device reused?"""
        return bool(self.reuse_name)

    def find_reused_device(self, storage):
        """Find the device to reuse.

        :param storage: a storage object
        :return: a device
        :raise: UnknownDeviceError if the device doesn't exist
        """
        device = storage.devicetree.get_device_by_name(self.reuse_name)

        if device is None:
            raise UnknownDeviceError(
                _("The device \"{}\" to reuse does not exist.").format(self.reuse_name)
            )

        return device

    def shrink(self, storage):
        """Will be the reused device shrunk?

        :param storage: a storage object
        :return: True or False
        """
        if not self.reuse or not self.resize or self.max_size is None:
            return False

        device = self.find_reused_device(storage)
        return self.max_size < device.size

    def reuse_device(self, storage):
        """Reuse the existing device in the given storage.

        The storage is modified in place.

        :param storage: a storage object
        :return: the reused device
        """
        device = self.find_reused_device(storage)
        log.debug("Reusing %s for %s.", device.name, self)
        self._reuse_device(storage, device)
        return device

    def _reuse_device(self, storage, device):
        """Apply the planned changes to the reused device."""
        if self.resize and self.max_size is not None and self.max_size != device.size:
            storage.resize_device(device, self.max_size)

        if self.reformat:
            storage.format_device(device, self.format_type, mount_point=self.mount_point)
        elif self.mount_point:
            storage.mount_device(device, self.mount_point)

    def _get_attributes(self):
        return {
            "reuse_name": self.reuse_name,
            "min_size": self.min_size,
            "max_size": self.max_size,
            "weight": self.weight,
            "mount_point": self.mount_point,
            "raid_name": self.raid_name,
            "lvm_volume_group_name": self.lvm_volume_group_name,
        }

    def __repr__(self):
        attributes = ", ".join(
            "{}={!r}".format(key, value)
            for key, value in self._get_attributes().items()
            if value is not None
        )
        return "{}({})".format(self.__class__.__name__, attributes)


class Partition(PlannedDevice):
    """A planned partition."""

    def __init__(self, disk=None, primary=False, **kwargs):
        """Create a new planned partition.

        :param disk: a name of the disk the partition should be created on
        :param primary: should be the partition primary?
        """
        super().__init__(**kwargs)
        self.disk = disk
        self.primary = primary

    def _get_attributes(self):
        attributes = super()._get_attributes()
        attributes["disk"] = self.disk
        attributes["primary"] = self.primary
        return attributes


class StrayBlkDevice(PlannedDevice):
    """A planned block device that cannot be partitioned.

    For example, a Xen virtual partition or a whole disk used
    as a physical volume. Such devices are always reused.
    """

    def __init__(self, reuse_name, **kwargs):
        if not reuse_name:
            raise ValueError("A stray block device must be reused.")

        super().__init__(reuse_name=reuse_name, **kwargs)


class Md(PlannedDevice):
    """A planned MD RAID."""

    def __init__(self, name, level=None, **kwargs):
        """Create a new planned MD RAID.

        :param name: a name of the MD RAID
        :param level: a RAID level
        """
        super().__init__(**kwargs)
        self.name = name
        self.level = level

    def _get_attributes(self):
        attributes = super()._get_attributes()
        attributes["name"] = self.name
        attributes["level"] = self.level
        return attributes


class LvmLv(PlannedDevice):
    """A planned LVM logical volume."""

    def __init__(self, logical_volume_name, **kwargs):
        super().__init__(**kwargs)
        self.logical_volume_name = logical_volume_name

    def _get_attributes(self):
        attributes = super()._get_attributes()
        attributes["logical_volume_name"] = self.logical_volume_name
        return attributes


class LvmVg(PlannedDevice):
    """A planned LVM volume group.

    The logical volumes are kept in the given order.
    """

    def __init__(self, volume_group_name, lvs=None, **kwargs):
        super().__init__(**kwargs)
        self.volume_group_name = volume_group_name
        self.lvs = list(lvs or [])

    def _reuse_device(self, storage, device):
        # The logical volumes are reused separately.
        log.debug("Keeping the volume group %s.", device.name)

    def _get_attributes(self):
        attributes = super()._get_attributes()
        attributes["volume_group_name"] = self.volume_group_name
        attributes["lvs"] = self.lvs
        return attributes


class DevicesCollection(object):
    """A read-only collection of the planned devices.

    The devices are classified by their class. Only partitions, stray
    block devices, MD RAIDs and volume groups are accepted. Logical
    volumes are part of their volume groups.
    """

    _device_types = (Partition, StrayBlkDevice, Md, LvmVg)

    def __init__(self, devices):
        """Create a new collection.

        :param devices: a list of planned devices
        :raise: TypeError for an unsupported device
        """
        self._devices = list(devices)
        self._devices_by_type = {t: [] for t in self._device_types}

        for device in self._devices:
            device_type = type(device)

            if device_type not in self._devices_by_type:
                raise TypeError("Unsupported planned device: {!r}".format(device))

            self._devices_by_type[device_type].append(device)

    @property
    def partitions(self):
        """The planned partitions."""
        return list(self._devices_by_type[Partition])

    @property
    def stray_blk_devices(self):
        """The planned stray block devices."""
        return list(self._devices_by_type[StrayBlkDevice])

    @property
    def mds(self):
        """The planned MD RAIDs."""
        return list(self._devices_by_type[Md])

    @property
    def vgs(self):
        """The planned volume groups."""
        return list(self._devices_by_type[LvmVg])

    @property
    def lvs(self):
        """The planned logical volumes of all volume groups."""
        return [lv for vg in self.vgs for lv in vg.lvs]

    def __iter__(self):
        return iter(self._devices)

    def __len__(self):
        return len(self._devices)

    def __repr__(self):
        return "DevicesCollection({!r})".format(self._devices)
