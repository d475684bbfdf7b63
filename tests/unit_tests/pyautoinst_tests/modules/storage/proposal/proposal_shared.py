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
import copy
from textwrap import dedent
from types import SimpleNamespace

from pykickstart.parser import KickstartParser
from pykickstart.version import makeVersion

from pyautoinst.modules.common.errors.storage import NoDiskSpaceError
from pyautoinst.modules.storage.proposal.creator_result import CreatorResult
from pyautoinst.modules.storage.proposal.engine import StorageEngine


class FakeDevice(object):
    """A device of the fake storage."""

    def __init__(self, name, size, container=None, parents=None):
        self.name = name
        self.size = size
        self.container = container
        self.parents = list(parents or [])
        self.format_type = None
        self.mount_point = None

    def __repr__(self):
        return "FakeDevice({}, {})".format(self.name, self.size)


class FakeStorage(object):
    """A storage with disks, devices and a simple space accounting.

    Devices allocated in a container (a disk or a volume group)
    consume its space.
    """

    def __init__(self, disks=None, devices=None):
        self.disks = dict(disks or {})
        self.devices = {}
        self.actions = []

        for device in devices or []:
            self.add_device(device)

    @property
    def devicetree(self):
        return self

    def get_device_by_name(self, name):
        return self.devices.get(name)

    def add_device(self, device):
        self.devices[device.name] = device

    def get_container_size(self, name):
        if name in self.disks:
            return self.disks[name]

        return self.devices[name].size

    def get_free_space(self, name):
        used = sum(d.size for d in self.devices.values() if d.container == name)
        return self.get_container_size(name) - used

    def copy(self):
        return copy.deepcopy(self)

    def resize_device(self, device, size):
        if device.container and size - device.size > self.get_free_space(device.container):
            raise NoDiskSpaceError("Not enough space to resize {}.".format(device.name))

        self.actions.append(("resize", device.name, size))
        device.size = size

    def format_device(self, device, format_type, mount_point=None):
        self.actions.append(("format", device.name, format_type))
        device.format_type = format_type
        device.mount_point = mount_point

    def mount_device(self, device, mount_point):
        self.actions.append(("mount", device.name, mount_point))
        device.mount_point = mount_point


def distribute_sizes(devices, space):
    """Distribute the space between the devices.

    Every device gets its minimal size. The rest is split
    proportionally to the weights up to the maximal sizes.

    :return: a list of sizes or None if the devices don't fit
    """
    needed = sum(d.min_size for d in devices)

    if needed > space:
        return None

    left = space - needed
    total_weight = sum(d.weight for d in devices)
    sizes = []

    for device in devices:
        size = device.min_size

        if total_weight:
            size += left * device.weight // total_weight

        if device.max_size is not None:
            size = min(size, device.max_size)

        sizes.append(size)

    return sizes


class FakeEngine(StorageEngine):
    """A storage engine for the fake storage.

    The primary slots limit the number of primary partitions plus
    the extended partition on a disk. Once the extended partition
    is created, no primary partition can follow.
    """

    def __init__(self, primary_slots=None):
        self.primary_slots = primary_slots
        self.distribution_calls = []

    def get_free_spaces(self, storage, disk_names):
        return [(name, storage.get_free_space(name)) for name in disk_names]

    def best_distribution(self, partitions, free_spaces):
        self.distribution_calls.append(list(partitions))
        assigned = {name: [] for name, _size in free_spaces}
        slots = {name: 0 for name, _size in free_spaces}
        extended = {name: False for name, _size in free_spaces}
        used = {name: 0 for name, _size in free_spaces}

        for partition in partitions:
            for name, size in free_spaces:
                if partition.disk and partition.disk != name:
                    continue

                if used[name] + partition.min_size > size:
                    continue

                if self.primary_slots is not None:
                    if partition.primary and extended[name]:
                        continue

                    needs_slot = partition.primary or not extended[name]

                    if needs_slot and slots[name] >= self.primary_slots:
                        continue

                    if needs_slot:
                        slots[name] += 1

                    if not partition.primary:
                        extended[name] = True

                assigned[name].append(partition)
                used[name] += partition.min_size
                break
            else:
                return None

        distribution = []

        for name, size in free_spaces:
            sizes = distribute_sizes(assigned[name], size)
            distribution.extend(zip(assigned[name], [name] * len(sizes), sizes))

        return distribution

    def create_partitions(self, storage, distribution):
        devices_map = {}

        for partition, disk_name, size in distribution:
            number = 1 + sum(1 for d in storage.devices.values() if d.container == disk_name)
            name = "{}{}".format(disk_name, number)
            storage.add_device(FakeDevice(name, size, container=disk_name))
            devices_map[name] = partition

        return CreatorResult(storage, devices_map)

    def create_md(self, storage, md, device_names):
        members = [storage.get_device_by_name(name) for name in device_names]
        size = min(m.size for m in members)
        storage.add_device(FakeDevice(md.name, size, parents=device_names))
        return CreatorResult(storage, {md.name: md})

    def create_volumes(self, storage, vg, pv_names):
        devices_map = {}

        if not vg.reuse:
            pvs = [storage.get_device_by_name(name) for name in pv_names]
            size = sum(pv.size for pv in pvs)
            storage.add_device(FakeDevice(vg.volume_group_name, size, parents=pv_names))
            devices_map[vg.volume_group_name] = vg

        lvs = [lv for lv in vg.lvs if not lv.reuse]
        sizes = distribute_sizes(lvs, storage.get_free_space(vg.volume_group_name))

        if sizes is None:
            raise NoDiskSpaceError("Not enough space in {}.".format(vg.volume_group_name))

        for lv, size in zip(lvs, sizes):
            name = "{}-{}".format(vg.volume_group_name, lv.logical_volume_name)
            storage.add_device(FakeDevice(name, size, container=vg.volume_group_name))
            devices_map[name] = lv

        return CreatorResult(storage, devices_map)


def parse_kickstart(ks_in):
    """Parse the kickstart string and return the kickstart data."""
    handler = makeVersion()
    parser = KickstartParser(handler)
    parser.readKickstartFromString(dedent(ks_in))
    return handler


def part_data(**kwargs):
    """Create data of the part command."""
    data = {
        "mountpoint": "",
        "fstype": "",
        "size": None,
        "grow": False,
        "maxSizeMB": 0,
        "disk": "",
        "onPart": "",
        "primOnly": False,
        "format": True,
        "resize": False,
    }
    data.update(kwargs)
    return SimpleNamespace(**data)


def volgroup_data(**kwargs):
    """Create data of the volgroup command."""
    data = {
        "vgname": "",
        "physvols": [],
        "preexist": False,
        "format": True,
    }
    data.update(kwargs)
    return SimpleNamespace(**data)


def logvol_data(**kwargs):
    """Create data of the logvol command."""
    data = {
        "name": "",
        "vgname": "",
        "mountpoint": "",
        "fstype": "",
        "size": None,
        "grow": False,
        "maxSizeMB": 0,
        "percent": 0,
        "preexist": False,
        "format": True,
        "resize": False,
    }
    data.update(kwargs)
    return SimpleNamespace(**data)


def kickstart_data(partitions=(), raids=(), volgroups=(), logvols=(), onlyuse=()):
    """Create the kickstart data."""
    return SimpleNamespace(
        partition=SimpleNamespace(partitions=list(partitions)),
        raid=SimpleNamespace(raidList=list(raids)),
        volgroup=SimpleNamespace(vgList=list(volgroups)),
        logvol=SimpleNamespace(lvList=list(logvols)),
        ignoredisk=SimpleNamespace(onlyuse=list(onlyuse)),
    )
