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
from pyautoinst.core.configuration.autoinst import conf
from pyautoinst.core.constants import KICKSTART_PV_PREFIX, KICKSTART_RAID_MEMBER_PREFIX, MiB
from pyautoinst.core.i18n import _
from pyautoinst.modules.storage.proposal.planned import (
    DevicesCollection,
    LvmLv,
    LvmVg,
    Md,
    Partition,
    StrayBlkDevice,
)

log = get_module_logger(__name__)

__all__ = ["KickstartDevicesPlanner", "get_disk_names", "get_planned_devices"]


def get_disk_names(data):
    """Get names of disks to use.

    :param data: an instance of kickstart data
    :return: a list of disk names
    """
    return list(data.ignoredisk.onlyuse)


def get_planned_devices(data, stray_device_names=(), default_size=None):
    """Get the planned devices from the kickstart data.

    :param data: an instance of kickstart data
    :param stray_device_names: names of existing devices that can't be partitioned
    :param default_size: a size in MiB of requests without --size or None
    :return: an instance of DevicesCollection
    """
    planner = KickstartDevicesPlanner(stray_device_names, default_size)
    return planner.plan(data)


class KickstartDevicesPlanner(object):
    """Plan devices from the part, raid, volgroup and logvol commands."""

    def __init__(self, stray_device_names=(), default_size=None):
        """Create a new planner.

        :param stray_device_names: names of existing devices that can't be partitioned
        :param default_size: a size in MiB of requests without --size or None
        """
        if default_size is None:
            default_size = conf.proposal.default_size

        self._stray_device_names = set(stray_device_names)
        self._default_size = default_size
        self._raid_members = {}
        self._physical_volumes = {}

    def plan(self, data):
        """Plan devices from the kickstart data.

        :param data: an instance of kickstart data
        :return: an instance of DevicesCollection
        :raise: ValueError if the data are not valid
        """
        self._raid_members = self._get_raid_members(data)
        self._physical_volumes = self._get_physical_volumes(data)

        devices = []
        devices.extend(self._plan_partitions(data))
        devices.extend(self._plan_raids(data))
        devices.extend(self._plan_volgroups(data))

        return DevicesCollection(devices)

    @staticmethod
    def _get_raid_members(data):
        """Map the raid.* requests to names of their MD RAIDs."""
        members = {}

        for raid_data in data.raid.raidList:
            for member in raid_data.members:
                members[member] = raid_data.device

        return members

    @staticmethod
    def _get_physical_volumes(data):
        """Map the pv.* requests to names of their volume groups."""
        pvs = {}

        for volgroup_data in data.volgroup.vgList:
            for pv in volgroup_data.physvols:
                pvs[pv] = volgroup_data.vgname

        return pvs

    def _get_member_kwargs(self, mount_point, fstype):
        """Get arguments for the given mount point of a request."""
        if mount_point.startswith(KICKSTART_RAID_MEMBER_PREFIX):
            raid_name = self._raid_members.get(mount_point)

            if not raid_name:
                log.warning("The RAID member %s is not used by any RAID.", mount_point)

            return {"format_type": "mdmember", "raid_name": raid_name}

        if mount_point.startswith(KICKSTART_PV_PREFIX):
            vg_name = self._physical_volumes.get(mount_point)

            if not vg_name:
                log.warning("The physical volume %s is not used by any volume group.",
                            mount_point)

            return {"format_type": "lvmpv", "lvm_volume_group_name": vg_name}

        if mount_point == "swap":
            return {"format_type": "swap"}

        return {
            "format_type": fstype or None,
            "mount_point": mount_point or None
        }

    def _get_size(self, size):
        """Get a size in bytes from the size in MiB."""
        if size is None or size == 0:
            size = self._default_size

        try:
            size = int(size)
        except (TypeError, ValueError) as e:
            raise ValueError(_("The size \"{}\" is invalid.").format(size)) from e

        if size <= 0:
            raise ValueError(_("The size \"{}\" is invalid.").format(size))

        return size * MiB

    def _get_size_kwargs(self, command_data, reused):
        """Get the size limits of a request."""
        if reused:
            if not command_data.resize:
                return {}

            size = self._get_size(command_data.size)
            return {"min_size": size, "max_size": size, "resize": True}

        size = self._get_size(command_data.size)

        if not command_data.grow:
            max_size = size
        elif command_data.maxSizeMB:
            max_size = self._get_size(command_data.maxSizeMB)
        else:
            max_size = None

        return {"min_size": size, "max_size": max_size}

    def _plan_partitions(self, data):
        """Plan devices of the part commands."""
        devices = []

        for partition_data in data.partition.partitions:
            kwargs = self._get_member_kwargs(partition_data.mountpoint, partition_data.fstype)
            reused = bool(partition_data.onPart)
            kwargs.update(self._get_size_kwargs(partition_data, reused))

            if not reused:
                device = Partition(
                    disk=partition_data.disk or None,
                    primary=partition_data.primOnly,
                    **kwargs
                )
            elif partition_data.onPart in self._stray_device_names:
                kwargs.pop("resize", None)
                kwargs.pop("min_size", None)
                kwargs.pop("max_size", None)
                device = StrayBlkDevice(
                    reuse_name=partition_data.onPart,
                    reformat=partition_data.format,
                    **kwargs
                )
            else:
                device = Partition(
                    reuse_name=partition_data.onPart,
                    reformat=partition_data.format,
                    **kwargs
                )

            log.debug("Planned %s for the part command.", device)
            devices.append(device)

        return devices

    def _plan_raids(self, data):
        """Plan devices of the raid commands."""
        devices = []

        for raid_data in data.raid.raidList:
            kwargs = self._get_member_kwargs(raid_data.mountpoint, raid_data.fstype)
            kwargs.pop("raid_name", None)

            if raid_data.preexist:
                kwargs["reuse_name"] = raid_data.device
                kwargs["reformat"] = raid_data.format

            device = Md(
                name=raid_data.device,
                level=raid_data.level or None,
                **kwargs
            )

            log.debug("Planned %s for the raid command.", device)
            devices.append(device)

        return devices

    def _plan_volgroups(self, data):
        """Plan devices of the volgroup and logvol commands."""
        devices = []
        vgs = {}

        for volgroup_data in data.volgroup.vgList:
            reused = volgroup_data.preexist or not volgroup_data.format

            if not volgroup_data.physvols and not reused:
                raise ValueError(_(
                    "Volume group \"{}\" defined without any physical volumes. Either specify "
                    "physical volumes or use --useexisting."
                ).format(volgroup_data.vgname))

            device = LvmVg(
                volume_group_name=volgroup_data.vgname,
                reuse_name=volgroup_data.vgname if reused else None
            )

            vgs[volgroup_data.vgname] = device
            devices.append(device)

        for logvol_data in data.logvol.lvList:
            vg = vgs.get(logvol_data.vgname)

            if vg is None:
                raise ValueError(_(
                    "No volume group exists with the name \"{}\". Specify volume "
                    "groups before logical volumes."
                ).format(logvol_data.vgname))

            vg.lvs.append(self._plan_logvol(logvol_data))

        for device in devices:
            log.debug("Planned %s for the volgroup command.", device)

        return devices

    def _plan_logvol(self, logvol_data):
        """Plan a logical volume of the logvol command."""
        if logvol_data.percent:
            raise ValueError(_(
                "The size of the logical volume \"{}\" can't be specified in percents."
            ).format(logvol_data.name))

        kwargs = self._get_member_kwargs(logvol_data.mountpoint, logvol_data.fstype)
        reused = logvol_data.preexist or not logvol_data.format
        kwargs.update(self._get_size_kwargs(logvol_data, reused))

        if reused:
            kwargs["reuse_name"] = "{}-{}".format(logvol_data.vgname, logvol_data.name)
            kwargs["reformat"] = logvol_data.format

        return LvmLv(logical_volume_name=logvol_data.name, **kwargs)
