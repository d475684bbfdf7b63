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

from pyautoinst.autoinst_loggers import get_module_logger
from pyautoinst.core.configuration.autoinst import conf
from pyautoinst.core.constants import (
    EVENT_DEVICE_REUSED,
    EVENT_STAGE_ENTERED,
    EVENT_UNIT_DEGRADED,
    EVENT_UNIT_FAILED,
    EVENT_UNIT_PLACED,
    STAGE_LVM,
    STAGE_PARTITIONS,
    STAGE_RAID,
    STAGE_STRAY_DEVICES,
)
from pyautoinst.core.i18n import _
from pyautoinst.modules.common.errors.general import AutoinstError
from pyautoinst.modules.common.errors.storage import NoDiskSpaceError, UnknownDeviceError
from pyautoinst.modules.storage.proposal.creator_result import (
    AutoinstCreatorResult,
    CreatorResult,
)
from pyautoinst.modules.storage.proposal.flexible import attempt_with_flexible_sizes

log = get_module_logger(__name__)

__all__ = ["AutoinstDevicesCreator"]


def split_by_reuse(devices):
    """Split the planned devices into the reused and the created ones.

    :param devices: a list of planned devices
    :return: a tuple of lists of reused and created devices
    """
    reused = [d for d in devices if d.reuse]
    created = [d for d in devices if not d.reuse]
    return reused, created


class AutoinstDevicesCreator(object):
    """Create and reuse the planned devices of the unattended installation.

    The given storage is the starting point. The existing devices were
    already removed or resized in it according to the profile, so all
    planned devices are allocated in the free space that is left.

    The devices are processed in layers. Partitions and stray block
    devices are processed first, so they can be used as members of the
    MD RAIDs. All of them can be used as physical volumes of the volume
    groups that are processed last.

    If the planned partitions or the logical volumes of a volume group
    don't fit, there is a second attempt with flexible sizes: the minimal
    sizes are removed and the space is distributed proportionally to
    the original minimal sizes. That doesn't have to be the optimal
    distribution, but it is good enough for the unattended installation.
    """

    def __init__(self, storage, engine, flexible_sizes=None, flexible_min_size=None):
        """Create a new creator.

        :param storage: a storage object to start with
        :param engine: an instance of StorageEngine
        :param flexible_sizes: allow flexible sizes or None to use the configuration
        :param flexible_min_size: a minimal flexible size or None to use the configuration
        """
        self._storage = storage
        self._engine = engine

        if flexible_sizes is None:
            flexible_sizes = conf.proposal.flexible_sizes

        if flexible_min_size is None:
            flexible_min_size = conf.proposal.flexible_min_size

        self._flexible_sizes = flexible_sizes
        self._flexible_min_size = flexible_min_size
        self._degraded_devices = []

    def populated_storage(self, planned_devices, disk_names):
        """Create a storage with all the planned devices.

        :param planned_devices: an instance of DevicesCollection
        :param disk_names: a list of names of disks to use
        :return: an instance of AutoinstCreatorResult
        :raise: NoDiskSpaceError if the devices don't fit
        :raise: UnknownDeviceError if a referenced device doesn't exist
        """
        log.debug("Planned devices: %s", list(planned_devices))
        log.debug("Disk names: %s", disk_names)
        self._degraded_devices = []

        parts_to_create, parts_to_reuse, result = self._process_partitions(
            planned_devices, disk_names
        )

        stray_devices = self._process_stray_devices(
            planned_devices, result.storage
        )

        mds_to_create, mds_to_reuse, result = self._process_mds(
            planned_devices, stray_devices, result
        )

        # Reused partitions, stray block devices and MD RAIDs
        # can be physical volumes of the volume groups.
        devices_to_reuse = parts_to_reuse + stray_devices + mds_to_reuse

        result = self._process_vgs(
            planned_devices, devices_to_reuse, result
        )

        log.debug("Final result: %s", result)
        return AutoinstCreatorResult(
            result,
            parts_to_create + parts_to_reuse + stray_devices
            + mds_to_create + mds_to_reuse + planned_devices.vgs,
            self._degraded_devices
        )

    def _process_partitions(self, planned_devices, disk_names):
        """Create and reuse the planned partitions.

        :return: a tuple of created partitions, reused partitions and a result
        """
        self._trace(EVENT_STAGE_ENTERED, STAGE_PARTITIONS)
        parts_to_reuse, parts_to_create = split_by_reuse(planned_devices.partitions)

        result = self._create_partitions(parts_to_create, disk_names)
        self._reuse_devices(parts_to_reuse, result.storage, STAGE_PARTITIONS)

        return parts_to_create, parts_to_reuse, result

    def _create_partitions(self, partitions, disk_names):
        """Create the planned partitions on the given disks.

        :param partitions: a list of planned partitions to create
        :param disk_names: a list of disk names
        :return: an instance of CreatorResult
        """
        if not partitions:
            log.debug("There are no partitions to create.")
            return CreatorResult(self._storage.copy())

        # The primary partitions go first. There are only
        # a few slots for them in the MS-DOS partition table.
        primary = [p for p in partitions if p.primary]
        non_primary = [p for p in partitions if not p.primary]
        partitions = primary + non_primary
        log.debug("Partitions to create: %s", partitions)

        free_spaces = self._engine.get_free_spaces(self._storage, disk_names)

        def find_distribution(devices):
            distribution = self._engine.best_distribution(devices, free_spaces)

            if distribution is None:
                raise NoDiskSpaceError(
                    _("Could not find a valid partitioning distribution.")
                )

            return distribution

        try:
            distribution, relaxed = self._attempt(find_distribution, partitions)
        except NoDiskSpaceError:
            self._trace(EVENT_UNIT_FAILED, STAGE_PARTITIONS)
            raise

        result = self._engine.create_partitions(self._storage.copy(), distribution)
        return self._placed(STAGE_PARTITIONS, None, result, partitions, relaxed)

    def _process_stray_devices(self, planned_devices, storage):
        """Reuse the planned stray block devices.

        :param planned_devices: an instance of DevicesCollection
        :param storage: a storage object to modify
        :return: a list of stray block devices
        """
        self._trace(EVENT_STAGE_ENTERED, STAGE_STRAY_DEVICES)
        stray_devices = planned_devices.stray_blk_devices

        for device in stray_devices:
            self._reuse_device(device, storage, STAGE_STRAY_DEVICES)

        return stray_devices

    def _process_mds(self, planned_devices, stray_devices, previous_result):
        """Create and reuse the planned MD RAIDs.

        :param planned_devices: an instance of DevicesCollection
        :param stray_devices: a list of reused stray block devices
        :param previous_result: a result of the previous stages
        :return: a tuple of created MD RAIDs, reused MD RAIDs and a result
        """
        self._trace(EVENT_STAGE_ENTERED, STAGE_RAID)
        mds_to_reuse, mds_to_create = split_by_reuse(planned_devices.mds)

        # FIXME: Whole disks and reused partitions can't be members of a new MD RAID.
        members_map = self._get_members_map(
            unit_names=[md.name for md in mds_to_create],
            known_names=[md.name for md in planned_devices.mds],
            get_unit_name=lambda d: d.raid_name,
            result=previous_result,
            reused_devices=stray_devices
        )

        result = previous_result

        for md in mds_to_create:
            members = members_map[md.name]
            self._check_devices(result.storage, members, STAGE_RAID, md.name)
            log.debug("Creating MD RAID %s from %s.", md.name, members)

            md_result = self._engine.create_md(result.storage.copy(), md, members)
            result = result.merge(md_result)
            self._trace(EVENT_UNIT_PLACED, STAGE_RAID, md.name)

        for md in mds_to_reuse:
            self._reuse_device(md, result.storage, STAGE_RAID)

        return mds_to_create, mds_to_reuse, result

    def _process_vgs(self, planned_devices, devices_to_reuse, previous_result):
        """Create and reuse the planned volume groups.

        :param planned_devices: an instance of DevicesCollection
        :param devices_to_reuse: a list of reused devices
        :param previous_result: a result of the previous stages
        :return: an instance of CreatorResult
        """
        self._trace(EVENT_STAGE_ENTERED, STAGE_LVM)
        vgs = planned_devices.vgs
        vg_names = [vg.volume_group_name for vg in vgs]

        pvs_map = self._get_members_map(
            unit_names=vg_names,
            known_names=vg_names,
            get_unit_name=lambda d: d.lvm_volume_group_name,
            result=previous_result,
            reused_devices=devices_to_reuse
        )

        result = previous_result

        # Reused volume groups are processed here as well,
        # because new logical volumes can be created in them.
        for vg in vgs:
            pvs = pvs_map[vg.volume_group_name]
            self._check_devices(result.storage, pvs, STAGE_LVM, vg.volume_group_name)
            result = result.merge(self._create_volumes(result.storage, vg, pvs))

        for vg in vgs:
            if not vg.reuse:
                continue

            self._reuse_device(vg, result.storage, STAGE_LVM)
            self._reuse_devices([lv for lv in vg.lvs if lv.reuse], result.storage, STAGE_LVM)

        return result

    def _create_volumes(self, storage, vg, pvs):
        """Create the logical volumes of the volume group.

        :param storage: a storage object to start with
        :param vg: a planned volume group
        :param pvs: a list of names of physical volumes
        :return: an instance of CreatorResult
        """
        lvs = [lv for lv in vg.lvs if not lv.reuse]
        log.debug("Creating volume group %s with %s on %s.", vg.volume_group_name, lvs, pvs)

        def create_volumes(devices):
            if devices is lvs:
                return self._engine.create_volumes(storage.copy(), vg, pvs)

            new_devices = {id(old): new for old, new in zip(lvs, devices)}
            new_vg = copy.copy(vg)
            new_vg.lvs = [new_devices.get(id(lv), lv) for lv in vg.lvs]
            result = self._engine.create_volumes(storage.copy(), new_vg, pvs)
            return result.replace_planned_devices([(new_vg, vg)])

        try:
            result, relaxed = self._attempt(create_volumes, lvs)
        except NoDiskSpaceError:
            self._trace(EVENT_UNIT_FAILED, STAGE_LVM, vg.volume_group_name)
            raise

        return self._placed(STAGE_LVM, vg.volume_group_name, result, lvs, relaxed)

    def _attempt(self, attempt, devices):
        """Call the attempt with the requested sizes or with flexible sizes."""
        return attempt_with_flexible_sizes(
            attempt,
            devices,
            min_size=self._flexible_min_size,
            enabled=self._flexible_sizes
        )

    def _placed(self, stage, unit, result, devices, relaxed):
        """Finish the placement of a unit.

        If flexible sizes were used, the result will refer to the
        original planned devices and the devices are marked as degraded.

        :return: an instance of CreatorResult
        """
        if relaxed is not None:
            result = result.replace_planned_devices(zip(relaxed, devices))
            self._degraded_devices.extend(devices)
            self._trace(EVENT_UNIT_DEGRADED, stage, unit)

        self._trace(EVENT_UNIT_PLACED, stage, unit)
        return result

    def _reuse_devices(self, devices, storage, stage):
        """Reuse the planned devices in the given storage.

        Shrinking devices are processed first to free
        some space for the growing ones.
        """
        shrinking = []
        not_shrinking = []

        for device in devices:
            if device.shrink(storage):
                shrinking.append(device)
            else:
                not_shrinking.append(device)

        for device in shrinking + not_shrinking:
            self._reuse_device(device, storage, stage)

    def _reuse_device(self, device, storage, stage):
        """Reuse the planned device in the given storage."""
        try:
            device.reuse_device(storage)
        except AutoinstError:
            self._trace(EVENT_UNIT_FAILED, stage, device.reuse_name)
            raise

        self._trace(EVENT_DEVICE_REUSED, stage, device.reuse_name)

    @staticmethod
    def _get_members_map(unit_names, known_names, get_unit_name, result, reused_devices):
        """Map names of units to names of their members.

        The members are devices created so far and the reused devices
        that belong to the units.

        :param unit_names: names of units that need members
        :param known_names: names of all planned units of this kind
        :param get_unit_name: a function that returns a unit name of a planned device
        :param result: a creator result with the created devices
        :param reused_devices: a list of reused planned devices
        :return: a dictionary of unit names and lists of member names
        """
        members_map = {}

        for unit_name in unit_names:
            members_map[unit_name] = result.created_names(
                lambda d, name=unit_name: get_unit_name(d) == name
            )
            members_map[unit_name] += [
                d.reuse_name for d in reused_devices if get_unit_name(d) == unit_name
            ]

        candidates = list(result.devices_map.values()) + list(reused_devices)
        unknown = {get_unit_name(d) for d in candidates} - set(known_names) - {None}

        for unit_name in sorted(unknown):
            log.warning("Devices refer to an unknown planned device %s.", unit_name)

        return members_map

    def _check_devices(self, storage, names, stage, unit):
        """Check that the devices exist in the storage.

        :raise: UnknownDeviceError if a device doesn't exist
        """
        for name in names:
            if storage.devicetree.get_device_by_name(name) is not None:
                continue

            self._trace(EVENT_UNIT_FAILED, stage, unit)
            raise UnknownDeviceError(
                _("The device \"{}\" required by \"{}\" does not exist.").format(name, unit)
            )

    @staticmethod
    def _trace(event, stage, unit=None):
        """Log an event of the proposal."""
        log.info("%s: stage=%s unit=%s", event, stage, unit or "-")
