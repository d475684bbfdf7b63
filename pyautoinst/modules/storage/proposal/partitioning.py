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
from pyautoinst.modules.common.errors.storage import (
    NoDiskSpaceError,
    StorageConfigurationError,
    UnknownDeviceError,
)
from pyautoinst.modules.storage.proposal.devices_creator import AutoinstDevicesCreator
from pyautoinst.modules.storage.proposal.kickstart import get_disk_names, get_planned_devices

log = get_module_logger(__name__)

__all__ = ["AutoinstPartitioningTask"]


class AutoinstPartitioningTask(object):
    """A task for the unattended partitioning."""

    def __init__(self, storage, engine, data, stray_device_names=(), disk_names=None):
        """Create a task.

        :param storage: a storage object with conflicting devices already removed
        :param engine: an instance of StorageEngine
        :param data: an instance of kickstart data
        :param stray_device_names: names of existing devices that can't be partitioned
        :param disk_names: a list of disk names or None to use the kickstart data
        """
        self._storage = storage
        self._engine = engine
        self._data = data
        self._stray_device_names = stray_device_names
        self._disk_names = disk_names

    @property
    def name(self):
        """Name of this task."""
        return "Configure the unattended partitioning"

    def run(self):
        """Do the partitioning and handle the errors.

        :return: an instance of AutoinstCreatorResult
        :raise: StorageConfigurationError
        """
        log.info(self.name)

        try:
            return self._run()
        except (NoDiskSpaceError, UnknownDeviceError, ValueError) as e:
            self._handle_storage_error(e, str(e))

    def _run(self):
        """Do the partitioning."""
        planned_devices = get_planned_devices(self._data, self._stray_device_names)

        disk_names = self._disk_names
        if disk_names is None:
            disk_names = get_disk_names(self._data)

        creator = AutoinstDevicesCreator(self._storage, self._engine)
        return creator.populated_storage(planned_devices, disk_names)

    def _handle_storage_error(self, exception, message):
        """Handle the storage error.

        :param exception: an exception to handle
        :param message: an error message to use
        :raise: StorageConfigurationError
        """
        log.error("Storage configuration has failed: %s", message)
        raise StorageConfigurationError(message) from exception
