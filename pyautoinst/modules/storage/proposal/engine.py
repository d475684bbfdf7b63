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
from abc import ABC, abstractmethod

__all__ = ["StorageEngine"]


class StorageEngine(ABC):
    """The storage engine used by the unattended proposal.

    The engine knows how to find free space on disks and how to write
    the planned devices into a storage object. It never modifies the
    planned devices.
    """

    @abstractmethod
    def get_free_spaces(self, storage, disk_names):
        """Get free spaces of the given disks.

        :param storage: a storage object
        :param disk_names: a list of disk names
        :return: a list of free spaces
        """
        return []

    @abstractmethod
    def best_distribution(self, partitions, free_spaces):
        """Find the best distribution of the partitions in the free spaces.

        Partitions are processed in the given order.

        :param partitions: a list of planned partitions
        :param free_spaces: a list of free spaces
        :return: a distribution or None if the partitions don't fit
        """
        return None

    @abstractmethod
    def create_partitions(self, storage, distribution):
        """Create partitions of the distribution.

        :param storage: a storage object to modify
        :param distribution: a distribution of partitions
        :return: an instance of CreatorResult
        """
        return None

    @abstractmethod
    def create_md(self, storage, md, device_names):
        """Create a MD RAID.

        :param storage: a storage object to modify
        :param md: a planned MD RAID
        :param device_names: names of the member devices
        :return: an instance of CreatorResult
        """
        return None

    @abstractmethod
    def create_volumes(self, storage, vg, pv_names):
        """Create or extend a volume group and create its logical volumes.

        :param storage: a storage object to modify
        :param vg: a planned volume group
        :param pv_names: names of the physical volumes
        :return: an instance of CreatorResult
        :raise: NoDiskSpaceError if the logical volumes don't fit
        """
        return None
