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
import unittest

import pytest

from pyautoinst.core.constants import GiB
from pyautoinst.modules.common.errors.storage import NoDiskSpaceError, UnknownDeviceError
from pyautoinst.modules.storage.proposal.planned import DevicesCollection, LvmLv, LvmVg, Md, \
    Partition, PlannedDevice, StrayBlkDevice
from tests.unit_tests.pyautoinst_tests.modules.storage.proposal.proposal_shared import \
    FakeDevice, FakeStorage


class PlannedDeviceTestCase(unittest.TestCase):
    """Test the planned devices."""

    def _get_storage(self):
        return FakeStorage(
            disks={"sda": 100 * GiB},
            devices=[
                FakeDevice("sda1", 60 * GiB, container="sda"),
                FakeDevice("sda2", 30 * GiB, container="sda"),
            ]
        )

    def test_sizes(self):
        """Test the sizes of a planned device."""
        device = PlannedDevice(min_size=1 * GiB)
        assert device.min_size == 1 * GiB
        assert device.max_size is None
        assert device.weight == 0

        device = PlannedDevice(min_size=1 * GiB, max_size=1 * GiB)
        assert device.max_size == 1 * GiB

        with pytest.raises(ValueError):
            PlannedDevice(min_size=2 * GiB, max_size=1 * GiB)

    def test_reuse(self):
        """Test the reuse property."""
        assert not Partition().reuse
        assert not Partition(reuse_name="").reuse
        assert Partition(reuse_name="sda1").reuse

    def test_find_reused_device(self):
        """Test the lookup of the reused device."""
        storage = self._get_storage()

        device = Partition(reuse_name="sda1").find_reused_device(storage)
        assert device.name == "sda1"

        with pytest.raises(UnknownDeviceError) as cm:
            Partition(reuse_name="sdz1").find_reused_device(storage)

        assert "sdz1" in str(cm.value)

    def test_shrink(self):
        """Test the shrink method."""
        storage = self._get_storage()

        device = Partition(reuse_name="sda1", resize=True, max_size=40 * GiB)
        assert device.shrink(storage)

        device = Partition(reuse_name="sda1", resize=True, max_size=70 * GiB)
        assert not device.shrink(storage)

        device = Partition(reuse_name="sda1", resize=False, max_size=40 * GiB)
        assert not device.shrink(storage)

        device = Partition(resize=True, max_size=40 * GiB)
        assert not device.shrink(storage)

    def test_reuse_device_resize(self):
        """Test the reuse of a resized device."""
        storage = self._get_storage()

        device = Partition(reuse_name="sda2", resize=True, max_size=35 * GiB)
        reused = device.reuse_device(storage)

        assert reused.name == "sda2"
        assert reused.size == 35 * GiB
        assert storage.actions == [("resize", "sda2", 35 * GiB)]

    def test_reuse_device_no_space(self):
        """Test the reuse of a device that can't grow."""
        storage = self._get_storage()
        device = Partition(reuse_name="sda2", resize=True, max_size=50 * GiB)

        with pytest.raises(NoDiskSpaceError):
            device.reuse_device(storage)

        assert storage.get_device_by_name("sda2").size == 30 * GiB

    def test_reuse_device_format(self):
        """Test the reuse of a formatted or mounted device."""
        storage = self._get_storage()

        Partition(
            reuse_name="sda1",
            reformat=True,
            format_type="xfs",
            mount_point="/home"
        ).reuse_device(storage)

        Partition(
            reuse_name="sda2",
            mount_point="/srv"
        ).reuse_device(storage)

        assert storage.actions == [
            ("format", "sda1", "xfs"),
            ("mount", "sda2", "/srv"),
        ]
        assert storage.get_device_by_name("sda1").mount_point == "/home"
        assert storage.get_device_by_name("sda2").mount_point == "/srv"

    def test_reuse_vg(self):
        """Test the reuse of a volume group."""
        storage = FakeStorage(devices=[FakeDevice("vg0", 10 * GiB)])

        vg = LvmVg("vg0", reuse_name="vg0", mount_point="/ignored")
        assert vg.reuse_device(storage).name == "vg0"
        assert storage.actions == []

    def test_stray_blk_device(self):
        """Test the stray block device."""
        device = StrayBlkDevice("xvda1", mount_point="/")
        assert device.reuse
        assert device.reuse_name == "xvda1"

        with pytest.raises(ValueError):
            StrayBlkDevice(None)

    def test_repr(self):
        """Test the string representation."""
        device = Partition(disk="sda", min_size=1024, mount_point="/")
        assert repr(device) == \
            "Partition(min_size=1024, weight=0, mount_point='/', disk='sda', primary=False)"

        device = Md("md0", level="raid1")
        assert "name='md0'" in repr(device)
        assert "level='raid1'" in repr(device)


class DevicesCollectionTestCase(unittest.TestCase):
    """Test the collection of planned devices."""

    def test_classification(self):
        """Test the classification of the devices."""
        p1 = Partition(mount_point="/")
        p2 = Partition(mount_point="/home")
        stray = StrayBlkDevice("xvda1")
        md = Md("md0")
        lv1 = LvmLv("root")
        lv2 = LvmLv("swap")
        vg1 = LvmVg("vg0", lvs=[lv1])
        vg2 = LvmVg("vg1", lvs=[lv2])

        collection = DevicesCollection([vg1, p1, md, stray, p2, vg2])

        assert collection.partitions == [p1, p2]
        assert collection.stray_blk_devices == [stray]
        assert collection.mds == [md]
        assert collection.vgs == [vg1, vg2]
        assert collection.lvs == [lv1, lv2]
        assert list(collection) == [vg1, p1, md, stray, p2, vg2]
        assert len(collection) == 6

    def test_empty(self):
        """Test an empty collection."""
        collection = DevicesCollection([])
        assert collection.partitions == []
        assert collection.lvs == []
        assert len(collection) == 0

    def test_unsupported(self):
        """Test unsupported devices."""
        with pytest.raises(TypeError):
            DevicesCollection([LvmLv("root")])

        with pytest.raises(TypeError):
            DevicesCollection([PlannedDevice()])

    def test_read_only(self):
        """Test that the collection can't be modified by the caller."""
        p1 = Partition()
        collection = DevicesCollection([p1])

        collection.partitions.append(Partition())
        assert collection.partitions == [p1]
