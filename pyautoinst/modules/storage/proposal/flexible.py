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
from pyautoinst.modules.common.errors.storage import NoDiskSpaceError

log = get_module_logger(__name__)

__all__ = ["attempt_with_flexible_sizes", "flexible_devices"]


def flexible_devices(devices, min_size=1):
    """Return new planned devices with flexible sizes.

    The minimal size of every device is removed and its weight is set
    to the original minimal size. The space can be distributed in the
    same proportion as requested instead of failing.

    The given devices are not modified.

    :param devices: a list of planned devices
    :param min_size: a new minimal size in bytes
    :return: a list of new planned devices
    """
    new_devices = []

    for device in devices:
        new_device = copy.copy(device)
        new_device.weight = device.min_size
        new_device.min_size = min_size
        new_devices.append(new_device)

    return new_devices


def attempt_with_flexible_sizes(attempt, devices, min_size=1, enabled=True):
    """Place the devices with the requested sizes or with flexible sizes.

    The attempt is a function that accepts a list of planned devices
    and raises NoDiskSpaceError if the devices don't fit. If the first
    attempt fails, the attempt is called once more with new flexible
    devices. The error of the second attempt is not handled.

    :param attempt: a function that places the given planned devices
    :param devices: a list of planned devices
    :param min_size: a minimal size of the flexible devices in bytes
    :param enabled: is the second attempt allowed?
    :return: a tuple of the attempt's result and the list of flexible
             devices or None if the requested sizes were used
    """
    try:
        return attempt(devices), None
    except NoDiskSpaceError as e:
        if not enabled or not devices:
            raise

        log.info("Retrying with flexible sizes: %s", e)

    relaxed_devices = flexible_devices(devices, min_size)
    return attempt(relaxed_devices), relaxed_devices
