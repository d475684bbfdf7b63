#
# constants.py: planner constants
#
# Copyright (C) 2026  Red Hat, Inc.  All rights reserved.
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.
#
import os

# Name of the root logger.
LOGGER_AUTOINST_ROOT = "autoinst"

# Gettext domain of the user-facing messages.
TRANSLATION_DOMAIN = "pyautoinst"

# Configuration.
AUTOINST_CONFIG_ENV = "AUTOINST_CONFIG"
AUTOINST_CONFIG_DEFAULT = os.path.join(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "data", "autoinst.conf"
)

# Size units in bytes.
KiB = 1024
MiB = 1024 * KiB
GiB = 1024 * MiB
TiB = 1024 * GiB

# Names of the proposal stages.
STAGE_PARTITIONS = "partitions"
STAGE_STRAY_DEVICES = "stray devices"
STAGE_RAID = "raid"
STAGE_LVM = "lvm"

# Events emitted at the stage boundaries.
EVENT_STAGE_ENTERED = "stage entered"
EVENT_UNIT_PLACED = "unit placed"
EVENT_UNIT_DEGRADED = "unit degraded"
EVENT_UNIT_FAILED = "unit failed"
EVENT_DEVICE_REUSED = "device reused"

# Kickstart prefixes of the member requests.
KICKSTART_RAID_MEMBER_PREFIX = "raid."
KICKSTART_PV_PREFIX = "pv."
