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
from pyautoinst.core.configuration.base import Section


def _positive_int(value):
    """Convert a string into a positive integer."""
    number = int(value)

    if number <= 0:
        raise ValueError("'{}' is not a positive number".format(value))

    return number


class ProposalSection(Section):
    """The Storage Proposal section."""

    @property
    def flexible_sizes(self):
        """Retry the placement with flexible sizes.

        If the planned partitions or logical volumes don't fit into
        the available space, try once more with their minimal sizes
        removed and weights proportional to the original minimal sizes.
        """
        return self._get_option("flexible_sizes", bool)

    @property
    def flexible_min_size(self):
        """The minimal size of a flexible device in bytes."""
        return self._get_option("flexible_min_size", _positive_int)

    @property
    def default_size(self):
        """Size in MiB of a kickstart request without --size."""
        return self._get_option("default_size", _positive_int)
