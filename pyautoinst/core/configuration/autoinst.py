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
import os

from pyautoinst.autoinst_loggers import get_module_logger
from pyautoinst.core.configuration.base import Configuration
from pyautoinst.core.configuration.proposal import ProposalSection
from pyautoinst.core.constants import AUTOINST_CONFIG_DEFAULT, AUTOINST_CONFIG_ENV

log = get_module_logger(__name__)

__all__ = ["conf", "AutoinstConfiguration"]


class AutoinstConfiguration(Configuration):
    """Representation of the planner configuration."""

    @classmethod
    def from_defaults(cls):
        """Get the default configuration.

        :return: an instance of AutoinstConfiguration
        """
        config = cls()
        config.set_from_defaults()
        return config

    def __init__(self):
        super().__init__()
        self._proposal = ProposalSection(
            "Storage Proposal", self.get_parser()
        )

    @property
    def proposal(self):
        """The Storage Proposal section."""
        return self._proposal

    def set_from_defaults(self):
        """Set the configuration from the default configuration file.

        Read the file specified by the AUTOINST_CONFIG environment
        variable if it exists. Otherwise, read the configuration file
        shipped with the package.
        """
        path = os.environ.get(AUTOINST_CONFIG_ENV, "")

        if not path or not os.path.exists(path):
            path = AUTOINST_CONFIG_DEFAULT

        self.read(path)
        self.validate()

    def set_from_files(self, paths):
        """Set the configuration from the given files and directories.

        :param paths: a list of paths to files and directories
        """
        for path in paths:
            if not path or not os.path.exists(path):
                log.debug("Skipping a missing configuration source %s.", path)
                continue

            if os.path.isdir(path):
                self.read_from_directory(path)
            else:
                self.read(path)

        self.validate()


conf = AutoinstConfiguration.from_defaults()
