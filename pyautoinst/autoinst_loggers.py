#
# autoinst_loggers.py : provides the planner specific loggers
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
import logging

from pyautoinst.core import constants


def get_module_logger(module_name):
    """Return a sub-logger based on a module __name__ attribute.

    We strip the "pyautoinst." prefix (if any) and put the rest
    behind "autoinst.". The result is the name of the sub-logger.
    """
    if module_name.startswith("pyautoinst."):
        module_name = module_name[len("pyautoinst."):]
    return logging.getLogger("%s.%s" % (constants.LOGGER_AUTOINST_ROOT, module_name))


def get_autoinst_root_logger():
    return logging.getLogger(constants.LOGGER_AUTOINST_ROOT)
