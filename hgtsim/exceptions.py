#
# Copyright (C) 2024 The hgtsim developers
#
# This file is part of hgtsim.
#
# hgtsim is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# hgtsim is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with hgtsim.  If not, see <http://www.gnu.org/licenses/>.
#
"""
Exceptions defined in hgtsim.
"""


class HgtsimException(Exception):
    """
    Superclass of all exceptions thrown.
    """


class TreeStructureError(HgtsimException):
    """
    The parent/child links of an arena tree are inconsistent. This always
    indicates a defect in the code that edited the tree, not bad input.
    """


class DegenerateTimelineError(HgtsimException):
    """
    The species tree has no time extent or no coexisting lineages, so no
    transfer time can be drawn.
    """


class SamplingError(HgtsimException):
    """
    A random draw fell outside of the cumulative distribution table.
    """


class FileFormatError(HgtsimException):
    """
    Some file format error was detected.
    """
