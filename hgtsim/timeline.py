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
The time subdivision induced by the nodes of a species tree, and the
lineages that coexist within each of its intervals.
"""
from __future__ import annotations

import math

import numpy as np

from . import core


def make_breakpoints(depths):
    """
    Returns the sorted distinct values of the specified depths. For the tree
    ``((A:1,B:2)C:1,D:5)R:0;`` these are ``[0, 1, 2, 3, 5]``.
    """
    depths = np.array(depths, dtype=float)
    if len(depths) == 0:
        raise ValueError("Cannot build breakpoints from an empty tree")
    if np.any(np.isnan(depths)):
        bad = np.where(np.isnan(depths))[0]
        raise ValueError(f"Depths are not comparable (NaN) at indexes {bad}")
    return np.unique(depths)


def make_intervals(breakpoints):
    """
    Returns the lengths of the intervals between consecutive breakpoints,
    with a zero prepended so that the result lines up with the breakpoints.
    Breakpoints ``[0, 1, 2, 3, 5]`` give intervals ``[0, 1, 1, 1, 2]``.
    """
    return np.insert(np.diff(breakpoints), 0, 0)


def find_closest_index(breakpoints, value):
    """
    Returns the index of the breakpoint closest to the specified value. Values
    outside of the breakpoints map to the first or last index, and a value
    exactly half way between two breakpoints maps to the lower one.
    """
    if math.isnan(value):
        raise ValueError("Cannot locate a NaN value")
    n = len(breakpoints)
    index = int(np.searchsorted(breakpoints, value, side="left"))
    if index < n and breakpoints[index] == value:
        return index
    if index == 0:
        return 0
    if index == n:
        return n - 1
    if value - breakpoints[index - 1] <= breakpoints[index] - value:
        return index - 1
    return index


def find_contemporaneity(tree, breakpoints):
    """
    Returns, for each interval, the list of the indexes of the lineages that
    are alive during it. A lineage is the branch above a node: it is alive in
    intervals ``start + 1`` to ``end`` (inclusive), where ``start`` and ``end``
    are the breakpoints closest to the top and bottom of the branch. The
    lineage is not alive on the interval that ends at its own start, and the
    root lineage is alive in no interval.
    """
    # Quadratic in the number of nodes in the worst case.
    contemporaneity = [[] for _ in range(len(breakpoints))]
    for j, node in enumerate(tree):
        start = find_closest_index(breakpoints, node.depth - node.length)
        end = find_closest_index(breakpoints, node.depth)
        for k in range(start + 1, end + 1):
            contemporaneity[k].append(j)
    return contemporaneity


def count_species(contemporaneity):
    return np.array([len(lineages) for lineages in contemporaneity], dtype=float)


class Timeline:
    """
    The breakpoints, intervals and contemporaneity of a species tree. All
    attributes are computed once when the instance is created and are read
    only afterwards, so that a single instance can be shared by all the gene
    trees simulated from one species tree.

    :param ArenaTree tree: A species tree in which every node has a depth.
    """

    def __init__(self, tree):
        depths = [node.depth for node in tree]
        if any(depth is None for depth in depths):
            raise ValueError("All nodes must have a depth assigned")
        self._breakpoints = make_breakpoints(depths)
        self._breakpoints.flags.writeable = False
        self._intervals = make_intervals(self._breakpoints)
        self._intervals.flags.writeable = False
        self._contemporaneity = tuple(
            tuple(lineages)
            for lineages in find_contemporaneity(tree, self._breakpoints)
        )
        self._species_counts = count_species(self._contemporaneity)
        self._species_counts.flags.writeable = False

    @property
    def breakpoints(self):
        """
        The distinct node depths, in increasing order.
        """
        return self._breakpoints

    @property
    def intervals(self):
        """
        The length of the interval ending at each breakpoint; the first value
        is always zero.
        """
        return self._intervals

    @property
    def contemporaneity(self):
        """
        The indexes of the lineages alive during the interval ending at each
        breakpoint.
        """
        return self._contemporaneity

    @property
    def species_counts(self):
        """
        The number of lineages alive during each interval, as floats.
        """
        return self._species_counts

    @property
    def num_intervals(self):
        return len(self._breakpoints)

    def __str__(self):
        col_titles = ["index", "breakpoint", "interval", "count"]
        data = [
            [
                str(j),
                core.format_float(self._breakpoints[j]),
                core.format_float(self._intervals[j]),
                str(int(self._species_counts[j])),
            ]
            for j in range(self.num_intervals)
        ]
        return core.text_table("Timeline", col_titles, ">>>>", data)
