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
Random sampling of horizontal transfer events on a species tree.
"""
from __future__ import annotations

import dataclasses
import logging
from typing import List
from typing import Union

import numpy as np

from . import core
from . import exceptions

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class TransferEvent:
    """
    A transfer from the lineage above node ``donor`` into the lineage above
    node ``recipient`` at the specified time (measured from the root of the
    species tree). Nodes are identified by their index in the arena tree.
    """

    donor: int
    recipient: int
    time: float

    def asdict(self):
        return dataclasses.asdict(self)


def make_cdf(intervals, species_counts):
    """
    Returns the cumulative distribution of the time of a transfer over the
    intervals of a timeline. The weight of an interval is its length times
    the number of lineages alive during it; the result is normalised so that
    its last value is 1.
    """
    weights = np.asarray(intervals, dtype=float) * np.asarray(
        species_counts, dtype=float
    )
    if len(weights) == 0:
        raise exceptions.DegenerateTimelineError("The timeline has no intervals")
    cdf = np.cumsum(weights)
    total = cdf[-1]
    if not total > 0:
        raise exceptions.DegenerateTimelineError(
            "The total weight of the timeline is zero: the species tree has no "
            "branch that can receive a transfer"
        )
    return cdf / total


def choose_from_cdf(cdf, breakpoints, rng):
    """
    Draws a transfer time from the specified CDF. Returns the tuple
    ``(time, index)`` where ``index`` is the interval containing the time,
    i.e. ``breakpoints[index - 1] <= time < breakpoints[index]``.
    """
    r = rng.random()
    # The first entry strictly greater than r, so that intervals of zero
    # weight (and the leading zero entry) can never be selected.
    index = int(np.searchsorted(cdf, r, side="right"))
    if index == len(cdf):
        raise exceptions.SamplingError(
            f"r={r} is greater than the last value of the CDF, which should be 1.0. "
            f"The CDF is: {cdf}"
        )
    assert index > 0
    lower = cdf[index - 1]
    upper = cdf[index]
    span = breakpoints[index] - breakpoints[index - 1]
    time = (r - lower) / (upper - lower) * span + breakpoints[index - 1]
    return float(time), index


def random_pair(lineages, rng):
    """
    Returns two distinct members of the specified sequence as an ordered
    pair, or None if it has fewer than two members.
    """
    n = len(lineages)
    if n < 2:
        return None
    first = rng.integers(n)
    second = rng.integers(n)
    while second == first:
        second = rng.integers(n)
    return int(lineages[first]), int(lineages[second])


class TransferSampler:
    """
    Draws transfer events uniformly over the branches of a species tree.

    The generator is always passed in by the caller and never stored, so
    that the same sampler can be used to draw reproducibly for many gene
    trees from one seeded generator.

    :param Timeline timeline: The timeline of the species tree.
    """

    def __init__(self, timeline):
        self.timeline = timeline
        self._cdf = make_cdf(timeline.intervals, timeline.species_counts)
        self._cdf.flags.writeable = False

    @property
    def cdf(self):
        return self._cdf

    def __str__(self):
        timeline = self.timeline
        col_titles = ["index", "breakpoint", "interval", "count", "cdf"]
        data = [
            [
                str(j),
                core.format_float(timeline.breakpoints[j]),
                core.format_float(timeline.intervals[j]),
                str(int(timeline.species_counts[j])),
                core.format_float(self._cdf[j]),
            ]
            for j in range(timeline.num_intervals)
        ]
        return core.text_table("Transfer time distribution", col_titles, ">>>>>", data)

    def sample_event(self, rng) -> Union[TransferEvent, None]:
        """
        Draws a single transfer. Returns None if fewer than two lineages are
        alive at the chosen time.
        """
        time, index = choose_from_cdf(self._cdf, self.timeline.breakpoints, rng)
        pair = random_pair(self.timeline.contemporaneity[index], rng)
        if pair is None:
            return None
        donor, recipient = pair
        return TransferEvent(donor=donor, recipient=recipient, time=time)

    def sample(self, num_transfers, rng) -> List[TransferEvent]:
        """
        Draws the specified number of independent transfers and returns those
        that could be placed, sorted by time.
        """
        if not core.isinteger(num_transfers) or num_transfers < 0:
            raise ValueError("The number of transfers must be a non-negative integer")
        events = []
        for _ in range(int(num_transfers)):
            event = self.sample_event(rng)
            if event is not None:
                events.append(event)
        dropped = int(num_transfers) - len(events)
        if dropped > 0:
            logger.debug(
                "Dropped %d of %d transfers drawn in intervals with fewer than "
                "two lineages",
                dropped,
                num_transfers,
            )
        events.sort(key=lambda event: event.time)
        return events
