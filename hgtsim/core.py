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
Core functions and classes used throughout hgtsim.
"""
from __future__ import annotations

import os
import random
from typing import Dict
from typing import List
from typing import Union

import numpy as np

__version__ = "undefined"
try:
    from . import _version

    __version__ = _version.version
except ImportError:
    pass


# Default seeds come from one generator per process ID; forked workers
# would otherwise inherit the parent's generator and repeat its seeds.
_default_seed_generators: Dict[int, random.Random] = {}


def get_random_seed() -> int:
    pid = os.getpid()
    if pid not in _default_seed_generators:
        _default_seed_generators[pid] = random.Random()
    return _default_seed_generators[pid].randint(1, 2**32 - 1)


def set_default_seed(seed: Union[int, None]):
    """
    Makes the default seeds of this process deterministic, or random again
    if ``seed`` is None.
    """
    if seed is None:
        _default_seed_generators.pop(os.getpid(), None)
    else:
        _default_seed_generators[os.getpid()] = random.Random(seed)


def get_rng(random_seed: Union[int, None] = None) -> np.random.Generator:
    """
    Returns the single generator that a batch of simulations draws from. If
    no seed is given one is taken from the per-process seed generator.
    """
    if random_seed is None:
        random_seed = get_random_seed()
    if not isinteger(random_seed) or random_seed < 0:
        raise ValueError("The random seed must be a non-negative integer")
    return np.random.default_rng(int(random_seed))


def isinteger(value) -> bool:
    """
    Returns True if the specified value can be converted losslessly to an
    integer.
    """
    if isinstance(value, (int, np.integer)) and not isinstance(value, bool):
        return True
    if isinstance(value, (float, np.floating)):
        return float(value).is_integer()
    return False


def format_float(value: Union[float, None], precision: int = 6) -> str:
    if value is None:
        return "None"
    return f"{value:.{precision}f}"


def text_table(
    caption: str,
    column_titles: List[str],
    column_alignments: str,
    rows: List[List[str]],
) -> str:
    """
    Returns the rows as a boxed text table below the caption. There is one
    alignment character (``<``, ``>`` or ``^``) per column.
    """
    assert len(column_alignments) == len(column_titles)
    widths = [
        max(len(row[j]) for row in [column_titles] + rows)
        for j in range(len(column_titles))
    ]

    def format_row(row):
        cells = [
            f" {cell:{align}{width}} "
            for cell, align, width in zip(row, column_alignments, widths)
        ]
        return "│" + "│".join(cells) + "│\n"

    hline = "─" * (sum(widths) + 3 * len(widths) - 1)
    out = f"{caption}\n┌{hline}┐\n"
    out += format_row(column_titles)
    out += f"├{hline}┤\n"
    for row in rows:
        out += format_row(row)
    out += f"└{hline}┘\n"
    return out
