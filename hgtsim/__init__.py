# Turn off flake8 and reorder-python-imports for this file.
# flake8: NOQA
# noreorder
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
hgtsim simulates gene trees by applying random horizontal gene transfers
to a dated species tree.
"""

from hgtsim.core import __version__

from hgtsim.exceptions import (
    HgtsimException,
    TreeStructureError,
    DegenerateTimelineError,
    SamplingError,
    FileFormatError,
)

from hgtsim.trees import Node
from hgtsim.tables import ArenaTree, FlatNode
from hgtsim.species_trees import parse_species_tree, parse_species_trees
from hgtsim.timeline import Timeline
from hgtsim.transfers import TransferEvent, TransferSampler
from hgtsim.topology import TopologyMutator, apply_transfers

from hgtsim.simulations import (
    GeneTree,
    SpeciesTreeModel,
    sim_gene_tree,
    sim_gene_trees,
)
