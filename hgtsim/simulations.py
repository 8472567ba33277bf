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
Simulation of gene trees under horizontal transfer along a species tree.
"""
from __future__ import annotations

import collections.abc
import dataclasses
import logging
from typing import List

from . import core
from . import species_trees
from . import tables
from . import timeline
from . import topology
from . import transfers
from . import trees

logger = logging.getLogger(__name__)


class SpeciesTreeModel:
    """
    Everything derived from a species tree that the simulation of gene trees
    needs: the arena form of the tree, its timeline and the transfer sampler.
    These are computed once and then only read, so any number of gene trees
    can be simulated from one instance.

    :param trees.Node root: The root of the species tree. Depths are assigned
        from zero if the root has none.
    """

    def __init__(self, root):
        if root.depth is None:
            trees.assign_depths(root, 0.0)
        self.root = root
        self.tree = tables.ArenaTree.from_node(root)
        self.tree.check_integrity()
        self.timeline = timeline.Timeline(self.tree)
        self.sampler = transfers.TransferSampler(self.timeline)

    @staticmethod
    def from_newick(text):
        return SpeciesTreeModel(species_trees.parse_species_tree(text))

    @property
    def num_nodes(self):
        return len(self.tree)


@dataclasses.dataclass
class GeneTree:
    """
    The result of simulating one gene tree.

    :ivar tree: The gene tree, with lengths recomputed from the depths.
    :vartype tree: ArenaTree
    :ivar transfers: The transfers applied to the tree, in time order.
    :vartype transfers: list
    :ivar index: The position of this gene tree in its batch.
    :vartype index: int
    """

    tree: tables.ArenaTree
    transfers: List[transfers.TransferEvent] = dataclasses.field(default_factory=list)
    index: int = 0

    @property
    def num_transfers(self):
        return len(self.transfers)

    def newick(self, precision=6):
        return self.tree.newick(precision=precision)

    def as_node(self):
        return self.tree.to_node()

    def transfer_records(self):
        """
        Returns the list of ``(donor name, recipient name, time)`` tuples for
        the applied transfers.
        """
        return [
            (self.tree[event.donor].name, self.tree[event.recipient].name, event.time)
            for event in self.transfers
        ]


def _parse_species_tree(species_tree):
    if isinstance(species_tree, SpeciesTreeModel):
        return species_tree
    if isinstance(species_tree, trees.Node):
        return SpeciesTreeModel(species_tree)
    if isinstance(species_tree, str):
        return SpeciesTreeModel.from_newick(species_tree)
    raise TypeError(
        "species_tree must be a newick string, a Node or a SpeciesTreeModel"
    )


def _parse_num_transfers(num_transfers, num_replicates):
    if num_replicates is not None and (
        not core.isinteger(num_replicates) or num_replicates < 0
    ):
        raise ValueError("num_replicates must be a non-negative integer")
    if core.isinteger(num_transfers):
        num_replicates = 1 if num_replicates is None else num_replicates
        counts = [int(num_transfers)] * int(num_replicates)
    else:
        if num_replicates is not None:
            raise ValueError(
                "num_replicates can only be used with a single number of transfers"
            )
        if not isinstance(num_transfers, collections.abc.Iterable):
            raise TypeError("num_transfers must be an integer or a list of integers")
        counts = list(num_transfers)
    for count in counts:
        if not core.isinteger(count) or count < 0:
            raise ValueError("Numbers of transfers must be non-negative integers")
    return [int(count) for count in counts]


def sim_gene_tree(species_tree, num_transfers, rng, index=0):
    """
    Simulates a single gene tree, drawing the transfers from the specified
    generator.
    """
    model = _parse_species_tree(species_tree)
    events = model.sampler.sample(num_transfers, rng)
    tree = topology.apply_transfers(model.tree.copy(), events)
    return GeneTree(tree=tree, transfers=events, index=index)


def sim_gene_trees(
    species_tree, num_transfers, *, num_replicates=None, random_seed=None
):
    """
    Simulates one gene tree per entry of ``num_transfers`` (or
    ``num_replicates`` gene trees with the same number of transfers) and
    returns an iterator over the resulting :class:`.GeneTree` objects.

    A single generator is seeded once with ``random_seed`` and used for all
    the gene trees, so a given seed always gives the same batch.
    """
    model = _parse_species_tree(species_tree)
    counts = _parse_num_transfers(num_transfers, num_replicates)
    rng = core.get_rng(random_seed)
    return _gene_tree_generator(model, counts, rng)


def _gene_tree_generator(model, counts, rng):
    for j, count in enumerate(counts):
        logger.info("Simulating gene tree %d with %d transfers", j, count)
        gene_tree = sim_gene_tree(model, count, rng, index=j)
        logger.debug(
            "Gene tree %d: %d of %d transfers applied",
            j,
            gene_tree.num_transfers,
            count,
        )
        yield gene_tree
