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
Changes to the topology of a tree caused by horizontal transfers.

A transfer from ``A`` (the donor) to ``B`` (the recipient) at time ``t``
regrafts one lineage onto the other at ``t``. Writing ``FN`` for the parent of
node ``N`` and ``SN`` for its sister, there are four cases:

1. ``FA == FB``: the topology does not change and ``FB`` moves down to ``t``.
2. ``FA`` is not the root: ``FB`` (with ``B``) is pruned from ``FFB``, where
   ``SB`` takes its place, and regrafted on the branch above ``A`` at ``t``.
   If ``FB`` was the root, ``SB`` becomes the new root.
3. ``FA`` is the root and ``FB`` is not: ``SA`` becomes the new root and
   ``FA`` is regrafted on the branch above ``B`` at ``t``, with children
   ``A`` and ``B``.
4. ``A`` and ``B`` are the two children of the root: the root moves down
   to ``t``.

Only depths are kept up to date while transfers are applied; lengths are
recomputed from depths when the tree is finalised. Whenever the root changes
position all depths are shifted so that the root is at time zero again; the
shift is remembered so that the times of later transfers, which are measured
on the species tree, can be translated.

Event times are not checked against the current branches of the donor and
recipient. The events drawn by a TransferSampler always lie on both branches;
other events are applied as given and can leave negative branch lengths.
"""
import logging

from . import exceptions
from . import trees

logger = logging.getLogger(__name__)


class TopologyMutator:
    """
    Applies transfers, in time order, to a single arena tree which is
    modified in place.

    :param ArenaTree tree: The tree to modify. Callers simulating several
        gene trees from one species tree must pass a copy.
    """

    def __init__(self, tree):
        self.tree = tree
        self.time_offset = 0.0
        self.last_time = None

    def _rebase(self, delta):
        self.tree.shift_depths(delta)
        self.time_offset += delta

    def apply(self, event):
        tree = self.tree
        a = event.donor
        b = event.recipient
        if self.last_time is not None and event.time < self.last_time:
            raise ValueError("Transfers must be applied in non-decreasing time order")
        self.last_time = event.time
        if a == b:
            raise exceptions.TreeStructureError(
                f"Donor and recipient are the same node ({a})"
            )
        fa = tree[a].parent
        fb = tree[b].parent
        if fa is None or fb is None:
            raise exceptions.TreeStructureError(
                f"Transfer between {a} and {b} involves the root"
            )
        if fa == b or fb == a:
            raise exceptions.TreeStructureError(
                f"Transfer between {a} and {b}, one of which is the parent of the other"
            )
        time = event.time - self.time_offset
        if fa == fb:
            if tree[fa].parent is None:
                logger.debug("Transfer %d -> %d moves the root to %f", a, b, time)
                tree[a].length = tree[a].depth - time
                tree[b].length = tree[b].depth - time
                tree[fa].depth = time
                self._rebase(time)
            else:
                logger.debug("Transfer %d -> %d between sisters", a, b)
                tree[fb].depth = time
        elif tree[fa].parent is None:
            self._regraft_root(a, b, time)
        else:
            self._prune_regraft(a, b, time)

    def _prune_regraft(self, a, b, time):
        tree = self.tree
        fa = tree[a].parent
        fb = tree[b].parent
        sb = tree.sister(b)
        ffb = tree[fb].parent
        logger.debug("Transfer %d -> %d: regraft %d above %d", a, b, fb, a)

        tree[sb].parent = ffb
        if ffb is not None:
            tree.replace_child(ffb, fb, sb)
        tree.replace_child(fa, a, fb)
        tree.replace_child(fb, sb, a)
        tree[a].parent = fb
        tree[fb].parent = fa
        tree[fb].depth = time
        if ffb is None:
            tree[sb].length = 0.0
            self._rebase(tree[sb].depth)

    def _regraft_root(self, a, b, time):
        tree = self.tree
        fa = tree[a].parent
        fb = tree[b].parent
        sa = tree.sister(a)
        logger.debug("Transfer %d -> %d: %d becomes the root", a, b, sa)

        tree[sa].parent = None
        tree[sa].length = 0.0
        tree.replace_child(fb, b, fa)
        tree[fa].parent = fb
        tree.replace_child(fa, sa, b)
        tree[b].parent = fa
        tree[fa].depth = time
        tree[b].length = tree[b].depth - time
        tree[fa].length = time - tree[fb].depth
        self._rebase(tree[sa].depth)

    def apply_all(self, events):
        for event in events:
            self.apply(event)

    def finalise(self):
        """
        Checks that the tree is still consistent, rebuilds the owned tree from
        the root to recompute every length from the depths, and stores the
        new lengths in the arena. Returns the arena tree.
        """
        self.tree.check_integrity()
        root = self.tree.to_node()
        trees.depths_to_lengths(root)
        for u, node in zip(self.tree.preorder(), root.walk()):
            self.tree[u].length = node.length
        return self.tree


def apply_transfers(tree, events):
    """
    Applies the specified time-ordered transfers to the tree in place and
    returns it with lengths recomputed from the final depths.
    """
    mutator = TopologyMutator(tree)
    mutator.apply_all(events)
    return mutator.finalise()
