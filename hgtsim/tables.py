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
The flat ("arena") representation of a rooted binary tree. Nodes refer to
their parent and children by index into a shared list, which allows the
topology to be edited in place.
"""
from __future__ import annotations

import copy
import dataclasses
from typing import List
from typing import Union

from . import core
from . import exceptions
from . import trees

CHILD_SLOTS = ("left_child", "right_child")


@dataclasses.dataclass
class FlatNode:
    """
    A single record of an :class:`.ArenaTree`.
    """

    name: str = ""
    left_child: Union[int, None] = None
    right_child: Union[int, None] = None
    parent: Union[int, None] = None
    depth: Union[float, None] = None
    length: float = 0.0

    @property
    def is_leaf(self):
        return self.left_child is None and self.right_child is None

    @property
    def children(self):
        return [c for c in (self.left_child, self.right_child) if c is not None]


class ArenaTree:
    """
    A tree stored as a list of :class:`.FlatNode` records. Exactly one record
    has no parent (the root), and for every other record the parent lists it
    in its left or right child slot.
    """

    def __init__(self, nodes=None):
        self.nodes: List[FlatNode] = [] if nodes is None else list(nodes)

    @staticmethod
    def from_node(root):
        """
        Flattens the owned tree rooted at ``root``. Indexes are assigned in
        preorder: every node comes before its children and the left subtree
        is numbered completely before the right one starts.
        """
        tree = ArenaTree()
        stack = [(root, None, None)]
        while len(stack) > 0:
            node, parent, slot = stack.pop()
            index = len(tree.nodes)
            tree.nodes.append(
                FlatNode(
                    name=node.name,
                    parent=parent,
                    depth=node.depth,
                    length=node.length,
                )
            )
            if parent is not None:
                setattr(tree.nodes[parent], slot, index)
            if node.right_child is not None:
                stack.append((node.right_child, index, "right_child"))
            if node.left_child is not None:
                stack.append((node.left_child, index, "left_child"))
        return tree

    def to_node(self, index=None, parent_index=None):
        """
        Rebuilds the owned tree below the specified index, which defaults to
        the root. The returned node takes ``parent_index`` as its parent
        whatever the arena says, so this must only be applied to the root.
        The parent of every other returned node is the arena index of its
        parent.
        """
        if index is None:
            index = self.find_root()
        record = self.nodes[index]
        root = trees.Node(
            name=record.name,
            parent=parent_index,
            depth=record.depth,
            length=record.length,
        )
        visited = 1
        stack = [(root, index)]
        while len(stack) > 0:
            node, u = stack.pop()
            for slot in CHILD_SLOTS:
                v = getattr(self.nodes[u], slot)
                if v is None:
                    continue
                if self.nodes[v].parent != u:
                    raise exceptions.TreeStructureError(
                        f"Node {v} is a child of {u} but records {self.nodes[v].parent}"
                        " as its parent"
                    )
                visited += 1
                if visited > len(self.nodes):
                    raise exceptions.TreeStructureError("Cycle detected in the tree")
                child = trees.Node(
                    name=self.nodes[v].name,
                    parent=u,
                    depth=self.nodes[v].depth,
                    length=self.nodes[v].length,
                )
                setattr(node, slot, child)
                stack.append((child, v))
        return root

    def copy(self):
        return ArenaTree(copy.deepcopy(self.nodes))

    def __len__(self):
        return len(self.nodes)

    def __getitem__(self, index):
        return self.nodes[index]

    def __iter__(self):
        return iter(self.nodes)

    def __eq__(self, other):
        if not isinstance(other, ArenaTree):
            return NotImplemented
        return self.nodes == other.nodes

    @property
    def names(self):
        return [node.name for node in self.nodes]

    def find_root(self):
        """
        Returns the index of the only record without a parent.
        """
        root = None
        for j, node in enumerate(self.nodes):
            if node.parent is None:
                if root is not None:
                    raise exceptions.TreeStructureError(
                        f"There should be only one node with no parent: found {root}"
                        f" and {j}"
                    )
                root = j
        if root is None:
            raise exceptions.TreeStructureError("No node without a parent")
        return root

    def sister(self, index):
        parent = self.nodes[index].parent
        if parent is None:
            raise exceptions.TreeStructureError(f"Node {index} is the root")
        record = self.nodes[parent]
        if record.left_child == index:
            sister = record.right_child
        elif record.right_child == index:
            sister = record.left_child
        else:
            raise exceptions.TreeStructureError(
                f"Node {index} is not a child of its parent {parent}"
            )
        if sister is None:
            raise exceptions.TreeStructureError(f"Node {parent} is not binary")
        return sister

    def replace_child(self, parent, old, new):
        """
        Puts ``new`` in the child slot of ``parent`` that currently holds
        ``old``. The other slot is not touched.
        """
        record = self.nodes[parent]
        if record.left_child == old:
            record.left_child = new
        elif record.right_child == old:
            record.right_child = new
        else:
            raise exceptions.TreeStructureError(
                f"Node {old} is not a child of node {parent}"
            )

    def check_integrity(self):
        """
        Raises a :class:`.TreeStructureError` if the tree does not have
        exactly one root, if a node has exactly one child, if the child and
        parent links disagree, or if some node cannot be reached from the
        root.
        """
        root = self.find_root()
        for j, node in enumerate(self.nodes):
            if (node.left_child is None) != (node.right_child is None):
                raise exceptions.TreeStructureError(f"Node {j} has a single child")
            if node.left_child is not None and node.left_child == node.right_child:
                raise exceptions.TreeStructureError(
                    f"Node {j} has the same node in both child slots"
                )
            for child in node.children:
                if self.nodes[child].parent != j:
                    raise exceptions.TreeStructureError(
                        f"Node {child} is a child of {j} but records "
                        f"{self.nodes[child].parent} as its parent"
                    )
            if node.parent is not None and j not in self.nodes[node.parent].children:
                raise exceptions.TreeStructureError(
                    f"Node {j} is not a child of its parent {node.parent}"
                )
        reached = set()
        stack = [root]
        while len(stack) > 0:
            u = stack.pop()
            if u in reached:
                raise exceptions.TreeStructureError("Cycle detected in the tree")
            reached.add(u)
            stack.extend(self.nodes[u].children)
        if len(reached) != len(self.nodes):
            num_unreachable = len(self.nodes) - len(reached)
            raise exceptions.TreeStructureError(
                f"{num_unreachable} nodes are not reachable from the root"
            )

    def shift_depths(self, delta):
        for node in self.nodes:
            node.depth -= delta

    def preorder(self, index=None):
        """
        Iterates over the indexes of the subtree below ``index`` (the root by
        default), parents before children and left before right, which is the
        order of :meth:`.trees.Node.walk`.
        """
        if index is None:
            index = self.find_root()
        stack = [index]
        while len(stack) > 0:
            u = stack.pop()
            yield u
            stack.extend(reversed(self.nodes[u].children))

    def total_length(self):
        return sum(node.length for node in self.nodes)

    def newick(self, precision=6):
        """
        Returns the Newick string for the tree, including the terminating
        semicolon.
        """
        return self.to_node().newick(precision=precision) + ";"

    def __str__(self):
        col_titles = ["Name", "Left", "Right", "Parent", "Depth", "Length"]
        data = []
        for node in self.nodes:
            data.append(
                [
                    node.name,
                    str(node.left_child),
                    str(node.right_child),
                    str(node.parent),
                    core.format_float(node.depth),
                    core.format_float(node.length),
                ]
            )
        return core.text_table("Arena tree", col_titles, "<>>>>>", data)
