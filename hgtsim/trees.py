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
The owned, recursive form of a tree. Each :class:`Node` exclusively owns its
two children; the parent is only recorded as an index into the flat arena
form (see :mod:`hgtsim.tables`).
"""
from __future__ import annotations

import dataclasses
from typing import Iterator
from typing import Union


@dataclasses.dataclass
class Node:
    """
    A node of a rooted binary tree, together with the branch above it.

    :ivar name: The node label, the empty string for unnamed nodes.
    :vartype name: str
    :ivar left_child: The first child as written in the Newick text, or None.
    :vartype left_child: Node
    :ivar right_child: The second child, or None.
    :vartype right_child: Node
    :ivar parent: Index of the parent in the flat form of the tree, or None.
    :vartype parent: int
    :ivar depth: Time from the root to this node, None until assigned.
    :vartype depth: float
    :ivar length: Length of the branch above this node.
    :vartype length: float
    """

    name: str = ""
    left_child: Union[Node, None] = None
    right_child: Union[Node, None] = None
    parent: Union[int, None] = None
    depth: Union[float, None] = None
    length: float = 0.0

    @property
    def is_leaf(self):
        return self.left_child is None and self.right_child is None

    @property
    def children(self):
        return [
            child for child in (self.left_child, self.right_child) if child is not None
        ]

    def walk(self) -> Iterator[Node]:
        """
        Iterates over the subtree rooted at this node in preorder, left
        subtree before right subtree.
        """
        stack = [self]
        while len(stack) > 0:
            node = stack.pop()
            yield node
            for child in reversed(node.children):
                stack.append(child)

    def num_nodes(self):
        return sum(1 for _ in self.walk())

    def total_length(self):
        return sum(node.length for node in self.walk())

    def newick(self, precision=6):
        """
        Returns the Newick representation of the subtree rooted at this node,
        without the terminating semicolon. Branch lengths are written with
        the specified number of decimal places.
        """
        return to_newick(self, precision=precision)


def assign_depths(root, depth=0.0):
    """
    Sets the depth of every node below and including ``root``. The root gets
    the specified depth and each child the depth of its parent plus its own
    branch length.
    """
    stack = [(root, depth)]
    while len(stack) > 0:
        node, node_depth = stack.pop()
        node.depth = node_depth
        for child in reversed(node.children):
            stack.append((child, node_depth + child.length))


def depths_to_lengths(root):
    """
    Recomputes the length of every non-root node as the difference between
    its depth and the depth of its parent. The length of the root is left
    unchanged.
    """
    if root.depth is None:
        raise ValueError("Depths must be assigned before computing lengths")
    stack = [root]
    while len(stack) > 0:
        node = stack.pop()
        for child in reversed(node.children):
            if child.depth is None:
                raise ValueError(f"Node '{child.name}' has no depth")
            child.length = child.depth - node.depth
            stack.append(child)


def to_newick(root, precision=6):
    # Build bottom up with an explicit stack so that caterpillar trees with
    # many thousands of nodes don't exceed the recursion limit.
    rendered = {}
    stack = [(root, False)]
    while len(stack) > 0:
        node, expanded = stack.pop()
        if node.is_leaf:
            rendered[id(node)] = f"{node.name}:{node.length:.{precision}f}"
        elif expanded:
            left = rendered.pop(id(node.left_child))
            right = rendered.pop(id(node.right_child))
            rendered[id(node)] = (
                f"({left},{right}){node.name}:{node.length:.{precision}f}"
            )
        else:
            stack.append((node, True))
            stack.append((node.right_child, False))
            stack.append((node.left_child, False))
    return rendered[id(root)]
