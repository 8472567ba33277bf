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
Common code for the hgtsim test cases.
"""
import random

import hgtsim
from hgtsim import trees

EXAMPLE_TREE = "((A:1,B:2)C:1,D:5)R:0;"


def random_tree(num_leaves, seed, min_length=0.1, max_length=2.0):
    """
    Returns a random binary tree with the specified number of leaves and
    uniformly distributed branch lengths. Nodes are named n0, n1, ...
    """
    rng = random.Random(seed)
    nodes = [
        hgtsim.Node(name=f"n{j}", length=rng.uniform(min_length, max_length))
        for j in range(num_leaves)
    ]
    k = num_leaves
    while len(nodes) > 1:
        left = nodes.pop(rng.randrange(len(nodes)))
        right = nodes.pop(rng.randrange(len(nodes)))
        nodes.append(
            hgtsim.Node(
                name=f"n{k}",
                left_child=left,
                right_child=right,
                length=rng.uniform(min_length, max_length),
            )
        )
        k += 1
    root = nodes[0]
    root.length = 0.0
    trees.assign_depths(root)
    return root


def caterpillar_tree(num_leaves, length=1.0):
    """
    Returns the maximally unbalanced tree with the specified number of leaves.
    """
    root = hgtsim.Node(name="x0", length=length)
    for j in range(1, num_leaves):
        root = hgtsim.Node(
            name=f"y{j}",
            left_child=root,
            right_child=hgtsim.Node(name=f"x{j}", length=length),
            length=length,
        )
    root.length = 0.0
    trees.assign_depths(root)
    return root


def trees_equal(a, b, tolerance=1e-6):
    """
    Returns True if the two trees have the same shape, the same names in
    the same child order, and branch lengths equal to within the specified
    tolerance.
    """
    stack = [(a, b)]
    while len(stack) > 0:
        u, v = stack.pop()
        if u.name != v.name or abs(u.length - v.length) > tolerance:
            return False
        if u.is_leaf != v.is_leaf:
            return False
        stack.extend(zip(u.children, v.children))
    return True


class FixedRng:
    """
    Stands in for a numpy Generator and returns predetermined values, so
    that the outcome of a draw can be checked exactly.
    """

    def __init__(self, uniforms=(), integers=()):
        self.uniforms = list(uniforms)
        self.integer_values = list(integers)

    def random(self):
        return self.uniforms.pop(0)

    def integers(self, n):
        value = self.integer_values.pop(0)
        assert 0 <= value < n
        return value
