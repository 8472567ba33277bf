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
Module responsible for parsing species trees.
"""
import logging
import re

import newick

from . import trees

logger = logging.getLogger(__name__)


def parse_species_trees(text):
    """
    Parses all the trees in the specified Newick text, returning a list of
    :class:`.trees.Node` roots with depths assigned from zero at each root.
    Whitespace is ignored, so trees may span several lines.
    """
    text = re.sub(r"\s+", "", text)
    parsed = newick.loads(text)
    if len(parsed) == 0:
        raise ValueError(f"Not a valid newick tree: '{text}'")
    roots = []
    for root in parsed:
        node = convert_newick(root)
        trees.assign_depths(node, 0.0)
        roots.append(node)
    return roots


def parse_species_tree(text):
    """
    Parses a single Newick tree. See :func:`parse_species_trees`.
    """
    roots = parse_species_trees(text)
    if len(roots) != 1:
        raise ValueError(f"Expected a single tree, found {len(roots)}")
    return roots[0]


def parse_length(newick_node):
    # Lengths that are not numbers are replaced by zero.
    try:
        return newick_node.length
    except ValueError:
        logger.warning(
            "Failed to parse length for node '%s'; using 0", newick_node.name or ""
        )
        return 0.0


def convert_newick(newick_root):
    """
    Converts a tree returned by the newick library into a :class:`.trees.Node`
    tree. Missing names become the empty string and missing lengths zero.
    """

    def make_node(newick_node):
        name = "" if newick_node.name is None else newick_node.name
        num_children = len(newick_node.descendants)
        if num_children not in (0, 2):
            raise ValueError(
                f"Only binary trees are supported: node '{name}' has "
                f"{num_children} children"
            )
        return trees.Node(name=name, length=parse_length(newick_node))

    root = make_node(newick_root)
    stack = [(newick_root, root)]
    while len(stack) > 0:
        source, dest = stack.pop()
        if len(source.descendants) == 2:
            left, right = source.descendants
            dest.left_child = make_node(left)
            dest.right_child = make_node(right)
            stack.append((left, dest.left_child))
            stack.append((right, dest.right_child))
    return root
