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
Reading species trees from files and writing simulated gene trees and
their transfers.
"""
import csv
import logging
import os

from . import exceptions
from . import species_trees

logger = logging.getLogger(__name__)

TRANSFERS_HEADER = ["Donor", "Recipient", "Depth"]


def read_species_trees(path):
    """
    Reads all the Newick trees from the specified file.
    """
    with open(path) as f:
        text = f.read()
    try:
        return species_trees.parse_species_trees(text)
    except ValueError as ve:
        raise exceptions.FileFormatError(f"{path}: {ve}") from ve


def write_transfers(records, output):
    """
    Writes the specified ``(donor, recipient, time)`` records as CSV to the
    specified file-like object.
    """
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(TRANSFERS_HEADER)
    for donor, recipient, time in records:
        writer.writerow([donor, recipient, repr(float(time))])


def write_transfers_csv(records, path):
    with open(path, "w", newline="") as f:
        write_transfers(records, f)


def write_newick(newick, path):
    with open(path, "w") as f:
        f.write(newick)


def write_gene_tree(gene_tree, output_dir, precision=6):
    """
    Writes ``gene_<i>.nwk`` and ``transfers_<i>.csv`` for the specified gene
    tree to the output directory and returns the two paths.
    """
    newick_path = os.path.join(output_dir, f"gene_{gene_tree.index}.nwk")
    csv_path = os.path.join(output_dir, f"transfers_{gene_tree.index}.csv")
    write_transfers_csv(gene_tree.transfer_records(), csv_path)
    write_newick(gene_tree.newick(precision=precision), newick_path)
    logger.debug("Wrote %s and %s", newick_path, csv_path)
    return newick_path, csv_path
