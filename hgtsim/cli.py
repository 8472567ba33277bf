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
Command line interface to the hgtsim library.
"""
import argparse
import logging
import os
import signal
import sys
import time

import daiquiri

from . import core
from . import exceptions
from . import formats
from . import provenance
from . import simulations

logger = logging.getLogger(__name__)


def set_sigpipe_handler():
    if os.name == "posix":
        # Set signal handler for SIGPIPE to quietly kill the program.
        signal.signal(signal.SIGPIPE, signal.SIG_DFL)


def setup_logging(args):
    log_level = logging.WARNING
    if args.verbose == 1:
        log_level = logging.INFO
    elif args.verbose >= 2:
        log_level = logging.DEBUG
    log_output = daiquiri.output.Stream(
        sys.stderr,
        formatter=daiquiri.formatter.ColorFormatter(fmt="[%(levelname)s] %(message)s"),
    )
    daiquiri.setup(level=log_level, outputs=[log_output])


def non_negative_int(value):
    int_value = int(value)
    if int_value < 0:
        msg = f"{value} is an invalid non-negative integer value"
        raise argparse.ArgumentTypeError(msg)
    return int_value


def positive_int(value):
    int_value = int(value)
    if int_value <= 0:
        msg = f"{value} is an invalid positive integer value"
        raise argparse.ArgumentTypeError(msg)
    return int_value


def add_species_tree_argument(parser):
    parser.add_argument(
        "species_tree",
        help="File containing one or more species trees in Newick format",
    )


def add_verbosity_argument(parser):
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase the verbosity of the log output (can be repeated)",
    )


def get_transfer_counts(args):
    if args.num_replicates is None:
        return list(args.num_transfers)
    if len(args.num_transfers) != 1:
        raise ValueError(
            "--num-replicates can only be used with a single --num-transfers value"
        )
    return args.num_transfers * args.num_replicates


def run_simulate(args):
    counts = get_transfer_counts(args)
    roots = formats.read_species_trees(args.species_tree)
    random_seed = args.random_seed
    if random_seed is None:
        random_seed = core.get_random_seed()
    logger.info("Using random seed %d", random_seed)
    rng = core.get_rng(random_seed)

    before = time.perf_counter()
    for k, root in enumerate(roots):
        output_dir = args.output_dir
        if k > 0:
            output_dir = os.path.join(output_dir, f"tree_{k}")
        os.makedirs(output_dir, exist_ok=True)
        model = simulations.SpeciesTreeModel(root)
        logger.info(
            "Species tree %d: %d nodes, %d intervals",
            k,
            model.num_nodes,
            model.timeline.num_intervals,
        )
        for j, count in enumerate(counts):
            gene_tree = simulations.sim_gene_tree(model, count, rng, index=j)
            formats.write_gene_tree(gene_tree, output_dir, precision=args.precision)
        parameters = {
            "command": "simulate",
            "species_tree": args.species_tree,
            "tree_index": k,
            "num_transfers": counts,
            "random_seed": random_seed,
        }
        with open(os.path.join(output_dir, "provenance.json"), "w") as f:
            f.write(
                provenance.json_encode_provenance(
                    provenance.get_provenance_dict(parameters)
                )
            )
    duration = time.perf_counter() - before
    logger.info(
        "Simulated %d gene trees for %d species trees in %.3f seconds",
        len(counts) * len(roots),
        len(roots),
        duration,
    )


def run_timeline(args):
    roots = formats.read_species_trees(args.species_tree)
    for root in roots:
        model = simulations.SpeciesTreeModel(root)
        if args.nodes:
            print(model.tree)
        print(model.sampler)


def add_simulate_subcommand(subparsers):
    parser = subparsers.add_parser(
        "simulate", help="Simulate gene trees with horizontal transfers"
    )
    add_species_tree_argument(parser)
    parser.add_argument(
        "--num-transfers",
        "-n",
        type=non_negative_int,
        nargs="+",
        default=[1],
        help=(
            "The number of transfers to draw for each gene tree. One gene tree "
            "is simulated per value."
        ),
    )
    parser.add_argument(
        "--num-replicates",
        "-R",
        type=positive_int,
        default=None,
        help="Simulate this many gene trees with the single --num-transfers value",
    )
    parser.add_argument(
        "--random-seed",
        "-s",
        type=non_negative_int,
        default=None,
        help="The random seed. If not specified one is chosen randomly",
    )
    parser.add_argument(
        "--output-dir",
        "-o",
        default=".",
        help="Directory in which the gene trees and transfers are written",
    )
    parser.add_argument(
        "--precision",
        "-p",
        type=non_negative_int,
        default=6,
        help="The number of decimal places of the branch lengths",
    )
    add_verbosity_argument(parser)
    parser.set_defaults(runner=run_simulate)


def add_timeline_subcommand(subparsers):
    parser = subparsers.add_parser(
        "timeline",
        help="Print the time intervals and transfer distribution of species trees",
    )
    add_species_tree_argument(parser)
    parser.add_argument(
        "--nodes",
        action="store_true",
        default=False,
        help="Also print the table of the nodes of the tree",
    )
    add_verbosity_argument(parser)
    parser.set_defaults(runner=run_timeline)


def get_hgtsim_parser():
    top_parser = argparse.ArgumentParser(
        description="Simulate gene trees under horizontal gene transfer."
    )
    top_parser.add_argument(
        "-V", "--version", action="version", version=f"%(prog)s {core.__version__}"
    )
    subparsers = top_parser.add_subparsers(dest="subcommand")
    subparsers.required = True

    add_simulate_subcommand(subparsers)
    add_timeline_subcommand(subparsers)

    return top_parser


def hgtsim_main(arg_list=None):
    set_sigpipe_handler()
    parser = get_hgtsim_parser()
    args = parser.parse_args(arg_list)
    setup_logging(args)
    try:
        args.runner(args)
    except (
        OSError,
        ValueError,
        exceptions.FileFormatError,
        exceptions.DegenerateTimelineError,
    ) as err:
        parser.error(str(err))
