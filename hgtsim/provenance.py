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
Common provenance methods used to determine the state and versions
of various dependencies and the OS.
"""
import json
import logging

import newick
import numpy
import tskit

from . import core

logger = logging.getLogger(__name__)


def get_provenance_dict(parameters=None):
    """
    Returns a dictionary encoding an execution of hgtsim conforming to the
    tskit provenance schema.
    """
    document = {
        "schema_version": "1.0.0",
        "software": {"name": "hgtsim", "version": core.__version__},
        "parameters": parameters,
        "environment": get_environment(),
    }
    return document


def _get_environment():
    libraries = {
        "numpy": {"version": numpy.__version__},
        "newick": {"version": getattr(newick, "__version__", "unknown")},
    }
    return tskit.provenance.get_environment(extra_libs=libraries)


_environment = None


def get_environment():
    """
    Returns a dictionary describing the environment in which hgtsim
    is currently running.
    """
    # Everything here is fixed so we cache it
    global _environment
    if _environment is None:
        _environment = _get_environment()
    return _environment


def json_encode_provenance(provenance_dict):
    """
    Return a JSON representation of the provenance.
    """
    return json.dumps(provenance_dict, indent=2, sort_keys=True)
