"""
chemgraph: a molecular graph engine.

Atoms addressed by stable serial numbers, bonds perceived from geometry
(optionally under periodic boundary conditions), topology analysis including
ring perception, and geometry clean-up by stress majorization.
"""

import jax

# geometric thresholds are evaluated in double precision
jax.config.update("jax_enable_x64", True)

from .atom import Atom
from .bond import Bond, BondKind
from .connect import BondingOptions, BondingScheme
from .elements import AtomKind, Dummy, Element
from .lattice import Lattice
from .molecule import Molecule
from .neighbors import Neighbor, Neighborhood
from .properties import PropertyStore
from .trajectory import Configuration, Trajectory

__all__ = [
    "Atom",
    "AtomKind",
    "Bond",
    "BondKind",
    "BondingOptions",
    "BondingScheme",
    "Configuration",
    "Dummy",
    "Element",
    "Lattice",
    "Molecule",
    "Neighbor",
    "Neighborhood",
    "PropertyStore",
    "Trajectory",
]
