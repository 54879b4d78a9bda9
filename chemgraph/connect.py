# Bond perception from interatomic distances.

from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple, Union

from loguru import logger as log
from openmm import unit

from . import element_data
from .atom import Atom
from .bond import Bond
from .neighbors import create_neighborhood
from .utils import to_angstrom

if TYPE_CHECKING:
    from .molecule import Molecule

# Jmol: DEFAULT_BOND_TOLERANCE
DEFAULT_BOND_TOLERANCE = 0.45
DEFAULT_VMD_SCALE = 0.6
DEFAULT_MULTIWFN_SCALE = 1.15
# 1.6 is the largest bonding radius used by Jmol
MIN_DISTANCE_CUTOFF = 1.6 * 2.0 + 0.4


class BondingScheme(Enum):
    """Distance criteria for deciding whether two atoms are bonded."""

    JMOL = "jmol"
    VMD = "vmd"
    MULTIWFN = "multiwfn"


class BondingOptions:
    """
    Options for bond perception.

    Parameters
    ----------
    scheme: BondingScheme or str, default = "jmol"
        Bonding criterion. Strings are matched case-insensitively against
        "jmol", "vmd" and "multiwfn".
    bond_tolerance: float or unit.Quantity, optional
        Distance added to the sum of bonding radii in the Jmol scheme.
        Defaults to 0.45 angstrom.
    distance_cutoff: float or unit.Quantity, optional
        Radius of the neighbor search. The search radius is never smaller than
        the largest threshold the scheme can produce for the atoms present.
    radius_scale: float, optional
        Scale factor applied to the doubled radius in the VMD (default 0.6) and
        Multiwfn (default 1.15) schemes.
    ignore_pbc: bool, default = False
        Treat periodic structures as aperiodic.

    Examples
    --------
    >>> from chemgraph.connect import BondingOptions
    >>> options = BondingOptions("VMD")
    >>> options.scale
    0.6
    """

    def __init__(
        self,
        scheme: Union[BondingScheme, str] = BondingScheme.JMOL,
        bond_tolerance: Optional[Union[float, unit.Quantity]] = None,
        distance_cutoff: Optional[Union[float, unit.Quantity]] = None,
        radius_scale: Optional[float] = None,
        ignore_pbc: bool = False,
    ) -> None:
        if isinstance(scheme, str):
            try:
                scheme = BondingScheme(scheme.lower())
            except ValueError:
                valid = ", ".join(s.value for s in BondingScheme)
                raise ValueError(f"unknown bonding scheme {scheme!r}, expected one of: {valid}") from None
        elif not isinstance(scheme, BondingScheme):
            raise TypeError(f"scheme must be a BondingScheme or str, type(scheme) = {type(scheme)}")
        self.scheme = scheme

        if bond_tolerance is not None:
            bond_tolerance = to_angstrom(bond_tolerance, "bond_tolerance")
        self.bond_tolerance = bond_tolerance

        if distance_cutoff is not None:
            distance_cutoff = to_angstrom(distance_cutoff, "distance_cutoff")
            if distance_cutoff < 0.0:
                raise ValueError(f"distance_cutoff must not be negative, got {distance_cutoff}")
        self.distance_cutoff = distance_cutoff

        if radius_scale is not None:
            if isinstance(radius_scale, bool) or not isinstance(radius_scale, (int, float)):
                raise TypeError(f"radius_scale must be a float, type(radius_scale) = {type(radius_scale)}")
            if radius_scale <= 0.0:
                raise ValueError(f"radius_scale must be positive, got {radius_scale}")
            radius_scale = float(radius_scale)
        self.radius_scale = radius_scale

        if not isinstance(ignore_pbc, bool):
            raise TypeError(f"ignore_pbc must be a bool, type(ignore_pbc) = {type(ignore_pbc)}")
        self.ignore_pbc = ignore_pbc

    def __repr__(self) -> str:
        return (
            f"BondingOptions(scheme={self.scheme.value!r}, bond_tolerance={self.bond_tolerance}, "
            f"distance_cutoff={self.distance_cutoff}, radius_scale={self.radius_scale}, ignore_pbc={self.ignore_pbc})"
        )

    @property
    def tolerance(self) -> float:
        """Bond tolerance in effect for the Jmol scheme."""
        if self.bond_tolerance is None:
            return DEFAULT_BOND_TOLERANCE
        return self.bond_tolerance

    @property
    def scale(self) -> float:
        """Radius scale factor in effect for the VMD and Multiwfn schemes."""
        if self.radius_scale is not None:
            return self.radius_scale
        if self.scheme == BondingScheme.VMD:
            return DEFAULT_VMD_SCALE
        if self.scheme == BondingScheme.MULTIWFN:
            return DEFAULT_MULTIWFN_SCALE
        return 1.0

    def search_cutoff(self, element_numbers: List[int]) -> float:
        """
        Radius of the neighbor search for a structure made of `element_numbers`.

        This is the largest bonding threshold reachable by those elements (never
        less than 3.6 angstrom), or `distance_cutoff` if that is larger.
        """
        if self.scheme == BondingScheme.JMOL:
            threshold = 2.0 * element_data.max_bonding_radius(element_numbers) + self.tolerance
        elif self.scheme == BondingScheme.VMD:
            threshold = 2.0 * element_data.max_vdw_radius(element_numbers) * self.scale
        else:
            threshold = 2.0 * element_data.max_cov_radius(element_numbers) * self.scale
        cutoff = max(threshold, MIN_DISTANCE_CUTOFF)
        if self.distance_cutoff is not None:
            cutoff = max(cutoff, self.distance_cutoff)
        return cutoff


def scheme_radius(scheme: BondingScheme, atom: Atom) -> Optional[float]:
    """Radius of `atom` used by `scheme`: bonding (Jmol), van der Waals (VMD) or covalent (Multiwfn)."""
    if scheme == BondingScheme.JMOL:
        return atom.get_bonding_radius()
    if scheme == BondingScheme.VMD:
        return atom.get_vdw_radius()
    return atom.get_cov_radius()


def is_bonded(options: BondingOptions, atom_i: Atom, atom_j: Atom, distance: float) -> bool:
    """
    Decide whether `atom_i` and `atom_j` separated by `distance` are bonded.

    Atoms without the radius data a scheme needs are never bonded.

    Notes
    -----
    The VMD and Multiwfn criteria double the radius of `atom_i` rather than
    summing the radii of both atoms, so they are not symmetric in i and j.
    """
    r_i = scheme_radius(options.scheme, atom_i)
    r_j = scheme_radius(options.scheme, atom_j)
    if r_i is None or r_j is None:
        return False
    if options.scheme == BondingScheme.JMOL:
        return distance <= r_i + r_j + options.tolerance
    return distance <= (r_i + r_i) * options.scale


def guess_bonds(mol: "Molecule", options: Optional[BondingOptions] = None) -> List[Tuple[int, int, Bond]]:
    """
    Guess bonds between atoms of `mol` from their distances.

    For periodic structures (unless `options.ignore_pbc` is set) the distance
    between two atoms is the shortest over all of their periodic images.

    Returns
    -------
    list of (sn1, sn2, Bond)
        Single bonds with sn1 < sn2.
    """
    if options is None:
        options = BondingOptions()

    skipped = [sn for sn, atom in mol.atoms() if scheme_radius(options.scheme, atom) is None]
    if skipped:
        log.warning(f"no radius data for atoms {skipped}; they will not be bonded")

    cutoff = options.search_cutoff([atom.number for _, atom in mol.atoms() if atom.is_element()])
    lattice = None if options.ignore_pbc else mol.lattice
    nh = create_neighborhood(((sn, atom.position) for sn, atom in mol.atoms()), lattice)
    log.debug(f"guess bonds using {options.scheme.value} scheme, search cutoff = {cutoff:.3f}")

    bonds = []
    for i, atom_i in mol.atoms():
        # keep the minimum image distance for each pair
        nearest: Dict[int, float] = {}
        for n in nh.neighbors(i, cutoff):
            j = n.node
            # avoid double counting and periodic self images
            if j <= i:
                continue
            if j not in nearest or n.distance < nearest[j]:
                nearest[j] = n.distance
        for j in sorted(nearest):
            if is_bonded(options, atom_i, mol.get_atom_unchecked(j), nearest[j]):
                bonds.append((i, j, Bond.single()))

    log.debug(f"{len(bonds)} bonds guessed")
    return bonds
