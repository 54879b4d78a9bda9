# Atom selection by bond topology or by distance.

from typing import TYPE_CHECKING, List, Sequence, Set, Union

from openmm import unit

from .neighbors import Neighbor, Neighborhood, create_neighborhood
from .utils import to_angstrom

if TYPE_CHECKING:
    from .molecule import Molecule


def _expand_bonds(mol: "Molecule", m: int, n: int) -> Set[int]:
    selection = {m}
    if n > 0:
        for o in mol.connected(m):
            selection |= _expand_bonds(mol, o, n - 1)
    return selection


def selection_by_expanding_bond(mol: "Molecule", m: int, n: int) -> List[int]:
    """
    Select atoms reachable within `n` chemical bonds from the center atom `m`.

    The center atom is always the last item of the returned list; the other
    atoms are sorted by serial number. Raises KeyError if atom `m` does not exist.
    """
    if n < 0:
        raise ValueError(f"number of bonds must not be negative, got {n}")
    nodes = _expand_bonds(mol, m, n)
    nodes.discard(m)
    return sorted(nodes) + [m]


def _create_neighborhood_probe(mol: "Molecule") -> Neighborhood:
    # keys of the neighborhood are atom serial numbers
    return create_neighborhood(((sn, atom.position) for sn, atom in mol.atoms()), mol.lattice)


def selection_by_distance(mol: "Molecule", n: int, r: Union[float, unit.Quantity]) -> List[int]:
    """
    Select atoms within distance `r` of the center atom `n`, the center excluded.

    For periodic structures any image within `r` counts; an atom is reported
    once no matter how many of its images are close. Periodic images of the
    center atom itself select the center atom.
    """
    r = to_angstrom(r, "r")
    if r < 0.0:
        raise ValueError(f"invalid cutoff distance {r}")
    nh = _create_neighborhood_probe(mol)
    return sorted({nn.node for nn in nh.neighbors(n, r)})


class NeighborProbe:
    """
    A probe for searching nearby atoms within a distance cutoff.

    The probe captures the atom positions (and lattice) of the molecule at the
    time it is created; later changes to the molecule are not seen.

    Examples
    --------
    >>> probe = mol.create_neighbor_probe()
    >>> neighbors = probe.probe_neighbors([1.0, 2.0, 3.0], 3.2)
    >>> neighbors = probe.neighbors(12, 3.2)
    """

    def __init__(self, mol: "Molecule") -> None:
        self._nh = _create_neighborhood_probe(mol)

    def probe_neighbors(self, p: Sequence[float], r_cutoff: Union[float, unit.Quantity]) -> List[Neighbor]:
        """Return atoms (as Neighbor records keyed by serial number) within `r_cutoff` of position `p`."""
        return self._nh.search(p, r_cutoff)

    def neighbors(self, n: int, r_cutoff: Union[float, unit.Quantity]) -> List[Neighbor]:
        """Return atoms within `r_cutoff` of atom `n`, excluding atom `n` itself."""
        return self._nh.neighbors(n, r_cutoff)
