# Connectivity analysis of the bond graph: shortest paths, neighbors,
# connected components and induced sub-molecules.

from typing import TYPE_CHECKING, Iterable, List, Optional

import networkx as nx

if TYPE_CHECKING:
    from .molecule import Molecule


def _shortest_node_path(mol: "Molecule", sn1: int, sn2: int) -> Optional[List[int]]:
    source = mol._node_index(sn1)
    target = mol._node_index(sn2)
    try:
        # unit edge cost and a zero heuristic: a plain breadth-first shortest path
        return nx.astar_path(mol._graph, source, target, heuristic=None, weight=lambda u, v, d: 1)
    except nx.NetworkXNoPath:
        return None


def nbonds_between(mol: "Molecule", sn1: int, sn2: int) -> Optional[int]:
    """
    Return the shortest distance between two atoms, counted in chemical bonds.

    Returns None if the atoms are not connected. Raises KeyError if either atom
    does not exist.
    """
    path = _shortest_node_path(mol, sn1, sn2)
    if path is None:
        return None
    return len(path) - 1


def path_between(mol: "Molecule", sn1: int, sn2: int) -> Optional[List[int]]:
    """
    Return the serial numbers along the shortest bond path from `sn1` to `sn2`,
    both ends included.

    Returns None if the atoms are not connected. Raises KeyError if either atom
    does not exist.
    """
    path = _shortest_node_path(mol, sn1, sn2)
    if path is None:
        return None
    return [mol._atom_sn(n) for n in path]


def connected(mol: "Molecule", sn: int) -> List[int]:
    """Serial numbers of all atoms directly bonded to atom `sn`, in no particular order."""
    node = mol._node_index(sn)
    return [mol._atom_sn(n) for n in mol._graph.neighbors(node)]


def _induced_molecule(mol: "Molecule", serial_numbers: Iterable[int]) -> "Molecule":
    """A new molecule holding copies of the selected atoms and the bonds among them."""
    from .molecule import Molecule

    serial_numbers = sorted(set(serial_numbers))
    sub = Molecule(mol.name)
    sub.lattice = mol.lattice
    for sn in serial_numbers:
        sub.add_atom(sn, mol.get_atom_unchecked(sn).copy())

    nodes = [mol._node_index(sn) for sn in serial_numbers]
    for u, v, bond in mol._graph.subgraph(nodes).edges(data="bond"):
        sub.add_bond(mol._atom_sn(u), mol._atom_sn(v), bond.copy())
    return sub


def get_sub_molecule(mol: "Molecule", atoms: Iterable[int]) -> Optional["Molecule"]:
    """
    Return the sub-molecule induced by `atoms`.

    Atoms keep their serial numbers from the parent molecule, so the two can be
    cross-referenced. Returns None if any serial number is invalid, and an empty
    molecule if `atoms` is empty.
    """
    atoms = list(atoms)
    if not all(mol.has_atom(sn) for sn in atoms):
        return None
    return _induced_molecule(mol, atoms)


def fragmented(mol: "Molecule") -> List["Molecule"]:
    """
    Break `mol` into its connected components.

    Every fragment keeps the serial numbers of its atoms in the parent molecule.
    Fragments are ordered by their lowest serial number.
    """
    components = [
        sorted(mol._atom_sn(n) for n in nodes) for nodes in nx.connected_components(mol._graph)
    ]
    components.sort(key=lambda sns: sns[0])
    return [_induced_molecule(mol, sns) for sns in components]
