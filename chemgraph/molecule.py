# Molecule: atoms and bonds stored in a graph, addressed by caller-facing
# serial numbers.
#
# The graph (networkx) uses private integer node handles that are never reused.
# A two-way index maps serial numbers to node handles and back; every method
# that touches the graph keeps both directions of that index consistent.

import copy
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple, Union

import networkx as nx
from loguru import logger as log

from .atom import Atom, Point3
from .bond import Bond
from .elements import AtomKind
from .lattice import Lattice
from .properties import PropertyStore


def _check_serial_number(sn) -> None:
    if isinstance(sn, bool) or not isinstance(sn, int) or sn <= 0:
        raise ValueError(f"serial number must be a positive integer, got {sn!r}")


class Molecule:
    """
    Molecule is the central data structure of chemgraph: a collection of atoms
    identified by serial numbers, optionally connected by chemical bonds and
    optionally placed in a periodic lattice.

    Parameters
    ----------
    name : str, default = ""
        Molecular name. Only the first line is used as the title.

    Notes
    -----
    Serial numbers are arbitrary positive integers chosen by the caller. They
    need not be contiguous and are preserved across edits, sub-molecule
    extraction and fragmentation. Iteration over atoms is always ordered by
    ascending serial number; iteration over bonds has no defined order.

    Examples
    --------
    >>> from chemgraph import Atom, Bond, Molecule
    >>> mol = Molecule("water")
    >>> mol.add_atom(1, Atom("O", [0.0, 0.0, 0.0]))
    >>> mol.add_atom(2, Atom("H", [0.96, 0.0, 0.0]))
    >>> mol.add_bond(1, 2, Bond.single())
    >>> mol.nbonds()
    1
    """

    def __init__(self, name: str = "") -> None:
        # Arbitrary property stored in key-value pair.
        self.properties = PropertyStore()
        # Crystalline lattice for structures using periodic boundary conditions
        self.lattice: Optional[Lattice] = None
        self.name = name

        self._graph = nx.Graph()
        # next node handle; handles of removed atoms are not reused
        self._next_node = 0
        # serial number <=> graph node
        self._sn_to_node: Dict[int, int] = {}
        self._node_to_sn: Dict[int, int] = {}

    @classmethod
    def from_atoms(cls, atoms: Iterable[Union[Atom, Tuple]], name: str = "") -> "Molecule":
        """
        Build a molecule from atoms, numbered consecutively from 1.

        Items may be Atom objects or (kind, position) tuples.
        """
        mol = cls(name)
        for sn, atom in enumerate(atoms, start=1):
            if not isinstance(atom, Atom):
                atom = Atom(*atom)
            mol.add_atom(sn, atom)
        return mol

    @classmethod
    def from_database(cls, name: str) -> "Molecule":
        """
        Return a small reference molecule shipped with chemgraph ("CH4", "H2O" or "HCN").
        """
        from .utils import get_data_file_path

        path = get_data_file_path(f"{name}.xyz")
        with open(path) as f:
            atoms = [Atom.from_line(line) for line in f if line.strip()]
        return cls.from_atoms(atoms, name=name)

    def __repr__(self) -> str:
        return f"Molecule({self.title()!r}, natoms={self.natoms()}, nbonds={self.nbonds()})"

    def copy(self) -> "Molecule":
        """Return a deep copy, including atoms, bonds, lattice and serial numbers."""
        return copy.deepcopy(self)

    # internal identity layer

    def _get_node_index(self, sn: int) -> Optional[int]:
        return self._sn_to_node.get(sn)

    def _node_index(self, sn: int) -> int:
        """Return the graph node bound to atom `sn`, failing loudly for unknown atoms."""
        try:
            return self._sn_to_node[sn]
        except KeyError:
            raise KeyError(f"invalid atom serial number: {sn}") from None

    def _atom_sn(self, node: int) -> int:
        try:
            return self._node_to_sn[node]
        except KeyError:
            raise KeyError(f"invalid graph node: {node}") from None

    def _bind(self, sn: int, node: int) -> None:
        """Insert the pair (sn, node) into the serial number index; never overwrites."""
        if sn in self._sn_to_node:
            raise RuntimeError(f"serial number {sn} is already bound to node {self._sn_to_node[sn]}")
        if node in self._node_to_sn:
            raise RuntimeError(f"node {node} is already bound to serial number {self._node_to_sn[node]}")
        self._sn_to_node[sn] = node
        self._node_to_sn[node] = sn

    def _unbind(self, sn: int) -> Optional[int]:
        """Remove atom `sn` from the serial number index and return its node."""
        node = self._sn_to_node.pop(sn, None)
        if node is not None:
            del self._node_to_sn[node]
        return node

    def _rebind_all(self, pairs: Iterable[Tuple[int, int]]) -> None:
        """Replace the whole serial number index by `pairs` of (sn, node).

        The new index is validated completely before it replaces the old one.
        """
        sn_to_node = {}
        node_to_sn = {}
        for sn, node in pairs:
            _check_serial_number(sn)
            if sn in sn_to_node:
                raise ValueError(f"duplicate serial number: {sn}")
            if node in node_to_sn:
                raise RuntimeError(f"node {node} bound twice")
            sn_to_node[sn] = node
            node_to_sn[node] = sn
        if set(node_to_sn) != set(self._node_to_sn):
            raise RuntimeError("new numbering does not cover all atoms")
        self._sn_to_node = sn_to_node
        self._node_to_sn = node_to_sn

    def _node_indices(self) -> List[int]:
        """Graph nodes ordered by serial numbers."""
        return [self._sn_to_node[sn] for sn in self.serial_numbers()]

    # core

    def add_atom(self, sn: int, atom: Atom) -> None:
        """
        Add `atom` into the molecule with serial number `sn`.

        If atom `sn` already exists, its data is replaced by `atom` while its
        bonds are kept.

        Raises ValueError if `sn` is not a positive integer.
        """
        _check_serial_number(sn)
        node = self._sn_to_node.get(sn)
        if node is not None:
            self._graph.nodes[node]["atom"] = atom
        else:
            node = self._next_node
            self._next_node += 1
            self._graph.add_node(node, atom=atom)
            self._bind(sn, node)

    def remove_atom(self, sn: int) -> Optional[Atom]:
        """
        Remove atom `sn` and all of its bonds.

        Returns the removed Atom, or None if atom `sn` does not exist.
        """
        node = self._unbind(sn)
        if node is None:
            return None
        atom = self._graph.nodes[node]["atom"]
        self._graph.remove_node(node)
        return atom

    def natoms(self) -> int:
        """Return the number of atoms in the molecule."""
        return self._graph.number_of_nodes()

    def nbonds(self) -> int:
        """Return the number of bonds in the molecule."""
        return self._graph.number_of_edges()

    def add_bond(self, a: int, b: int, bond: Bond) -> None:
        """
        Add `bond` between atom `a` and atom `b`. An existing bond between the two
        atoms is replaced.

        Raises KeyError if `a` or `b` does not exist.
        """
        na = self._node_index(a)
        nb = self._node_index(b)
        # replace, rather than update, the edge data so no stale attributes survive
        if self._graph.has_edge(na, nb):
            self._graph.remove_edge(na, nb)
        self._graph.add_edge(na, nb, bond=bond)

    def remove_bond(self, a: int, b: int) -> Optional[Bond]:
        """
        Remove the bond between atom `a` and atom `b`.

        Returns the removed Bond, or None if the atoms are not bonded.
        Raises KeyError if `a` or `b` does not exist.
        """
        na = self._node_index(a)
        nb = self._node_index(b)
        if not self._graph.has_edge(na, nb):
            return None
        bond = self._graph.edges[na, nb]["bond"]
        self._graph.remove_edge(na, nb)
        return bond

    def clear(self) -> None:
        """Remove all atoms and bonds. To remove bonds only, see `unbound`."""
        self._graph.clear()
        self._sn_to_node.clear()
        self._node_to_sn.clear()

    def atoms(self) -> Iterator[Tuple[int, Atom]]:
        """Iterate over (serial number, atom) pairs ordered by serial number."""
        for sn in self.serial_numbers():
            yield sn, self._graph.nodes[self._sn_to_node[sn]]["atom"]

    def bonds(self) -> Iterator[Tuple[int, int, Bond]]:
        """Iterate over (sn1, sn2, bond) triples in arbitrary order."""
        for u, v, bond in self._graph.edges(data="bond"):
            yield self._node_to_sn[u], self._node_to_sn[v], bond

    def serial_numbers(self) -> List[int]:
        """Atom serial numbers in ascending order."""
        return sorted(self._sn_to_node)

    def numbers(self) -> List[int]:
        """A shorter alias to `serial_numbers`."""
        return self.serial_numbers()

    def symbols(self) -> List[str]:
        """Atom symbols ordered by serial numbers."""
        return [atom.symbol for _, atom in self.atoms()]

    def masses(self) -> List[float]:
        """Atom masses ordered by serial numbers. Dummy atoms have a mass of zero."""
        return [atom.get_mass() or 0.0 for _, atom in self.atoms()]

    def atomic_numbers(self) -> List[int]:
        return [atom.number for _, atom in self.atoms()]

    def positions(self) -> List[Point3]:
        """Atom positions ordered by serial numbers."""
        return [atom.position for _, atom in self.atoms()]

    def title(self) -> str:
        """
        A short description of the molecule: the first line of its name, or
        "untitled" if the name is empty.
        """
        lines = self.name.splitlines()
        if not lines:
            return "untitled"
        return lines[0].strip()

    def set_title(self, title: str) -> None:
        self.name = title

    # edit

    def has_atom(self, sn: int) -> bool:
        return sn in self._sn_to_node

    def get_atom(self, sn: int) -> Optional[Atom]:
        """Return atom `sn`, or None if it does not exist. The returned atom may be edited in place."""
        node = self._sn_to_node.get(sn)
        if node is None:
            return None
        return self._graph.nodes[node]["atom"]

    def get_atom_unchecked(self, sn: int) -> Atom:
        """Return atom `sn`; raises KeyError if it does not exist."""
        return self._graph.nodes[self._node_index(sn)]["atom"]

    def get_bond(self, sn1: int, sn2: int) -> Optional[Bond]:
        """Return the bond between atoms `sn1` and `sn2`, or None if there is none."""
        n1 = self._sn_to_node.get(sn1)
        n2 = self._sn_to_node.get(sn2)
        if n1 is None or n2 is None or not self._graph.has_edge(n1, n2):
            return None
        return self._graph.edges[n1, n2]["bond"]

    def get_bond_unchecked(self, sn1: int, sn2: int) -> Bond:
        """Return the bond between atoms `sn1` and `sn2`; raises KeyError if there is none."""
        bond = self.get_bond(sn1, sn2)
        if bond is None:
            raise KeyError(f"no bond between atom {sn1} and atom {sn2}")
        return bond

    def has_bond(self, sn1: int, sn2: int) -> bool:
        return self.get_bond(sn1, sn2) is not None

    def set_position(self, sn: int, position: Sequence[float]) -> None:
        """Set the position of atom `sn`; raises KeyError if it does not exist."""
        self.get_atom_unchecked(sn).set_position(position)

    def set_symbol(self, sn: int, kind: Union[AtomKind, str, int]) -> None:
        """Set the element of atom `sn`; raises KeyError if it does not exist."""
        self.get_atom_unchecked(sn).set_symbol(kind)

    def add_atoms_from(self, atoms: Iterable[Tuple[int, Atom]]) -> None:
        for sn, atom in atoms:
            self.add_atom(sn, atom)

    def add_bonds_from(self, bonds: Iterable[Tuple[int, int, Bond]]) -> None:
        for u, v, bond in bonds:
            self.add_bond(u, v, bond)

    def _check_sequential(self, values: Sequence, what: str) -> List:
        values = list(values)
        if len(values) != self.natoms():
            raise ValueError(f"invalid number of {what}: expected {self.natoms()}, got {len(values)}")
        return values

    def set_positions(self, positions: Sequence[Sequence[float]]) -> None:
        """Set positions of all atoms in serial number order, overriding any freezing mask."""
        positions = self._check_sequential(positions, "positions")
        for (_, atom), p in zip(self.atoms(), positions):
            atom.set_position(p)

    def update_positions(self, positions: Sequence[Sequence[float]]) -> None:
        """Update positions of all atoms in serial number order, keeping frozen coordinates."""
        positions = self._check_sequential(positions, "positions")
        for (_, atom), p in zip(self.atoms(), positions):
            atom.update_position(p)

    def set_positions_from(self, selected_positions: Iterable[Tuple[int, Sequence[float]]]) -> None:
        """Set positions of selected atoms given as (serial number, position) pairs."""
        for sn, p in selected_positions:
            self.set_position(sn, p)

    def set_symbols(self, symbols: Sequence[Union[AtomKind, str, int]]) -> None:
        symbols = self._check_sequential(symbols, "symbols")
        for (_, atom), kind in zip(self.atoms(), symbols):
            atom.set_symbol(kind)

    # display order

    def renumber(self) -> None:
        """Renumber atoms consecutively from 1, keeping their current order."""
        self.renumber_using(range(1, self.natoms() + 1))

    def renumber_using(self, numbers: Sequence[int]) -> None:
        """
        Renumber atoms using user provided serial numbers, one per atom in the
        current order. Atom data and bonds are kept.

        Raises ValueError if `numbers` does not provide exactly one unique number per atom.
        """
        numbers = list(numbers)
        nodes = self._node_indices()
        if len(numbers) != len(nodes):
            raise ValueError(f"expected {len(nodes)} serial numbers, got {len(numbers)}")
        self._rebind_all(zip(numbers, nodes))

    def swap_order(self, sn1: int, sn2: int) -> None:
        """
        Swap the display order of atoms `sn1` and `sn2` without touching the
        graph structure. Raises KeyError if either atom does not exist.
        """
        n1 = self._node_index(sn1)
        n2 = self._node_index(sn2)
        self._sn_to_node[sn1], self._sn_to_node[sn2] = n2, n1
        self._node_to_sn[n1], self._node_to_sn[n2] = sn2, sn1

    def reorder(self, keys: Sequence) -> None:
        """
        Reorder atoms by sorting `keys` (one per atom, in the current order) and
        renumber them consecutively from 1. The sort is stable.

        Raises ValueError if the number of keys differs from the number of atoms.
        """
        keys = list(keys)
        if len(keys) != self.natoms():
            raise ValueError(f"keys length is invalid: expected {self.natoms()}, got {len(keys)}")
        nodes = self._node_indices()
        order = sorted(range(len(nodes)), key=lambda i: keys[i])
        self._rebind_all((sn, nodes[i]) for sn, i in enumerate(order, start=1))

    # bonds

    def unbound(self) -> None:
        """Remove all existing bonds between atoms."""
        self._graph.remove_edges_from(list(self._graph.edges()))

    def unbond(self, atoms1: Iterable[int], atoms2: Iterable[int]) -> None:
        """
        Remove all bonds between two selections of atoms, in the manner of pymol's
        unbond command.
        """
        atoms2 = list(atoms2)
        for a in atoms1:
            for b in atoms2:
                self.remove_bond(a, b)

    def rebond(self, options=None) -> None:
        """
        Recalculate all bonds from interatomic distances, replacing existing bonds.

        Parameters
        ----------
        options : BondingOptions, optional
            Bonding scheme and thresholds. Defaults to the Jmol scheme.
        """
        from .connect import guess_bonds

        bonds = guess_bonds(self, options)
        self.unbound()
        self.add_bonds_from(bonds)
        log.info(f"rebond: {len(bonds)} bonds perceived for {self.natoms()} atoms")

    # lattice

    def set_lattice(self, lattice: Lattice) -> None:
        self.lattice = lattice

    def is_periodic(self) -> bool:
        return self.lattice is not None

    def unbuild_crystal(self) -> None:
        """Remove the lattice, leaving a nonperiodic structure."""
        self.lattice = None

    def get_scaled_positions(self) -> Optional[List[Point3]]:
        """Fractional coordinates of atoms in serial number order, or None if not periodic."""
        if self.lattice is None:
            return None
        if self.natoms() == 0:
            return []
        return [tuple(p) for p in self.lattice.to_frac(self.positions()).tolist()]

    def _require_lattice(self) -> Lattice:
        if self.lattice is None:
            raise ValueError("cannot set scaled positions for aperiodic structure")
        return self.lattice

    def set_scaled_positions(self, scaled: Sequence[Sequence[float]]) -> None:
        """Set fractional coordinates of all atoms in serial number order."""
        lattice = self._require_lattice()
        scaled = self._check_sequential(scaled, "positions")
        if scaled:
            self.set_positions(lattice.to_cart(scaled).tolist())

    def set_scaled_positions_from(self, scaled: Iterable[Tuple[int, Sequence[float]]]) -> None:
        """Set fractional coordinates of selected atoms given as (serial number, position) pairs."""
        lattice = self._require_lattice()
        for sn, frac in scaled:
            self.set_position(sn, lattice.to_cart(frac).tolist())

    def supercell(self, sa: int, sb: int, sc: int) -> Optional["Molecule"]:
        """
        Create a supercell of dimensions sa*a x sb*b x sc*c.

        Atoms are renumbered from 1, image by image. Bonds are not copied; call
        `rebond` on the result if needed. Returns None if not periodic.
        """
        if self.lattice is None:
            return None
        atoms = []
        for image in self.lattice.replicate(range(sa), range(sb), range(sc)):
            t = [float(x) for x in self.lattice.to_cart(image)]
            for _, atom in self.atoms():
                atom = atom.copy()
                x, y, z = atom.position
                atom.set_position([x + t[0], y + t[1], z + t[2]])
                atoms.append(atom)

        mol = Molecule.from_atoms(atoms, name=self.name)
        vectors = self.lattice.vectors()
        for v, s in zip(vectors, (sa, sb, sc)):
            for k in range(3):
                v[k] *= s
        mol.lattice = Lattice(vectors)
        return mol

    # delegated analyses, implemented in their own modules

    def get_distance(self, i: int, j: int) -> Optional[float]:
        """
        Return the distance between atoms `i` and `j`, using the minimum image
        convention for periodic structures. Returns None if any atom does not exist.
        """
        from .geometry import get_distance

        return get_distance(self, i, j)

    def get_angle(self, i: int, j: int, k: int) -> Optional[float]:
        from .geometry import get_angle

        return get_angle(self, i, j, k)

    def get_torsion(self, i: int, j: int, k: int, l: int) -> Optional[float]:
        from .geometry import get_torsion

        return get_torsion(self, i, j, k, l)

    def translate(self, displacement: Sequence[float]) -> None:
        from .geometry import translate

        translate(self, displacement)

    def center_of_geometry(self) -> Point3:
        from .geometry import center_of_geometry

        return center_of_geometry(self)

    def recenter(self) -> None:
        from .geometry import recenter

        recenter(self)

    def center_of_mass(self) -> Point3:
        from .geometry import center_of_mass

        return center_of_mass(self)

    def inertia_matrix(self):
        from .geometry import inertia_matrix

        return inertia_matrix(self)

    def formula(self) -> str:
        """Molecular formula in Hill system order; empty for an empty molecule."""
        from .formula import get_reduced_formula

        return get_reduced_formula(self.symbols())

    def reduced_symbols(self) -> Dict[str, int]:
        from .formula import get_reduced_symbols

        return get_reduced_symbols(self.symbols())

    def freezing_atoms_mask(self):
        from .freeze import freezing_atoms_mask

        return freezing_atoms_mask(self)

    def freezing_coords_mask(self):
        from .freeze import freezing_coords_mask

        return freezing_coords_mask(self)

    def nbonds_between(self, sn1: int, sn2: int) -> Optional[int]:
        from .topology import nbonds_between

        return nbonds_between(self, sn1, sn2)

    def path_between(self, sn1: int, sn2: int) -> Optional[List[int]]:
        from .topology import path_between

        return path_between(self, sn1, sn2)

    def connected(self, sn: int) -> List[int]:
        from .topology import connected

        return connected(self, sn)

    def fragmented(self) -> List["Molecule"]:
        from .topology import fragmented

        return fragmented(self)

    def get_sub_molecule(self, atoms: Sequence[int]) -> Optional["Molecule"]:
        from .topology import get_sub_molecule

        return get_sub_molecule(self, atoms)

    def selection_by_expanding_bond(self, m: int, n: int) -> List[int]:
        from .selection import selection_by_expanding_bond

        return selection_by_expanding_bond(self, m, n)

    def selection_by_distance(self, n: int, r: float) -> List[int]:
        from .selection import selection_by_distance

        return selection_by_distance(self, n, r)

    def create_neighbor_probe(self):
        from .selection import NeighborProbe

        return NeighborProbe(self)

    def find_rings(self, nmax: int):
        """Find rings of up to `nmax` atoms. See `chemgraph.rings.find_rings`."""
        from .rings import find_rings

        return find_rings(self, nmax)

    def clean(self, **kwargs) -> int:
        """Clean up the geometry using stress majorization. See `chemgraph.clean.clean`."""
        from .clean import clean

        return clean(self, **kwargs)

    def matching_configuration(self, other: "Molecule") -> bool:
        """Test if `other` has the same atoms and periodicity, irrespective of positions."""
        from .trajectory import matching_configuration

        return matching_configuration(self, other)
