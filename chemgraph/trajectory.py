# Trajectory: frames of one molecule that share atoms but differ in geometry.

import copy
from typing import TYPE_CHECKING, Iterator, List, Optional, Sequence, Tuple, Union

import jax.numpy as jnp
from loguru import logger as log
from openmm import unit

from .bond import Bond
from .lattice import Lattice
from .properties import PropertyStore
from .utils import to_angstrom_array

if TYPE_CHECKING:
    from .molecule import Molecule


def matching_configuration(mol1: "Molecule", mol2: "Molecule") -> bool:
    """
    Return True if `mol1` and `mol2` may be frames of the same trajectory.

    Both must have the same number of atoms, the same element symbols in
    serial number order, and either both or neither must be periodic.
    Positions are not compared.
    """
    if mol1.natoms() != mol2.natoms():
        return False
    if mol1.symbols() != mol2.symbols():
        return False
    return mol1.is_periodic() == mol2.is_periodic()


class Configuration:
    """
    State of a molecule at one frame of a trajectory.

    Parameters
    ----------
    positions : array-like or unit.Quantity
        Shape[N,3] atom positions in serial number order. A unit.Quantity must
        have units of distance and is converted to angstrom.
    title : str, default = ""
        A descriptive message of this frame.
    lattice : Lattice, optional
        Periodic lattice of this frame.
    bonds : list of (sn1, sn2, Bond), optional
        Bond connectivity of this frame.
    properties : PropertyStore, optional
        Properties associated with this frame.
    """

    def __init__(
        self,
        positions: Union[jnp.ndarray, unit.Quantity, Sequence[Sequence[float]]],
        title: str = "",
        lattice: Optional[Lattice] = None,
        bonds: Optional[List[Tuple[int, int, Bond]]] = None,
        properties: Optional[PropertyStore] = None,
    ) -> None:
        self._positions = None
        self.set_positions(positions)
        if lattice is not None and not isinstance(lattice, Lattice):
            raise TypeError(f"lattice must be a Lattice, type(lattice) = {type(lattice)}")
        self.title = title
        self.lattice = lattice
        self.bonds = list(bonds) if bonds is not None else []
        self.properties = properties if properties is not None else PropertyStore()

    @classmethod
    def from_molecule(cls, mol: "Molecule") -> "Configuration":
        """Capture the current state of `mol`."""
        return cls(
            mol.positions(),
            title=mol.title(),
            lattice=copy.deepcopy(mol.lattice),
            bonds=[(u, v, bond.copy()) for u, v, bond in mol.bonds()],
            properties=copy.deepcopy(mol.properties),
        )

    @property
    def natoms(self) -> int:
        return self._positions.shape[0]

    @property
    def positions(self) -> jnp.ndarray:
        """Shape[N,3] array of positions in angstrom."""
        return self._positions

    def set_positions(self, positions: Union[jnp.ndarray, unit.Quantity, Sequence[Sequence[float]]]) -> None:
        positions = to_angstrom_array(positions, "positions").reshape(-1, 3)
        if self._positions is not None and positions.shape != self._positions.shape:
            raise ValueError(
                f"positions must have shape {self._positions.shape}, got {positions.shape} instead."
            )
        self._positions = positions

    def update_molecule(self, parent: "Molecule") -> None:
        """
        Apply this frame to `parent` in place: positions, lattice and title.
        Bonds and properties of `parent` are kept.
        """
        parent.set_positions(self._positions.tolist())
        parent.lattice = copy.deepcopy(self.lattice)
        parent.set_title(self.title)

    def to_molecule(self, parent: "Molecule") -> "Molecule":
        """Return a copy of `parent` carrying the state of this frame, including its bonds."""
        mol = parent.copy()
        self.update_molecule(mol)
        mol.unbound()
        for u, v, bond in self.bonds:
            mol.add_bond(u, v, bond.copy())
        mol.properties = copy.deepcopy(self.properties)
        return mol


class Trajectory:
    """
    A collection of molecules of the same size but with different configurations.

    The first molecule is kept as the parent: atom data (elements, masses,
    freezing masks) comes from it, while each frame stores its own positions,
    lattice, bonds, title and properties.

    Parameters
    ----------
    molecules : sequence of Molecule
        Frames of the trajectory. All of them must match the first one in
        number of atoms, element symbols and periodicity.

    Raises
    ------
    ValueError
        If `molecules` is empty or two consecutive molecules do not match.

    Examples
    --------
    >>> from chemgraph import Molecule
    >>> from chemgraph.trajectory import Trajectory
    >>> mol = Molecule.from_database("CH4")
    >>> traj = Trajectory([mol, mol.copy()])
    >>> traj.nframes()
    2
    """

    def __init__(self, molecules: Sequence["Molecule"]) -> None:
        molecules = list(molecules)
        if not molecules:
            raise ValueError("a trajectory needs at least one molecule")
        for i in range(len(molecules) - 1):
            if not matching_configuration(molecules[i], molecules[i + 1]):
                raise ValueError(f"found inconsistent molecules: {i} -- {i + 1}")

        self._parent = molecules[0].copy()
        self.frames = [Configuration.from_molecule(mol) for mol in molecules]
        log.debug(f"trajectory of {self.nframes()} frames with {self.natoms()} atoms")

    def __len__(self) -> int:
        return self.nframes()

    def __getitem__(self, index: int) -> "Molecule":
        return self.frames[index].to_molecule(self._parent)

    def __iter__(self) -> Iterator["Molecule"]:
        for conf in self.frames:
            yield conf.to_molecule(self._parent)

    def is_empty(self) -> bool:
        """Return True if the trajectory has no frames."""
        return not self.frames

    def nframes(self) -> int:
        """Return the number of frames in the trajectory."""
        return len(self.frames)

    def natoms(self) -> int:
        """Return the number of atoms in each frame."""
        return self._parent.natoms()

    def append(self, mol: "Molecule") -> None:
        """Append `mol` as a new frame; raises ValueError if it does not match the parent."""
        if not matching_configuration(self._parent, mol):
            raise ValueError("molecule does not match the atoms of the trajectory")
        self.frames.append(Configuration.from_molecule(mol))
