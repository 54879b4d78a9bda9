import copy
import math
from typing import Optional, Sequence, Tuple, Union

from openmm import unit

from . import element_data
from .elements import AtomKind
from .properties import PropertyStore

Point3 = Tuple[float, float, float]


def as_point(p: Union[Sequence[float], unit.Quantity], name: str = "position") -> Point3:
    """Convert a 3-component sequence (optionally a unit.Quantity) into a tuple of floats in angstrom."""
    if isinstance(p, unit.Quantity):
        if not p.unit.is_compatible(unit.angstrom):
            raise ValueError(f"{name} must have units of distance, got {p.unit}")
        p = p.value_in_unit(unit.angstrom)
    values = tuple(float(x) for x in p)
    if len(values) != 3:
        raise ValueError(f"{name} must have 3 components, got {len(values)}")
    return values


class Atom:
    """
    Atom is the smallest particle still characterizing a chemical element.

    Parameters
    ----------
    kind : AtomKind, str or int
        Element symbol, element name, atomic number or an AtomKind. Unknown
        labels produce a dummy atom.
    position : sequence of 3 floats or unit.Quantity, default = (0, 0, 0)
        Cartesian position in angstrom.

    Notes
    -----
    `freezing` is a per-axis mask. `update_position` leaves masked axes
    untouched, while `set_position` always overwrites all three components.
    """

    def __init__(
        self,
        kind: Union[AtomKind, str, int] = "C",
        position: Union[Sequence[float], unit.Quantity] = (0.0, 0.0, 0.0),
    ) -> None:
        self.properties = PropertyStore()
        self._kind = AtomKind.from_value(kind)
        self._position = as_point(position)
        self.label: Optional[str] = None
        self.velocity: Point3 = (0.0, 0.0, 0.0)
        self.mass: Optional[float] = None
        self.partial_charge: Optional[float] = None
        self._freezing = [False, False, False]

    @classmethod
    def from_line(cls, line: str) -> "Atom":
        """
        Parse an atom from a line record: ``SYMBOL X Y Z [VX VY VZ]``.

        Velocities are only set if all three optional fields parse as floats.

        Raises
        ------
        ValueError
            If the line has fewer than 4 fields or a coordinate is not a number.
        """
        parts = line.split()
        if len(parts) < 4:
            raise ValueError(f"Incorrect number of data fields: {line!r}")
        try:
            position = [float(x) for x in parts[1:4]]
        except ValueError as e:
            raise ValueError(f"Invalid coordinates in line: {line!r}") from e

        atom = cls(parts[0], position)
        if len(parts) >= 7:
            try:
                atom.velocity = tuple(float(x) for x in parts[4:7])
            except ValueError:
                pass
        return atom

    def __str__(self) -> str:
        x, y, z = self._position
        return f"{self.symbol:6} {x:12.6f} {y:12.6f} {z:12.6f}"

    def __repr__(self) -> str:
        return f"Atom({self.symbol!r}, {self._position})"

    def copy(self) -> "Atom":
        return copy.deepcopy(self)

    @property
    def kind(self) -> AtomKind:
        return self._kind

    @property
    def symbol(self) -> str:
        return self._kind.symbol

    @property
    def number(self) -> int:
        return self._kind.number

    @property
    def position(self) -> Point3:
        return self._position

    def set_position(self, p: Union[Sequence[float], unit.Quantity]) -> None:
        self._position = as_point(p)

    def set_symbol(self, kind: Union[AtomKind, str, int]) -> None:
        self._kind = AtomKind.from_value(kind)

    def set_label(self, label: str) -> None:
        self.label = label

    def set_velocity(self, v: Sequence[float]) -> None:
        self.velocity = as_point(v, "velocity")

    def set_partial_charge(self, charge: float) -> None:
        self.partial_charge = charge

    def set_mass(self, mass: float) -> None:
        self.mass = mass

    def is_dummy(self) -> bool:
        return self._kind.number == 0

    def is_element(self) -> bool:
        return not self.is_dummy()

    @property
    def freezing(self) -> Tuple[bool, bool, bool]:
        return tuple(self._freezing)

    def set_freezing(self, freezing: Sequence[bool]) -> None:
        if len(freezing) != 3:
            raise ValueError(f"freezing mask must have 3 components, got {len(freezing)}")
        self._freezing = [bool(f) for f in freezing]

    def is_fixed(self) -> bool:
        """Return True if the atom is frozen along all of x, y and z."""
        return all(self._freezing)

    def update_position(self, p: Union[Sequence[float], unit.Quantity]) -> None:
        """Update the Cartesian position, leaving frozen components unchanged."""
        new_position = as_point(p)
        self._position = tuple(
            old if masked else new
            for old, new, masked in zip(self._position, new_position, self._freezing)
        )

    def get_cov_radius(self) -> Optional[float]:
        """Covalent radius of the atom, or None for dummy atoms or missing data."""
        return element_data.get_cov_radius(self.number, 1)

    def get_vdw_radius(self) -> Optional[float]:
        """Van der Waals radius of the atom, or None for dummy atoms or missing data."""
        return element_data.get_vdw_radius(self.number)

    def get_bonding_radius(self) -> Optional[float]:
        return element_data.get_bonding_radius(self.number)

    def get_mass(self) -> Optional[float]:
        """Mass in atomic mass units; an explicit mass set on the atom takes precedence."""
        if self.mass is not None:
            return self.mass
        return element_data.get_atomic_mass(self.number)

    def distance(self, other: "Atom") -> float:
        """Return the Cartesian distance to `other`, irrespective of periodic images."""
        return math.dist(self._position, other._position)
