# Element registry: symbols, names and atomic numbers, plus the AtomKind type
# that distinguishes chemical elements from dummy atoms.
from dataclasses import dataclass
from typing import Optional, Union

ELEMENT_DATA = (
    ("H", "Hydrogen"),
    ("He", "Helium"),
    ("Li", "Lithium"),
    ("Be", "Beryllium"),
    ("B", "Boron"),
    ("C", "Carbon"),
    ("N", "Nitrogen"),
    ("O", "Oxygen"),
    ("F", "Fluorine"),
    ("Ne", "Neon"),
    ("Na", "Sodium"),
    ("Mg", "Magnesium"),
    ("Al", "Aluminum"),
    ("Si", "Silicon"),
    ("P", "Phosphorus"),
    ("S", "Sulfur"),
    ("Cl", "Chlorine"),
    ("Ar", "Argon"),
    ("K", "Potassium"),
    ("Ca", "Calcium"),
    ("Sc", "Scandium"),
    ("Ti", "Titanium"),
    ("V", "Vanadium"),
    ("Cr", "Chromium"),
    ("Mn", "Manganese"),
    ("Fe", "Iron"),
    ("Co", "Cobalt"),
    ("Ni", "Nickel"),
    ("Cu", "Copper"),
    ("Zn", "Zinc"),
    ("Ga", "Gallium"),
    ("Ge", "Germanium"),
    ("As", "Arsenic"),
    ("Se", "Selenium"),
    ("Br", "Bromine"),
    ("Kr", "Krypton"),
    ("Rb", "Rubidium"),
    ("Sr", "Strontium"),
    ("Y", "Yttrium"),
    ("Zr", "Zirconium"),
    ("Nb", "Niobium"),
    ("Mo", "Molybdenum"),
    ("Tc", "Technetium"),
    ("Ru", "Ruthenium"),
    ("Rh", "Rhodium"),
    ("Pd", "Palladium"),
    ("Ag", "Silver"),
    ("Cd", "Cadmium"),
    ("In", "Indium"),
    ("Sn", "Tin"),
    ("Sb", "Antimony"),
    ("Te", "Tellurium"),
    ("I", "Iodine"),
    ("Xe", "Xenon"),
    ("Cs", "Cesium"),
    ("Ba", "Barium"),
    ("La", "Lanthanum"),
    ("Ce", "Cerium"),
    ("Pr", "Praseodymium"),
    ("Nd", "Neodymium"),
    ("Pm", "Promethium"),
    ("Sm", "Samarium"),
    ("Eu", "Europium"),
    ("Gd", "Gadolinium"),
    ("Tb", "Terbium"),
    ("Dy", "Dysprosium"),
    ("Ho", "Holmium"),
    ("Er", "Erbium"),
    ("Tm", "Thulium"),
    ("Yb", "Ytterbium"),
    ("Lu", "Lutetium"),
    ("Hf", "Hafnium"),
    ("Ta", "Tantalum"),
    ("W", "Tungsten"),
    ("Re", "Rhenium"),
    ("Os", "Osmium"),
    ("Ir", "Iridium"),
    ("Pt", "Platinum"),
    ("Au", "Gold"),
    ("Hg", "Mercury"),
    ("Tl", "Thallium"),
    ("Pb", "Lead"),
    ("Bi", "Bismuth"),
    ("Po", "Polonium"),
    ("At", "Astatine"),
    ("Rn", "Radon"),
    ("Fr", "Francium"),
    ("Ra", "Radium"),
    ("Ac", "Actinium"),
    ("Th", "Thorium"),
    ("Pa", "Protactinium"),
    ("U", "Uranium"),
    ("Np", "Neptunium"),
    ("Pu", "Plutonium"),
    ("Am", "Americium"),
    ("Cm", "Curium"),
    ("Bk", "Berkelium"),
    ("Cf", "Californium"),
    ("Es", "Einsteinium"),
    ("Fm", "Fermium"),
    ("Md", "Mendelevium"),
    ("No", "Nobelium"),
    ("Lr", "Lawrencium"),
    ("Rf", "Rutherfordium"),
    ("Db", "Dubnium"),
    ("Sg", "Seaborgium"),
    ("Bh", "Bohrium"),
    ("Hs", "Hassium"),
    ("Mt", "Meitnerium"),
    ("Ds", "Darmstadtium"),
    ("Rg", "Roentgenium"),
    ("Cn", "Copernicium"),
    ("Nh", "Nihonium"),
    ("Fl", "Flerovium"),
    ("Mc", "Moscovium"),
    ("Lv", "Livermorium"),
    ("Ts", "Tennessine"),
    ("Og", "Oganesson"),
)

# quick lookup of atomic numbers by exact symbol
ELEMENTS = {symbol: number for number, (symbol, _) in enumerate(ELEMENT_DATA, start=1)}

# case-insensitive lookup by symbol or by name
_ELEMENTS_UPPER = {}
for _number, (_symbol, _name) in enumerate(ELEMENT_DATA, start=1):
    _ELEMENTS_UPPER[_symbol.upper()] = _number
    _ELEMENTS_UPPER[_name.upper()] = _number


def symbol_for(number: int) -> Optional[str]:
    """Return the element symbol for an atomic number, or None if out of range."""
    if 0 < number <= len(ELEMENT_DATA):
        return ELEMENT_DATA[number - 1][0]
    return None


def name_for(number: int) -> Optional[str]:
    """Return the element name for an atomic number, or None if out of range."""
    if 0 < number <= len(ELEMENT_DATA):
        return ELEMENT_DATA[number - 1][1]
    return None


def number_for(label: str) -> Optional[int]:
    """
    Return the atomic number of an element given by symbol, name or number.

    Parameters
    ----------
    label: str
        Element symbol ("Fe"), name ("iron") or atomic number ("26").
        Symbols and names are matched case-insensitively.

    Returns
    -------
    Optional[int]
        The atomic number, or None if `label` does not identify a known element.
    """
    label = label.strip()
    if label in ELEMENTS:
        return ELEMENTS[label]
    if label.isdigit():
        number = int(label)
        return number if 0 < number <= len(ELEMENT_DATA) else None
    return _ELEMENTS_UPPER.get(label.upper())


class AtomKind:
    """
    Kind of an atom: either a chemical element or a dummy atom.

    Use `AtomKind.from_value` to build one from a symbol, name or atomic number.
    """

    @property
    def symbol(self) -> str:
        raise NotImplementedError

    @property
    def number(self) -> int:
        raise NotImplementedError

    @property
    def name(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        return self.symbol

    @staticmethod
    def from_value(value: Union["AtomKind", int, str]) -> "AtomKind":
        """
        Build an AtomKind from an element symbol, name or atomic number.

        Atomic number 0 gives a dummy atom labeled "dummy". Anything that is not a
        known element falls back to a dummy atom carrying the original label.
        """
        if isinstance(value, AtomKind):
            return value
        if isinstance(value, bool):
            raise TypeError(f"invalid atom kind: {value!r}")
        if isinstance(value, int):
            if value == 0:
                return Dummy("dummy")
            if 0 < value <= len(ELEMENT_DATA):
                return Element(value)
            return Dummy(str(value))
        if isinstance(value, str):
            number = number_for(value)
            if number is None:
                return Dummy(value)
            return Element(number)
        raise TypeError(f"cannot build an atom kind from {type(value)}")


@dataclass(frozen=True)
class Element(AtomKind):
    """Chemical element identified by its atomic number."""

    atomic_number: int

    def __post_init__(self):
        if not 0 < self.atomic_number <= len(ELEMENT_DATA):
            raise ValueError(f"atomic number out of range: {self.atomic_number}")

    @property
    def symbol(self) -> str:
        return ELEMENT_DATA[self.atomic_number - 1][0]

    @property
    def number(self) -> int:
        return self.atomic_number

    @property
    def name(self) -> str:
        return ELEMENT_DATA[self.atomic_number - 1][1]

    def __str__(self) -> str:
        return self.symbol


@dataclass(frozen=True)
class Dummy(AtomKind):
    """Dummy atom for special purposes, e.g. ghost sites or unknown labels."""

    label: str

    @property
    def symbol(self) -> str:
        return self.label

    @property
    def number(self) -> int:
        return 0

    @property
    def name(self) -> str:
        return self.label

    def __str__(self) -> str:
        return self.symbol
