# Static chemical data for atoms: element radii and masses.
#
# Radii are taken from https://mendeleev.readthedocs.io/en/stable/data.html
# Columns: covalent radius for single, double, triple bonds; van der Waals radius.
# All lengths are in angstrom, masses in atomic mass units.
from typing import Optional

RADII_DATA = (
    (0.32, 0.32, 0.32, 1.1),  # H
    (0.46, 0.46, 0.46, 1.4),  # He
    (1.33, 1.24, 1.24, 1.82),  # Li
    (1.02, 0.9, 0.85, 1.53),  # Be
    (0.85, 0.78, 0.73, 1.92),  # B
    (0.75, 0.67, 0.6, 1.7),  # C
    (0.71, 0.6, 0.54, 1.55),  # N
    (0.63, 0.57, 0.53, 1.52),  # O
    (0.64, 0.59, 0.53, 1.47),  # F
    (0.67, 0.96, 0.96, 1.54),  # Ne
    (1.55, 1.6, 1.6, 2.27),  # Na
    (1.39, 1.32, 1.27, 1.73),  # Mg
    (1.26, 1.13, 1.11, 1.84),  # Al
    (1.16, 1.07, 1.02, 2.1),  # Si
    (1.11, 1.02, 0.94, 1.8),  # P
    (1.03, 0.94, 0.95, 1.8),  # S
    (0.99, 0.95, 0.93, 1.75),  # Cl
    (0.96, 1.07, 0.96, 1.88),  # Ar
    (1.96, 1.93, 1.93, 2.75),  # K
    (1.71, 1.47, 1.33, 2.31),  # Ca
    (1.48, 1.16, 1.14, 2.15),  # Sc
    (1.36, 1.17, 1.08, 2.11),  # Ti
    (1.34, 1.12, 1.06, 2.07),  # V
    (1.22, 1.11, 1.03, 2.06),  # Cr
    (1.19, 1.05, 1.03, 2.05),  # Mn
    (1.16, 1.09, 1.02, 2.04),  # Fe
    (1.11, 1.03, 0.96, 2.0),  # Co
    (1.1, 1.01, 1.01, 1.97),  # Ni
    (1.12, 1.15, 1.2, 1.96),  # Cu
    (1.18, 1.2, 1.2, 2.01),  # Zn
    (1.24, 1.17, 1.21, 1.87),  # Ga
    (1.21, 1.11, 1.14, 2.11),  # Ge
    (1.21, 1.14, 1.06, 1.85),  # As
    (1.16, 1.07, 1.07, 1.9),  # Se
    (1.14, 1.09, 1.1, 1.85),  # Br
    (1.17, 1.21, 1.08, 2.02),  # Kr
    (2.1, 2.02, 2.02, 3.03),  # Rb
    (1.85, 1.57, 1.39, 2.49),  # Sr
    (1.63, 1.3, 1.24, 2.32),  # Y
    (1.54, 1.27, 1.21, 2.23),  # Zr
    (1.47, 1.25, 1.16, 2.18),  # Nb
    (1.38, 1.21, 1.13, 2.17),  # Mo
    (1.28, 1.2, 1.1, 2.16),  # Tc
    (1.25, 1.14, 1.03, 2.13),  # Ru
    (1.25, 1.1, 1.06, 2.1),  # Rh
    (1.2, 1.17, 1.12, 2.1),  # Pd
    (1.28, 1.39, 1.37, 2.11),  # Ag
    (1.36, 1.44, 1.44, 2.18),  # Cd
    (1.42, 1.36, 1.46, 1.93),  # In
    (1.4, 1.3, 1.32, 2.17),  # Sn
    (1.4, 1.33, 1.27, 2.06),  # Sb
    (1.36, 1.28, 1.21, 2.06),  # Te
    (1.33, 1.29, 1.25, 1.98),  # I
    (1.31, 1.35, 1.22, 2.16),  # Xe
    (2.32, 2.09, 2.09, 3.43),  # Cs
    (1.96, 1.61, 1.49, 2.68),  # Ba
    (1.8, 1.39, 1.39, 2.43),  # La
    (1.63, 1.37, 1.31, 2.42),  # Ce
    (1.76, 1.38, 1.28, 2.4),  # Pr
    (1.74, 1.37, 1.37, 2.39),  # Nd
    (1.73, 1.35, 1.35, 2.38),  # Pm
    (1.72, 1.34, 1.34, 2.36),  # Sm
    (1.68, 1.34, 1.34, 2.35),  # Eu
    (1.69, 1.35, 1.32, 2.34),  # Gd
    (1.68, 1.35, 1.35, 2.33),  # Tb
    (1.67, 1.33, 1.33, 2.31),  # Dy
    (1.66, 1.33, 1.33, 2.3),  # Ho
    (1.65, 1.33, 1.33, 2.29),  # Er
    (1.64, 1.31, 1.31, 2.27),  # Tm
    (1.7, 1.29, 1.29, 2.26),  # Yb
    (1.62, 1.31, 1.31, 2.24),  # Lu
    (1.52, 1.28, 1.22, 2.23),  # Hf
    (1.46, 1.26, 1.19, 2.22),  # Ta
    (1.37, 1.2, 1.15, 2.18),  # W
    (1.31, 1.19, 1.1, 2.16),  # Re
    (1.29, 1.16, 1.09, 2.16),  # Os
    (1.22, 1.15, 1.07, 2.13),  # Ir
    (1.23, 1.12, 1.1, 2.13),  # Pt
    (1.24, 1.21, 1.23, 2.14),  # Au
    (1.33, 1.42, 1.42, 2.23),  # Hg
    (1.44, 1.42, 1.5, 1.96),  # Tl
    (1.44, 1.35, 1.37, 2.02),  # Pb
    (1.51, 1.41, 1.35, 2.07),  # Bi
    (1.45, 1.35, 1.29, 1.97),  # Po
    (1.47, 1.38, 1.38, 2.02),  # At
    (1.42, 1.45, 1.33, 2.2),  # Rn
    (2.23, 2.18, 2.18, 3.48),  # Fr
    (2.01, 1.73, 1.59, 2.83),  # Ra
    (1.86, 1.53, 1.4, 2.47),  # Ac
    (1.75, 1.43, 1.36, 2.45),  # Th
    (1.69, 1.38, 1.29, 2.43),  # Pa
    (1.7, 1.34, 1.18, 2.41),  # U
    (1.71, 1.36, 1.16, 2.39),  # Np
    (1.72, 1.35, 1.35, 2.43),  # Pu
    (1.66, 1.35, 1.35, 2.44),  # Am
    (1.66, 1.36, 1.36, 2.45),  # Cm
    (1.68, 1.39, 1.39, 2.44),  # Bk
    (1.68, 1.4, 1.4, 2.45),  # Cf
    (1.65, 1.4, 1.4, 2.45),  # Es
    (1.67, 1.67, 1.67, 2.45),  # Fm
    (1.73, 1.39, 1.39, 2.46),  # Md
    (1.76, 1.76, 1.76, 2.46),  # No
    (1.61, 1.41, 1.41, 2.46),  # Lr
    (1.57, 1.4, 1.31, 2.46),  # Rf
    (1.49, 1.36, 1.26, 2.46),  # Db
    (1.43, 1.28, 1.21, 2.46),  # Sg
    (1.41, 1.28, 1.19, 2.46),  # Bh
    (1.34, 1.25, 1.18, 2.46),  # Hs
    (1.29, 1.25, 1.13, 2.46),  # Mt
    (1.28, 1.16, 1.18, 2.46),  # Ds
    (1.21, 1.16, 1.18, 2.46),  # Rg
    (1.22, 1.37, 1.3, 2.46),  # Cn
    (1.36, 1.36, 1.36, 2.46),  # Nh
    (1.43, 1.43, 1.43, 2.46),  # Fl
    (1.62, 1.62, 1.62, 2.46),  # Mc
    (1.75, 1.75, 1.75, 2.46),  # Lv
    (1.65, 1.65, 1.65, 2.46),  # Ts
    (1.57, 1.57, 1.57, 2.46),  # Og
)

MASSES_DATA = (
    1.008,  # H
    4.002602,  # He
    6.94,  # Li
    9.012183,  # Be
    10.81,  # B
    12.011,  # C
    14.007,  # N
    15.999,  # O
    18.998403,  # F
    20.1797,  # Ne
    22.989769,  # Na
    24.305,  # Mg
    26.981538,  # Al
    28.085,  # Si
    30.973762,  # P
    32.06,  # S
    35.45,  # Cl
    39.948,  # Ar
    39.0983,  # K
    40.078,  # Ca
    44.955908,  # Sc
    47.867,  # Ti
    50.9415,  # V
    51.9961,  # Cr
    54.938044,  # Mn
    55.845,  # Fe
    58.933194,  # Co
    58.6934,  # Ni
    63.546,  # Cu
    65.38,  # Zn
    69.723,  # Ga
    72.63,  # Ge
    74.921595,  # As
    78.971,  # Se
    79.904,  # Br
    83.798,  # Kr
    85.4678,  # Rb
    87.62,  # Sr
    88.90584,  # Y
    91.224,  # Zr
    92.90637,  # Nb
    95.95,  # Mo
    97.90721,  # Tc
    101.07,  # Ru
    102.9055,  # Rh
    106.42,  # Pd
    107.8682,  # Ag
    112.414,  # Cd
    114.818,  # In
    118.71,  # Sn
    121.76,  # Sb
    127.6,  # Te
    126.90447,  # I
    131.293,  # Xe
    132.905452,  # Cs
    137.327,  # Ba
    138.90547,  # La
    140.116,  # Ce
    140.90766,  # Pr
    144.242,  # Nd
    144.91276,  # Pm
    150.36,  # Sm
    151.964,  # Eu
    157.25,  # Gd
    158.92535,  # Tb
    162.5,  # Dy
    164.93033,  # Ho
    167.259,  # Er
    168.93422,  # Tm
    173.045,  # Yb
    174.9668,  # Lu
    178.49,  # Hf
    180.94788,  # Ta
    183.84,  # W
    186.207,  # Re
    190.23,  # Os
    192.217,  # Ir
    195.084,  # Pt
    196.966569,  # Au
    200.592,  # Hg
    204.38,  # Tl
    207.2,  # Pb
    208.9804,  # Bi
    209.0,  # Po
    210.0,  # At
    222.0,  # Rn
    223.0,  # Fr
    226.0,  # Ra
    227.0,  # Ac
    232.0377,  # Th
    231.03588,  # Pa
    238.02891,  # U
    237.0,  # Np
    244.0,  # Pu
    243.0,  # Am
    247.0,  # Cm
    247.0,  # Bk
    251.0,  # Cf
    252.0,  # Es
    257.0,  # Fm
    258.0,  # Md
    259.0,  # No
    262.0,  # Lr
    267.0,  # Rf
    268.0,  # Db
    271.0,  # Sg
    274.0,  # Bh
    269.0,  # Hs
    276.0,  # Mt
    281.0,  # Ds
    281.0,  # Rg
    285.0,  # Cn
    286.0,  # Nh
    289.0,  # Fl
    288.0,  # Mc
    293.0,  # Lv
    294.0,  # Ts
    294.0,  # Og
)

# column index of the van der Waals radius in RADII_DATA
_VDW_COLUMN = 3


def get_cov_radius(element_number: int, bond_order: int = 1) -> Optional[float]:
    """Return the covalent radius for a single, double or triple bond, or None if no data."""
    if 0 < element_number <= len(RADII_DATA) and 0 < bond_order <= 3:
        return RADII_DATA[element_number - 1][bond_order - 1]
    return None


def get_vdw_radius(element_number: int) -> Optional[float]:
    """Return the van der Waals radius, or None if no data."""
    if 0 < element_number <= len(RADII_DATA):
        return RADII_DATA[element_number - 1][_VDW_COLUMN]
    return None


def get_bonding_radius(element_number: int) -> Optional[float]:
    """Return the radius used for Jmol style bond perception.

    Jmol perceives bonds from single-bond covalent radii, so this is the first
    column of RADII_DATA.
    """
    return get_cov_radius(element_number, 1)


def get_atomic_mass(element_number: int) -> Optional[float]:
    """Return the standard atomic mass, or None for dummy/unknown elements."""
    if 0 < element_number <= len(MASSES_DATA):
        return MASSES_DATA[element_number - 1]
    return None


def max_cov_radius(element_numbers=None) -> float:
    """Largest single-bond covalent radius among `element_numbers` (all elements if None)."""
    return _max_radius(get_cov_radius, element_numbers)


def max_vdw_radius(element_numbers=None) -> float:
    """Largest van der Waals radius among `element_numbers` (all elements if None)."""
    return _max_radius(get_vdw_radius, element_numbers)


def max_bonding_radius(element_numbers=None) -> float:
    """Largest bonding radius among `element_numbers` (all elements if None)."""
    return _max_radius(get_bonding_radius, element_numbers)


def _max_radius(getter, element_numbers) -> float:
    if element_numbers is None:
        element_numbers = range(1, len(RADII_DATA) + 1)
    radii = [r for r in map(getter, element_numbers) if r is not None]
    return max(radii, default=0.0)
