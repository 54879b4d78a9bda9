import math

import pytest


@pytest.fixture
def methane():
    from chemgraph import Atom, Molecule

    atoms = [
        Atom("C", [-0.90203687, 0.62555259, 0.0081889]),
        Atom("H", [-0.54538244, -0.38325741, 0.0081889]),
        Atom("H", [-0.54536403, 1.12995078, 0.88184041]),
        Atom("H", [-0.54536403, 1.12995078, -0.8654626]),
        Atom("H", [-1.97203687, 0.62556577, 0.0081889]),
    ]
    return Molecule.from_atoms(atoms, name="methane")


@pytest.fixture
def hcn():
    from chemgraph import Molecule

    return Molecule.from_database("HCN")


@pytest.fixture
def water():
    from chemgraph import Molecule

    return Molecule.from_database("H2O")


@pytest.fixture
def diamond_si():
    """Conventional cubic cell of diamond silicon, 8 atoms."""
    from chemgraph import Atom, Lattice, Molecule

    a = 5.4307
    fractional = [
        (0.00, 0.00, 0.00),
        (0.00, 0.50, 0.50),
        (0.50, 0.00, 0.50),
        (0.50, 0.50, 0.00),
        (0.25, 0.25, 0.25),
        (0.25, 0.75, 0.75),
        (0.75, 0.25, 0.75),
        (0.75, 0.75, 0.25),
    ]
    mol = Molecule.from_atoms([Atom("Si", [x * a, y * a, z * a]) for x, y, z in fractional], name="Si8")
    mol.set_lattice(Lattice([[a, 0.0, 0.0], [0.0, a, 0.0], [0.0, 0.0, a]]))
    return mol


def _ring_molecule(n: int, bond_length: float = 1.4):
    """A planar regular n-membered carbon ring, bonded, numbered 1..n."""
    from chemgraph import Atom, Bond, Molecule

    radius = bond_length / (2.0 * math.sin(math.pi / n))
    atoms = [
        Atom("C", [radius * math.cos(2 * math.pi * k / n), radius * math.sin(2 * math.pi * k / n), 0.0])
        for k in range(n)
    ]
    mol = Molecule.from_atoms(atoms)
    for k in range(1, n + 1):
        mol.add_bond(k, k % n + 1, Bond.single())
    return mol


@pytest.fixture
def benzene():
    return _ring_molecule(6)


@pytest.fixture
def naphthalene():
    """Graph of naphthalene: two six-membered rings sharing the bond 1-6."""
    from chemgraph import Atom, Bond, Molecule

    mol = Molecule.from_atoms([Atom("C", [1.4 * k, 0.0, 0.0]) for k in range(10)])
    ring_a = [1, 2, 3, 4, 5, 6]
    ring_b = [1, 6, 7, 8, 9, 10]
    for ring in (ring_a, ring_b):
        for a, b in zip(ring, ring[1:] + ring[:1]):
            mol.add_bond(a, b, Bond.aromatic())
    return mol
