import jax.numpy as jnp
import pytest

from chemgraph import Atom, Bond, Molecule
from chemgraph.clean import get_distance_bounds


def test_distance_bounds(methane):
    methane.rebond()
    methane.add_atom(6, Atom("He", [30.0, 0.0, 0.0]))
    bounds = get_distance_bounds(methane)

    # C-H: bonded and already within the covalent window
    d = methane.get_distance(1, 2)
    assert bounds[(1, 2)] == pytest.approx((d, d))
    # H-H: two bonds apart and shorter than 0.8 * (vdw_H + vdw_H)
    d = methane.get_distance(2, 3)
    assert bounds[(2, 3)] == pytest.approx((1.76, 1.76 + d))
    # disconnected
    lower, upper = bounds[(1, 6)]
    assert upper == 90.0
    assert lower == pytest.approx(max(0.8 * (1.7 + 1.4), 1.2 * (0.75 + 0.46)))
    assert len(bounds) == 15
    assert all(i < j for i, j in bounds)


def test_distance_bounds_stretched_bond():
    mol = Molecule.from_atoms([Atom("C"), Atom("H", [2.0, 0.0, 0.0])])
    mol.add_bond(1, 2, Bond.single())
    lower, upper = get_distance_bounds(mol)[(1, 2)]
    assert lower == upper == pytest.approx(0.8 * (0.75 + 0.32))


def test_clean_stretched_methane(methane):
    methane.rebond()
    x, y, z = methane.get_atom(2).position
    methane.set_position(2, [x, y - 0.5, z])
    assert methane.get_distance(1, 2) > 1.5

    ncycles = methane.clean()
    assert 1 <= ncycles <= 500
    assert methane.get_distance(1, 2) < 1.5
    assert bool(jnp.all(jnp.isfinite(jnp.array(methane.positions()))))
    # bonds are untouched
    assert methane.nbonds() == 4


def test_clean_respects_frozen_atoms(methane):
    methane.rebond()
    methane.get_atom(1).set_freezing([True, True, True])
    methane.get_atom(3).set_freezing([False, False, True])
    carbon = methane.get_atom(1).position
    z3 = methane.get_atom(3).position[2]
    methane.set_position(2, [0.5, -1.0, 0.0])

    methane.clean(max_cycles=50)
    assert methane.get_atom(1).position == carbon
    assert methane.get_atom(3).position[2] == z3


def test_clean_max_cycles(methane):
    methane.rebond()
    methane.set_position(2, [1.0, -2.0, 0.3])
    assert methane.clean(max_cycles=1) == 1
    with pytest.raises(ValueError):
        methane.clean(max_cycles=-1)
    with pytest.raises(ValueError):
        methane.clean(ecut=0.0)


def test_clean_trivial():
    assert Molecule().clean() == 0
    assert Molecule.from_atoms([Atom("C")]).clean() == 0


def test_clean_degenerate_geometry():
    mol = Molecule.from_atoms([Atom("C"), Atom("C"), Atom("H", [1.0, 0.0, 0.0])])
    mol.add_bond(1, 2, Bond.single())
    before = mol.positions()
    with pytest.raises(RuntimeError):
        mol.clean()
    # positions are not corrupted by the failed cycle
    assert mol.positions() == before


def test_clean_missing_radius_data():
    mol = Molecule.from_atoms([Atom("C"), Atom("X", [1.0, 0.0, 0.0])])
    with pytest.raises(RuntimeError):
        mol.clean()
