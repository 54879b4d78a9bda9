import jax.numpy as jnp
import pytest
from openmm import unit

from chemgraph import Bond, Configuration, Lattice, Molecule, Trajectory


def test_matching_configuration():
    mol1 = Molecule.from_database("CH4")
    mol2 = mol1.copy()
    mol2.set_position(1, [1.0, 2.0, 3.0])
    assert mol2.matching_configuration(mol1)

    mol2.set_symbol(2, "Fe")
    assert not mol2.matching_configuration(mol1)

    mol2 = mol1.copy()
    mol2.set_lattice(Lattice(jnp.eye(3) * 10.0))
    assert not mol2.matching_configuration(mol1)
    mol1.set_lattice(Lattice(jnp.eye(3) * 12.0))
    assert mol2.matching_configuration(mol1)

    mol2.remove_atom(5)
    assert not mol2.matching_configuration(mol1)


def test_trajectory_frames():
    mol1 = Molecule.from_database("CH4")
    mol1.rebond()
    mol2 = mol1.copy()
    mol2.set_title("stretched")
    mol2.set_position(2, [0.0, 0.0, 2.0])
    mol2.unbound()
    mol2.properties.store("energy", -40.1)

    traj = Trajectory([mol1, mol2])
    assert traj.nframes() == len(traj) == 2
    assert traj.natoms() == 5
    assert not traj.is_empty()

    frames = list(traj)
    assert frames[0].nbonds() == 4
    assert frames[0].positions() == mol1.positions()
    assert frames[1].title() == "stretched"
    assert frames[1].get_atom(2).position == (0.0, 0.0, 2.0)
    assert frames[1].nbonds() == 0
    assert frames[1].properties.load("energy") == -40.1
    assert traj[1].positions() == frames[1].positions()

    # frames are snapshots: later edits of the source molecules do not leak in
    mol2.set_position(3, [9.0, 9.0, 9.0])
    assert traj[1].get_atom(3).position != (9.0, 9.0, 9.0)


def test_trajectory_rejects_inconsistent_molecules():
    with pytest.raises(ValueError):
        Trajectory([])

    water = Molecule.from_database("H2O")
    methane = Molecule.from_database("CH4")
    with pytest.raises(ValueError):
        Trajectory([methane, methane.copy(), water])

    traj = Trajectory([methane])
    with pytest.raises(ValueError):
        traj.append(water)
    traj.append(methane.copy())
    assert traj.nframes() == 2


def test_configuration_positions():
    mol = Molecule.from_database("H2O")
    conf = Configuration.from_molecule(mol)
    assert conf.natoms == 3
    assert jnp.allclose(conf.positions, jnp.array(mol.positions()))

    conf.set_positions(unit.Quantity(jnp.zeros((3, 3)), unit.nanometer))
    assert jnp.allclose(conf.positions, 0.0)
    with pytest.raises(ValueError):
        conf.set_positions(jnp.zeros((2, 3)))
    with pytest.raises(ValueError):
        conf.set_positions(unit.Quantity(jnp.zeros((3, 3)), unit.kelvin))

    conf.title = "collapsed"
    conf.update_molecule(mol)
    assert mol.title() == "collapsed"
    assert mol.positions() == [(0.0, 0.0, 0.0)] * 3

    conf = Configuration([[0.0, 0.0, 0.0], [1.1, 0.0, 0.0]], bonds=[(1, 2, Bond.double())])
    pair = Molecule.from_atoms([("C", [5.0, 0.0, 0.0]), ("O", [6.0, 0.0, 0.0])])
    mol = conf.to_molecule(pair)
    assert mol.get_bond(1, 2).is_double()
    assert mol.get_atom(2).position == (1.1, 0.0, 0.0)
    # the parent is left untouched
    assert pair.nbonds() == 0
    assert pair.get_atom(2).position == (6.0, 0.0, 0.0)
