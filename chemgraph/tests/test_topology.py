import pytest

from chemgraph import Atom, Bond, Molecule


def test_path_methane():
    mol = Molecule.from_database("CH4")
    mol.rebond()

    assert mol.nbonds_between(1, 2) == 1
    assert mol.nbonds_between(2, 3) == 2
    assert mol.nbonds_between(3, 3) == 0
    assert mol.path_between(1, 2) == [1, 2]
    path = mol.path_between(2, 3)
    assert path[0] == 2 and path[-1] == 3 and path[1] == 1


def test_path_unknown_or_disconnected(methane):
    # no bonds yet
    assert methane.nbonds_between(1, 2) is None
    assert methane.path_between(1, 2) is None
    with pytest.raises(KeyError):
        methane.nbonds_between(1, 100)
    with pytest.raises(KeyError):
        methane.path_between(100, 1)
    with pytest.raises(KeyError):
        methane.connected(100)


def test_sub_molecule():
    mol = Molecule.from_database("CH4")
    mol.rebond()

    empty = mol.get_sub_molecule([])
    assert empty is not None
    assert empty.natoms() == 0

    submol = mol.get_sub_molecule([1, 2, 3])
    assert submol.natoms() == 3
    assert submol.nbonds() == 2
    assert submol.has_bond(1, 2)
    assert submol.has_bond(1, 3)
    assert not submol.has_bond(2, 3)

    assert mol.get_sub_molecule([1, 100]) is None


def test_sub_molecule_keeps_serial_numbers(methane):
    methane.rebond()
    methane.renumber_using([11, 12, 13, 14, 15])
    submol = methane.get_sub_molecule([15, 11])
    assert submol.serial_numbers() == [11, 15]
    assert submol.has_bond(11, 15)
    # atoms are copies
    submol.set_position(11, [0.0, 0.0, 0.0])
    assert methane.get_atom(11).position != (0.0, 0.0, 0.0)


def test_fragmented(methane, water):
    # put water next to methane, far away and with serial numbers 6..8
    mol = methane
    for k, (_, atom) in enumerate(water.atoms()):
        x, y, z = atom.position
        atom.set_position([x + 20.0, y, z])
        mol.add_atom(6 + k, atom)
    mol.add_atom(20, Atom("Ar", [-20.0, 0.0, 0.0]))
    mol.rebond()

    fragments = mol.fragmented()
    assert len(fragments) == 3
    assert sum(frag.natoms() for frag in fragments) == mol.natoms()
    sns = [sn for frag in fragments for sn in frag.serial_numbers()]
    assert sorted(sns) == mol.serial_numbers()
    assert [frag.formula() for frag in fragments] == ["CH4", "H2O", "Ar"]
    assert fragments[1].serial_numbers() == [6, 7, 8]
    assert fragments[1].nbonds() == 2


def test_fragments_inherit_lattice(diamond_si):
    diamond_si.rebond()
    fragments = diamond_si.fragmented()
    assert len(fragments) == 1
    assert fragments[0].is_periodic()
    assert fragments[0].nbonds() == 16


def test_selection_by_expanding_bond(benzene):
    assert benzene.selection_by_expanding_bond(1, 0) == [1]
    assert benzene.selection_by_expanding_bond(1, 1) == [2, 6, 1]
    assert benzene.selection_by_expanding_bond(1, 2) == [2, 3, 5, 6, 1]
    with pytest.raises(KeyError):
        benzene.selection_by_expanding_bond(100, 1)


def test_selection_by_distance(methane, diamond_si):
    assert methane.selection_by_distance(1, 1.2) == [2, 3, 4, 5]
    assert methane.selection_by_distance(2, 1.2) == [1]
    with pytest.raises(ValueError):
        methane.selection_by_distance(1, -1.0)

    # periodic images count
    assert diamond_si.selection_by_distance(1, 2.5) == [5, 6, 7, 8]
    # the center is only selected through its own periodic images
    assert 1 not in diamond_si.selection_by_distance(1, 5.0)
    assert 1 in diamond_si.selection_by_distance(1, 5.5)


def test_neighbor_probe(methane):
    probe = methane.create_neighbor_probe()
    found = probe.probe_neighbors([-0.902, 0.626, 0.008], 0.1)
    assert [n.node for n in found] == [1]
    assert sorted(n.node for n in probe.neighbors(1, 1.2)) == [2, 3, 4, 5]


def test_connected_ring(benzene):
    assert sorted(benzene.connected(1)) == [2, 6]
    benzene.add_bond(1, 4, Bond.single())
    assert sorted(benzene.connected(1)) == [2, 4, 6]
