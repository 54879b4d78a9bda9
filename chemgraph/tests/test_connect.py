import pytest
from loguru import logger as log
from openmm import unit

from chemgraph import Atom, BondingOptions, BondingScheme, Molecule
from chemgraph.connect import guess_bonds, is_bonded, scheme_radius


def test_rebond_methane(methane):
    assert methane.nbonds() == 0
    methane.rebond()
    assert methane.nbonds() == 4
    assert sorted(methane.connected(1)) == [2, 3, 4, 5]


def test_rebond_is_idempotent(methane):
    methane.rebond()
    first = {frozenset((i, j)) for i, j, _ in methane.bonds()}
    methane.rebond()
    second = {frozenset((i, j)) for i, j, _ in methane.bonds()}
    assert first == second


def test_rebond_replaces_existing_bonds(methane):
    from chemgraph import Bond

    methane.add_bond(2, 3, Bond.single())
    methane.rebond()
    assert not methane.has_bond(2, 3)
    assert methane.nbonds() == 4


def test_rebond_periodic_diamond(diamond_si):
    diamond_si.rebond()
    assert diamond_si.nbonds() == 16
    connected = set(diamond_si.connected(1))
    assert len(connected) == 4
    assert connected <= {5, 6, 7, 8}


def test_rebond_ignore_pbc(diamond_si):
    diamond_si.rebond(BondingOptions(ignore_pbc=True))
    # inside a single cell only atom 5 is close enough to atom 1
    assert set(diamond_si.connected(1)) == {5}
    # 5 bonds to 1-4; 6, 7 and 8 each keep one bond inside the cell
    assert diamond_si.nbonds() == 7


def test_bonding_options_validation():
    assert BondingOptions().scheme == BondingScheme.JMOL
    assert BondingOptions("Multiwfn").scheme == BondingScheme.MULTIWFN
    with pytest.raises(ValueError):
        BondingOptions("openbabel")
    with pytest.raises(TypeError):
        BondingOptions(42)
    with pytest.raises(ValueError):
        BondingOptions(distance_cutoff=-1.0)
    with pytest.raises(ValueError):
        BondingOptions(distance_cutoff=1.0 * unit.kelvin)
    with pytest.raises(ValueError):
        BondingOptions("vmd", radius_scale=0.0)

    options = BondingOptions(bond_tolerance=0.05 * unit.nanometer)
    assert options.tolerance == pytest.approx(0.5)


def test_scheme_defaults():
    assert BondingOptions().tolerance == 0.45
    assert BondingOptions("vmd").scale == 0.6
    assert BondingOptions("multiwfn").scale == 1.15
    assert BondingOptions("vmd", radius_scale=0.5).scale == 0.5

    # never smaller than 3.6 angstrom
    assert BondingOptions().search_cutoff([1, 6]) == pytest.approx(3.6)
    assert BondingOptions(distance_cutoff=5.0).search_cutoff([1, 6]) == 5.0


def test_is_bonded_schemes():
    carbon = Atom("C")
    hydrogen = Atom("H")
    # C: cov 0.75, vdw 1.7; H: cov 0.32, vdw 1.1
    jmol = BondingOptions("jmol")
    assert is_bonded(jmol, carbon, hydrogen, 1.5)
    assert not is_bonded(jmol, carbon, hydrogen, 1.6)

    # VMD and Multiwfn double the radius of the first atom
    vmd = BondingOptions("vmd")
    assert is_bonded(vmd, carbon, hydrogen, 2.0)
    assert not is_bonded(vmd, hydrogen, carbon, 2.0)

    multiwfn = BondingOptions("multiwfn")
    assert is_bonded(multiwfn, carbon, hydrogen, 1.7)
    assert not is_bonded(multiwfn, hydrogen, carbon, 1.7)


def test_dummy_atoms_are_never_bonded():
    mol = Molecule.from_atoms([Atom("C"), Atom("X", [0.5, 0.0, 0.0])])
    assert mol.get_atom(2).is_dummy()
    for scheme in BondingScheme:
        assert guess_bonds(mol, BondingOptions(scheme)) == []


def test_guess_bonds_pairs_are_ordered(water):
    bonds = guess_bonds(water)
    assert [(i, j) for i, j, _ in bonds] == [(1, 2), (1, 3)]
    assert all(bond.is_single() for _, _, bond in bonds)


def test_missing_radius_warning_follows_scheme(water, monkeypatch):
    carbon = Atom("C")
    assert scheme_radius(BondingScheme.JMOL, carbon) == carbon.get_bonding_radius()
    assert scheme_radius(BondingScheme.VMD, carbon) == carbon.get_vdw_radius()
    assert scheme_radius(BondingScheme.MULTIWFN, carbon) == carbon.get_cov_radius()

    # hydrogen loses its van der Waals radius only
    vdw_radius = Atom.get_vdw_radius
    monkeypatch.setattr(Atom, "get_vdw_radius", lambda atom: None if atom.symbol == "H" else vdw_radius(atom))

    messages = []
    handler_id = log.add(messages.append, level="WARNING", format="{message}")
    try:
        assert guess_bonds(water, BondingOptions("jmol")) != []
        assert messages == []
        assert guess_bonds(water, BondingOptions("vmd")) == []
    finally:
        log.remove(handler_id)
    assert len(messages) == 1
    assert "[2, 3]" in messages[0]
