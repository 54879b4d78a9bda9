import math

import jax.numpy as jnp
import pytest
from openmm import unit

from chemgraph import Lattice


def test_lattice_construction():
    lattice = Lattice(jnp.eye(3) * 10.0)
    assert lattice.lengths() == pytest.approx((10.0, 10.0, 10.0))
    assert lattice.volume() == pytest.approx(1000.0)
    assert lattice.widths() == pytest.approx((10.0, 10.0, 10.0))

    # units are converted to angstrom
    lattice = Lattice(unit.Quantity(jnp.eye(3), unit.nanometer))
    assert lattice.lengths() == pytest.approx((10.0, 10.0, 10.0))

    with pytest.raises(ValueError):
        Lattice(jnp.eye(2))
    with pytest.raises(ValueError):
        Lattice([[1.0, 0.0, 0.0], [2.0, 0.0, 0.0], [0.0, 0.0, 1.0]])
    with pytest.raises(ValueError):
        Lattice(unit.Quantity(jnp.eye(3), unit.kelvin))


def test_from_params():
    lattice = Lattice.from_params(3.0, 4.0, 5.0, 90.0, 90.0, 120.0)
    assert lattice.lengths() == pytest.approx((3.0, 4.0, 5.0))
    va, vb, _ = lattice.vectors()
    cos_gamma = (va[0] * vb[0] + va[1] * vb[1] + va[2] * vb[2]) / 12.0
    assert math.degrees(math.acos(cos_gamma)) == pytest.approx(120.0)
    assert lattice.volume() == pytest.approx(3.0 * 4.0 * 5.0 * math.sin(math.radians(120.0)))

    lattice = Lattice.from_params(0.5 * unit.nanometer, 5.0, 5.0)
    assert lattice.lengths() == pytest.approx((5.0, 5.0, 5.0))


def test_coordinate_conversion():
    lattice = Lattice.from_params(4.0, 5.0, 6.0, 80.0, 95.0, 110.0)
    frac = jnp.array([[0.1, 0.2, 0.3], [0.9, -0.4, 1.7]])
    cart = lattice.to_cart(frac)
    assert jnp.allclose(lattice.to_frac(cart), frac)
    assert jnp.allclose(lattice.to_cart([1.0, 0.0, 0.0]), lattice.matrix()[0])


def test_wrap():
    lattice = Lattice(jnp.eye(3) * 10.0)
    assert jnp.allclose(lattice.wrap([11.0, 0.0, 0.0]), jnp.array([1.0, 0.0, 0.0]))
    assert jnp.allclose(lattice.wrap([-1.0, 0.0, 0.0]), jnp.array([9.0, 0.0, 0.0]))
    assert jnp.allclose(lattice.wrap([[5.0, 12.0, -1.0]]), jnp.array([[5.0, 2.0, 9.0]]))


def test_minimum_image_distance():
    lattice = Lattice(jnp.eye(3) * 10.0)
    r_ij, dist = lattice.displacement(jnp.array([[0.0, 0.0, 0.0], [0.0, 0.0, 0.0]]), jnp.array([[1.0, 0.0, 0.0], [6.0, 0.0, 0.0]]))
    assert jnp.allclose(r_ij, jnp.array([[-1.0, 0.0, 0.0], [4.0, 0.0, 0.0]]))
    assert jnp.allclose(dist, jnp.array([1.0, 4.0]))

    assert lattice.distance([0.5, 0.5, 0.5], [9.5, 9.5, 9.5]) == pytest.approx(math.sqrt(3.0))


def test_minimum_image_skewed_cell():
    # strongly skewed cell where rounding fractional coordinates alone is not enough
    lattice = Lattice([[10.0, 0.0, 0.0], [9.0, 2.0, 0.0], [0.0, 0.0, 10.0]])
    p = jnp.array([0.0, 0.0, 0.0])
    q = lattice.to_cart([0.4, 0.4, 0.0])
    brute = min(
        float(jnp.linalg.norm(q + lattice.to_cart([i, j, k]) - p))
        for i in range(-3, 4)
        for j in range(-3, 4)
        for k in range(-1, 2)
    )
    assert lattice.distance(p, q) == pytest.approx(brute)


def test_replicate():
    lattice = Lattice(jnp.eye(3))
    images = lattice.replicate(range(2), range(-1, 2), range(1))
    assert len(images) == 6
    assert (1, -1, 0) in images
