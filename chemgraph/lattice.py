# Periodic lattice: conversion between Cartesian and fractional coordinates
# and distances under the minimum image convention.

import itertools
import math
from typing import Iterable, List, Tuple, Union

import jax
import jax.numpy as jnp
from openmm import unit

from .utils import to_angstrom, to_angstrom_array

# fractional offsets of the 27 cells surrounding (and including) the home cell
_NEIGHBOR_IMAGES = jnp.array(list(itertools.product((-1, 0, 1), repeat=3)), dtype=jnp.float64)


@jax.jit
def _wrap(xyz: jnp.ndarray, matrix: jnp.ndarray, inverse: jnp.ndarray) -> jnp.ndarray:
    frac = xyz @ inverse
    frac = frac - jnp.floor(frac)
    return frac @ matrix


@jax.jit
def _displacement(
    xyz_1: jnp.ndarray, xyz_2: jnp.ndarray, matrix: jnp.ndarray, inverse: jnp.ndarray
) -> Tuple[jnp.ndarray, jnp.ndarray]:
    # reduce the fractional displacement to [-0.5, 0.5] first; for skewed cells the
    # nearest image may still live in a neighboring cell, so scan all 27 of them
    frac = (xyz_1 - xyz_2) @ inverse
    frac = frac - jnp.round(frac)
    candidates = (frac[..., None, :] + _NEIGHBOR_IMAGES) @ matrix
    dist = jnp.linalg.norm(candidates, axis=-1)
    nearest = jnp.argmin(dist, axis=-1)
    r_ij = jnp.einsum("...k,...kd->...d", jax.nn.one_hot(nearest, 27, dtype=candidates.dtype), candidates)
    return r_ij, jnp.min(dist, axis=-1)

class Lattice:
    """
    Crystalline lattice for structures using periodic boundary conditions.

    Parameters
    ----------
    matrix: array-like or unit.Quantity
        Shape[3,3] array whose rows are the lattice vectors a, b and c.
        If passed as a unit.Quantity, the units must be distances and will be converted to angstrom.

    Notes
    -----
    A Lattice is immutable. Its kernels are module-level jitted functions that
    take the lattice matrix and its inverse as arguments, so they compile once
    per array shape and are shared by all lattices.

    Examples
    --------
    >>> from chemgraph.lattice import Lattice
    >>> lat = Lattice([[5.43, 0, 0], [0, 5.43, 0], [0, 0, 5.43]])
    >>> round(lat.distance([0.1, 0.0, 0.0], [5.33, 0.0, 0.0]), 6)
    0.2
    """

    def __init__(self, matrix: Union[jnp.ndarray, unit.Quantity, List]):
        matrix = to_angstrom_array(matrix, "lattice matrix")
        if matrix.shape != (3, 3):
            raise ValueError(f"lattice matrix should be a 3x3 array, shape provided: {matrix.shape}")
        volume = float(jnp.linalg.det(matrix))
        if abs(volume) < 1e-8:
            raise ValueError("lattice vectors are linearly dependent")

        self._matrix = matrix
        self._inverse = jnp.linalg.inv(matrix)

    @classmethod
    def from_params(
        cls,
        a: Union[float, unit.Quantity],
        b: Union[float, unit.Quantity],
        c: Union[float, unit.Quantity],
        alpha: float = 90.0,
        beta: float = 90.0,
        gamma: float = 90.0,
    ) -> "Lattice":
        """
        Build a lattice from cell parameters.

        Parameters
        ----------
        a, b, c: float or unit.Quantity
            Lengths of the lattice vectors.
        alpha, beta, gamma: float
            Cell angles in degrees.
        """
        a = to_angstrom(a, "a")
        b = to_angstrom(b, "b")
        c = to_angstrom(c, "c")
        cos_alpha = math.cos(math.radians(alpha))
        cos_beta = math.cos(math.radians(beta))
        cos_gamma = math.cos(math.radians(gamma))
        sin_gamma = math.sin(math.radians(gamma))

        va = [a, 0.0, 0.0]
        vb = [b * cos_gamma, b * sin_gamma, 0.0]
        cx = c * cos_beta
        cy = c * (cos_alpha - cos_beta * cos_gamma) / sin_gamma
        cz = math.sqrt(c * c - cx * cx - cy * cy)
        return cls([va, vb, [cx, cy, cz]])

    def __repr__(self) -> str:
        return f"Lattice({self._matrix.tolist()})"

    def matrix(self) -> jnp.ndarray:
        """Shape[3,3] array with the lattice vectors as rows."""
        return self._matrix

    def inverse(self) -> jnp.ndarray:
        """Inverse of the lattice matrix, mapping Cartesian rows to fractional rows."""
        return self._inverse

    def vectors(self) -> List[List[float]]:
        """Lattice vectors a, b and c as plain lists."""
        return self._matrix.tolist()

    def lengths(self) -> Tuple[float, float, float]:
        """Lengths of the lattice vectors a, b and c."""
        return tuple(float(x) for x in jnp.linalg.norm(self._matrix, axis=1))

    def volume(self) -> float:
        return abs(float(jnp.linalg.det(self._matrix)))

    def widths(self) -> Tuple[float, float, float]:
        """Perpendicular distances between opposite faces of the unit cell."""
        va, vb, vc = self._matrix
        volume = self.volume()
        areas = [
            jnp.linalg.norm(jnp.cross(vb, vc)),
            jnp.linalg.norm(jnp.cross(vc, va)),
            jnp.linalg.norm(jnp.cross(va, vb)),
        ]
        return tuple(volume / float(area) for area in areas)

    def to_frac(self, cart) -> jnp.ndarray:
        """Convert Cartesian coordinates (a point or shape[N,3] array) to fractional coordinates."""
        return jnp.asarray(cart, dtype=jnp.float64) @ self._inverse

    def to_cart(self, frac) -> jnp.ndarray:
        """Convert fractional coordinates (a point or shape[N,3] array) to Cartesian coordinates."""
        return jnp.asarray(frac, dtype=jnp.float64) @ self._matrix

    def wrap(self, xyz) -> jnp.ndarray:
        """
        Wrap Cartesian positions into the unit cell.

        Parameters
        ----------
        xyz: array-like
            A single position or shape[N,3] array of positions.

        Returns
        -------
        jnp.ndarray
            Wrapped positions, whose fractional coordinates all lie in [0, 1).
        """
        return _wrap(jnp.asarray(xyz, dtype=jnp.float64), self._matrix, self._inverse)

    def displacement(self, xyz_1, xyz_2) -> Tuple[jnp.ndarray, jnp.ndarray]:
        """
        Calculate the displacement vector and distance between two points under the
        minimum image convention.

        Parameters
        ----------
        xyz_1: array-like
            Positions of the first point(s)
        xyz_2: array-like
            Positions of the second point(s)

        Returns
        -------
        r_ij: jnp.ndarray
            Displacement vector xyz_1 - xyz_2 to the nearest periodic image
        dist: jnp.ndarray
            Distance between the two points
        """
        xyz_1 = jnp.asarray(xyz_1, dtype=jnp.float64)
        xyz_2 = jnp.asarray(xyz_2, dtype=jnp.float64)
        return _displacement(xyz_1, xyz_2, self._matrix, self._inverse)

    def distance(self, p, q) -> Union[float, jnp.ndarray]:
        """Return the distance between `p` and `q` under the minimum image convention."""
        _, dist = self.displacement(p, q)
        if dist.ndim == 0:
            return float(dist)
        return dist

    def replicate(self, ra: Iterable[int], rb: Iterable[int], rc: Iterable[int]) -> List[Tuple[int, int, int]]:
        """
        Enumerate periodic images as integer fractional translations.

        Parameters
        ----------
        ra, rb, rc: iterables of int
            Ranges of images along a, b and c, e.g. range(-1, 2).
        """
        return list(itertools.product(ra, rb, rc))
