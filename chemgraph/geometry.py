# Geometric measures of a molecule: distances, angles, centers and the inertia tensor.

import math
from typing import TYPE_CHECKING, Optional, Sequence

import jax.numpy as jnp

from .atom import Point3, as_point

if TYPE_CHECKING:
    from .molecule import Molecule


def _positions(mol: "Molecule") -> jnp.ndarray:
    if mol.natoms() == 0:
        raise ValueError("molecule contains no atoms")
    return jnp.array(mol.positions(), dtype=jnp.float64)


def translate(mol: "Molecule", displacement: Sequence[float]) -> None:
    """Translate all atoms by `displacement`, frozen atoms included."""
    dx, dy, dz = as_point(displacement, "displacement")
    for _, atom in mol.atoms():
        x, y, z = atom.position
        atom.set_position((x + dx, y + dy, z + dz))


def center_of_geometry(mol: "Molecule") -> Point3:
    return tuple(_positions(mol).mean(axis=0).tolist())


def recenter(mol: "Molecule") -> None:
    """Move the center of geometry to the origin."""
    if mol.is_periodic():
        raise NotImplementedError("recenter is not supported for periodic structures")
    x, y, z = center_of_geometry(mol)
    translate(mol, (-x, -y, -z))


def center_of_mass(mol: "Molecule") -> Point3:
    positions = _positions(mol)
    masses = jnp.array(mol.masses(), dtype=jnp.float64)
    total = float(masses.sum())
    if total <= 0.0:
        raise ValueError(f"invalid masses: {mol.masses()}")
    return tuple((masses @ positions / total).tolist())


def inertia_matrix(mol: "Molecule") -> jnp.ndarray:
    """
    Return the 3x3 inertia tensor relative to the center of mass.

    Returns
    -------
    jnp.ndarray
        Symmetric shape[3,3] array in amu * angstrom**2.
    """
    com = jnp.array(center_of_mass(mol))
    r = _positions(mol) - com
    masses = jnp.array(mol.masses(), dtype=jnp.float64)
    r2 = jnp.sum(r * r, axis=1)
    # I = sum_k m_k (|r_k|^2 E - r_k r_k^T)
    return jnp.einsum("k,kij->ij", masses, r2[:, None, None] * jnp.eye(3) - r[:, :, None] * r[:, None, :])


def get_distance(mol: "Molecule", i: int, j: int) -> Optional[float]:
    """
    Distance between atoms `i` and `j`, under the minimum image convention for
    periodic structures. Returns None if either atom does not exist.
    """
    atom_i, atom_j = mol.get_atom(i), mol.get_atom(j)
    if atom_i is None or atom_j is None:
        return None
    if mol.lattice is not None:
        return mol.lattice.distance(atom_i.position, atom_j.position)
    return atom_i.distance(atom_j)


def get_angle(mol: "Molecule", i: int, j: int, k: int) -> Optional[float]:
    """
    Angle i-j-k in radians, irrespective of periodic images. Returns None if any
    atom does not exist.
    """
    atoms = [mol.get_atom(sn) for sn in (i, j, k)]
    if any(a is None for a in atoms):
        return None
    pi, pj, pk = (jnp.array(a.position) for a in atoms)
    v1, v2 = pi - pj, pk - pj
    cos = jnp.dot(v1, v2) / (jnp.linalg.norm(v1) * jnp.linalg.norm(v2))
    return math.acos(max(-1.0, min(1.0, float(cos))))


def get_torsion(mol: "Molecule", i: int, j: int, k: int, l: int) -> Optional[float]:
    """
    Signed torsion angle i-j-k-l in radians, in (-pi, pi], irrespective of
    periodic images. Returns None if any atom does not exist.
    """
    atoms = [mol.get_atom(sn) for sn in (i, j, k, l)]
    if any(a is None for a in atoms):
        return None
    pi, pj, pk, pl = (jnp.array(a.position) for a in atoms)
    b1, b2, b3 = pj - pi, pk - pj, pl - pk
    n1 = jnp.cross(b1, b2)
    n2 = jnp.cross(b2, b3)
    y = jnp.dot(b2 / jnp.linalg.norm(b2), jnp.cross(n1, n2))
    return math.atan2(float(y), float(jnp.dot(n1, n2)))
