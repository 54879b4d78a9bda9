# Clean up molecular geometry by stress majorization against pairwise
# distance bounds derived from bond topology and atomic radii.

import itertools
import math
from typing import TYPE_CHECKING, Dict, Optional, Tuple, Union

import jax
import jax.numpy as jnp
import networkx as nx
from loguru import logger as log
from openmm import unit

from .utils import to_angstrom

if TYPE_CHECKING:
    from .molecule import Molecule

Bounds = Dict[Tuple[int, int], Tuple[float, float]]

# weight of a pair whose distance already lies within its bounds
SATISFIED_WEIGHT = 1e-4


def _radii(mol: "Molecule") -> Dict[int, Tuple[float, float]]:
    radii = {}
    for sn, atom in mol.atoms():
        cov, vdw = atom.get_cov_radius(), atom.get_vdw_radius()
        if cov is None or vdw is None:
            raise RuntimeError(f"no radius data for atom {sn} ({atom.symbol})")
        radii[sn] = (cov, vdw)
    return radii


def get_distance_bounds(mol: "Molecule", max_distance: Union[float, unit.Quantity] = 90.0) -> Bounds:
    """
    Compute lower and upper distance bounds for every pair of atoms.

    With cov and vdw the sums of covalent and van der Waals radii of a pair,
    l = 0.8 * cov and u = max(0.8 * vdw, 1.2 * cov), the bounds are

    * bonded pairs: (d, d) if l <= d < 1.2 * cov, else (l, l)
    * pairs two bonds apart: (d, d) if u < d < max_distance, else (u, u + d)
    * pairs further apart: (d, max_distance) if u < d < max_distance, else (u, max_distance)
    * disconnected pairs: (u, max_distance)

    where d is the current Cartesian distance of the pair.

    Parameters
    ----------
    mol: Molecule
        The molecule; every atom needs covalent and van der Waals radii.
    max_distance: float or unit.Quantity, default = 90.0
        Upper bound for distant or disconnected pairs, in angstrom.

    Returns
    -------
    dict
        {(i, j): (lower, upper)} keyed by serial numbers with i < j.

    Raises
    ------
    RuntimeError
        If an atom has no radius data.
    """
    max_distance = to_angstrom(max_distance, "max_distance")
    radii = _radii(mol)
    # bond counts between every pair of graph nodes
    nbonds = dict(nx.all_pairs_shortest_path_length(mol._graph))

    bounds = {}
    for i, j in itertools.combinations(mol.serial_numbers(), 2):
        atom_i, atom_j = mol.get_atom_unchecked(i), mol.get_atom_unchecked(j)
        cov = radii[i][0] + radii[j][0]
        vdw = radii[i][1] + radii[j][1]
        l = cov * 0.8
        u = max(vdw * 0.8, cov * 1.2)
        d = atom_i.distance(atom_j)

        nb = nbonds[mol._node_index(i)].get(mol._node_index(j))
        if nb is None:
            bounds[(i, j)] = (u, max_distance)
        elif nb == 1:
            if l <= d < cov * 1.2:
                bounds[(i, j)] = (d, d)
            else:
                bounds[(i, j)] = (l, l)
        elif nb == 2:
            if u < d < max_distance:
                bounds[(i, j)] = (d, d)
            else:
                bounds[(i, j)] = (u, u + d)
        else:
            if u < d < max_distance:
                bounds[(i, j)] = (d, max_distance)
            else:
                bounds[(i, j)] = (u, max_distance)
    return bounds


def _bounds_matrices(mol: "Molecule", bounds: Bounds) -> Tuple[jnp.ndarray, jnp.ndarray]:
    """Symmetric shape[N,N] lower and upper bound arrays in serial number order."""
    index = {sn: k for k, sn in enumerate(mol.serial_numbers())}
    n = len(index)
    lower = [[0.0] * n for _ in range(n)]
    upper = [[0.0] * n for _ in range(n)]
    for (i, j), (l, u) in bounds.items():
        a, b = index[i], index[j]
        lower[a][b] = lower[b][a] = l
        upper[a][b] = upper[b][a] = u
    return jnp.array(lower, dtype=jnp.float64), jnp.array(upper, dtype=jnp.float64)


@jax.jit
def _majorization_step(
    positions: jnp.ndarray, lower: jnp.ndarray, upper: jnp.ndarray
) -> Tuple[jnp.ndarray, jnp.ndarray, jnp.ndarray]:
    """
    One synchronous stress majorization cycle.

    Parameters
    ----------
    positions: jnp.ndarray
        Shape[N,3] array of positions at the start of the cycle
    lower, upper: jnp.ndarray
        Shape[N,N] symmetric arrays of distance bounds

    Returns
    -------
    new_positions: jnp.ndarray
        Shape[N,3] array of positions for the next cycle
    stress: jnp.ndarray
        Stress of the input positions
    weight_sum: jnp.ndarray
        Shape[N] array of the total pair weight of each atom
    """
    n = positions.shape[0]
    off_diagonal = ~jnp.eye(n, dtype=bool)

    # r_ij[i, j] = p_i - p_j
    r_ij = positions[:, None, :] - positions[None, :, :]
    dist = jnp.linalg.norm(r_ij, axis=-1)

    satisfied = (dist >= lower) & (dist < upper)
    # every pair is visited twice, once from each end
    weight = jnp.where(off_diagonal, 0.5 * jnp.where(satisfied, SATISFIED_WEIGHT, 1.0), 0.0)
    weight_sum = weight.sum(axis=1)

    # candidate position of i pulled to distance lower[i, j] from j
    safe_dist = jnp.where(off_diagonal, dist, 1.0)
    candidates = positions[None, :, :] + (lower / safe_dist)[..., None] * r_ij
    new_positions = jnp.einsum("ij,ijd->id", weight, candidates) / weight_sum[:, None]

    stress = jnp.sum(weight * (dist - lower) ** 2)
    return new_positions, stress, weight_sum


def clean(
    mol: "Molecule",
    max_cycles: Optional[int] = None,
    ecut: float = 1e-4,
    max_distance: Union[float, unit.Quantity] = 90.0,
) -> int:
    """
    Clean up the geometry of `mol` in place using stress majorization.

    Atom positions are moved towards satisfying the distance bounds from
    `get_distance_bounds`. All positions of a cycle are computed from the
    positions at the start of that cycle and applied together. Frozen
    coordinates are never changed.

    Parameters
    ----------
    mol: Molecule
        The molecule to clean. Periodic images are not considered.
    max_cycles: int, optional
        Maximum number of cycles, 100 times the number of atoms by default.
    ecut: float, default = 1e-4
        Convergence threshold. Iteration stops when the stress, its absolute
        change or its relative change falls below `ecut`.
    max_distance: float or unit.Quantity, default = 90.0
        Upper distance bound for distant or disconnected pairs.

    Returns
    -------
    int
        Number of cycles performed.

    Raises
    ------
    RuntimeError
        If an atom has no radius data, or the geometry degenerates (for
        example two atoms at the same position). Positions are left as they
        were at the start of the failing cycle.
    """
    natoms = mol.natoms()
    if max_cycles is None:
        max_cycles = 100 * natoms
    if isinstance(max_cycles, bool) or not isinstance(max_cycles, int) or max_cycles < 0:
        raise ValueError(f"max_cycles must be a non-negative integer, got {max_cycles}")
    if ecut <= 0.0:
        raise ValueError(f"ecut must be positive, got {ecut}")
    if natoms < 2:
        log.debug("nothing to clean for fewer than two atoms")
        return 0

    bounds = get_distance_bounds(mol, max_distance)
    lower, upper = _bounds_matrices(mol, bounds)

    positions = jnp.array(mol.positions(), dtype=jnp.float64)
    old_stress = 0.0
    for icycle in range(1, max_cycles + 1):
        new_positions, stress, weight_sum = _majorization_step(positions, lower, upper)
        stress = float(stress)
        log.debug(f"cycle: {icycle} stress = {stress}")

        if not math.isfinite(stress) or not bool(jnp.all(jnp.isfinite(new_positions))):
            raise RuntimeError(f"found invalid number in cycle {icycle}: stress = {stress}")
        if not bool(jnp.all(weight_sum > 0.0)):
            raise RuntimeError(f"zero pair weight sum in cycle {icycle}")

        mol.update_positions(new_positions.tolist())
        # read back, so frozen coordinates stay where they are
        positions = jnp.array(mol.positions(), dtype=jnp.float64)

        delta = abs(stress - old_stress)
        if stress < ecut or delta < ecut or delta / stress < ecut:
            log.info(f"clean converged in {icycle} cycles, stress = {stress:.6g}")
            return icycle
        old_stress = stress

    log.warning(f"clean stopped after {max_cycles} cycles without convergence")
    return max_cycles
