# Radius queries over a set of keyed points, with optional periodic images.

import itertools
import math
from collections import namedtuple
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

import jax
import jax.numpy as jnp
from loguru import logger as log
from openmm import unit

from .lattice import Lattice
from .utils import to_angstrom

Neighbor = namedtuple("Neighbor", ["node", "distance", "image"])
Neighbor.__doc__ = """\
A point found within the search radius.

node: the key of the point
distance: distance from the query position to the point (or its periodic image)
image: integer lattice translation of the image relative to the stored point,
       None for aperiodic searches
"""


@jax.jit
def _aperiodic_distances(p: jnp.ndarray, positions: jnp.ndarray) -> jnp.ndarray:
    return jnp.linalg.norm(positions - p, axis=-1)


@jax.jit
def _periodic_distances(
    p: jnp.ndarray,
    positions: jnp.ndarray,
    images: jnp.ndarray,
    matrix: jnp.ndarray,
    inverse: jnp.ndarray,
) -> Tuple[jnp.ndarray, jnp.ndarray]:
    """
    Distances from `p` to every image of every point in `positions`.

    Returns
    -------
    dist: jnp.ndarray
        Shape[n_points, n_images] array of distances
    shift: jnp.ndarray
        Shape[n_points, 3] array of the integer translations that reduced
        each fractional separation to [-0.5, 0.5]
    """
    frac = (positions - p) @ inverse
    shift = jnp.round(frac)
    reduced = frac - shift
    r_ij = (reduced[:, None, :] + images[None, :, :]) @ matrix
    return jnp.linalg.norm(r_ij, axis=-1), shift


class Neighborhood:
    """
    Fixed-radius neighbor search over points identified by integer keys.

    The search is a brute force O(N) scan per query rather than a spatial
    partitioning scheme; distances for all stored points (and all periodic
    images that may fall within the cutoff) are evaluated in a single jitted kernel.

    Examples
    --------
    >>> from chemgraph.neighbors import Neighborhood
    >>> nh = Neighborhood()
    >>> nh.update([(1, (0.0, 0.0, 0.0)), (2, (1.0, 0.0, 0.0)), (3, (5.0, 0.0, 0.0))])
    >>> sorted(n.node for n in nh.neighbors(1, 1.5))
    [2]
    """

    def __init__(self) -> None:
        self._points: Dict[int, Tuple[float, float, float]] = {}
        self._keys: List[int] = []
        self._positions: Optional[jnp.ndarray] = None
        self.lattice: Optional[Lattice] = None

    def update(self, points: Iterable[Tuple[int, Sequence[float]]]) -> None:
        """Add or replace points given as (key, position) pairs."""
        for key, p in points:
            self._points[key] = tuple(float(x) for x in p)
        # invalidate the cached array
        self._positions = None

    def set_lattice(self, lattice: Union[Lattice, jnp.ndarray, unit.Quantity]) -> None:
        """Search periodic images generated by `lattice`."""
        if not isinstance(lattice, Lattice):
            lattice = Lattice(lattice)
        self.lattice = lattice

    def npoints(self) -> int:
        return len(self._points)

    def _build(self) -> None:
        self._keys = sorted(self._points)
        self._positions = jnp.array([self._points[k] for k in self._keys], dtype=jnp.float64).reshape(-1, 3)

    def _image_offsets(self, cutoff: float) -> jnp.ndarray:
        # fractional separations are reduced to [-0.5, 0.5] first, so along each
        # axis only |n| <= cutoff/width + 0.5 can come within the cutoff
        ranges = [
            range(-k, k + 1)
            for k in (math.ceil(cutoff / width + 0.5) for width in self.lattice.widths())
        ]
        return jnp.array(list(itertools.product(*ranges)), dtype=jnp.float64)

    def search(self, p: Sequence[float], cutoff: Union[float, unit.Quantity]) -> List[Neighbor]:
        """
        Return all points (and periodic images) within `cutoff` of position `p`.

        Parameters
        ----------
        p: sequence of 3 floats
            Query position in angstrom
        cutoff: float or unit.Quantity
            Search radius; a point exactly at the cutoff is included.
        """
        cutoff = to_angstrom(cutoff, "cutoff")
        if cutoff < 0.0:
            raise ValueError(f"cutoff must not be negative, got {cutoff}")
        if not self._points:
            return []
        if self._positions is None:
            self._build()

        p = jnp.asarray(p, dtype=jnp.float64)
        if self.lattice is None:
            dist = _aperiodic_distances(p, self._positions).tolist()
            return [
                Neighbor(key, d, None) for key, d in zip(self._keys, dist) if d <= cutoff
            ]

        images = self._image_offsets(cutoff)
        dist, shift = _periodic_distances(
            p, self._positions, images, self.lattice.matrix(), self.lattice.inverse()
        )
        found = []
        hits = jnp.argwhere(dist <= cutoff).tolist()
        dist = dist.tolist()
        shift = shift.tolist()
        images = images.tolist()
        for i, m in hits:
            image = tuple(int(n - s) for n, s in zip(images[m], shift[i]))
            found.append(Neighbor(self._keys[i], dist[i][m], image))
        return found

    def neighbors(self, key: int, cutoff: Union[float, unit.Quantity]) -> List[Neighbor]:
        """
        Return neighbors of the point `key` within `cutoff`, excluding the point
        itself. Periodic images of the point itself are reported.

        Raises KeyError if `key` was never added.
        """
        if key not in self._points:
            raise KeyError(f"invalid point key: {key}")
        found = self.search(self._points[key], cutoff)
        return [n for n in found if not (n.node == key and n.image in (None, (0, 0, 0)))]


def create_neighborhood(points: Iterable[Tuple[int, Sequence[float]]], lattice: Optional[Lattice] = None) -> Neighborhood:
    """Build a Neighborhood over `points`, periodic if `lattice` is given."""
    nh = Neighborhood()
    nh.update(points)
    if lattice is not None:
        nh.set_lattice(lattice)
    log.debug(f"neighborhood over {nh.npoints()} points, periodic = {lattice is not None}")
    return nh
