# Find the smallest chordless rings in the bond graph of a Molecule.
#
# The search is a bounded depth-first walk in the manner of vitroid's
# CountRings (https://github.com/vitroid/CountRings).

import itertools
from typing import TYPE_CHECKING, Dict, List, Set, Tuple

if TYPE_CHECKING:
    from .molecule import Molecule

Rings = List[Set[int]]


class _RingSearch:
    """Ring search over one molecule, caching shortest path lengths between atoms."""

    def __init__(self, mol: "Molecule") -> None:
        self.mol = mol
        self._pathlen: Dict[Tuple[int, int], int] = {}

    def shortest_pathlen(self, i: int, j: int) -> int:
        key = (i, j) if i < j else (j, i)
        if key not in self._pathlen:
            n = self.mol.nbonds_between(i, j)
            self._pathlen[key] = 0 if n is None else n
        return self._pathlen[key]

    def has_shortcut(self, members: List[int]) -> bool:
        """True if any two ring members are closer in the graph than along the ring."""
        n = len(members)
        for i in range(n):
            for j in range(i + 1, n):
                d = min(j - i, n - (j - i))
                if d > self.shortest_pathlen(members[i], members[j]):
                    return True
        return False

    def find_ring(self, members: List[int], max_size: int) -> Tuple[int, Rings]:
        """
        Extend the open path `members` into rings of at most `max_size` atoms.

        Returns
        -------
        size: int
            The smallest ring size found, or `max_size` if none was found
        rings: list of set
            All rings of that size
        """
        if len(members) > max_size:
            return max_size, []

        best = max_size
        results: Rings = []
        first, last = members[0], members[-1]
        for adj in self.mol.connected(last):
            if adj in members:
                # a closed ring without shortcuts is the best and unique answer
                if adj == first and not self.has_shortcut(members):
                    return len(members), [set(members)]
            else:
                size, rings = self.find_ring(members + [adj], best)
                if size < best:
                    best = size
                    results = rings
                elif size == best:
                    results.extend(rings)
        return best, results


def find_rings(mol: "Molecule", max_size: int) -> Rings:
    """
    Find rings of up to `max_size` atoms.

    For every atom and every pair of its bonded neighbors, the smallest rings
    passing through that angle are collected. Only chordless rings are
    reported, i.e. no two ring members are connected by a path shorter than
    their separation along the ring.

    Returns
    -------
    list of set
        Each ring as a set of atom serial numbers, without duplicates.

    Examples
    --------
    >>> mol = Molecule.from_database("HCN")
    >>> mol.rebond()
    >>> find_rings(mol, 7)
    []
    """
    search = _RingSearch(mol)
    rings: Rings = []
    seen = set()
    for x in mol.numbers():
        neighbors = sorted(mol.connected(x))
        for y, z in itertools.combinations(neighbors, 2):
            _, results = search.find_ring([y, x, z], max_size)
            for ring in results:
                key = frozenset(ring)
                if key not in seen:
                    seen.add(key)
                    rings.append(ring)
    return rings
