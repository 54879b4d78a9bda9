# Masks over frozen atoms and coordinates, used when only the free degrees of
# freedom of a structure should be exposed to an optimizer.

from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence

import jax.numpy as jnp

if TYPE_CHECKING:
    from .molecule import Molecule


class Mask:
    """
    A helper for masking and unmasking values in a flat sequence.

    Parameters
    ----------
    mask: iterable of bool
        True marks a masked (removed) value.
    """

    def __init__(self, mask: Iterable[bool]) -> None:
        self.mask = [bool(m) for m in mask]

    def __len__(self) -> int:
        return len(self.mask)

    def __repr__(self) -> str:
        return f"Mask(n={len(self.mask)}, nmasked={self.nmasked()})"

    def nmasked(self) -> int:
        """Number of masked values."""
        return sum(self.mask)

    def apply(self, values: Sequence[float]) -> List[float]:
        """Return `values` with the masked entries removed."""
        if len(values) != len(self.mask):
            raise ValueError(f"expected {len(self.mask)} values, got {len(values)}")
        return [v for v, masked in zip(values, self.mask) if not masked]

    def unmask(self, values: Sequence[float], fill_value: float = 0.0, fill: Optional[Sequence[float]] = None) -> List[float]:
        """
        Put masked entries back into `values`, the inverse of `apply`.

        Masked entries take `fill_value`, or the matching entry of `fill` if given.
        """
        n_free = len(self.mask) - self.nmasked()
        if len(values) != n_free:
            raise ValueError(f"expected {n_free} unmasked values, got {len(values)}")
        if fill is not None and len(fill) != len(self.mask):
            raise ValueError(f"expected {len(self.mask)} fill values, got {len(fill)}")

        free = iter(values)
        out = []
        for i, masked in enumerate(self.mask):
            if not masked:
                out.append(next(free))
            elif fill is not None:
                out.append(fill[i])
            else:
                out.append(fill_value)
        return out


def freezing_atoms_mask(mol: "Molecule") -> Mask:
    """Mask of atoms frozen along all three axes, in serial number order."""
    return Mask(atom.is_fixed() for _, atom in mol.atoms())


def freezing_coords_mask(mol: "Molecule") -> Mask:
    """Mask of frozen Cartesian components, flattened as [x1, y1, z1, x2, ...]."""
    return Mask(f for _, atom in mol.atoms() for f in atom.freezing)


def get_free_coords(mol: "Molecule") -> jnp.ndarray:
    """Flat array of the Cartesian components that are not frozen."""
    flat = [x for p in mol.positions() for x in p]
    return jnp.array(freezing_coords_mask(mol).apply(flat), dtype=jnp.float64)


def set_free_coords(mol: "Molecule", coords: Sequence[float]) -> None:
    """Write back the components produced by `get_free_coords`; frozen components are kept."""
    mask = freezing_coords_mask(mol)
    current = [x for p in mol.positions() for x in p]
    flat = mask.unmask([float(x) for x in coords], fill=current)
    mol.set_positions([flat[i : i + 3] for i in range(0, len(flat), 3)])
