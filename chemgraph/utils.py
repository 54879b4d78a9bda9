from typing import Union

import jax.numpy as jnp
from openmm import unit


def get_data_file_path(relative_path: str) -> str:
    """Get the full path to one of the reference structures shipped with chemgraph.
    In the source distribution, these files are in ``chemgraph/data/``,
    but on installation, they're moved to somewhere in the user's python
    site-packages directory.

    Parameters
    ----------

    relative_path : str
        Name of the file to load (with respect to `chemgraph/data/`)

    """
    from importlib.resources import files

    _DATA_ROOT = files("chemgraph") / "data"

    file_path = _DATA_ROOT / relative_path

    if not file_path.exists():
        raise ValueError(f"Sorry! {file_path} does not exist.")

    return str(file_path)


def to_angstrom(value: Union[float, unit.Quantity], name: str = "value") -> float:
    """
    Convert a length to a plain float in angstrom.

    Parameters
    ----------
    value: float or unit.Quantity
        A bare number is assumed to already be in angstrom.
        A unit.Quantity must carry distance units.
    name: str
        Name used in error messages.

    Returns
    -------
    float
        The length in angstrom.
    """
    if isinstance(value, unit.Quantity):
        if not value.unit.is_compatible(unit.angstrom):
            raise ValueError(f"{name} must have units of distance, got {value.unit}")
        return float(value.value_in_unit(unit.angstrom))
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(
            f"{name} must be a float or a unit.Quantity, type({name}) = {type(value)}"
        )
    return float(value)


def to_angstrom_array(array, name: str = "array") -> jnp.ndarray:
    """Convert a (possibly unit-bearing) array of lengths into a jnp array in angstrom."""
    if isinstance(array, unit.Quantity):
        if not array.unit.is_compatible(unit.angstrom):
            raise ValueError(f"{name} must have units of distance, not {array.unit}")
        array = array.value_in_unit(unit.angstrom)
    return jnp.asarray(array, dtype=jnp.float64)
