# Molecular formula in the Hill system order:
# https://web.stanford.edu/group/swain/cinf/workshop98aug/hill.html

from collections import Counter
from typing import Dict, Iterable


def get_reduced_symbols(symbols: Iterable[str]) -> Dict[str, int]:
    """Count symbols, e.g. ["C", "C", "H"] gives {"C": 2, "H": 1}."""
    return dict(Counter(str(s) for s in symbols))


def get_reduced_formula(symbols: Iterable[str]) -> str:
    """
    Return the Hill formula for `symbols`.

    Carbon comes first and hydrogen second, followed by all remaining elements
    in alphabetical order. Without carbon, all elements are in alphabetical
    order. A count of one is omitted, e.g. CH4 rather than C1H4.

    Examples
    --------
    >>> get_reduced_formula(["C", "H", "C", "H", "H", "H"])
    'C2H4'
    >>> get_reduced_formula(["H", "Cl"])
    'ClH'
    """
    counts = get_reduced_symbols(symbols)
    if "C" in counts:
        order = {"C": "0", "H": "1"}
        keys = sorted(counts, key=lambda k: order.get(k, k))
    else:
        keys = sorted(counts)

    return "".join(k if counts[k] == 1 else f"{k}{counts[k]}" for k in keys)
