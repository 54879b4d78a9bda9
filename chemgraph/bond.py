import copy
from enum import IntEnum
from typing import Optional

from .properties import PropertyStore


class BondKind(IntEnum):
    """Bond types ordered by increasing bond strength."""

    DUMMY = 0
    PARTIAL = 1
    SINGLE = 2
    AROMATIC = 3
    DOUBLE = 4
    TRIPLE = 5
    QUADRUPLE = 6


# https://en.wikipedia.org/wiki/Bond_order
_BOND_ORDERS = {
    BondKind.DUMMY: 0.0,
    BondKind.PARTIAL: 0.5,
    BondKind.SINGLE: 1.0,
    BondKind.AROMATIC: 1.5,
    BondKind.DOUBLE: 2.0,
    BondKind.TRIPLE: 3.0,
    BondKind.QUADRUPLE: 4.0,
}


class Bond:
    """
    Chemical bond between two atoms.

    Parameters
    ----------
    kind : BondKind, default = BondKind.SINGLE
        The bond type.
    order : float, optional
        Explicit bond order, overriding the value implied by `kind`.
    label : str, default = ""
        A bond label.
    """

    def __init__(
        self,
        kind: BondKind = BondKind.SINGLE,
        order: Optional[float] = None,
        label: str = "",
    ) -> None:
        self.properties = PropertyStore()
        self.kind = BondKind(kind)
        self._order = None
        if order is not None:
            self.set_order(order)
        self.label = label

    def __repr__(self) -> str:
        return f"Bond({self.kind.name}, order={self.order()})"

    def copy(self) -> "Bond":
        return copy.deepcopy(self)

    def set_kind(self, kind: BondKind) -> None:
        self.kind = BondKind(kind)

    def set_order(self, order: float) -> None:
        if order < 0.0:
            raise ValueError(f"bond order must not be negative, got {order}")
        self._order = float(order)

    def set_label(self, label: str) -> None:
        self.label = label

    def order(self) -> float:
        """Return the explicit bond order if set, else the order implied by the bond kind."""
        if self._order is not None:
            return self._order
        return _BOND_ORDERS[self.kind]

    def is_dummy(self) -> bool:
        return self.kind == BondKind.DUMMY

    def is_single(self) -> bool:
        return self.kind == BondKind.SINGLE

    def is_double(self) -> bool:
        return self.kind == BondKind.DOUBLE

    @classmethod
    def single(cls) -> "Bond":
        return cls(BondKind.SINGLE)

    @classmethod
    def double(cls) -> "Bond":
        return cls(BondKind.DOUBLE)

    @classmethod
    def triple(cls) -> "Bond":
        return cls(BondKind.TRIPLE)

    @classmethod
    def aromatic(cls) -> "Bond":
        return cls(BondKind.AROMATIC)

    @classmethod
    def partial(cls) -> "Bond":
        return cls(BondKind.PARTIAL)

    @classmethod
    def quadruple(cls) -> "Bond":
        return cls(BondKind.QUADRUPLE)

    @classmethod
    def dummy(cls) -> "Bond":
        return cls(BondKind.DUMMY)
