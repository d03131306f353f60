"""
Relation Core: bitset form

BitRel stores one packed row mask per domain element (bit j = codomain
element j), row-major, and delegates every operation to the bit-row kernel:

  - compose:    for each row of R, OR the rows of S selected by its bits
  - converse:   transpose over set bits
  - meet/join:  row-wise AND/OR
  - complement: row-wise NOT within the carrier product
  - difference: row-wise AND-NOT

Parity: for every operation sequence reachable from from_pairs, BitRel and
PairRel decode to identical pair sets.
"""

from typing import Iterable, List, Tuple

from .base import RelationOps, check_index_pair
from .finite import Finite
from .kernel import (
    unpack_rows_to_pairs,
    popcount,
    rows_and,
    rows_andn,
    rows_or,
    rows_not,
    rows_leq,
    rows_transpose,
    rows_compose
)


class BitRel(RelationOps):
    """Relation as a packed boolean matrix (one int mask per row)."""

    __slots__ = ("_rows",)

    strategy = "bit"

    def __init__(self, dom: Finite, cod: Finite, rows: tuple):
        super().__init__(dom, cod)
        self._rows = rows

    @classmethod
    def from_index_pairs(cls, dom: Finite, cod: Finite, index_pairs: Iterable[Tuple[int, int]]) -> "BitRel":
        rows = [0] * len(dom)
        for i, j in index_pairs:
            check_index_pair(dom, cod, i, j)
            rows[i] |= 1 << j
        return cls(dom, cod, tuple(rows))

    @classmethod
    def _coerce_from(cls, other: RelationOps) -> "BitRel":
        if isinstance(other, cls):
            return other
        return cls(other.dom, other.cod, tuple(other.rows()))

    def _coerce(self, other: RelationOps) -> "BitRel":
        return BitRel._coerce_from(other)

    @property
    def shape(self) -> Tuple[int, int]:
        return (len(self.dom), len(self.cod))

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------

    def rows(self) -> List[int]:
        return list(self._rows)

    def index_pairs(self) -> List[Tuple[int, int]]:
        n, m = self.shape
        return unpack_rows_to_pairs(list(self._rows), n, m)

    def has_index(self, i: int, j: int) -> bool:
        return bool((self._rows[i] >> j) & 1)

    def size(self) -> int:
        return sum(popcount(r) for r in self._rows)

    def _compose(self, other: "BitRel") -> "BitRel":
        n, m = self.shape
        k = len(other.cod)
        rows = rows_compose(list(self._rows), list(other._rows), n, m, k)
        return BitRel(self.dom, other.cod, tuple(rows))

    def _converse(self) -> "BitRel":
        n, m = self.shape
        return BitRel(self.cod, self.dom, tuple(rows_transpose(list(self._rows), n, m)))

    def _meet(self, other: "BitRel") -> "BitRel":
        n, m = self.shape
        return BitRel(self.dom, self.cod, tuple(rows_and(list(self._rows), list(other._rows), n, m)))

    def _join(self, other: "BitRel") -> "BitRel":
        n, m = self.shape
        return BitRel(self.dom, self.cod, tuple(rows_or(list(self._rows), list(other._rows), n, m)))

    def _complement(self) -> "BitRel":
        n, m = self.shape
        return BitRel(self.dom, self.cod, tuple(rows_not(list(self._rows), n, m)))

    def _difference(self, other: "BitRel") -> "BitRel":
        n, m = self.shape
        return BitRel(self.dom, self.cod, tuple(rows_andn(list(self._rows), list(other._rows), n, m)))

    def _leq(self, other: "BitRel") -> bool:
        n, m = self.shape
        return rows_leq(list(self._rows), list(other._rows), n, m)

    def image_mask(self, mask: int) -> int:
        out = 0
        for i, row in enumerate(self._rows):
            if (mask >> i) & 1:
                out |= row
        return out

    def preimage_mask(self, mask: int) -> int:
        out = 0
        for i, row in enumerate(self._rows):
            if row & mask:
                out |= 1 << i
        return out
