"""
Relation Core: pair form

PairRel stores a relation as an explicit frozenset of (i, j) carrier-index
pairs. Every operation works on that pair set directly; nothing here goes
through the bit-row kernel, so PairRel is an independent reference for the
bitset form.

Complexity:
  - compose:           O(|R| * max out-degree of S) <= O(|A|·|B|·|C|)
  - meet/join/leq:     set operations on the pair sets
  - converse:          O(|R|)
"""

from collections import defaultdict
from typing import Iterable, List, Tuple

from .base import RelationOps, check_index_pair
from .finite import Finite


class PairRel(RelationOps):
    """Relation as an explicit collection of related pairs."""

    __slots__ = ("_pairs",)

    strategy = "pair"

    def __init__(self, dom: Finite, cod: Finite, pairs: frozenset):
        super().__init__(dom, cod)
        self._pairs = pairs

    @classmethod
    def from_index_pairs(cls, dom: Finite, cod: Finite, index_pairs: Iterable[Tuple[int, int]]) -> "PairRel":
        pairs = set()
        for i, j in index_pairs:
            check_index_pair(dom, cod, i, j)
            pairs.add((i, j))
        return cls(dom, cod, frozenset(pairs))

    @classmethod
    def _coerce_from(cls, other: RelationOps) -> "PairRel":
        if isinstance(other, cls):
            return other
        return cls(other.dom, other.cod, frozenset(other.index_pairs()))

    def _coerce(self, other: RelationOps) -> "PairRel":
        return PairRel._coerce_from(other)

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------

    def index_pairs(self) -> List[Tuple[int, int]]:
        return sorted(self._pairs)

    def has_index(self, i: int, j: int) -> bool:
        return (i, j) in self._pairs

    def size(self) -> int:
        return len(self._pairs)

    def _compose(self, other: "PairRel") -> "PairRel":
        succ = defaultdict(list)
        for j, k in other._pairs:
            succ[j].append(k)
        out = set()
        for i, j in self._pairs:
            for k in succ.get(j, ()):
                out.add((i, k))
        return PairRel(self.dom, other.cod, frozenset(out))

    def _converse(self) -> "PairRel":
        return PairRel(self.cod, self.dom, frozenset((j, i) for i, j in self._pairs))

    def _meet(self, other: "PairRel") -> "PairRel":
        return PairRel(self.dom, self.cod, self._pairs & other._pairs)

    def _join(self, other: "PairRel") -> "PairRel":
        return PairRel(self.dom, self.cod, self._pairs | other._pairs)

    def _complement(self) -> "PairRel":
        universe = frozenset(
            (i, j) for i in range(len(self.dom)) for j in range(len(self.cod))
        )
        return PairRel(self.dom, self.cod, universe - self._pairs)

    def _leq(self, other: "PairRel") -> bool:
        return self._pairs <= other._pairs

    def image_mask(self, mask: int) -> int:
        out = 0
        for i, j in self._pairs:
            if (mask >> i) & 1:
                out |= 1 << j
        return out

    def preimage_mask(self, mask: int) -> int:
        out = 0
        for i, j in self._pairs:
            if (mask >> j) & 1:
                out |= 1 << i
        return out
