"""
RelationOps: the one interface both relation representations implement.

A relation R ⊆ dom × cod is addressed by carrier indices (i, j). Concrete
forms supply the primitive algebra over index pairs (or bit rows); this base
derives the element-level API from those primitives so that nothing a
caller can observe depends on which form is in use.

Carrier rules (checked, never assumed):
  - compose:              R.cod is S.dom
  - meet/join/leq/...:    R.dom is S.dom and R.cod is S.cod

Every algebra call is handed to parity.guard_operation, a pass-through unless
the runtime parity guard is enabled.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable, List, Tuple

from .finite import Finite, Subset, CarrierMismatch, InvalidPair, require_carrier
from .kernel.rows import pack_pairs_to_rows, iter_bits


class RelationOps(ABC):
    """Abstract binary relation between two finite carriers."""

    __slots__ = ("dom", "cod")

    #: strategy name under which the factory hands out this form
    strategy = ""

    def __init__(self, dom: Finite, cod: Finite):
        self.dom = dom
        self.cod = cod

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    @abstractmethod
    def from_index_pairs(cls, dom: Finite, cod: Finite, index_pairs: Iterable[Tuple[int, int]]):
        """Build from (i, j) carrier indices; out-of-range indices raise InvalidPair."""

    @classmethod
    def from_pairs(cls, dom: Finite, cod: Finite, pairs: Iterable[Tuple[Any, Any]]):
        """
        Build from element pairs. Duplicates coalesce.

        Raises:
            InvalidPair: If a component is absent from its carrier.
        """
        index_pairs = []
        for pair in pairs:
            a, b = pair
            i = dom.index_of(a)
            j = cod.index_of(b)
            if i < 0:
                raise InvalidPair(f"Pair ({a!r}, {b!r}): {a!r} not in domain {dom!r}")
            if j < 0:
                raise InvalidPair(f"Pair ({a!r}, {b!r}): {b!r} not in codomain {cod!r}")
            index_pairs.append((i, j))
        return cls.from_index_pairs(dom, cod, index_pairs)

    @classmethod
    def by(cls, dom: Finite, cod: Finite, predicate: Callable[[Any, Any], bool]):
        """Relation {(a, b) | predicate(a, b)} over dom × cod."""
        return cls.from_index_pairs(dom, cod, [
            (i, j)
            for i, a in enumerate(dom.elems)
            for j, b in enumerate(cod.elems)
            if predicate(a, b)
        ])

    @classmethod
    def empty(cls, dom: Finite, cod: Finite):
        return cls.from_index_pairs(dom, cod, ())

    @classmethod
    def full(cls, dom: Finite, cod: Finite):
        return cls.from_index_pairs(dom, cod, [
            (i, j) for i in range(len(dom)) for j in range(len(cod))
        ])

    @classmethod
    def identity(cls, carrier: Finite):
        """Diagonal on carrier; two-sided unit of compose."""
        return cls.from_index_pairs(carrier, carrier, [(i, i) for i in range(len(carrier))])

    # ------------------------------------------------------------------
    # Primitives each form provides
    # ------------------------------------------------------------------

    @abstractmethod
    def index_pairs(self) -> List[Tuple[int, int]]:
        """Related (i, j) indices in row-major order."""

    @abstractmethod
    def has_index(self, i: int, j: int) -> bool:
        ...

    @abstractmethod
    def size(self) -> int:
        """Number of related pairs."""

    @abstractmethod
    def _compose(self, other):
        ...

    @abstractmethod
    def _converse(self):
        ...

    @abstractmethod
    def _meet(self, other):
        ...

    @abstractmethod
    def _join(self, other):
        ...

    @abstractmethod
    def _complement(self):
        ...

    @abstractmethod
    def _leq(self, other) -> bool:
        ...

    def _difference(self, other):
        return self._meet(other._complement())

    @abstractmethod
    def image_mask(self, mask: int) -> int:
        """Codomain mask reachable from the domain mask."""

    @abstractmethod
    def preimage_mask(self, mask: int) -> int:
        """Domain mask with at least one successor in the codomain mask."""

    @abstractmethod
    def _coerce(self, other):
        """Return other in this form (no copy when it already is)."""

    # ------------------------------------------------------------------
    # Algebra (carrier-checked)
    # ------------------------------------------------------------------

    def compose(self, other: "RelationOps"):
        """R;S = {(a, c) | ∃b. (a,b) ∈ R ∧ (b,c) ∈ S}."""
        if self.cod is not other.dom:
            raise CarrierMismatch(
                f"compose: middle carriers differ "
                f"(#{self.cod.uid} vs #{other.dom.uid})"
            )
        return _guarded("compose", self._compose(self._coerce(other)), self, other)

    def converse(self):
        """R† = {(b, a) | (a, b) ∈ R}."""
        return _guarded("converse", self._converse(), self)

    def dagger(self):
        return self.converse()

    def meet(self, other: "RelationOps"):
        self._require_parallel(other, "meet")
        return _guarded("meet", self._meet(self._coerce(other)), self, other)

    def join(self, other: "RelationOps"):
        self._require_parallel(other, "join")
        return _guarded("join", self._join(self._coerce(other)), self, other)

    def complement(self):
        """(dom × cod) − R."""
        return _guarded("complement", self._complement(), self)

    def difference(self, other: "RelationOps"):
        self._require_parallel(other, "difference")
        return _guarded("difference", self._difference(self._coerce(other)), self, other)

    def leq(self, other: "RelationOps") -> bool:
        """Inclusion R ⊆ S."""
        self._require_parallel(other, "leq")
        return self._leq(self._coerce(other))

    def same_as(self, other: "RelationOps") -> bool:
        """Extensional equality; carriers must match."""
        self._require_parallel(other, "same_as")
        other = self._coerce(other)
        return self._leq(other) and other._leq(self)

    def _require_parallel(self, other: "RelationOps", op: str) -> None:
        if self.dom is not other.dom or self.cod is not other.cod:
            raise CarrierMismatch(
                f"{op}: carriers differ "
                f"(#{self.dom.uid}x#{self.cod.uid} vs #{other.dom.uid}x#{other.cod.uid})"
            )

    # ------------------------------------------------------------------
    # Element-level queries
    # ------------------------------------------------------------------

    def has(self, a: Any, b: Any) -> bool:
        """Membership; elements outside the carriers are simply unrelated."""
        i = self.dom.index_of(a)
        j = self.cod.index_of(b)
        return i >= 0 and j >= 0 and self.has_index(i, j)

    def to_pairs(self) -> List[Tuple[Any, Any]]:
        """Element pairs in row-major carrier order."""
        A, B = self.dom.elems, self.cod.elems
        return [(A[i], B[j]) for i, j in self.index_pairs()]

    def rows(self) -> List[int]:
        """Row masks (bit j of row i = (i, j) related)."""
        return pack_pairs_to_rows(self.index_pairs(), len(self.dom), len(self.cod))

    def image(self, P: Subset) -> Subset:
        """{b | ∃a ∈ P. a R b} as a subset of cod."""
        require_carrier(P, self.dom, "image")
        return Subset.from_mask(self.cod, self.image_mask(P.mask()))

    def preimage(self, Q: Subset) -> Subset:
        """{a | ∃b ∈ Q. a R b} as a subset of dom."""
        require_carrier(Q, self.cod, "preimage")
        return Subset.from_mask(self.dom, self.preimage_mask(Q.mask()))

    def successors(self, a: Any) -> list:
        i = self.dom.index_of(a)
        if i < 0:
            return []
        B = self.cod.elems
        return [B[j] for j in iter_bits(self.image_mask(1 << i))]

    def domain_of(self) -> Subset:
        """{a | ∃b. a R b}."""
        return Subset.from_mask(self.dom, self.preimage_mask((1 << len(self.cod)) - 1))

    def range_of(self) -> Subset:
        """{b | ∃a. a R b}."""
        return Subset.from_mask(self.cod, self.image_mask((1 << len(self.dom)) - 1))

    def is_empty(self) -> bool:
        return self.size() == 0

    def is_functional(self) -> bool:
        """Each a relates to at most one b."""
        for i in range(len(self.dom)):
            row = self.image_mask(1 << i)
            if row & (row - 1):
                return False
        return True

    def is_total(self) -> bool:
        """Each a relates to at least one b."""
        return all(self.image_mask(1 << i) != 0 for i in range(len(self.dom)))

    def is_map(self) -> bool:
        """Graph of a total function."""
        return self.is_functional() and self.is_total()

    # ------------------------------------------------------------------
    # Conversion & dunder
    # ------------------------------------------------------------------

    def to_pair_rel(self):
        from .rel import PairRel
        return PairRel._coerce_from(self)

    def to_bit_rel(self):
        from .bitrel import BitRel
        return BitRel._coerce_from(self)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, RelationOps):
            return NotImplemented
        if self.dom is not other.dom or self.cod is not other.cod:
            return False
        return self.index_pairs() == other.index_pairs()

    def __hash__(self) -> int:
        return hash((self.dom.uid, self.cod.uid, tuple(self.index_pairs())))

    def __len__(self) -> int:
        return self.size()

    def __iter__(self):
        return iter(self.to_pairs())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(#{self.dom.uid}->#{self.cod.uid}, {self.to_pairs()!r})"


def check_index_pair(dom: Finite, cod: Finite, i: int, j: int) -> None:
    if not (0 <= i < len(dom) and 0 <= j < len(cod)):
        raise InvalidPair(f"Index pair ({i},{j}) outside {len(dom)}x{len(cod)} carriers")


def _guarded(operation: str, result: "RelationOps", *operands: "RelationOps") -> "RelationOps":
    from .parity import guard_operation
    return guard_operation(operation, result, *operands)
