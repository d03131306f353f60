"""
Finite Carriers & Subsets

Finite[T]: ordered, deduplicated, immutable carrier. Its iteration order is
the canonical index order used by every relation representation.

Subset[T]: characteristic predicate over exactly one carrier. Subset.by defers
its predicate until mask() is first needed; boolean operations work on
materialized masks, so chains of them stay flat.

Carrier identity: two carriers are the same iff they are the same object.
Each Finite carries a uid token for messages; equal contents never make two
carriers interchangeable.
"""

import itertools
from typing import Any, Callable, Iterable, Iterator, Optional

from .kernel.rows import iter_bits, popcount, full_mask

_UIDS = itertools.count(1)


class Finite:
    """
    A finite carrier with a fixed index order.

    Deduplication uses `eq` when supplied; otherwise hashing, with an
    O(n) `==` scan for unhashable elements. index_of is O(1) for hashable
    elements under the default equality.
    """

    __slots__ = ("_elems", "_eq", "_index", "_has_unhashable", "uid")

    def __init__(self, elements: Iterable[Any] = (), eq: Optional[Callable[[Any, Any], bool]] = None):
        self._eq = eq
        self._index = {}
        self._has_unhashable = False
        self.uid = next(_UIDS)

        out = []
        for x in elements:
            if self._find(x, out) < 0:
                if eq is None:
                    try:
                        self._index[x] = len(out)
                    except TypeError:
                        self._has_unhashable = True
                out.append(x)
        self._elems = tuple(out)

    @classmethod
    def of(cls, elements: Iterable[Any], eq: Optional[Callable[[Any, Any], bool]] = None) -> "Finite":
        """Build a carrier; first occurrence of each element fixes its index."""
        return cls(elements, eq)

    @classmethod
    def range(cls, n: int) -> "Finite":
        """Carrier {0, 1, ..., n-1}."""
        return cls(range(n))

    def _find(self, x: Any, elems) -> int:
        if self._eq is not None:
            for i, y in enumerate(elems):
                if self._eq(x, y):
                    return i
            return -1
        try:
            i = self._index.get(x)
        except TypeError:
            i = None
        if i is not None:
            return i
        if self._has_unhashable:
            for i, y in enumerate(elems):
                if _unhashable(y) and y == x:
                    return i
        return -1

    @property
    def elems(self) -> tuple:
        return self._elems

    def index_of(self, x: Any) -> int:
        """Index of x in carrier order, or -1 if absent."""
        return self._find(x, self._elems)

    def element_at(self, i: int) -> Any:
        if not 0 <= i < len(self._elems):
            raise IndexError(f"Index {i} out of range for carrier of size {len(self._elems)}")
        return self._elems[i]

    def has(self, x: Any) -> bool:
        return self.index_of(x) >= 0

    def __contains__(self, x: Any) -> bool:
        return self.has(x)

    def __len__(self) -> int:
        return len(self._elems)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._elems)

    def __repr__(self) -> str:
        return f"Finite#{self.uid}({list(self._elems)!r})"


def _unhashable(x: Any) -> bool:
    try:
        hash(x)
    except TypeError:
        return True
    return False


class Subset:
    """
    A subset of one carrier, given by an index-level membership test.

    Build with Subset.by (predicate over elements), Subset.of (explicit
    elements), Subset.from_mask, Subset.empty or Subset.full.
    """

    __slots__ = ("carrier", "_member", "_mask")

    def __init__(self, carrier: Finite, member: Callable[[int], bool], mask: Optional[int] = None):
        self.carrier = carrier
        self._member = member
        self._mask = mask

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def by(cls, carrier: Finite, predicate: Callable[[Any], bool]) -> "Subset":
        return cls(carrier, lambda i: bool(predicate(carrier.element_at(i))))

    @classmethod
    def from_mask(cls, carrier: Finite, mask: int) -> "Subset":
        if mask < 0 or (mask >> len(carrier)) != 0:
            raise ValueError(f"Mask has bits outside carrier of size {len(carrier)}: {mask:b}")
        return cls(carrier, lambda i: bool((mask >> i) & 1), mask)

    @classmethod
    def of(cls, carrier: Finite, elements: Iterable[Any]) -> "Subset":
        """
        Subset with the listed elements.

        Raises:
            InvalidElement: If an element is not in the carrier.
        """
        mask = 0
        for x in elements:
            i = carrier.index_of(x)
            if i < 0:
                raise InvalidElement(f"Element {x!r} not in carrier {carrier!r}")
            mask |= 1 << i
        return cls.from_mask(carrier, mask)

    @classmethod
    def empty(cls, carrier: Finite) -> "Subset":
        return cls.from_mask(carrier, 0)

    @classmethod
    def full(cls, carrier: Finite) -> "Subset":
        return cls.from_mask(carrier, full_mask(len(carrier)))

    # ------------------------------------------------------------------
    # Membership & extension
    # ------------------------------------------------------------------

    def contains(self, x: Any) -> bool:
        i = self.carrier.index_of(x)
        return i >= 0 and self._member(i)

    def __contains__(self, x: Any) -> bool:
        return self.contains(x)

    def contains_index(self, i: int) -> bool:
        return self._member(i)

    def mask(self) -> int:
        """Bitmask over carrier indices (bit i = element i)."""
        if self._mask is None:
            m = 0
            for i in range(len(self.carrier)):
                if self._member(i):
                    m |= 1 << i
            self._mask = m
        return self._mask

    def to_array(self) -> list:
        """Members in carrier order."""
        elems = self.carrier.elems
        return [elems[i] for i in iter_bits(self.mask())]

    def __iter__(self) -> Iterator[Any]:
        return iter(self.to_array())

    def __len__(self) -> int:
        return popcount(self.mask())

    # ------------------------------------------------------------------
    # Boolean algebra (over masks)
    # ------------------------------------------------------------------

    def union(self, other: "Subset") -> "Subset":
        _require_same_carrier(self, other, "union")
        return Subset.from_mask(self.carrier, self.mask() | other.mask())

    def intersection(self, other: "Subset") -> "Subset":
        _require_same_carrier(self, other, "intersection")
        return Subset.from_mask(self.carrier, self.mask() & other.mask())

    def difference(self, other: "Subset") -> "Subset":
        _require_same_carrier(self, other, "difference")
        return Subset.from_mask(self.carrier, self.mask() & ~other.mask())

    def complement(self) -> "Subset":
        return Subset.from_mask(self.carrier, full_mask(len(self.carrier)) & ~self.mask())

    def leq(self, other: "Subset") -> bool:
        """Inclusion self ⊆ other."""
        _require_same_carrier(self, other, "leq")
        return (self.mask() & ~other.mask()) == 0

    def same_as(self, other: "Subset") -> bool:
        """Extensional equality."""
        _require_same_carrier(self, other, "same_as")
        return self.mask() == other.mask()

    def __repr__(self) -> str:
        return f"Subset(#{self.carrier.uid}, {self.to_array()!r})"


def all_subsets(carrier: Finite) -> list:
    """All 2^n subsets of carrier, in mask order (empty set first)."""
    return [Subset.from_mask(carrier, m) for m in range(1 << len(carrier))]


def _require_same_carrier(a: Subset, b: Subset, op: str) -> None:
    if a.carrier is not b.carrier:
        raise MismatchedCarrier(
            f"{op}: subsets over different carriers "
            f"#{a.carrier.uid} and #{b.carrier.uid}"
        )


def require_carrier(subset: Subset, carrier: Finite, op: str) -> None:
    """Raise MismatchedCarrier unless subset lives over exactly this carrier."""
    if subset.carrier is not carrier:
        raise MismatchedCarrier(
            f"{op}: subset over carrier #{subset.carrier.uid}, "
            f"expected carrier #{carrier.uid}"
        )


class RelationError(Exception):
    """Base class for construction and carrier errors."""
    pass


class CarrierMismatch(RelationError):
    """Raised when operands reference different carrier instances."""
    pass


class MismatchedCarrier(CarrierMismatch):
    """Raised when a subset is used against a carrier it was not built over."""
    pass


class InvalidPair(RelationError):
    """Raised when a pair component is absent from its declared carrier."""
    pass


class InvalidElement(RelationError):
    """Raised when an element (or function value) is absent from its carrier."""
    pass
