#!/usr/bin/env python3
"""
Finite Carrier & Subset Tests

Tests:
1. Deduplication keeps first-occurrence order
2. Custom equality and unhashable elements
3. Subset construction (by / of / mask) and lazy predicates
4. Long chains of subset operations stay flat
5. Carrier identity: equal contents never make carriers interchangeable
"""

import sys
from functools import reduce
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from relbit import (
    Finite,
    Subset,
    all_subsets,
    MismatchedCarrier,
    CarrierMismatch,
    InvalidElement,
    RelationError
)


def test_finite_dedup_and_order():
    A = Finite.of([3, 1, 3, 2, 1])
    assert A.elems == (3, 1, 2)
    assert len(A) == 3
    assert list(A) == [3, 1, 2]
    assert A.index_of(2) == 2
    assert A.index_of(99) == -1
    assert A.has(1) and 1 in A
    assert 99 not in A


def test_finite_range():
    A = Finite.range(4)
    assert A.elems == (0, 1, 2, 3)
    assert Finite.range(0).elems == ()


def test_element_at_bounds():
    A = Finite.of("xyz")
    assert A.element_at(1) == "y"
    with pytest.raises(IndexError):
        A.element_at(3)
    with pytest.raises(IndexError):
        A.element_at(-1)


def test_custom_equality():
    A = Finite.of(["a", "A", "b"], eq=lambda x, y: x.lower() == y.lower())
    assert A.elems == ("a", "b")
    assert A.index_of("B") == 1


def test_unhashable_elements():
    A = Finite.of([[1], [2], [1], {"k": 0}])
    assert len(A) == 3
    assert A.index_of([2]) == 1
    assert A.index_of({"k": 0}) == 2
    assert A.index_of([3]) == -1


def test_mixed_hashable_and_unhashable():
    A = Finite.of([1, [1], (1,), [1]])
    assert A.elems == (1, [1], (1,))
    assert A.index_of((1,)) == 2


def test_carrier_uids_are_unique():
    A = Finite.of([1, 2])
    B = Finite.of([1, 2])
    assert A.uid != B.uid
    assert A is not B


def test_subset_by_is_lazy():
    calls = []
    A = Finite.range(5)

    def even(x):
        calls.append(x)
        return x % 2 == 0

    P = Subset.by(A, even)
    assert calls == []
    assert P.contains(2)
    assert P.to_array() == [0, 2, 4]
    assert P.mask() == 0b10101


def test_subset_of_and_errors():
    A = Finite.of(["a", "b", "c"])
    P = Subset.of(A, ["c", "a", "a"])
    assert P.to_array() == ["a", "c"]
    assert len(P) == 2
    assert "b" not in P
    assert "zzz" not in P
    with pytest.raises(InvalidElement):
        Subset.of(A, ["d"])


def test_subset_from_mask_rejects_stray_bits():
    A = Finite.range(3)
    with pytest.raises(ValueError):
        Subset.from_mask(A, 0b1000)


def test_subset_algebra():
    A = Finite.range(6)
    P = Subset.of(A, [0, 1, 2])
    Q = Subset.of(A, [2, 3])
    assert P.union(Q).to_array() == [0, 1, 2, 3]
    assert P.intersection(Q).to_array() == [2]
    assert P.difference(Q).to_array() == [0, 1]
    assert P.complement().to_array() == [3, 4, 5]
    assert Subset.empty(A).leq(P)
    assert P.leq(Subset.full(A))
    assert not P.leq(Q)
    assert P.union(Q).same_as(Subset.of(A, [3, 2, 1, 0]))


def test_subset_long_operation_chains():
    A = Finite.range(3000)
    singletons = [Subset.of(A, [i]) for i in range(3000)]
    everything = reduce(lambda P, Q: P.union(Q), singletons)
    assert everything.same_as(Subset.full(A))
    assert len(everything) == 3000

    rest = reduce(lambda P, Q: P.difference(Q), singletons[:2999], Subset.full(A))
    assert rest.to_array() == [2999]

    B = Finite.range(4)
    P = Subset.of(B, [1, 3])
    toggled = P
    for _ in range(2000):
        toggled = toggled.complement()
    assert toggled.same_as(P)

    evens = Subset.by(B, lambda x: x % 2 == 0)
    mixed = evens
    for _ in range(2001):
        mixed = mixed.intersection(Subset.full(B)).complement()
    assert mixed.to_array() == [1, 3]


def test_subset_mismatched_carrier():
    A = Finite.range(3)
    B = Finite.range(3)
    P = Subset.full(A)
    Q = Subset.full(B)
    for op in (P.union, P.intersection, P.difference, P.leq, P.same_as):
        with pytest.raises(MismatchedCarrier):
            op(Q)


def test_error_taxonomy():
    assert issubclass(MismatchedCarrier, CarrierMismatch)
    assert issubclass(CarrierMismatch, RelationError)
    assert issubclass(InvalidElement, RelationError)


def test_all_subsets_mask_order():
    A = Finite.of(["x", "y"])
    subsets = all_subsets(A)
    assert [s.to_array() for s in subsets] == [[], ["x"], ["y"], ["x", "y"]]
    assert len(all_subsets(Finite.range(0))) == 1
