#!/usr/bin/env python3
"""
Property Tests (hypothesis)

Relations over fixed small carriers are drawn as bitmasks over the carrier
product; subsets as bitmasks over one carrier.

Properties:
1. Parity of every operation between the two forms
2. Associativity, converse involution, converse of composition
3. sp ⊣ wp and the residual adjunctions
4. Modular law and its dual
5. ∃f ⊣ f* ⊣ ∀f for arbitrary total maps
"""

import sys
from pathlib import Path

from hypothesis import given, settings
from hypothesis.strategies import integers, lists

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from relbit import (
    Finite,
    Subset,
    PairRel,
    BitRel,
    FiniteMap,
    full_parity,
    associativity_check,
    converse_involution_check,
    converse_compose_check,
    modular_law_check,
    dual_modular_law_check,
    wp_sp_adjunction_check,
    left_residual_check,
    right_residual_check,
    exists_preimage_check,
    preimage_forall_check,
    describe
)

A = Finite.range(3)
B = Finite.of("abcd")
C = Finite.of(["x", "y", "z"])


def rel_from_mask(Rel, dom, cod, mask):
    m = len(cod)
    pairs = [(k // m, k % m) for k in range(len(dom) * m) if (mask >> k) & 1]
    return Rel.from_index_pairs(dom, cod, pairs)


def masks(dom, cod):
    return integers(min_value=0, max_value=(1 << (len(dom) * len(cod))) - 1)


def subset_masks(carrier):
    return integers(min_value=0, max_value=(1 << len(carrier)) - 1)


@given(masks(A, B), masks(B, C), masks(A, B))
def test_parity_all_operations(r, s, t):
    R = rel_from_mask(PairRel, A, B, r)
    S = rel_from_mask(BitRel, B, C, s)
    T = rel_from_mask(PairRel, A, B, t)
    for check in full_parity(R, S, T):
        assert check["ok"], describe(check)


@given(masks(A, B), masks(B, C), masks(C, A))
def test_associativity(r, s, t):
    for Rel in (PairRel, BitRel):
        R = rel_from_mask(Rel, A, B, r)
        S = rel_from_mask(Rel, B, C, s)
        T = rel_from_mask(Rel, C, A, t)
        assert associativity_check(R, S, T)["ok"]
        assert converse_compose_check(R, S)["ok"]
        assert converse_involution_check(R)["ok"]


@given(masks(A, B), masks(B, C), masks(A, C))
def test_modular_laws(r, s, t):
    for Rel in (PairRel, BitRel):
        R = rel_from_mask(Rel, A, B, r)
        S = rel_from_mask(Rel, B, C, s)
        T = rel_from_mask(Rel, A, C, t)
        assert modular_law_check(R, S, T)["ok"]
        assert dual_modular_law_check(R, S, T)["ok"]


@given(masks(A, B), subset_masks(A), subset_masks(B))
def test_wp_sp_adjunction(r, p, q):
    R = rel_from_mask(BitRel, A, B, r)
    P = Subset.from_mask(A, p)
    Q = Subset.from_mask(B, q)
    assert wp_sp_adjunction_check(P, R, Q)["ok"]


@given(masks(A, B), masks(B, C), masks(A, C))
def test_residual_adjunctions(r, x, t):
    R = rel_from_mask(PairRel, A, B, r)
    X = rel_from_mask(PairRel, B, C, x)
    T = rel_from_mask(PairRel, A, C, t)
    assert left_residual_check(R, X, T)["ok"]
    Y = rel_from_mask(BitRel, A, B, r)
    S = rel_from_mask(BitRel, B, C, x)
    assert right_residual_check(Y, S, T)["ok"]


@settings(max_examples=50)
@given(
    lists(integers(min_value=0, max_value=3), min_size=3, max_size=3),
    subset_masks(A),
    subset_masks(B)
)
def test_galois_chain(targets, p, q):
    f = FiniteMap(A, B, lambda a: B.element_at(targets[a]))
    P = Subset.from_mask(A, p)
    Q = Subset.from_mask(B, q)
    assert exists_preimage_check(f, P, Q)["ok"]
    assert preimage_forall_check(f, Q, P)["ok"]
