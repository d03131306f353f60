#!/usr/bin/env python3
"""
Witness / LawCheck Tests

Tests:
1. Inclusion scenario: exact missing pairs, in carrier order
2. Refinement, equality (symmetric difference), subset inclusion
3. law_ok / law_fail / law_from shapes
4. describe() renders every witness kind
5. Witnesses are identical across forms and repeated runs
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from relbit import (
    Finite,
    Subset,
    PairRel,
    BitRel,
    law_ok,
    law_fail,
    law_from,
    inclusion_witness,
    refines,
    equality_witness,
    subset_inclusion_witness,
    describe,
    CarrierMismatch
)


@pytest.fixture(params=[PairRel, BitRel], ids=["pair", "bit"])
def Rel(request):
    return request.param


@pytest.fixture
def scenario(Rel):
    A = Finite.of([1, 2, 3])
    B = Finite.of(["a", "b", "c"])
    R = Rel.from_pairs(A, B, [(1, "a"), (2, "b")])
    S = Rel.from_pairs(A, B, [(1, "a"), (2, "b"), (3, "c")])
    return A, B, R, S


def test_inclusion_scenario(scenario):
    _, _, R, S = scenario

    ok = inclusion_witness(S, R)
    assert ok == {"law": "inclusion", "ok": True, "witness": None}

    fail = inclusion_witness(R, S)
    assert not fail["ok"]
    assert fail["witness"]["missing"] == [(3, "c")]
    assert describe(fail) == "inclusion: FAIL: missing pairs [(3, 'c')]"


def test_inclusion_lists_all_missing_in_order(Rel):
    A = Finite.range(3)
    B = Finite.of("xy")
    left = Rel.from_pairs(A, B, [(1, "x")])
    right = Rel.full(A, B)
    fail = inclusion_witness(left, right)
    assert fail["witness"]["missing"] == [
        (0, "x"), (0, "y"), (1, "y"), (2, "x"), (2, "y")
    ]


def test_inclusion_requires_same_carriers(scenario):
    A, _, R, _ = scenario
    other = R.converse()
    with pytest.raises(CarrierMismatch):
        inclusion_witness(R, other)


def test_refines(scenario):
    _, _, R, S = scenario
    assert refines(R, S)["ok"]
    check = refines(S, R)
    assert check["law"] == "refines"
    assert check["witness"]["missing"] == [(3, "c")]


def test_equality_witness(Rel):
    A = Finite.range(2)
    R = Rel.from_pairs(A, A, [(0, 0), (0, 1)])
    S = Rel.from_pairs(A, A, [(0, 1), (1, 1)])
    assert equality_witness(R, R)["ok"]
    check = equality_witness(R, S)
    assert check["witness"]["left_only"] == [(0, 0)]
    assert check["witness"]["right_only"] == [(1, 1)]
    assert describe(check) == "equality: FAIL: left only [(0, 0)], right only [(1, 1)]"


def test_subset_inclusion_witness():
    A = Finite.of("abcd")
    P = Subset.of(A, ["a", "c", "d"])
    Q = Subset.of(A, ["c"])
    assert subset_inclusion_witness(Q, P)["ok"]
    check = subset_inclusion_witness(P, Q)
    assert describe(check) == "subset_inclusion: FAIL: missing elements ['a', 'd']"


def test_law_constructors():
    assert law_ok("x") == {"law": "x", "ok": True, "witness": None}
    w = {"kind": "subset_inclusion", "missing": [1]}
    assert law_fail("x", w) == {"law": "x", "ok": False, "witness": w}
    assert law_from("x", None)["ok"]
    assert law_from("x", w)["witness"] is w


def test_describe_bare_witnesses():
    assert describe(None) == "no witness"
    assert describe({"kind": "inclusion", "missing": [(1, "a")]}) == "missing pairs [(1, 'a')]"
    assert describe({
        "kind": "adjunction",
        "adjunction": "∃f ⊣ f*",
        "element": 2,
        "left": "∃f(P) ⊆ Q",
        "right": "P ⊆ f*(Q)",
        "left_holds": True,
        "right_holds": False,
    }) == "∃f ⊣ f* breaks at 2: ∃f(P) ⊆ Q holds, P ⊆ f*(Q) fails"
    assert describe({
        "kind": "residual",
        "adjunction": "R;- ⊣ R\\-",
        "pair": ("b", "y"),
        "left": "R;X ⊆ T",
        "right": "X ⊆ R\\T",
        "left_holds": False,
        "right_holds": True,
    }) == "R;- ⊣ R\\- at ('b', 'y'): R;X ⊆ T fails, X ⊆ R\\T holds"
    assert describe({
        "kind": "parity",
        "operation": "compose",
        "pair_only": [(0, 1)],
        "bit_only": [],
    }) == "compose forms disagree: pair only [(0, 1)], bit only []"
    assert describe({
        "kind": "subset_law",
        "law": "wp_composition",
        "element": 0,
        "in_left": True,
        "in_right": False,
    }) == "wp_composition differs at 0: left=True, right=False"


def test_describe_unknown_kind():
    with pytest.raises(ValueError):
        describe({"kind": "mystery"})


def test_witness_determinism_across_forms():
    A = Finite.of([1, 2, 3])
    B = Finite.of(["a", "b", "c"])
    pairs_r = [(1, "a"), (2, "b")]
    pairs_s = [(3, "c"), (1, "a"), (2, "c"), (2, "b")]
    results = []
    for Rel in (PairRel, BitRel, PairRel, BitRel):
        R = Rel.from_pairs(A, B, pairs_r)
        S = Rel.from_pairs(A, B, pairs_s)
        results.append(describe(inclusion_witness(R, S)))
    assert len(set(results)) == 1
    assert results[0] == "inclusion: FAIL: missing pairs [(2, 'c'), (3, 'c')]"
