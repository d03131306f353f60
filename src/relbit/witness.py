"""
Witness / LawCheck System

Every law checker returns a LawCheck instead of a boolean:

    {"law": str, "ok": bool, "witness": dict | None}

A passing check has no witness. A failing check carries the smallest
certificate that falsifies the law, tagged by "kind":

  - inclusion:         pairs of the included side absent from the including side
  - equality:          symmetric difference (left_only, right_only)
  - subset_inclusion:  elements of P absent from Q
  - law_pair:          first pair (row-major) on which two sides of an
                       equational law disagree
  - subset_law:        first element on which two subsets disagree
  - adjunction:        first element breaking a Galois/transformer equivalence
  - residual:          first pair breaking a residual adjunction
  - hoare:             first pre-state (and successor) breaking a triple
  - parity:            pairs on which the two relation forms disagree

Candidates are always scanned in carrier index order, so repeated runs on the
same inputs yield identical witnesses. Callers read witnesses through
describe() only.
"""

import logging
from typing import Any, Optional, TypedDict

from .base import RelationOps
from .finite import Subset, require_carrier
from .kernel.rows import iter_bits

logger = logging.getLogger(__name__)


class LawCheck(TypedDict):
    law: str
    ok: bool
    witness: Optional[dict]


# ============================================================================
# LawCheck constructors
# ============================================================================

def law_ok(law: str) -> LawCheck:
    return {"law": law, "ok": True, "witness": None}


def law_fail(law: str, witness: dict) -> LawCheck:
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("law %s failed: %s", law, describe(witness))
    return {"law": law, "ok": False, "witness": witness}


def law_from(law: str, witness: Optional[dict]) -> LawCheck:
    """Ok when witness is None, Fail(witness) otherwise."""
    if witness is None:
        return law_ok(law)
    return law_fail(law, witness)


# ============================================================================
# Relation witnesses
# ============================================================================

def inclusion_witness(left: RelationOps, right: RelationOps) -> LawCheck:
    """
    Check right ⊆ left.

    The witness lists exactly the pairs of `right` absent from `left`, in
    row-major carrier order.

    Raises:
        CarrierMismatch: If the relations are not parallel.
    """
    missing = right.difference(left).to_pairs()
    if not missing:
        return law_ok("inclusion")
    return law_fail("inclusion", {"kind": "inclusion", "missing": missing})


def refines(R: RelationOps, S: RelationOps) -> LawCheck:
    """R ⊆ S (R refines S); witness lists pairs of R outside S."""
    check = inclusion_witness(S, R)
    return {**check, "law": "refines"}


def equality_witness(R: RelationOps, S: RelationOps) -> LawCheck:
    """Extensional equality with the symmetric difference as witness."""
    left_only = R.difference(S).to_pairs()
    right_only = S.difference(R).to_pairs()
    if not left_only and not right_only:
        return law_ok("equality")
    return law_fail("equality", {
        "kind": "equality",
        "left_only": left_only,
        "right_only": right_only,
    })


def subset_inclusion_witness(P: Subset, Q: Subset) -> LawCheck:
    """P ⊆ Q; witness lists elements of P absent from Q in carrier order."""
    missing = P.difference(Q).to_array()
    if not missing:
        return law_ok("subset_inclusion")
    return law_fail("subset_inclusion", {"kind": "subset_inclusion", "missing": missing})


def first_difference(left: RelationOps, right: RelationOps) -> Optional[tuple]:
    """
    First (a, b) in row-major carrier order on which two parallel relations
    disagree, as (a, b, in_left, in_right); None when they are equal.
    """
    left._require_parallel(right, "first_difference")
    lrows, rrows = left.rows(), right.rows()
    A, B = left.dom.elems, left.cod.elems
    for i, (lr, rr) in enumerate(zip(lrows, rrows)):
        diff = lr ^ rr
        if diff:
            j = next(iter_bits(diff))
            return (A[i], B[j], bool((lr >> j) & 1), bool((rr >> j) & 1))
    return None


def law_pair_check(law: str, left: RelationOps, right: RelationOps) -> LawCheck:
    """Equational law `left = right`; witness is the first disagreeing pair."""
    diff = first_difference(left, right)
    if diff is None:
        return law_ok(law)
    a, b, in_left, in_right = diff
    return law_fail(law, {
        "kind": "law_pair",
        "law": law,
        "pair": (a, b),
        "in_left": in_left,
        "in_right": in_right,
    })


def law_inclusion_check(law: str, smaller: RelationOps, larger: RelationOps) -> LawCheck:
    """Inequational law `smaller ⊆ larger`; witness lists the offending pairs."""
    check = inclusion_witness(larger, smaller)
    return {**check, "law": law}


def first_subset_difference(P: Subset, Q: Subset) -> Optional[tuple]:
    """First element (carrier order) in exactly one of P, Q as (x, in_P, in_Q)."""
    require_carrier(Q, P.carrier, "first_subset_difference")
    p, q = P.mask(), Q.mask()
    diff = p ^ q
    if not diff:
        return None
    i = next(iter_bits(diff))
    return (P.carrier.element_at(i), bool((p >> i) & 1), bool((q >> i) & 1))


def subset_law_check(law: str, left: Subset, right: Subset) -> LawCheck:
    """Equational law between subsets; witness is the first disagreeing element."""
    diff = first_subset_difference(left, right)
    if diff is None:
        return law_ok(law)
    x, in_left, in_right = diff
    return law_fail(law, {
        "kind": "subset_law",
        "law": law,
        "element": x,
        "in_left": in_left,
        "in_right": in_right,
    })


# ============================================================================
# Rendering
# ============================================================================

def _fmt_pairs(pairs) -> str:
    return "[" + ", ".join(f"({a!r}, {b!r})" for a, b in pairs) + "]"


def _fmt_holds(flag: bool) -> str:
    return "holds" if flag else "fails"


def describe(value: Any) -> str:
    """
    Human-readable rendering of a LawCheck or a bare witness.

    This is the only supported way to read a witness.
    """
    if isinstance(value, dict) and "law" in value and "ok" in value:
        if value["ok"]:
            return f"{value['law']}: ok"
        return f"{value['law']}: FAIL: {describe(value['witness'])}"

    if value is None:
        return "no witness"

    kind = value.get("kind")

    if kind == "inclusion":
        return f"missing pairs {_fmt_pairs(value['missing'])}"

    if kind == "equality":
        return (
            f"left only {_fmt_pairs(value['left_only'])}, "
            f"right only {_fmt_pairs(value['right_only'])}"
        )

    if kind == "subset_inclusion":
        return f"missing elements {value['missing']!r}"

    if kind == "law_pair":
        a, b = value["pair"]
        return (
            f"{value['law']} differs at ({a!r}, {b!r}): "
            f"left={value['in_left']}, right={value['in_right']}"
        )

    if kind == "subset_law":
        return (
            f"{value['law']} differs at {value['element']!r}: "
            f"left={value['in_left']}, right={value['in_right']}"
        )

    if kind == "adjunction":
        return (
            f"{value['adjunction']} breaks at {value['element']!r}: "
            f"{value['left']} {_fmt_holds(value['left_holds'])}, "
            f"{value['right']} {_fmt_holds(value['right_holds'])}"
        )

    if kind == "residual":
        pair = value["pair"]
        where = f" at ({pair[0]!r}, {pair[1]!r})" if pair is not None else ""
        return (
            f"{value['adjunction']}{where}: "
            f"{value['left']} {_fmt_holds(value['left_holds'])}, "
            f"{value['right']} {_fmt_holds(value['right_holds'])}"
        )

    if kind == "hoare":
        if value["successor"] is None:
            return f"{value['mode']} triple fails at pre-state {value['state']!r}: no successor in Q"
        return (
            f"{value['mode']} triple fails at pre-state {value['state']!r}: "
            f"successor {value['successor']!r} not in Q"
        )

    if kind == "parity":
        return (
            f"{value['operation']} forms disagree: "
            f"pair only {_fmt_pairs(value['pair_only'])}, "
            f"bit only {_fmt_pairs(value['bit_only'])}"
        )

    raise ValueError(f"Unknown witness kind: {kind!r}")
