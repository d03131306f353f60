"""
Predicate Transformers & Residuals

  - wp(R, Q):  {a | ∀b. a R b ⇒ b ∈ Q} = ¬ preimage(R, ¬Q)
  - sp(P, R):  {b | ∃a ∈ P. a R b}     = image(R, P)
  - left_residual(R, T):  R\\T, greatest X with R;X ⊆ T   = ¬(R† ; ¬T)
  - right_residual(T, S): T/S, greatest X with X;S ⊆ T   = ¬(¬T ; S†)

Laws (each returns a LawCheck):
  - sp ⊣ wp:          sp(P,R) ⊆ Q  ⟺  P ⊆ wp(R,Q)
  - wp composition:   wp(R1;R2, Q) = wp(R1, wp(R2, Q))
  - left residual:    R;X ⊆ T  ⟺  X ⊆ R\\T
  - right residual:   X;S ⊆ T  ⟺  X ⊆ T/S
  - Hoare triples {P} R {Q} (demonic or angelic)

Carrier rules: wp needs Q over R.cod, sp needs P over R.dom. Residuals rely on
the compose/converse carrier checks.
"""

from typing import Optional

from .base import RelationOps
from .finite import Subset, require_carrier
from .kernel.rows import full_mask, iter_bits
from .witness import (
    LawCheck,
    law_ok,
    law_fail,
    law_inclusion_check,
    subset_law_check,
    subset_inclusion_witness
)

HOARE_KINDS = ("demonic", "angelic")


# ============================================================================
# Transformers
# ============================================================================

def wp(R: RelationOps, Q: Subset) -> Subset:
    """
    Weakest precondition: states all of whose successors lie in Q.

    States with no successor are in wp(R, Q) for every Q.

    Raises:
        MismatchedCarrier: If Q is not over R.cod.
    """
    require_carrier(Q, R.cod, "wp")
    not_q = full_mask(len(R.cod)) & ~Q.mask()
    bad = R.preimage_mask(not_q)
    return Subset.from_mask(R.dom, full_mask(len(R.dom)) & ~bad)


def sp(P: Subset, R: RelationOps) -> Subset:
    """Strongest postcondition: states reachable from P in one R-step."""
    require_carrier(P, R.dom, "sp")
    return R.image(P)


def left_residual(R: RelationOps, T: RelationOps) -> RelationOps:
    """R\\T: B → C for R: A → B and T: A → C."""
    return R.converse().compose(T.complement()).complement()


def right_residual(T: RelationOps, S: RelationOps) -> RelationOps:
    """T/S: A → B for T: A → C and S: B → C."""
    return T.complement().compose(S.converse()).complement()


# ============================================================================
# Law checks
# ============================================================================

def _first_outside(X: RelationOps, Y: RelationOps) -> Optional[tuple]:
    pairs = X.difference(Y).to_pairs()
    return pairs[0] if pairs else None


def _first_element(P: Subset, Q: Subset):
    return next(iter(P.difference(Q)), None)


def wp_sp_adjunction_check(P: Subset, R: RelationOps, Q: Subset) -> LawCheck:
    """sp(P,R) ⊆ Q ⟺ P ⊆ wp(R,Q); witness names the breaking state."""
    law = "wp_sp_adjunction"
    post, pre = sp(P, R), wp(R, Q)
    left_holds = post.leq(Q)
    right_holds = P.leq(pre)
    if left_holds == right_holds:
        return law_ok(law)
    if left_holds:
        element = _first_element(P, pre)
    else:
        element = _first_element(post, Q)
    return law_fail(law, {
        "kind": "adjunction",
        "adjunction": "sp ⊣ wp",
        "element": element,
        "left": "sp(P,R) ⊆ Q",
        "right": "P ⊆ wp(R,Q)",
        "left_holds": left_holds,
        "right_holds": right_holds,
    })


def wp_composition_check(R1: RelationOps, R2: RelationOps, Q: Subset) -> LawCheck:
    """wp(R1;R2, Q) = wp(R1, wp(R2, Q))."""
    return subset_law_check(
        "wp_composition",
        wp(R1.compose(R2), Q),
        wp(R1, wp(R2, Q))
    )


def _residual_check(
    law: str,
    adjunction: str,
    composite: RelationOps,
    T: RelationOps,
    X: RelationOps,
    residual: RelationOps,
    left: str,
    right: str
) -> LawCheck:
    left_holds = composite.leq(T)
    right_holds = X.leq(residual)
    if left_holds == right_holds:
        return law_ok(law)
    if left_holds:
        pair = _first_outside(X, residual)
    else:
        pair = _first_outside(composite, T)
    return law_fail(law, {
        "kind": "residual",
        "adjunction": adjunction,
        "pair": pair,
        "left": left,
        "right": right,
        "left_holds": left_holds,
        "right_holds": right_holds,
    })


def left_residual_check(R: RelationOps, X: RelationOps, T: RelationOps) -> LawCheck:
    """R;X ⊆ T ⟺ X ⊆ R\\T."""
    return _residual_check(
        "left_residual", "R;- ⊣ R\\-",
        R.compose(X), T, X, left_residual(R, T),
        "R;X ⊆ T", "X ⊆ R\\T"
    )


def right_residual_check(X: RelationOps, S: RelationOps, T: RelationOps) -> LawCheck:
    """X;S ⊆ T ⟺ X ⊆ T/S."""
    return _residual_check(
        "right_residual", "-;S ⊣ -/S",
        X.compose(S), T, X, right_residual(T, S),
        "X;S ⊆ T", "X ⊆ T/S"
    )


def left_residual_greatest_check(R: RelationOps, T: RelationOps) -> LawCheck:
    """R;(R\\T) ⊆ T: the left residual is itself a solution."""
    return law_inclusion_check("left_residual_greatest", R.compose(left_residual(R, T)), T)


def right_residual_greatest_check(T: RelationOps, S: RelationOps) -> LawCheck:
    """(T/S);S ⊆ T: the right residual is itself a solution."""
    return law_inclusion_check("right_residual_greatest", right_residual(T, S).compose(S), T)


# ============================================================================
# Hoare triples & transport
# ============================================================================

def hoare_check(P: Subset, R: RelationOps, Q: Subset, kind: str = "demonic") -> LawCheck:
    """
    Hoare triple {P} R {Q}.

    demonic: every successor of every state in P lies in Q (P ⊆ wp(R,Q)).
    angelic: every state in P has some successor in Q.

    The witness is the first pre-state in carrier order that breaks the
    triple, with its first successor outside Q (demonic) or None (angelic).

    Raises:
        ValueError: If kind is not "demonic" or "angelic".
        MismatchedCarrier: If P or Q is over the wrong carrier.
    """
    if kind not in HOARE_KINDS:
        raise ValueError(f"Unknown Hoare triple kind '{kind}'. Must be one of {HOARE_KINDS}")
    require_carrier(P, R.dom, "hoare")
    require_carrier(Q, R.cod, "hoare")

    law = f"hoare_{kind}"
    q = Q.mask()
    not_q = full_mask(len(R.cod)) & ~q
    A, B = R.dom.elems, R.cod.elems

    for i in iter_bits(P.mask()):
        succ = R.image_mask(1 << i)
        if kind == "demonic":
            escaped = succ & not_q
            if escaped:
                return law_fail(law, {
                    "kind": "hoare",
                    "mode": kind,
                    "state": A[i],
                    "successor": B[next(iter_bits(escaped))],
                })
        elif not succ & q:
            return law_fail(law, {
                "kind": "hoare",
                "mode": kind,
                "state": A[i],
                "successor": None,
            })
    return law_ok(law)


def wp_transport_check(P: Subset, R: RelationOps, Q: Subset) -> LawCheck:
    """P ⊆ wp(R, Q); witness lists the states of P outside wp."""
    return {**subset_inclusion_witness(P, wp(R, Q)), "law": "wp_transport"}


def sp_transport_check(P: Subset, R: RelationOps, Q: Subset) -> LawCheck:
    """sp(P, R) ⊆ Q; witness lists the reachable states outside Q."""
    return {**subset_inclusion_witness(sp(P, R), Q), "law": "sp_transport"}
