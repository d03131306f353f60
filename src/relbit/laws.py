"""
Allegory Law Checkers

Equational laws report the first disagreeing pair (row-major); inequational
laws report every pair of the smaller side missing from the larger one.

  associativity:        (R;S);T = R;(S;T)
  converse involution:  R†† = R
  identity:             id;R = R = R;id
  meet idempotence:     R ∩ R = R
  join idempotence:     R ∪ R = R
  converse of compose:  (R;S)† = S†;R†
  semi-distributivity:  R;(S ∩ T) ⊆ R;S ∩ R;T
  modular law:          (R;S) ∩ T ⊆ R;(S ∩ R†;T)
  dual modular law:     (R;S) ∩ T ⊆ (R ∩ T;S†);S
  self-adjoint:         R† = R
"""

from .base import RelationOps
from .witness import LawCheck, law_pair_check, law_inclusion_check


def associativity_check(R: RelationOps, S: RelationOps, T: RelationOps) -> LawCheck:
    return law_pair_check(
        "associativity",
        R.compose(S).compose(T),
        R.compose(S.compose(T))
    )


def converse_involution_check(R: RelationOps) -> LawCheck:
    return law_pair_check("converse_involution", R.converse().converse(), R)


def identity_check(R: RelationOps) -> LawCheck:
    """Left unit first; the right unit is checked only when the left holds."""
    left = type(R).identity(R.dom).compose(R)
    check = law_pair_check("identity", left, R)
    if not check["ok"]:
        return check
    right = R.compose(type(R).identity(R.cod))
    return law_pair_check("identity", right, R)


def meet_idempotence_check(R: RelationOps) -> LawCheck:
    return law_pair_check("meet_idempotence", R.meet(R), R)


def join_idempotence_check(R: RelationOps) -> LawCheck:
    return law_pair_check("join_idempotence", R.join(R), R)


def converse_compose_check(R: RelationOps, S: RelationOps) -> LawCheck:
    return law_pair_check(
        "converse_compose",
        R.compose(S).converse(),
        S.converse().compose(R.converse())
    )


def semi_distributivity_check(R: RelationOps, S: RelationOps, T: RelationOps) -> LawCheck:
    """R: A → B, S and T: B → C."""
    return law_inclusion_check(
        "semi_distributivity",
        R.compose(S.meet(T)),
        R.compose(S).meet(R.compose(T))
    )


def modular_law_check(R: RelationOps, S: RelationOps, T: RelationOps) -> LawCheck:
    """R: A → B, S: B → C, T: A → C."""
    return law_inclusion_check(
        "modular_law",
        R.compose(S).meet(T),
        R.compose(S.meet(R.converse().compose(T)))
    )


def dual_modular_law_check(R: RelationOps, S: RelationOps, T: RelationOps) -> LawCheck:
    """R: A → B, S: B → C, T: A → C."""
    return law_inclusion_check(
        "dual_modular_law",
        R.compose(S).meet(T),
        R.meet(T.compose(S.converse())).compose(S)
    )


def self_adjoint_check(R: RelationOps) -> LawCheck:
    """
    R† = R; a non-symmetric R fails with its first asymmetric pair.

    Raises:
        CarrierMismatch: Unless R.dom is R.cod.
    """
    return law_pair_check("self_adjoint", R.converse(), R)
