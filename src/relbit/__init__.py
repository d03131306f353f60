"""
Finite-Relation Algebra Engine

Binary relations between finite carriers in two interchangeable forms (pair
set and packed bit rows), predicate transformers, residuals, Galois
connections along total functions, and law checks that return concrete
counterexamples.
"""

__version__ = "0.1.0"

from .finite import (
    Finite,
    Subset,
    all_subsets,
    RelationError,
    CarrierMismatch,
    MismatchedCarrier,
    InvalidPair,
    InvalidElement
)
from .base import RelationOps
from .rel import PairRel
from .bitrel import BitRel
from .common import (
    make_rel,
    make_rel_factory,
    rel_by,
    identity,
    empty,
    full,
    convert,
    compose,
    converse,
    meet,
    join,
    complement,
    fingerprint,
    UnknownStrategy
)
from .transformers import (
    wp,
    sp,
    left_residual,
    right_residual,
    wp_sp_adjunction_check,
    wp_composition_check,
    left_residual_check,
    right_residual_check,
    left_residual_greatest_check,
    right_residual_greatest_check,
    hoare_check,
    wp_transport_check,
    sp_transport_check
)
from .galois import (
    FiniteMap,
    exists_along,
    preimage,
    forall_along,
    exists_preimage_check,
    preimage_forall_check,
    verify_galois_chain,
    graph,
    companion,
    conjoint,
    unit_check,
    counit_check,
    square_check
)
from .witness import (
    LawCheck,
    law_ok,
    law_fail,
    law_from,
    inclusion_witness,
    refines,
    equality_witness,
    subset_inclusion_witness,
    describe
)
from .laws import (
    associativity_check,
    converse_involution_check,
    identity_check,
    meet_idempotence_check,
    join_idempotence_check,
    converse_compose_check,
    semi_distributivity_check,
    modular_law_check,
    dual_modular_law_check,
    self_adjoint_check
)
from .parity import (
    parity_check,
    construct_parity,
    compose_parity,
    converse_parity,
    meet_parity,
    join_parity,
    complement_parity,
    full_parity,
    configure_parity_checking,
    get_parity_config,
    reset_parity_checking,
    guard_operation,
    ParityMismatch
)
from .suite import (
    random_relation,
    random_subset,
    random_map,
    run_law_suite,
    run_law_suite_with_determinism_check
)

__all__ = [
    # Carriers & errors
    "Finite",
    "Subset",
    "all_subsets",
    "RelationError",
    "CarrierMismatch",
    "MismatchedCarrier",
    "InvalidPair",
    "InvalidElement",

    # Relations
    "RelationOps",
    "PairRel",
    "BitRel",
    "make_rel",
    "make_rel_factory",
    "rel_by",
    "identity",
    "empty",
    "full",
    "convert",
    "compose",
    "converse",
    "meet",
    "join",
    "complement",
    "fingerprint",
    "UnknownStrategy",

    # Transformers
    "wp",
    "sp",
    "left_residual",
    "right_residual",
    "wp_sp_adjunction_check",
    "wp_composition_check",
    "left_residual_check",
    "right_residual_check",
    "left_residual_greatest_check",
    "right_residual_greatest_check",
    "hoare_check",
    "wp_transport_check",
    "sp_transport_check",

    # Galois & equipment
    "FiniteMap",
    "exists_along",
    "preimage",
    "forall_along",
    "exists_preimage_check",
    "preimage_forall_check",
    "verify_galois_chain",
    "graph",
    "companion",
    "conjoint",
    "unit_check",
    "counit_check",
    "square_check",

    # Witnesses
    "LawCheck",
    "law_ok",
    "law_fail",
    "law_from",
    "inclusion_witness",
    "refines",
    "equality_witness",
    "subset_inclusion_witness",
    "describe",

    # Laws
    "associativity_check",
    "converse_involution_check",
    "identity_check",
    "meet_idempotence_check",
    "join_idempotence_check",
    "converse_compose_check",
    "semi_distributivity_check",
    "modular_law_check",
    "dual_modular_law_check",
    "self_adjoint_check",

    # Parity
    "parity_check",
    "construct_parity",
    "compose_parity",
    "converse_parity",
    "meet_parity",
    "join_parity",
    "complement_parity",
    "full_parity",
    "configure_parity_checking",
    "get_parity_config",
    "reset_parity_checking",
    "guard_operation",
    "ParityMismatch",

    # Suite
    "random_relation",
    "random_subset",
    "random_map",
    "run_law_suite",
    "run_law_suite_with_determinism_check",
]
