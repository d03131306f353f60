"""
Seeded Law Suite

Runs every algebra, transformer, residual, Galois, equipment and parity law
on seeded random inputs and records the outcome in a Receipts section:

  - sample.<k>:   carrier sizes, input fingerprints, per-law results
  - summary.*:    totals and the names of failing laws

Receipts carry only ints, bools and strings (fingerprints and describe()
output), never carrier uids, so two runs with the same seed, sample count and
strategy produce the same section_hash.
"""

import logging
import random
from typing import List, Optional, Tuple

from .base import RelationOps
from .common import make_rel_factory, resolve_strategy, fingerprint
from .core import Receipts, assert_double_run_equal, param_registry
from .finite import Finite, Subset
from .galois import (
    FiniteMap,
    exists_preimage_check,
    preimage_forall_check,
    unit_check,
    counit_check
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
    dual_modular_law_check
)
from .parity import full_parity
from .transformers import (
    wp_sp_adjunction_check,
    wp_composition_check,
    left_residual_check,
    right_residual_check,
    left_residual_greatest_check,
    right_residual_greatest_check
)
from .witness import LawCheck, describe

logger = logging.getLogger(__name__)

SUITE_SECTION = "law-suite"
MAX_CARRIER_SIZE = 4


# ============================================================================
# Generators
# ============================================================================

def random_relation(
    dom: Finite,
    cod: Finite,
    rng: random.Random,
    density: Optional[int] = None,
    strategy: Optional[str] = None
) -> RelationOps:
    """
    Relation with each pair present with probability density/100.

    Pairs are drawn in row-major order, so the result depends only on the
    rng state and the carrier sizes.
    """
    if density is None:
        density = param_registry()["suite_rel_density_pct"]
    index_pairs = [
        (i, j)
        for i in range(len(dom))
        for j in range(len(cod))
        if rng.randrange(100) < density
    ]
    return make_rel_factory(strategy).from_index_pairs(dom, cod, index_pairs)


def random_subset(carrier: Finite, rng: random.Random, density: Optional[int] = None) -> Subset:
    if density is None:
        density = param_registry()["suite_subset_density_pct"]
    mask = 0
    for i in range(len(carrier)):
        if rng.randrange(100) < density:
            mask |= 1 << i
    return Subset.from_mask(carrier, mask)


def random_map(dom: Finite, cod: Finite, rng: random.Random) -> FiniteMap:
    """Total function; cod must be non-empty when dom is."""
    table = {a: cod.element_at(rng.randrange(len(cod))) for a in dom}
    return FiniteMap.from_dict(dom, cod, table)


# ============================================================================
# Suite
# ============================================================================

def _sample_checks(rng: random.Random, strategy: str) -> Tuple[List[LawCheck], dict]:
    n_a = rng.randint(1, MAX_CARRIER_SIZE)
    n_b = rng.randint(1, MAX_CARRIER_SIZE)
    n_c = rng.randint(1, MAX_CARRIER_SIZE)
    A, B, C = Finite.range(n_a), Finite.range(n_b), Finite.range(n_c)

    R = random_relation(A, B, rng, strategy=strategy)
    R2 = random_relation(A, B, rng, strategy=strategy)
    S = random_relation(B, C, rng, strategy=strategy)
    S2 = random_relation(B, C, rng, strategy=strategy)
    T = random_relation(C, A, rng, strategy=strategy)
    U = random_relation(A, C, rng, strategy=strategy)

    P = random_subset(A, rng)
    Q = random_subset(B, rng)
    Qc = random_subset(C, rng)
    f = random_map(A, B, rng)

    checks = [
        associativity_check(R, S, T),
        converse_involution_check(R),
        identity_check(R),
        meet_idempotence_check(R),
        join_idempotence_check(R),
        converse_compose_check(R, S),
        semi_distributivity_check(R, S, S2),
        modular_law_check(R, S, U),
        dual_modular_law_check(R, S, U),
        wp_sp_adjunction_check(P, R, Q),
        wp_composition_check(R, S, Qc),
        left_residual_check(R, S, U),
        right_residual_check(R, S, U),
        left_residual_greatest_check(R, U),
        right_residual_greatest_check(U, S),
        exists_preimage_check(f, P, Q),
        preimage_forall_check(f, Q, P),
        unit_check(f),
        counit_check(f),
    ]
    checks.extend(full_parity(R, S, R2))

    record = {
        "sizes": [n_a, n_b, n_c],
        "inputs": {
            "R": fingerprint(R),
            "S": fingerprint(S),
            "T": fingerprint(T),
            "U": fingerprint(U),
            "P": fingerprint(P),
        },
        "results": [
            [c["law"], c["ok"], None if c["ok"] else describe(c)]
            for c in checks
        ],
    }
    return checks, record


def _build_suite(seed: int, samples: int, strategy: str) -> Tuple[List[LawCheck], Receipts]:
    rng = random.Random(seed)
    receipts = Receipts(SUITE_SECTION)
    receipts.extend({"seed": seed, "samples": samples, "strategy": strategy})

    all_checks = []
    for k in range(samples):
        checks, record = _sample_checks(rng, strategy)
        receipts.put(f"sample.{k}", record)
        all_checks.extend(checks)
        logger.debug("sample %d: %d checks, sizes=%s", k, len(checks), record["sizes"])

    failed = sorted({c["law"] for c in all_checks if not c["ok"]})
    receipts.put("summary.total", len(all_checks))
    receipts.put("summary.failed", sum(1 for c in all_checks if not c["ok"]))
    receipts.put("summary.failed_laws", failed)

    if failed:
        logger.warning("law suite (seed=%d, strategy=%s): failing laws %s", seed, strategy, failed)
    else:
        logger.info("law suite (seed=%d, strategy=%s): %d checks ok", seed, strategy, len(all_checks))
    return all_checks, receipts


def run_law_suite(
    seed: Optional[int] = None,
    samples: Optional[int] = None,
    strategy: Optional[str] = None
) -> Tuple[List[LawCheck], dict]:
    """
    Run every law on `samples` seeded random input sets.

    Args:
        seed: RNG seed (registry default when None).
        samples: Number of input sets (registry default when None).
        strategy: Relation form for generated inputs (registry default when None).

    Returns:
        (checks, digest): every LawCheck in run order, and the receipts digest.
    """
    registry = param_registry()
    seed = registry["suite_seed"] if seed is None else seed
    samples = registry["suite_samples"] if samples is None else samples
    strategy = resolve_strategy(strategy)

    checks, receipts = _build_suite(seed, samples, strategy)
    return checks, receipts.digest()


def run_law_suite_with_determinism_check(
    seed: Optional[int] = None,
    samples: Optional[int] = None,
    strategy: Optional[str] = None
) -> Tuple[List[LawCheck], dict]:
    """
    Run the suite twice and require identical section hashes.

    Returns:
        (checks, digest) of the first run, with "determinism.double_run_ok"
        added to the digest.

    Raises:
        DeterminismError: If the two runs disagree.
    """
    registry = param_registry()
    seed = registry["suite_seed"] if seed is None else seed
    samples = registry["suite_samples"] if samples is None else samples
    strategy = resolve_strategy(strategy)

    runs = []

    def build() -> Receipts:
        checks, receipts = _build_suite(seed, samples, strategy)
        runs.append((checks, receipts))
        return receipts

    assert_double_run_equal(build)

    checks, receipts = runs[0]
    digest = receipts.digest()
    digest["determinism.double_run_ok"] = True
    return checks, digest
