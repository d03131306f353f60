"""
Representation Parity

Runs the same operation through PairRel and BitRel and compares the decoded
pair sets. Any disagreement is a bug in one of the two forms; the witness
names the operation and the pairs each form produced alone.

Two entry points:
  - on-demand checkers (compose_parity, ..., full_parity) returning LawCheck
  - a runtime guard, off by default, that shadows live RelationOps calls in
    the other form (configure_parity_checking). Sampling is a deterministic
    integer-percent stride, so guarded runs stay reproducible.
"""

import logging
from typing import Any, Callable, Dict, List, Sequence

from .base import RelationOps
from .core import param_registry
from .finite import RelationError
from .witness import LawCheck, law_ok, law_fail, describe

logger = logging.getLogger(__name__)


def parity_check(operation: str, pair_result: RelationOps, bit_result: RelationOps) -> LawCheck:
    """Compare two results of the same operation; carriers must be identical."""
    pair_result._require_parallel(bit_result, f"{operation} parity")
    pair_set = set(pair_result.to_pair_rel().index_pairs())
    bit_set = set(bit_result.to_bit_rel().index_pairs())
    law = f"{operation}_parity"
    if pair_set == bit_set:
        return law_ok(law)

    A, B = pair_result.dom.elems, pair_result.cod.elems
    pair_only = [(A[i], B[j]) for i, j in sorted(pair_set - bit_set)]
    bit_only = [(A[i], B[j]) for i, j in sorted(bit_set - pair_set)]
    logger.warning("parity mismatch in %s: %d pair-only, %d bit-only",
                   operation, len(pair_only), len(bit_only))
    return law_fail(law, {
        "kind": "parity",
        "operation": operation,
        "pair_only": pair_only,
        "bit_only": bit_only,
    })


def construct_parity(R: RelationOps) -> LawCheck:
    return parity_check("construct", R.to_pair_rel(), R.to_bit_rel())


def compose_parity(R: RelationOps, S: RelationOps) -> LawCheck:
    return parity_check(
        "compose",
        R.to_pair_rel().compose(S.to_pair_rel()),
        R.to_bit_rel().compose(S.to_bit_rel())
    )


def converse_parity(R: RelationOps) -> LawCheck:
    return parity_check("converse", R.to_pair_rel().converse(), R.to_bit_rel().converse())


def meet_parity(R: RelationOps, S: RelationOps) -> LawCheck:
    return parity_check(
        "meet",
        R.to_pair_rel().meet(S.to_pair_rel()),
        R.to_bit_rel().meet(S.to_bit_rel())
    )


def join_parity(R: RelationOps, S: RelationOps) -> LawCheck:
    return parity_check(
        "join",
        R.to_pair_rel().join(S.to_pair_rel()),
        R.to_bit_rel().join(S.to_bit_rel())
    )


def complement_parity(R: RelationOps) -> LawCheck:
    return parity_check("complement", R.to_pair_rel().complement(), R.to_bit_rel().complement())


def full_parity(R: RelationOps, S: RelationOps, T: RelationOps) -> List[LawCheck]:
    """
    Every parity check on one input triple.

    Args:
        R: A → B
        S: B → C (composed after R)
        T: A → B (met and joined with R)

    Returns:
        List[LawCheck] in a fixed order: construct, compose, converse, meet,
        join, complement.
    """
    return [
        construct_parity(R),
        compose_parity(R, S),
        converse_parity(R),
        meet_parity(R, T),
        join_parity(R, T),
        complement_parity(R),
    ]


# ============================================================================
# Runtime guard
# ============================================================================

# Unguarded primitives; the guard must not re-enter itself.
_SHADOW_OPS: Dict[str, Callable[..., RelationOps]] = {
    "compose": lambda R, S: R._compose(S),
    "converse": lambda R: R._converse(),
    "meet": lambda R, S: R._meet(S),
    "join": lambda R, S: R._join(S),
    "complement": lambda R: R._complement(),
    "difference": lambda R, S: R._difference(S),
}


def _default_config() -> Dict[str, Any]:
    registry = param_registry()
    return {
        "enabled": False,
        "sample_pct": registry["parity_sample_pct"],
        "max_input_size": registry["parity_max_input_size"],
        "crash_on_mismatch": True,
    }


_config = _default_config()
_calls_seen = 0


def configure_parity_checking(**changes: Any) -> None:
    """
    Update the runtime guard configuration and restart its sampling stride.

    Keys:
        enabled:            shadow live operations at all
        sample_pct:         integer 0..100; every (100/sample_pct)-th eligible call
        max_input_size:     skip calls whose carrier sizes sum above this
        crash_on_mismatch:  raise ParityMismatch instead of only logging

    Raises:
        ValueError: On an unknown key or an out-of-range value.
    """
    global _config, _calls_seen
    unknown = set(changes) - set(_config)
    if unknown:
        raise ValueError(f"Unknown parity config keys: {sorted(unknown)}")
    updated = {**_config, **changes}
    pct = updated["sample_pct"]
    if isinstance(pct, bool) or not isinstance(pct, int) or not 0 <= pct <= 100:
        raise ValueError(f"sample_pct must be an int in 0..100, got {pct!r}")
    size = updated["max_input_size"]
    if isinstance(size, bool) or not isinstance(size, int) or size < 0:
        raise ValueError(f"max_input_size must be a non-negative int, got {size!r}")
    _config = updated
    _calls_seen = 0
    logger.debug("parity guard configured: %s", _config)


def get_parity_config() -> Dict[str, Any]:
    """Copy of the current runtime guard configuration."""
    return dict(_config)


def reset_parity_checking() -> None:
    """Restore the registry defaults (guard disabled)."""
    global _config, _calls_seen
    _config = _default_config()
    _calls_seen = 0


def _input_size(operation: str, operands: Sequence[RelationOps]) -> int:
    first = operands[0]
    total = len(first.dom) + len(first.cod)
    if operation == "compose":
        total += len(operands[1].cod)
    return total


def _take_sample() -> bool:
    global _calls_seen
    _calls_seen += 1
    pct = _config["sample_pct"]
    return (_calls_seen * pct) // 100 > ((_calls_seen - 1) * pct) // 100


def guard_operation(operation: str, result: RelationOps, *operands: RelationOps) -> RelationOps:
    """
    Cross-check one live operation against the other form and pass result through.

    Called by RelationOps after every compose/converse/meet/join/complement/
    difference. A no-op unless the guard is enabled, the inputs are within
    max_input_size and the call falls on the sampling stride.

    Raises:
        ParityMismatch: On disagreement when crash_on_mismatch is set
            (otherwise parity_check logs a warning).
    """
    if not _config["enabled"]:
        return result
    if _input_size(operation, operands) > _config["max_input_size"]:
        return result
    if not _take_sample():
        return result

    if result.strategy == "pair":
        shadow = _SHADOW_OPS[operation](*[R.to_bit_rel() for R in operands])
        check = parity_check(operation, result, shadow)
    else:
        shadow = _SHADOW_OPS[operation](*[R.to_pair_rel() for R in operands])
        check = parity_check(operation, shadow, result)

    if not check["ok"] and _config["crash_on_mismatch"]:
        raise ParityMismatch(check)
    return result


class ParityMismatch(RelationError):
    """Raised by the runtime guard when the two forms disagree."""

    def __init__(self, check: LawCheck):
        self.check = check
        super().__init__(describe(check))
