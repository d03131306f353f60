"""
Common relation API: strategy factory, free-function algebra, fingerprints.

Callers pick a representation by strategy name ("pair" or "bit"), or take
the registry default. The free functions below accept either form and never
reveal which one is in use.
"""

from typing import Any, Iterable, Optional, Tuple

from .base import RelationOps
from .bitrel import BitRel
from .core.hashing import rows_fingerprint, mask_fingerprint
from .core.registry import param_registry
from .finite import Finite, Subset
from .rel import PairRel

_FORMS = {
    "pair": PairRel,
    "bit": BitRel,
}


# ============================================================================
# Factory
# ============================================================================

def resolve_strategy(strategy: Optional[str] = None) -> str:
    """Registry default when strategy is None; validated otherwise."""
    registry = param_registry()
    if strategy is None:
        return registry["default_strategy"]
    if strategy not in registry["strategies"]:
        raise UnknownStrategy(
            f"Unknown relation strategy '{strategy}'. "
            f"Must be one of {registry['strategies']}"
        )
    return strategy


def make_rel_factory(strategy: Optional[str] = None) -> type:
    """Concrete relation class for a strategy name."""
    return _FORMS[resolve_strategy(strategy)]


def make_rel(
    dom: Finite,
    cod: Finite,
    pairs: Iterable[Tuple[Any, Any]],
    strategy: Optional[str] = None
) -> RelationOps:
    """Relation from element pairs in the chosen form."""
    return make_rel_factory(strategy).from_pairs(dom, cod, pairs)


def rel_by(dom: Finite, cod: Finite, predicate, strategy: Optional[str] = None) -> RelationOps:
    return make_rel_factory(strategy).by(dom, cod, predicate)


def identity(carrier: Finite, strategy: Optional[str] = None) -> RelationOps:
    return make_rel_factory(strategy).identity(carrier)


def empty(dom: Finite, cod: Finite, strategy: Optional[str] = None) -> RelationOps:
    return make_rel_factory(strategy).empty(dom, cod)


def full(dom: Finite, cod: Finite, strategy: Optional[str] = None) -> RelationOps:
    return make_rel_factory(strategy).full(dom, cod)


def convert(R: RelationOps, strategy: str) -> RelationOps:
    """Same relation in another form."""
    return make_rel_factory(strategy)._coerce_from(R)


# ============================================================================
# Free-function algebra
# ============================================================================

def compose(R: RelationOps, S: RelationOps) -> RelationOps:
    return R.compose(S)


def converse(R: RelationOps) -> RelationOps:
    return R.converse()


def meet(R: RelationOps, S: RelationOps) -> RelationOps:
    return R.meet(S)


def join(R: RelationOps, S: RelationOps) -> RelationOps:
    return R.join(S)


def complement(R: RelationOps) -> RelationOps:
    return R.complement()


# ============================================================================
# Fingerprints
# ============================================================================

def fingerprint(value: Any) -> str:
    """
    BLAKE3 digest of the canonical encoding of a relation or subset.

    Both relation forms encode to identical bytes, so equal relations have
    equal fingerprints regardless of representation. Carrier identity is not
    part of the encoding.
    """
    if isinstance(value, RelationOps):
        return rows_fingerprint(value.rows(), len(value.dom), len(value.cod))
    if isinstance(value, Subset):
        return mask_fingerprint(value.mask(), len(value.carrier))
    raise TypeError(f"Cannot fingerprint {type(value).__name__}")


class UnknownStrategy(ValueError):
    """Raised when a strategy name is not in the registry."""
    pass
