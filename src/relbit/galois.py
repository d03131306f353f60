"""
Galois / Adjunction Layer

For a total function f: A → B (FiniteMap):

    ∃f(P) = {f(a) | a ∈ P}                 existential image
    f*(Q) = {a | f(a) ∈ Q}                  preimage
    ∀f(P) = {b | ∀a. f(a) = b ⇒ a ∈ P}     universal image

with the chain ∃f ⊣ f* ⊣ ∀f:

    ∃f(P) ⊆ Q  ⟺  P ⊆ f*(Q)
    f*(Q) ⊆ P  ⟺  Q ⊆ ∀f(P)

Equipment: the graph ⟨f⟩ has companion ⟨f⟩ and conjoint ⟨f⟩†, with

    unit:   id_A ⊆ ⟨f⟩;⟨f⟩†      (totality)
    counit: ⟨f⟩†;⟨f⟩ ⊆ id_B      (single-valuedness)
"""

import logging
from typing import Any, Callable, Optional, Union

from .base import RelationOps
from .common import make_rel_factory
from .finite import Finite, Subset, InvalidElement, all_subsets, require_carrier
from .kernel.rows import full_mask, iter_bits
from .witness import LawCheck, law_ok, law_fail, law_inclusion_check

logger = logging.getLogger(__name__)


class FiniteMap:
    """
    Total function between finite carriers, tabulated at construction.

    Raises:
        InvalidElement: If fn(a) is not in cod for some a in dom.
    """

    __slots__ = ("dom", "cod", "_targets")

    def __init__(self, dom: Finite, cod: Finite, fn: Callable[[Any], Any]):
        targets = []
        for a in dom:
            b = fn(a)
            j = cod.index_of(b)
            if j < 0:
                raise InvalidElement(f"Map value f({a!r}) = {b!r} not in codomain {cod!r}")
            targets.append(j)
        self.dom = dom
        self.cod = cod
        self._targets = tuple(targets)

    @classmethod
    def from_dict(cls, dom: Finite, cod: Finite, table: dict) -> "FiniteMap":
        """
        Map tabulated by a dict keyed by domain elements.

        Raises:
            InvalidElement: If the table has no value for some a in dom, or a
                value outside cod.
        """
        def lookup(a: Any) -> Any:
            try:
                return table[a]
            except (KeyError, TypeError):
                raise InvalidElement(f"Map has no value for {a!r}") from None

        return cls(dom, cod, lookup)

    def target_index(self, i: int) -> int:
        return self._targets[i]

    def __call__(self, a: Any) -> Any:
        i = self.dom.index_of(a)
        if i < 0:
            raise InvalidElement(f"{a!r} not in map domain {self.dom!r}")
        return self.cod.element_at(self._targets[i])

    def graph(self, strategy: Optional[str] = None) -> RelationOps:
        return graph(self, strategy)

    def __repr__(self) -> str:
        return f"FiniteMap(#{self.dom.uid}->#{self.cod.uid})"


# ============================================================================
# Images
# ============================================================================

def exists_along(f: FiniteMap, P: Subset) -> Subset:
    """∃f(P) ⊆ B."""
    require_carrier(P, f.dom, "exists_along")
    out = 0
    for i in iter_bits(P.mask()):
        out |= 1 << f.target_index(i)
    return Subset.from_mask(f.cod, out)


def preimage(f: FiniteMap, Q: Subset) -> Subset:
    """f*(Q) ⊆ A."""
    require_carrier(Q, f.cod, "preimage")
    q = Q.mask()
    out = 0
    for i in range(len(f.dom)):
        if (q >> f.target_index(i)) & 1:
            out |= 1 << i
    return Subset.from_mask(f.dom, out)


def forall_along(f: FiniteMap, P: Subset) -> Subset:
    """∀f(P) ⊆ B; every b outside the range of f is included."""
    require_carrier(P, f.dom, "forall_along")
    outside = full_mask(len(f.dom)) & ~P.mask()
    hit = 0
    for i in iter_bits(outside):
        hit |= 1 << f.target_index(i)
    return Subset.from_mask(f.cod, full_mask(len(f.cod)) & ~hit)


# ============================================================================
# Adjunction checks
# ============================================================================

def _first_element(P: Subset, Q: Subset):
    return next(iter(P.difference(Q)), None)


def _adjunction_check(
    law: str,
    adjunction: str,
    small: Subset,
    big: Subset,
    inner: Subset,
    outer: Subset,
    left: str,
    right: str
) -> LawCheck:
    left_holds = small.leq(big)
    right_holds = inner.leq(outer)
    if left_holds == right_holds:
        return law_ok(law)
    if left_holds:
        element = _first_element(inner, outer)
    else:
        element = _first_element(small, big)
    return law_fail(law, {
        "kind": "adjunction",
        "adjunction": adjunction,
        "element": element,
        "left": left,
        "right": right,
        "left_holds": left_holds,
        "right_holds": right_holds,
    })


def exists_preimage_check(f: FiniteMap, P: Subset, Q: Subset) -> LawCheck:
    """∃f(P) ⊆ Q ⟺ P ⊆ f*(Q)."""
    return _adjunction_check(
        "exists_preimage", "∃f ⊣ f*",
        exists_along(f, P), Q, P, preimage(f, Q),
        "∃f(P) ⊆ Q", "P ⊆ f*(Q)"
    )


def preimage_forall_check(f: FiniteMap, Q: Subset, P: Subset) -> LawCheck:
    """f*(Q) ⊆ P ⟺ Q ⊆ ∀f(P)."""
    return _adjunction_check(
        "preimage_forall", "f* ⊣ ∀f",
        preimage(f, Q), P, Q, forall_along(f, P),
        "f*(Q) ⊆ P", "Q ⊆ ∀f(P)"
    )


def verify_galois_chain(f: FiniteMap) -> dict:
    """
    Check ∃f ⊣ f* ⊣ ∀f over every pair of subsets.

    Subsets are enumerated in mask order; the first failing pair supplies the
    witness. Cost is 2^(|A|+|B|) checks per adjunction, so this is meant for
    small carriers.

    Returns:
        {"exists_preimage": LawCheck, "preimage_forall": LawCheck,
         "complete": bool}
    """
    subsets_a = all_subsets(f.dom)
    subsets_b = all_subsets(f.cod)

    exists_pre = law_ok("exists_preimage")
    pre_forall = law_ok("preimage_forall")

    for P in subsets_a:
        for Q in subsets_b:
            if exists_pre["ok"]:
                exists_pre = exists_preimage_check(f, P, Q)
            if pre_forall["ok"]:
                pre_forall = preimage_forall_check(f, Q, P)
        if not exists_pre["ok"] and not pre_forall["ok"]:
            break

    complete = exists_pre["ok"] and pre_forall["ok"]
    logger.debug("galois chain for %r: complete=%s", f, complete)
    return {
        "exists_preimage": exists_pre,
        "preimage_forall": pre_forall,
        "complete": complete,
    }


# ============================================================================
# Equipment
# ============================================================================

def graph(f: FiniteMap, strategy: Optional[str] = None) -> RelationOps:
    """⟨f⟩ = {(a, f(a))} as a relation dom → cod."""
    return make_rel_factory(strategy).from_index_pairs(
        f.dom, f.cod, [(i, f.target_index(i)) for i in range(len(f.dom))]
    )


def companion(f: FiniteMap, strategy: Optional[str] = None) -> RelationOps:
    return graph(f, strategy)


def conjoint(f: FiniteMap, strategy: Optional[str] = None) -> RelationOps:
    """⟨f⟩† as a relation cod → dom."""
    return graph(f, strategy).converse()


def _as_graph(f: Union[FiniteMap, RelationOps]) -> RelationOps:
    if isinstance(f, FiniteMap):
        return graph(f)
    return f


def unit_check(f: Union[FiniteMap, RelationOps]) -> LawCheck:
    """
    id_A ⊆ G;G† for G = ⟨f⟩ (or a candidate graph relation).

    Fails exactly on elements with no image; the witness lists (a, a).
    """
    G = _as_graph(f)
    identity = type(G).identity(G.dom)
    return law_inclusion_check("unit", identity, G.compose(G.converse()))


def counit_check(f: Union[FiniteMap, RelationOps]) -> LawCheck:
    """
    G†;G ⊆ id_B for G = ⟨f⟩ (or a candidate graph relation).

    Fails exactly when some element has two images b ≠ b'; the witness
    lists the offending (b, b') pairs.
    """
    G = _as_graph(f)
    identity = type(G).identity(G.cod)
    return law_inclusion_check("counit", G.converse().compose(G), identity)


def square_check(f: FiniteMap, R: RelationOps, g: FiniteMap, R1: RelationOps) -> LawCheck:
    """
    Refinement square R;⟨g⟩ ⊆ ⟨f⟩;R1:

        A --R--> B
        |f       |g
        v        v
        A1 -R1-> B1

    For maps this says a R b ⇒ f(a) R1 g(b). The witness lists the
    (a, g(b)) pairs the square fails to cover.
    """
    Gf = graph(f, R.strategy)
    Gg = graph(g, R.strategy)
    return law_inclusion_check("square", R.compose(Gg), Gf.compose(R1))
