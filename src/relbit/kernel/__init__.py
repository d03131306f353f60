"""
Bit-Row Kernel

Minimal kernel of pure operations on packed boolean matrices.

Components:
  - rows: PACK/UNPACK (index pairs to row masks), bit iteration
  - ops: BITWISE (AND/OR/ANDN/NOT), TRANSPOSE, COMPOSE
"""

from .rows import (
    pack_pairs_to_rows,
    unpack_rows_to_pairs,
    iter_bits,
    popcount,
    full_mask
)
from .ops import (
    rows_and,
    rows_or,
    rows_andn,
    rows_not,
    rows_leq,
    rows_transpose,
    rows_compose
)

__all__ = [
    # Rows
    "pack_pairs_to_rows",
    "unpack_rows_to_pairs",
    "iter_bits",
    "popcount",
    "full_mask",

    # Ops
    "rows_and",
    "rows_or",
    "rows_andn",
    "rows_not",
    "rows_leq",
    "rows_transpose",
    "rows_compose",
]
