"""
Kernel Component: Row Ops (BITWISE, TRANSPOSE, COMPOSE)

Pure operations on packed boolean matrices held as row masks.
Every op returns a fresh list; inputs are never mutated.
"""

from typing import List

from .rows import iter_bits, full_mask


def _check_rows(rows: List[int], n_rows: int, n_cols: int, name: str) -> None:
    if len(rows) != n_rows:
        raise ValueError(f"Row count mismatch: {name}={len(rows)}, expected {n_rows}")
    for i, m in enumerate(rows):
        if (m >> n_cols) != 0:
            raise ValueError(
                f"Row {i} of {name} has bits outside [0..{n_cols - 1}]: {m:b}"
            )


# ============================================================================
# BITWISE (AND/OR/ANDN/NOT)
# ============================================================================

def rows_and(a: List[int], b: List[int], n_rows: int, n_cols: int) -> List[int]:
    """
    Bitwise AND of two matrices (relational meet).

    Raises:
        ValueError: If row counts differ or bits outside [0..n_cols-1].
    """
    _check_rows(a, n_rows, n_cols, "a")
    _check_rows(b, n_rows, n_cols, "b")
    return [x & y for x, y in zip(a, b)]


def rows_or(a: List[int], b: List[int], n_rows: int, n_cols: int) -> List[int]:
    """
    Bitwise OR of two matrices (relational join).

    Raises:
        ValueError: If row counts differ or bits outside [0..n_cols-1].
    """
    _check_rows(a, n_rows, n_cols, "a")
    _check_rows(b, n_rows, n_cols, "b")
    return [x | y for x, y in zip(a, b)]


def rows_andn(a: List[int], notmask: List[int], n_rows: int, n_cols: int) -> List[int]:
    """
    Bitwise AND-NOT: a & ~notmask (relational difference).

    Raises:
        ValueError: If row counts differ or bits outside [0..n_cols-1].
    """
    _check_rows(a, n_rows, n_cols, "a")
    _check_rows(notmask, n_rows, n_cols, "notmask")
    all_cols = full_mask(n_cols)
    return [x & ~y & all_cols for x, y in zip(a, notmask)]


def rows_not(a: List[int], n_rows: int, n_cols: int) -> List[int]:
    """Complement within the n_rows x n_cols universe."""
    _check_rows(a, n_rows, n_cols, "a")
    all_cols = full_mask(n_cols)
    return [~x & all_cols for x in a]


def rows_leq(a: List[int], b: List[int], n_rows: int, n_cols: int) -> bool:
    """True iff every bit of a is also set in b."""
    _check_rows(a, n_rows, n_cols, "a")
    _check_rows(b, n_rows, n_cols, "b")
    return all((x & ~y) == 0 for x, y in zip(a, b))


# ============================================================================
# TRANSPOSE (converse)
# ============================================================================

def rows_transpose(a: List[int], n_rows: int, n_cols: int) -> List[int]:
    """
    Transpose an n_rows x n_cols matrix into n_cols x n_rows.

    Pull mapping: out[c][r] = a[r][c]. Only set bits are visited, so the
    cost is O(n_rows + popcount) rather than O(n_rows * n_cols).

    Invariant:
        rows_transpose(rows_transpose(a)) == a (bit-for-bit).
    """
    _check_rows(a, n_rows, n_cols, "a")
    out = [0] * n_cols
    for r, mask in enumerate(a):
        bit_r = 1 << r
        for c in iter_bits(mask):
            out[c] |= bit_r
    return out


# ============================================================================
# COMPOSE (boolean matrix product)
# ============================================================================

def rows_compose(
    a: List[int],
    b: List[int],
    n_rows: int,
    n_mid: int,
    n_cols: int
) -> List[int]:
    """
    Boolean product of a (n_rows x n_mid) and b (n_mid x n_cols).

    For each row of a, OR together the rows of b selected by its set bits.
    The inner loop is a single word-parallel OR per selected row.

    Raises:
        ValueError: If shapes are inconsistent.
    """
    _check_rows(a, n_rows, n_mid, "a")
    _check_rows(b, n_mid, n_cols, "b")
    all_cols = full_mask(n_cols)
    out = []
    for mask in a:
        acc = 0
        for k in iter_bits(mask):
            acc |= b[k]
            if acc == all_cols:
                break  # row saturated
        out.append(acc)
    return out
