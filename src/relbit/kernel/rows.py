"""
Kernel Component: Bit-Rows (PACK/UNPACK)

Index pairs ↔ packed row masks.

Row representation:
  - List[int] of length n_rows
  - Each entry is a Python int with n_cols least-significant bits
  - Bit j (0-indexed) corresponds to column j
  - bit j == 1 ⟺ cell (r, j) is related
"""

from typing import Iterable, Iterator, List, Tuple


def pack_pairs_to_rows(
    index_pairs: Iterable[Tuple[int, int]],
    n_rows: int,
    n_cols: int
) -> List[int]:
    """
    Build row masks from (row, col) index pairs. Duplicates coalesce.

    Args:
        index_pairs: Iterable of (i, j) with 0 <= i < n_rows, 0 <= j < n_cols.
        n_rows: Number of rows.
        n_cols: Number of columns.

    Returns:
        List[int]: n_rows row masks.

    Raises:
        ValueError: If any index lies outside the matrix.
    """
    rows = [0] * n_rows
    for i, j in index_pairs:
        if not (0 <= i < n_rows and 0 <= j < n_cols):
            raise ValueError(
                f"Cell ({i},{j}) outside {n_rows}x{n_cols} matrix"
            )
        rows[i] |= (1 << j)  # bit j = column j
    return rows


def unpack_rows_to_pairs(rows: List[int], n_rows: int, n_cols: int) -> List[Tuple[int, int]]:
    """
    Decode row masks to (row, col) index pairs in row-major order.

    Raises:
        ValueError: If row count mismatches or bits lie outside [0..n_cols-1].

    Invariant:
        unpack(pack(P)) == sorted(set(P)) (round-trip identity).
    """
    if len(rows) != n_rows:
        raise ValueError(f"Row count mismatch: expected {n_rows}, got {len(rows)}")

    out = []
    for i, mask in enumerate(rows):
        if mask >> n_cols != 0:
            raise ValueError(
                f"Row {i} has bits outside [0..{n_cols - 1}]: {mask:b}"
            )
        for j in iter_bits(mask):
            out.append((i, j))
    return out


def iter_bits(mask: int) -> Iterator[int]:
    """Yield the indices of set bits in ascending order."""
    while mask:
        low = mask & -mask
        yield low.bit_length() - 1
        mask ^= low


def popcount(mask: int) -> int:
    return bin(mask).count('1')


def full_mask(n: int) -> int:
    """Mask with the n low bits set."""
    return (1 << n) - 1
