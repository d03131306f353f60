"""
Core Component: Canonical Byte Encoding (Big-Endian, Row-Major)

Stable, deterministic byte encodings of relation matrices and subset masks.
These bytes are hashing preimages for fingerprints and receipts only; they
are never written to disk or sent anywhere.

Bit mapping (frozen):
  - Within each byte: bit 7 → col 0, bit 6 → col 1, ..., bit 0 → col 7
  - Row-major order: rows serialized sequentially
  - Big-endian for multi-byte integers (dimensions)

No timestamps, no padding beyond ceil(n_cols/8) per row.
"""

import math
from typing import List

_MAX_DIM = 0xFFFFFFFF


def serialize_rows_be_row_major(rows: List[int], n_rows: int, n_cols: int) -> bytes:
    """
    Encode a boolean matrix given as row masks.

    Format (exact):
      - 4 ASCII bytes tag: b"REL1"
      - 4 bytes n_rows (uint32, big-endian)
      - 4 bytes n_cols (uint32, big-endian)
      - Payload: for each row r, ceil(n_cols/8) bytes with
        bit 7 → col 0, bit 6 → col 1, ..., next byte continues at col 8.

    Args:
        rows: List of n_rows row masks (bit j of rows[r] = cell (r, j)).
        n_rows: Number of rows (domain size).
        n_cols: Number of columns (codomain size).

    Returns:
        bytes: Deterministic serialization.

    Raises:
        SerializationError: If row count mismatches or bits lie outside [0..n_cols-1].
    """
    if len(rows) != n_rows:
        raise SerializationError(f"Row count mismatch: expected {n_rows}, got {len(rows)}")
    if n_rows > _MAX_DIM or n_cols > _MAX_DIM:
        raise SerializationError(f"Dimensions too large: rows={n_rows}, cols={n_cols}")

    stream = bytearray()
    stream.extend(b"REL1")
    stream.extend(n_rows.to_bytes(4, byteorder='big'))
    stream.extend(n_cols.to_bytes(4, byteorder='big'))

    for r in range(n_rows):
        row_mask = rows[r]
        if row_mask < 0 or (row_mask >> n_cols) != 0:
            raise SerializationError(
                f"Row {r} has bits outside [0..{n_cols - 1}]: {row_mask:b}"
            )
        stream.extend(_mask_to_bytes(row_mask, n_cols))

    return bytes(stream)


def serialize_mask_be(mask: int, n: int) -> bytes:
    """
    Encode a subset mask over a carrier of size n.

    Format (exact):
      - 4 ASCII bytes tag: b"SUB1"
      - 4 bytes n (uint32, big-endian)
      - ceil(n/8) bytes with bit 7 → element 0

    Raises:
        SerializationError: If n is too large or the mask has bits at or above n.
    """
    if n > _MAX_DIM:
        raise SerializationError(f"Carrier too large: n={n}")
    if mask < 0 or (mask >> n) != 0:
        raise SerializationError(f"Subset mask has bits outside [0..{n - 1}]: {mask:b}")

    stream = bytearray()
    stream.extend(b"SUB1")
    stream.extend(n.to_bytes(4, byteorder='big'))
    stream.extend(_mask_to_bytes(mask, n))
    return bytes(stream)


def _mask_to_bytes(mask: int, width: int) -> bytearray:
    out = bytearray(math.ceil(width / 8))
    for col in range(width):
        if mask & (1 << col):
            out[col // 8] |= (1 << (7 - (col % 8)))  # bit 7 → col 0
    return out


class SerializationError(Exception):
    """Raised when canonical encoding meets invalid dimensions or stray bits."""
    pass
