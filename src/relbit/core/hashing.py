"""
Core Component: BLAKE3 Hashing & Fingerprints

BLAKE3 over canonical byte encodings. A fingerprint identifies a relation
matrix or subset mask by content only: carrier identity and representation
never reach the hashed bytes.
"""

from typing import List

import blake3

from .bytesio import serialize_rows_be_row_major, serialize_mask_be


def blake3_hash(data: bytes) -> str:
    """
    Hex-encoded BLAKE3-256 digest (64 lowercase hex chars).

    Example:
        >>> len(blake3_hash(b"REL1"))
        64
    """
    return blake3.blake3(data).hexdigest()


def rows_fingerprint(rows: List[int], n_rows: int, n_cols: int) -> str:
    """Digest of a row-mask matrix via its REL1 encoding."""
    return blake3_hash(serialize_rows_be_row_major(rows, n_rows, n_cols))


def mask_fingerprint(mask: int, n: int) -> str:
    """Digest of a subset mask via its SUB1 encoding."""
    return blake3_hash(serialize_mask_be(mask, n))
