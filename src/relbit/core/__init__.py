"""
Core foundation: receipts, hashing, canonical bytes, parameter registry.

Frozen constants and deterministic byte-level encodings.
"""

from .registry import param_registry, RegistryError
from .hashing import blake3_hash, rows_fingerprint, mask_fingerprint
from .bytesio import (
    serialize_rows_be_row_major,
    serialize_mask_be,
    SerializationError
)
from .receipts import (
    Receipts,
    assert_double_run_equal,
    ReceiptError,
    DeterminismError
)

__all__ = [
    # Registry
    "param_registry",
    "RegistryError",

    # Hashing
    "blake3_hash",
    "rows_fingerprint",
    "mask_fingerprint",

    # Serialization
    "serialize_rows_be_row_major",
    "serialize_mask_be",
    "SerializationError",

    # Receipts
    "Receipts",
    "assert_double_run_equal",
    "ReceiptError",
    "DeterminismError",
]
