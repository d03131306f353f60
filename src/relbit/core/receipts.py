"""
Core Component: Section Receipts & Double-Run Checker

A Receipts section collects the observable outcome of one deterministic run
(a law suite, a parity sweep) as ordered key/value pairs. Its digest binds
the parameter registry and commits to the payload with a BLAKE3 section_hash,
so two runs over the same inputs can be compared by hash alone.

Payload values are restricted to JSON scalars (int, bool, str, None) and
lists, tuples and string-keyed dicts of them. Floats, carrier uids and object
reprs never enter a receipt.
"""

import json
from typing import Any, Callable, Optional

from .registry import param_registry, REGISTRY_VERSION
from .hashing import blake3_hash

_MISSING = "<MISSING>"


class Receipts:
    """Ordered, validated key/value log for one section."""

    def __init__(self, section: str):
        self.section = section
        self.payload = {}

    def put(self, key: str, value: Any) -> None:
        """
        Record value under key.

        Raises:
            ReceiptError: If key was already recorded or value has a forbidden type.
        """
        if key in self.payload:
            raise ReceiptError(f"Duplicate key in receipts: '{key}'")
        _validate_receipt_value(value, key)
        self.payload[key] = value

    def extend(self, items: dict) -> None:
        """put() every item, in the dict's order."""
        for key, value in items.items():
            self.put(key, value)

    def digest(self) -> dict:
        """
        Section digest:

            section, registry_version, param_registry_hash, payload,
            section_hash = blake3(stable_json(everything before it))
        """
        body = {
            "section": self.section,
            "registry_version": REGISTRY_VERSION,
            "param_registry_hash": blake3_hash(_stable_json_bytes(param_registry())),
            "payload": dict(self.payload),
        }
        body["section_hash"] = blake3_hash(_stable_json_bytes(body))
        return body


def assert_double_run_equal(build_section_callable: Callable[[], Receipts]) -> None:
    """
    Build the section twice and require identical section hashes.

    Raises:
        DeterminismError: With the first payload key (run A's order, then keys
            only run B has) whose values differ.

    Example:
        >>> def build():
        ...     r = Receipts("suite")
        ...     r.put("total", 3)
        ...     return r
        >>> assert_double_run_equal(build)
    """
    digest_a = build_section_callable().digest()
    digest_b = build_section_callable().digest()
    if digest_a["section_hash"] == digest_b["section_hash"]:
        return

    key, value_a, value_b = _first_payload_difference(digest_a["payload"], digest_b["payload"])
    raise DeterminismError(
        section=digest_a["section"],
        first_differing_key=key,
        value_a=value_a,
        value_b=value_b,
        hash_a=digest_a["section_hash"],
        hash_b=digest_b["section_hash"]
    )


def _first_payload_difference(payload_a: dict, payload_b: dict) -> tuple:
    keys = list(payload_a) + [k for k in payload_b if k not in payload_a]
    for key in keys:
        value_a = payload_a.get(key, _MISSING)
        value_b = payload_b.get(key, _MISSING)
        if value_a != value_b:
            return key, value_a, value_b
    # Same payloads but different hashes: the section name itself differs.
    return None, None, None


def _stable_json_bytes(obj: Any) -> bytes:
    """Sorted keys, compact separators, raw UTF-8."""
    return json.dumps(obj, sort_keys=True, ensure_ascii=False, separators=(',', ':')).encode('utf-8')


def _validate_receipt_value(value: Any, path: str) -> None:
    if value is None or isinstance(value, (bool, int, str)):
        return
    if isinstance(value, float):
        raise ReceiptError(f"Floats forbidden in receipts (key: '{path}').")
    if isinstance(value, (list, tuple)):
        for i, item in enumerate(value):
            _validate_receipt_value(item, f"{path}[{i}]")
        return
    if isinstance(value, dict):
        for k, v in value.items():
            if not isinstance(k, str):
                raise ReceiptError(f"Dict keys must be strings in receipts (key: '{path}', dict_key: {k!r})")
            _validate_receipt_value(v, f"{path}.{k}")
        return
    raise ReceiptError(
        f"Invalid type in receipts: {type(value).__name__} (key: '{path}'). "
        f"Allowed: int, bool, str, None, list, tuple, dict."
    )


class ReceiptError(Exception):
    """Raised on a duplicate key or a forbidden value type."""
    pass


class DeterminismError(Exception):
    """Raised when two runs of the same section hash differently."""

    def __init__(
        self,
        section: str,
        first_differing_key: Optional[str],
        value_a: Any,
        value_b: Any,
        hash_a: str,
        hash_b: str
    ):
        self.section = section
        self.first_differing_key = first_differing_key
        self.value_a = value_a
        self.value_b = value_b
        self.hash_a = hash_a
        self.hash_b = hash_b
        super().__init__(
            f"Double-run hash mismatch in section '{section}'.\n"
            f"  First differing key: '{first_differing_key}'\n"
            f"  Value A: {value_a}\n"
            f"  Value B: {value_b}\n"
            f"  Hash A: {hash_a}\n"
            f"  Hash B: {hash_b}"
        )
