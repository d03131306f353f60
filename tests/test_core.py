#!/usr/bin/env python3
"""
Core Tests: registry, hashing, canonical bytes, receipts

Tests:
1. Registry keys are exact and the default strategy is allowed
2. BLAKE3 hashing is stable hex
3. Canonical row/mask encodings are byte-exact
4. Receipts reject duplicates and floats; digests are reproducible
5. Double-run checker reports the first differing key
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from relbit.core import (
    param_registry,
    blake3_hash,
    rows_fingerprint,
    mask_fingerprint,
    serialize_rows_be_row_major,
    serialize_mask_be,
    SerializationError,
    Receipts,
    assert_double_run_equal,
    ReceiptError,
    DeterminismError
)


def test_registry_exact_keys():
    registry = param_registry()
    assert registry["registry_version"] == "1.0"
    assert registry["pair_order"] == "row-major-carrier-index"
    assert registry["row_encoding"] == "int-lsb-col0"
    assert registry["default_strategy"] in registry["strategies"]
    assert registry["strategies"] == ["pair", "bit"]
    assert registry["byte_frame_tags"] == {"REL": "REL1", "SUBSET": "SUB1"}
    assert registry["parity_sample_pct"] == 10
    assert registry["parity_max_input_size"] == 100


def test_registry_has_no_floats():
    """Suite densities are stored as integer percentages."""
    for key, value in param_registry().items():
        assert not isinstance(value, float), f"float in registry at {key}"


def test_blake3_hash_is_hex_and_stable():
    h1 = blake3_hash(b"relbit")
    h2 = blake3_hash(b"relbit")
    assert h1 == h2
    assert len(h1) == 64
    int(h1, 16)
    assert blake3_hash(b"relbit") != blake3_hash(b"relbiT")


def test_serialize_rows_exact_bytes():
    # 2x3 matrix: row 0 = {0, 2}, row 1 = {1}
    data = serialize_rows_be_row_major([0b101, 0b010], 2, 3)
    assert data[:4] == b"REL1"
    assert data[4:8] == (2).to_bytes(4, "big")
    assert data[8:12] == (3).to_bytes(4, "big")
    assert data[12:] == bytes([0b10100000, 0b01000000])


def test_serialize_rows_spans_bytes():
    data = serialize_rows_be_row_major([1 << 8], 1, 9)
    assert data[12:] == bytes([0x00, 0x80])


def test_serialize_rows_rejects_stray_bits():
    with pytest.raises(SerializationError):
        serialize_rows_be_row_major([0b1000], 1, 3)
    with pytest.raises(SerializationError):
        serialize_rows_be_row_major([0, 0], 1, 3)


def test_serialize_mask_exact_bytes():
    data = serialize_mask_be(0b1, 9)
    assert data == b"SUB1" + (9).to_bytes(4, "big") + bytes([0x80, 0x00])


def test_serialize_mask_empty_carrier():
    assert serialize_mask_be(0, 0) == b"SUB1" + (0).to_bytes(4, "big")
    with pytest.raises(SerializationError):
        serialize_mask_be(1, 0)


def test_receipts_duplicate_key():
    r = Receipts("test")
    r.put("a", 1)
    with pytest.raises(ReceiptError, match="Duplicate"):
        r.put("a", 2)


def test_receipts_forbid_floats():
    r = Receipts("test")
    with pytest.raises(ReceiptError, match="Floats"):
        r.put("x", 0.5)
    with pytest.raises(ReceiptError):
        r.put("nested", {"inner": [1, 2.0]})


def test_receipts_forbid_objects():
    r = Receipts("test")
    with pytest.raises(ReceiptError):
        r.put("obj", object())
    with pytest.raises(ReceiptError):
        r.put("keys", {1: "non-string key"})


def test_receipts_digest_shape_and_determinism():
    def build():
        r = Receipts("section")
        r.put("x", 1)
        r.put("pairs", [[0, 1], [1, 2]])
        return r

    d1 = build().digest()
    d2 = build().digest()
    assert d1 == d2
    assert d1["section"] == "section"
    assert d1["registry_version"] == "1.0"
    assert d1["payload"] == {"x": 1, "pairs": [[0, 1], [1, 2]]}
    assert len(d1["section_hash"]) == 64


def test_digest_depends_on_payload():
    a = Receipts("s")
    a.put("x", 1)
    b = Receipts("s")
    b.put("x", 2)
    assert a.digest()["section_hash"] != b.digest()["section_hash"]


def test_double_run_equal_passes():
    def build():
        r = Receipts("stable")
        r.put("value", 42)
        return r

    assert_double_run_equal(build)


def test_double_run_equal_reports_first_difference():
    counter = iter(range(10))

    def build():
        r = Receipts("unstable")
        r.put("fixed", "same")
        r.put("counter", next(counter))
        return r

    with pytest.raises(DeterminismError) as exc_info:
        assert_double_run_equal(build)

    err = exc_info.value
    assert err.section == "unstable"
    assert err.first_differing_key == "counter"
    assert (err.value_a, err.value_b) == (0, 1)
    assert err.hash_a != err.hash_b


def test_receipts_extend_keeps_order():
    r = Receipts("ordered")
    r.extend({"b": 1, "a": [True, None]})
    assert list(r.payload) == ["b", "a"]
    with pytest.raises(ReceiptError):
        r.extend({"c": 2, "b": 3})


def test_fingerprint_helpers():
    assert rows_fingerprint([0b01], 1, 2) == blake3_hash(serialize_rows_be_row_major([0b01], 1, 2))
    assert mask_fingerprint(0b10, 2) == blake3_hash(serialize_mask_be(0b10, 2))
    # same bits, different shape
    assert rows_fingerprint([0b1], 1, 1) != rows_fingerprint([0b1], 1, 2)
