"""
Core Component: Parameter Registry

Frozen constants for deterministic relation-algebra evaluation.
All global parameters (pair order, witness scan order, row encoding,
default representation, suite and parity-guard defaults) are defined here with exact values.

No randomness, no environment leakage, no optionals.
"""


REGISTRY_VERSION = "1.0"


def param_registry() -> dict:
    """
    Returns a frozen mapping of all global constants used by the engine.

    Keys and values are JSON-serializable primitives or lists.
    This registry is hashed into every section receipt to prove parametric consistency.

    Returns:
        dict: Frozen parameter mapping with exact keys and values.

    Raises:
        RegistryError: If any required key is missing (internal consistency check).
    """
    registry = {
        # Core version binding
        "registry_version": REGISTRY_VERSION,

        # Pairs are always emitted row-major over carrier insertion order
        "pair_order": "row-major-carrier-index",

        # Counterexample search order (first violation wins)
        "witness_scan_order": "lex-carrier-index",

        # Bitset rows: one Python int per domain element, bit j = codomain j
        "row_encoding": "int-lsb-col0",

        # Representation selection
        "default_strategy": "pair",
        "strategies": ["pair", "bit"],

        # Hashing
        "hash_algo": "BLAKE3",

        # Byte frame tags for canonical encodings (ASCII 4-byte tags)
        "byte_frame_tags": {
            "REL": "REL1",
            "SUBSET": "SUB1"
        },

        # Seeded law suite defaults (densities in percent; no floats)
        "suite_seed": 42,
        "suite_samples": 10,
        "suite_rel_density_pct": 30,
        "suite_subset_density_pct": 50,

        # Runtime parity guard defaults (sample rate in percent; no floats)
        "parity_sample_pct": 10,
        "parity_max_input_size": 100
    }

    # Consistency check: ensure all required keys are present
    required_keys = {
        "registry_version", "pair_order", "witness_scan_order",
        "row_encoding", "default_strategy", "strategies", "hash_algo",
        "byte_frame_tags", "suite_seed", "suite_samples",
        "suite_rel_density_pct", "suite_subset_density_pct",
        "parity_sample_pct", "parity_max_input_size"
    }

    actual_keys = set(registry.keys())
    if actual_keys != required_keys:
        missing = required_keys - actual_keys
        extra = actual_keys - required_keys
        raise RegistryError(
            f"param_registry() key mismatch. Missing: {missing}, Extra: {extra}"
        )

    if registry["default_strategy"] not in registry["strategies"]:
        raise RegistryError(
            f"default_strategy '{registry['default_strategy']}' "
            f"not in strategies {registry['strategies']}"
        )

    return registry


class RegistryError(Exception):
    """Raised when param_registry() has missing or unexpected keys."""
    pass
