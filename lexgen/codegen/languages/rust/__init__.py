"""
Rust code generator module.

Generates serde-annotated Rust structs and tagged enums from lexicon
definitions.
"""

from .generator import RustGenerator, create_rust_generator
from .naming import create_rust_sanitizer, rust_string_literal
from .types import NestedRecord, RustType, RustTypeConfig, RustTypeMapper

__all__ = [
    "RustGenerator",
    "RustType",
    "RustTypeConfig",
    "RustTypeMapper",
    "NestedRecord",
    "create_rust_sanitizer",
    "rust_string_literal",
    # Factory functions
    "create_rust_generator",
    "create_serde_generator",
    "create_snake_case_generator",
]


def create_serde_generator():
    """
    Create generator for a standalone module.

    Features:
    - Prelude with the serde use statement
    - Optional fields skipped when None
    - Records expanded into structs
    """
    return create_rust_generator(
        {
            "emit_prelude": True,
            "skip_serializing_none": True,
            "expand_records": True,
        }
    )


def create_snake_case_generator():
    """
    Create generator with idiomatic Rust field names.

    Fields are converted to snake_case; the wire names are kept through
    serde rename attributes.
    """
    return create_rust_generator({"field_case": "snake"})
