"""
Rust-specific naming utilities and sanitization.

Handles Rust keywords, raw identifiers and naming conventions.
"""

import re

from ...core.naming import NameSanitizer


# Strict and reserved keywords, usable as raw identifiers (r#type)
RUST_RESERVED_WORDS = {
    "abstract",
    "as",
    "async",
    "await",
    "become",
    "box",
    "break",
    "const",
    "continue",
    "do",
    "dyn",
    "else",
    "enum",
    "extern",
    "false",
    "final",
    "fn",
    "for",
    "gen",
    "if",
    "impl",
    "in",
    "let",
    "loop",
    "macro",
    "match",
    "mod",
    "move",
    "mut",
    "override",
    "priv",
    "pub",
    "ref",
    "return",
    "static",
    "struct",
    "trait",
    "true",
    "try",
    "type",
    "typeof",
    "unsafe",
    "unsized",
    "use",
    "virtual",
    "where",
    "while",
    "yield",
}

# Keywords that cannot be raw identifiers
RUST_UNESCAPABLE_WORDS = {"crate", "self", "Self", "super", "_"}

RAW_IDENTIFIER_PREFIX = "r#"

RUST_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


def create_rust_sanitizer() -> NameSanitizer:
    """Create a name sanitizer configured for Rust."""
    sanitizer = NameSanitizer(RUST_RESERVED_WORDS, RUST_UNESCAPABLE_WORDS)
    sanitizer.escape_prefix = RAW_IDENTIFIER_PREFIX
    return sanitizer


def rust_string_literal(value: str) -> str:
    """Quote a value as a Rust string literal."""
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'
