"""
Naming utilities for safe code generation.

Resolves lexicon references to local type names, turns wire names into
identifiers, synthesizes names for inline objects and handles case
conversion and keyword conflicts for target languages.
"""

import re
from dataclasses import dataclass
from typing import Dict, Iterable, Set
from enum import Enum

# Characters a wire name may contain that identifiers may not
IDENTIFIER_REPLACEMENTS = ("-", ".")


class NamingCase(Enum):
    """Different naming case styles."""

    ORIGINAL = "original"  # createdAt (unchanged)
    SNAKE_CASE = "snake"  # created_at
    CAMEL_CASE = "camel"  # createdAt
    PASCAL_CASE = "pascal"  # CreatedAt


def reference_tail(reference: str) -> str:
    """
    Local name of a reference.

    "com.example.foo#bar" -> "bar", "#bar" -> "bar",
    "com.example.foo" -> "com.example.foo".
    """
    return reference.rsplit("#", 1)[-1]


def sanitize_identifier(name: str) -> str:
    """Replace characters that are illegal in identifiers with underscores."""
    for char in IDENTIFIER_REPLACEMENTS:
        name = name.replace(char, "_")
    return name


def capitalize_first(name: str) -> str:
    """Upper-case the first character only ("displayName" -> "DisplayName")."""
    return name[:1].upper() + name[1:]


def synthesize_nested_name(owner: str, property_name: str) -> str:
    """Type name for an inline object: owner + capitalized property."""
    return f"{owner}{capitalize_first(sanitize_identifier(property_name))}"


def normalize_reference(reference: str, document_id: str) -> str:
    """
    Canonical "<document-id>#<name>" form of a reference.

    A bare document id points at its "main" definition.
    """
    if reference.startswith("#"):
        return f"{document_id}{reference}"
    if "#" not in reference:
        return f"{reference}#main"
    return reference


def reference_document(reference: str, document_id: str) -> str:
    """Id of the document a reference points into."""
    return normalize_reference(reference, document_id).split("#", 1)[0]


class ReferenceIndex:
    """Names defined by every document loaded in one run."""

    def __init__(self):
        self._documents: Set[str] = set()
        self._definitions: Set[str] = set()

    @classmethod
    def from_documents(cls, documents: Iterable) -> "ReferenceIndex":
        index = cls()
        for document in documents:
            index.add_document(document.id, document.defs)
        return index

    def add_document(self, document_id: str, names: Iterable[str]):
        self._documents.add(document_id)
        for name in names:
            self._definitions.add(f"{document_id}#{name}")

    def knows_document(self, document_id: str) -> bool:
        return document_id in self._documents

    def is_unresolved(self, reference: str, document_id: str) -> bool:
        """
        True when a reference points into a loaded document that does not
        define it. References into documents outside the run are not judged.
        """
        target = normalize_reference(reference, document_id)
        if target.split("#", 1)[0] not in self._documents:
            return False
        return target not in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)


@dataclass(frozen=True)
class Identifier:
    """A generated identifier and the wire name it came from."""

    name: str
    original_name: str
    prefix: str = ""

    @property
    def declared(self) -> str:
        """Identifier as written in source, including any keyword escape."""
        return f"{self.prefix}{self.name}"

    @property
    def renamed(self) -> bool:
        return self.name != self.original_name


class NameSanitizer:
    """Handles identifier sanitization, case conversion and conflicts."""

    def __init__(
        self, reserved_words: Set[str] = None, unescapable_words: Set[str] = None
    ):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Keywords escaped with the language's escape prefix
            unescapable_words: Keywords that must be suffixed instead
        """
        self.reserved_words = reserved_words or set()
        self.unescapable_words = unescapable_words or set()
        self.escape_prefix = ""
        self.conflict_suffix = "_"
        self._name_cache: Dict[str, str] = {}
        self._used_names: Set[str] = set()

    def field_identifier(
        self, name: str, target_case: NamingCase = NamingCase.ORIGINAL
    ) -> Identifier:
        """
        Identifier for a property or parameter, unique within the current scope.

        Args:
            name: Wire name from the schema
            target_case: Desired case style

        Returns:
            Identifier carrying the original wire name
        """
        cache_key = f"{name}_{target_case.value}"
        converted = self._name_cache.get(cache_key)
        if converted is None:
            converted = self._convert_case(sanitize_identifier(name), target_case)
            converted = self._clean_basic(converted)
            self._name_cache[cache_key] = converted

        final_name = self._resolve_conflicts(converted)
        self._used_names.add(final_name)
        return Identifier(
            name=final_name, original_name=name, prefix=self._escape_prefix(final_name)
        )

    def _clean_basic(self, name: str) -> str:
        """Remove characters no identifier may contain."""
        cleaned = re.sub(r"[^a-zA-Z0-9_]", "_", name)

        if cleaned and cleaned[0].isdigit():
            cleaned = f"_{cleaned}"

        if not cleaned:
            cleaned = "field"

        return cleaned

    def _convert_case(self, name: str, target_case: NamingCase) -> str:
        """Convert name to target case style."""
        if target_case == NamingCase.SNAKE_CASE:
            return self._to_snake_case(name)
        elif target_case == NamingCase.CAMEL_CASE:
            return self._to_camel_case(name)
        elif target_case == NamingCase.PASCAL_CASE:
            return self._to_pascal_case(name)
        else:
            return name

    def _to_snake_case(self, name: str) -> str:
        """Convert to snake_case."""
        leading = len(name) - len(name.lstrip("_"))
        name = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", name)
        name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
        name = re.sub(r"_+", "_", name.lower())
        return "_" * leading + name.strip("_")

    def _to_camel_case(self, name: str) -> str:
        """Convert to camelCase."""
        parts = self._to_snake_case(name).split("_")
        parts = [part for part in parts if part]
        if not parts:
            return name
        return parts[0] + "".join(part.capitalize() for part in parts[1:])

    def _to_pascal_case(self, name: str) -> str:
        """Convert to PascalCase."""
        snake = self._to_snake_case(name)
        return "".join(part.capitalize() for part in snake.split("_") if part)

    def _escape_prefix(self, name: str) -> str:
        """Prefix that keeps a reserved word usable as an identifier."""
        if name in self.reserved_words and self.escape_prefix:
            return self.escape_prefix
        return ""

    def _resolve_conflicts(self, name: str) -> str:
        """Resolve conflicts with unescapable keywords and names already used."""
        if name in self.unescapable_words or (
            name in self.reserved_words and not self.escape_prefix
        ):
            name = f"{name}{self.conflict_suffix}"

        original_name = name
        counter = 1
        while name in self._used_names:
            name = f"{original_name}_{counter}"
            counter += 1

        return name

    def reset_used_names(self):
        """Start a new scope (one struct or enum)."""
        self._used_names.clear()

    def is_used(self, name: str) -> bool:
        return name in self._used_names
