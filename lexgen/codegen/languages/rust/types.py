"""
Rust-specific type system for code generation.

Maps lexicon schema nodes in field position to Rust types. The mapping is
total: constructs without a structural mapping fall back to a configured
type and carry a hint explaining the fallback.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from ...core.naming import reference_tail, synthesize_nested_name
from ...core.schema import (
    ArrayType,
    BooleanType,
    BytesType,
    CidLinkType,
    IntegerType,
    ObjectType,
    RefType,
    SchemaNode,
    StringType,
)

# Suffix for inline objects used as array items
ARRAY_ITEM_SUFFIX = "Item"


@dataclass(frozen=True)
class NestedRecord:
    """An inline object that needs its own struct declaration."""

    name: str
    schema: ObjectType


@dataclass(frozen=True)
class RustType:
    """
    Immutable representation of a Rust type with all metadata.

    Carries the nested records a field type introduces and the hints
    produced while mapping it.
    """

    name: str  # The Rust type (e.g. "Option<Vec<String>>")
    base_name: str = field(default="")  # Without the Option wrapper
    is_option: bool = field(default=False)
    nested: Tuple[NestedRecord, ...] = field(default=())
    validation_hints: Tuple[str, ...] = field(default=())

    def __post_init__(self):
        if not self.base_name:
            object.__setattr__(self, "base_name", self.name)

    def as_option(self) -> "RustType":
        """Return the Option<...> version of this type."""
        if self.is_option:
            return self

        return RustType(
            name=f"Option<{self.name}>",
            base_name=self.base_name,
            is_option=True,
            nested=self.nested,
            validation_hints=self.validation_hints,
        )


@dataclass
class RustTypeConfig:
    """Configuration for Rust type mapping behavior."""

    int_type: str = "i64"
    string_type: str = "String"
    bool_type: str = "bool"
    bytes_type: str = "Vec<u8>"
    cid_link_type: Optional[str] = None  # defaults to string_type
    fallback_type: str = "String"

    # Sequence wrapper
    sequence_template: str = "Vec<{}>"

    # Custom type overrides keyed by lexicon kind ("cid-link", "blob", ...)
    type_overrides: Dict[str, str] = field(default_factory=dict)


class RustTypeMapper:
    """
    Central engine for mapping schema nodes in field position to Rust types.
    """

    def __init__(self, config: Optional[RustTypeConfig] = None):
        """Initialize with type configuration."""
        self.config = config or RustTypeConfig()
        self._primitive_types = self._build_primitive_type_map()

    def _build_primitive_type_map(self) -> Dict[type, str]:
        """Build mapping of primitive node classes to Rust types."""
        return {
            StringType: self.config.string_type,
            IntegerType: self.config.int_type,
            BooleanType: self.config.bool_type,
            BytesType: self.config.bytes_type,
            CidLinkType: self.config.cid_link_type or self.config.string_type,
        }

    def map_field_type(
        self,
        node: SchemaNode,
        owner: str,
        property_name: str,
        optional: bool = False,
    ) -> RustType:
        """
        Map a property node to a Rust type.

        Args:
            node: The property's schema node
            owner: Name of the enclosing declaration
            property_name: Wire name of the property
            optional: Whether to wrap the type in Option<...>

        Returns:
            Complete RustType with all metadata
        """
        base_type = self._map_base_type(
            node, synthesize_nested_name(owner, property_name)
        )
        return base_type.as_option() if optional else base_type

    def _map_base_type(self, node: SchemaNode, name_hint: str) -> RustType:
        """Map the base type without considering optionality."""
        if node.kind in self.config.type_overrides:
            return RustType(name=self.config.type_overrides[node.kind])

        primitive = self._primitive_types.get(type(node))
        if primitive is not None:
            return RustType(name=primitive)

        if isinstance(node, RefType):
            return RustType(name=reference_tail(node.ref))

        if isinstance(node, ArrayType):
            return self._map_array_type(node, name_hint)

        if isinstance(node, ObjectType):
            return RustType(
                name=name_hint, nested=(NestedRecord(name=name_hint, schema=node),)
            )

        return self._get_fallback_type(node)

    def _map_array_type(self, node: ArrayType, name_hint: str) -> RustType:
        """Map array types; items follow the same table."""
        element = self._map_base_type(node.items, f"{name_hint}{ARRAY_ITEM_SUFFIX}")
        return RustType(
            name=self.config.sequence_template.format(element.name),
            nested=element.nested,
            validation_hints=element.validation_hints,
        )

    def _get_fallback_type(self, node: SchemaNode) -> RustType:
        """Get fallback type for constructs with no structural mapping."""
        return RustType(
            name=self.config.fallback_type,
            validation_hints=(
                f"'{node.kind}' has no field mapping, "
                f"using fallback {self.config.fallback_type}",
            ),
        )

    def get_validation_summary(self, types: List[RustType]) -> List[str]:
        """Get all validation hints from a list of types."""
        all_hints = []
        for rust_type in types:
            all_hints.extend(rust_type.validation_hints)
        return all_hints
