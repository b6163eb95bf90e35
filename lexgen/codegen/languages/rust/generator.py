"""
Rust code generator implementation.

Generates serde-annotated Rust structs and tagged enums from lexicon
definitions.
"""

from typing import Any, Dict, List, Optional, Set
from pathlib import Path

from ....logging_config import get_logger
from ...core.config import ConfigError, GeneratorConfig, load_config
from ...core.generator import CodeGenerator, DiagnosticKind
from ...core.naming import NamingCase, reference_tail
from ...core.schema import (
    ObjectType,
    RecordType,
    SchemaDocument,
    SchemaNode,
    UnionType,
)
from .naming import RUST_IDENTIFIER, create_rust_sanitizer, rust_string_literal
from .types import NestedRecord, RustType, RustTypeConfig, RustTypeMapper

logger = get_logger(__name__)

PRELUDE_USES = ["serde::{Deserialize, Serialize}"]


class RustGenerator(CodeGenerator):
    """Code generator for Rust structs and enums with serde attributes."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize Rust generator with configuration."""
        super().__init__(config)

        self.sanitizer = create_rust_sanitizer()
        self.template_engine.add_filter("rust_string", rust_string_literal)
        try:
            self.field_case = NamingCase(self.config.field_case)
        except ValueError as e:
            raise ConfigError(f"Invalid field_case: {self.config.field_case}") from e

        self.type_config = self._build_type_config()
        self.type_mapper = RustTypeMapper(self.type_config)

        # State tracking, per document
        self.generated_names: Set[str] = set()
        self.definition_names: Set[str] = set()

    def get_template_directory(self) -> Optional[Path]:
        """Return the Rust templates directory."""
        template_dir = Path(__file__).parent / "templates"
        return template_dir if template_dir.exists() else None

    def _build_type_config(self) -> RustTypeConfig:
        """Build RustTypeConfig from generator config."""
        custom = self.config.custom

        return RustTypeConfig(
            int_type=custom.get("int_type", "i64"),
            string_type=custom.get("string_type", "String"),
            bool_type=custom.get("bool_type", "bool"),
            bytes_type=custom.get("bytes_type", "Vec<u8>"),
            cid_link_type=custom.get("cid_link_type"),
            fallback_type=custom.get("fallback_type", "String"),
            type_overrides=dict(custom.get("type_overrides", {})),
        )

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "rust"

    @property
    def file_extension(self) -> str:
        """Return Rust file extension."""
        return ".rs"

    def generate(self, document: SchemaDocument) -> str:
        """Generate Rust code for every definition of a document, in order."""
        self.generated_names.clear()
        self.definition_names = set(document.defs)
        logger.debug(
            f"Generating Rust declarations for {len(document.defs)} "
            f"definitions of {document.id}"
        )

        blocks = []
        if self.config.emit_prelude:
            blocks.append(self._render_prelude(document))

        for name, node in document.defs.items():
            blocks.extend(self.generate_definition(name, node))

        return "\n".join(blocks)

    def generate_definition(self, name: str, node: SchemaNode) -> List[str]:
        """Generate the blocks for one definition plus its nested records."""
        if isinstance(node, ObjectType):
            return self._generate_record_blocks(name, node, name)

        if isinstance(node, UnionType):
            self.generated_names.add(name)
            return [self._render_enum(name, node)]

        if isinstance(node, RecordType) and self.config.expand_records:
            return self._generate_record_blocks(
                name, node.record, name, description=node.description
            )

        self.report(
            DiagnosticKind.UNSUPPORTED_CONSTRUCT,
            name,
            f"top-level '{node.kind}' is not mapped to a declaration",
        )
        context = {"name": name, "kind": node.kind}
        return [self.render_template("placeholder.rs.j2", context)]

    def _generate_record_blocks(
        self,
        struct_name: str,
        schema: ObjectType,
        definition: str,
        description: Optional[str] = None,
    ) -> List[str]:
        """A struct followed, depth-first, by the nested structs it introduced."""
        self.generated_names.add(struct_name)
        code, nested = self._render_struct(
            struct_name, schema, definition, description
        )

        blocks = [code]
        for record in nested:
            if (
                record.name in self.generated_names
                or record.name in self.definition_names
            ):
                self.report(
                    DiagnosticKind.SCHEMA_INCONSISTENCY,
                    definition,
                    f"nested type name '{record.name}' is already declared, "
                    f"not generating it again",
                )
                continue
            blocks.extend(
                self._generate_record_blocks(record.name, record.schema, definition)
            )
        return blocks

    def _render_struct(
        self,
        struct_name: str,
        schema: ObjectType,
        definition: str,
        description: Optional[str] = None,
    ):
        """Render one struct; returns (code, nested records in field order)."""
        self.sanitizer.reset_used_names()

        field_data_list = []
        nested: List[NestedRecord] = []

        for property_name, property_node in schema.properties.items():
            field_data, rust_type = self._generate_field_data(
                struct_name, property_name, property_node, schema
            )
            field_data_list.append(field_data)

            for hint in rust_type.validation_hints:
                self.report(
                    DiagnosticKind.UNSUPPORTED_CONSTRUCT,
                    definition,
                    f"{struct_name}.{property_name}: {hint}",
                )
            for record in rust_type.nested:
                seen = next((n for n in nested if n.name == record.name), None)
                if seen is None:
                    nested.append(record)
                elif seen.schema != record.schema:
                    self.report(
                        DiagnosticKind.SCHEMA_INCONSISTENCY,
                        definition,
                        f"{struct_name}.{property_name}: nested type name "
                        f"'{record.name}' is already used by a different object",
                    )

        template_context = {
            "struct_name": struct_name,
            "description": self._comment(
                description if description is not None else schema.description
            ),
            "derives": self.config.derives,
            "fields": field_data_list,
            "indent": self.config.indent,
        }
        return self.render_template("struct.rs.j2", template_context), nested

    def _generate_field_data(
        self,
        struct_name: str,
        property_name: str,
        node: SchemaNode,
        schema: ObjectType,
    ) -> tuple[Dict[str, Any], RustType]:
        """Generate field data for template using type system."""
        optional = schema.is_optional(property_name)
        rust_type = self.type_mapper.map_field_type(
            node, struct_name, property_name, optional=optional
        )

        identifier = self.sanitizer.field_identifier(property_name, self.field_case)

        attributes = []
        if identifier.renamed:
            attributes.append(self._serde_attribute("rename", property_name))
        if optional and self.config.skip_serializing_none:
            attributes.append(
                self._serde_attribute("skip_serializing_if", "Option::is_none")
            )

        field_data = {
            "name": identifier.declared,
            "type": rust_type.name,
            "original_name": property_name,
            "optional": optional,
            "description": self._comment(node.description),
            "attributes": attributes,
        }
        return field_data, rust_type

    def _render_enum(self, enum_name: str, union: UnionType) -> str:
        """Render a serde-tagged enum with one variant per union member."""
        self.sanitizer.reset_used_names()

        tails: List[str] = []
        variants: List[Dict[str, Any]] = []
        for reference in union.refs:
            tail = reference_tail(reference)
            if tail in tails:
                self.report(
                    DiagnosticKind.SCHEMA_INCONSISTENCY,
                    enum_name,
                    f"union members resolve to the same variant '{tail}' "
                    f"('{reference}')",
                )
                continue
            tails.append(tail)

            identifier = self.sanitizer.field_identifier(tail)
            attributes = []
            if identifier.renamed:
                attributes.append(self._serde_attribute("rename", tail))
            variants.append({"name": identifier.declared, "attributes": attributes})

        template_context = {
            "enum_name": enum_name,
            "description": self._comment(union.description),
            "derives": self.config.derives,
            "tag": self.config.union_tag,
            "variants": variants,
            "indent": self.config.indent,
        }
        return self.render_template("enum.rs.j2", template_context)

    def _render_prelude(self, document: SchemaDocument) -> str:
        """Render the generated-file header and use statements."""
        context = {"lexicon_id": document.id, "uses": PRELUDE_USES}
        return self.render_template("prelude.rs.j2", context)

    def _serde_attribute(self, key: str, value: str) -> str:
        return f"#[serde({key} = {rust_string_literal(value)})]"

    def _comment(self, description: Optional[str]) -> Optional[str]:
        return description if self.config.add_comments else None

    def validate_document(self, document: SchemaDocument):
        """Validate a document for Rust generation."""
        super().validate_document(document)

        for name in document.defs:
            if not RUST_IDENTIFIER.match(name):
                self.report(
                    DiagnosticKind.SCHEMA_INCONSISTENCY,
                    name,
                    f"definition name '{name}' is not a valid Rust identifier",
                )


# Factory functions


def create_rust_generator(config: Optional[Dict[str, Any]] = None) -> RustGenerator:
    """Create a Rust generator with default configuration plus overrides."""
    return RustGenerator(load_config("rust", custom_config=config))
