"""
Core code generation components.

Provides the lexicon schema model, naming resolver and base classes used
by all language generators.
"""

from .generator import (
    CodeGenerator,
    Diagnostic,
    DiagnosticKind,
    GeneratorError,
    GenerationResult,
    generate_code,
    generate_documents,
    process_document,
)
from .schema import (
    SchemaDocument,
    SchemaNode,
    StructuralDecodeError,
    decode_document,
    decode_node,
)
from .naming import (
    NameSanitizer,
    NamingCase,
    ReferenceIndex,
    reference_tail,
    sanitize_identifier,
    synthesize_nested_name,
)
from .config import GeneratorConfig, ConfigManager, ConfigError, load_config
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Base generator interface
    "CodeGenerator",
    "Diagnostic",
    "DiagnosticKind",
    "GeneratorError",
    "GenerationResult",
    "generate_code",
    "generate_documents",
    "process_document",
    # Schema model
    "SchemaDocument",
    "SchemaNode",
    "StructuralDecodeError",
    "decode_document",
    "decode_node",
    # Naming
    "NameSanitizer",
    "NamingCase",
    "ReferenceIndex",
    "reference_tail",
    "sanitize_identifier",
    "synthesize_nested_name",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
