"""
lexgen code generation module.

Generates type declarations from lexicon schema documents.
"""

from .registry import (
    GeneratorRegistry,
    RegistryError,
    get_generator,
    get_language_info,
    list_all_language_info,
    list_supported_languages,
)
from .core.generator import (
    CodeGenerator,
    Diagnostic,
    DiagnosticKind,
    GeneratorError,
    GenerationResult,
    generate_code,
    generate_documents,
    process_document,
)
from .core.schema import SchemaDocument, StructuralDecodeError, decode_document
from .core.config import GeneratorConfig, ConfigManager, ConfigError, load_config


def generate_from_lexicon(payload, language="rust", config=None):
    """
    Generate code from one lexicon document.

    Args:
        payload: Decoded lexicon mapping, raw JSON text or SchemaDocument
        language: Target language name
        config: Generator configuration dict, path or GeneratorConfig

    Returns:
        GenerationResult with generated code and diagnostics
    """
    generator = get_generator(language, config)
    return generate_code(generator, payload)


def quick_generate(payload, language="rust", **options):
    """
    Quick code generation from a lexicon document.

    Args:
        payload: Decoded lexicon mapping or raw JSON text
        language: Target language
        **options: Generator options

    Returns:
        Generated code string
    """
    result = generate_from_lexicon(payload, language, options)

    if result.success:
        return result.code
    else:
        raise GeneratorError(f"Code generation failed: {result.error_message}")


__all__ = [
    "GeneratorRegistry",
    "RegistryError",
    "CodeGenerator",
    "Diagnostic",
    "DiagnosticKind",
    "GeneratorError",
    "GenerationResult",
    "SchemaDocument",
    "StructuralDecodeError",
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "decode_document",
    "generate_code",
    "generate_documents",
    "process_document",
    "generate_from_lexicon",
    "quick_generate",
    "get_generator",
    "get_language_info",
    "list_all_language_info",
    "list_supported_languages",
    "load_config",
]
