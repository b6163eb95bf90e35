"""
Base generator interface for all code generation targets.

Defines the contract that all language generators must implement, the
diagnostics they report and the helpers that run them over documents.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union
from pathlib import Path

from ...logging_config import get_logger
from .config import GeneratorConfig
from .naming import ReferenceIndex
from .schema import (
    ObjectType,
    ParamsType,
    SchemaDocument,
    StructuralDecodeError,
    UnionType,
    RefType,
    decode_document,
    iter_nodes,
)
from .templates import TemplateEngine, create_template_engine

logger = get_logger(__name__)


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


class DiagnosticKind(Enum):
    """Non-fatal findings reported alongside generated code."""

    SCHEMA_INCONSISTENCY = "schema_inconsistency"
    UNSUPPORTED_CONSTRUCT = "unsupported_construct"


@dataclass(frozen=True)
class Diagnostic:
    """A finding about one definition of a document."""

    kind: DiagnosticKind
    definition: str
    message: str

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.definition}: {self.message}"


class CodeGenerator(ABC):
    """Abstract base class for all code generators."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize generator with optional configuration."""
        self.config = config or GeneratorConfig()
        self.diagnostics: List[Diagnostic] = []
        self.reference_index: Optional[ReferenceIndex] = None
        self._template_engine = None
        self._setup_templates()

    def _setup_templates(self):
        """Setup template engine for this generator."""
        template_dir = self.get_template_directory()
        if template_dir:
            self._template_engine = create_template_engine(template_dir)
        else:
            self._template_engine = create_template_engine()

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the target language (e.g., 'rust')."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for generated files (e.g., '.rs')."""
        pass

    def get_template_directory(self) -> Optional[Path]:
        """
        Return the directory containing templates for this generator.

        Return None to use in-memory templates only.
        """
        return None

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._setup_templates()
        return self._template_engine

    @abstractmethod
    def generate(self, document: SchemaDocument) -> str:
        """
        Generate code for every definition of a document, in document order.

        Args:
            document: Decoded lexicon document

        Returns:
            Generated code as a string
        """
        pass

    @abstractmethod
    def generate_definition(self, name: str, node) -> List[str]:
        """
        Generate the declaration blocks for one top-level definition.

        Args:
            name: Definition name
            node: Definition node

        Returns:
            Blocks of code, the definition's own block first
        """
        pass

    def reset(self, reference_index: Optional[ReferenceIndex] = None):
        """Clear per-document state before a new run."""
        self.diagnostics = []
        self.reference_index = reference_index

    def report(self, kind: DiagnosticKind, definition: str, message: str):
        """Record a diagnostic and log it."""
        diagnostic = Diagnostic(kind, definition, message)
        self.diagnostics.append(diagnostic)
        if kind == DiagnosticKind.SCHEMA_INCONSISTENCY:
            logger.warning(str(diagnostic))
        else:
            logger.debug(str(diagnostic))

    def validate_document(self, document: SchemaDocument):
        """
        Report schema inconsistencies that do not stop generation.

        Language generators may override this to add their own checks.
        """
        index = self.reference_index
        for name, definition in document.defs.items():
            for path, node in iter_nodes(definition):
                where = f"{name}.{path}" if path else name

                if isinstance(node, (ObjectType, ParamsType)):
                    for missing in node.undeclared_names():
                        self.report(
                            DiagnosticKind.SCHEMA_INCONSISTENCY,
                            name,
                            f"'{missing}' is listed as required/nullable in "
                            f"{where} but is not a property",
                        )

                elif isinstance(node, UnionType):
                    if not node.refs:
                        self.report(
                            DiagnosticKind.SCHEMA_INCONSISTENCY,
                            name,
                            f"union {where} has no refs",
                        )
                    if index is not None:
                        for ref in node.refs:
                            if index.is_unresolved(ref, document.id):
                                self.report(
                                    DiagnosticKind.SCHEMA_INCONSISTENCY,
                                    name,
                                    f"union member '{ref}' in {where} does not "
                                    f"resolve to a known definition",
                                )

                elif isinstance(node, RefType) and index is not None:
                    if index.is_unresolved(node.ref, document.id):
                        self.report(
                            DiagnosticKind.SCHEMA_INCONSISTENCY,
                            name,
                            f"reference '{node.ref}' in {where} does not "
                            f"resolve to a known definition",
                        )

    def format_code(self, code: str) -> str:
        """
        Apply language-specific formatting to generated code.

        Args:
            code: Raw generated code

        Returns:
            Formatted code
        """
        lines = code.split("\n")
        formatted_lines = []
        blank_count = 0

        for line in lines:
            stripped = line.rstrip()
            if not stripped:
                blank_count += 1
                if blank_count <= 1:
                    formatted_lines.append("")
            else:
                blank_count = 0
                formatted_lines.append(stripped)

        return "\n".join(formatted_lines).strip("\n") + "\n"

    # Template helper methods

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """Render a template with context."""
        return self.template_engine.render_template(template_name, context)

    def template_exists(self, template_name: str) -> bool:
        """Check if a template exists."""
        return self.template_engine.template_exists(template_name)


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self,
        code: str,
        diagnostics: List[Diagnostic] = None,
        metadata: Dict[str, Any] = None,
    ):
        """
        Initialize generation result.

        Args:
            code: Generated code
            diagnostics: Non-fatal findings from generation
            metadata: Additional metadata about generation
        """
        self.code = code
        self.diagnostics = diagnostics or []
        self.metadata = metadata or {}
        self.success = True
        self.error_message: Optional[str] = None
        self.exception: Optional[Exception] = None

    @property
    def warnings(self) -> List[str]:
        return [str(diagnostic) for diagnostic in self.diagnostics]

    @classmethod
    def error(cls, message: str, exception: Exception = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls(code="")
        result.success = False
        result.error_message = message
        result.exception = exception
        return result


def process_document(
    generator: CodeGenerator,
    payload: Union[SchemaDocument, Dict[str, Any], str, bytes],
    reference_index: Optional[ReferenceIndex] = None,
) -> GenerationResult:
    """
    Decode (if needed) and generate one document.

    Raises:
        StructuralDecodeError: If the document is malformed
    """
    if isinstance(payload, SchemaDocument):
        document = payload
    else:
        document = decode_document(payload)

    if reference_index is None:
        reference_index = ReferenceIndex.from_documents([document])

    generator.reset(reference_index)
    generator.validate_document(document)
    code = generator.format_code(generator.generate(document))

    metadata = {
        "language": generator.language_name,
        "file_extension": generator.file_extension,
        "lexicon_id": document.id,
        "definition_count": len(document.defs),
        "diagnostic_count": len(generator.diagnostics),
    }

    return GenerationResult(code, list(generator.diagnostics), metadata)


def generate_code(
    generator: CodeGenerator,
    payload: Union[SchemaDocument, Dict[str, Any], str, bytes],
    reference_index: Optional[ReferenceIndex] = None,
) -> GenerationResult:
    """
    Generate code for one document with error handling.

    A malformed document yields a failed result instead of an exception.
    """
    try:
        return process_document(generator, payload, reference_index)
    except StructuralDecodeError as e:
        logger.error(f"Cannot decode lexicon: {e}")
        return GenerationResult.error(f"Invalid lexicon document: {e}", exception=e)
    except GeneratorError as e:
        logger.error(f"Code generation failed: {e}")
        return GenerationResult.error(f"Code generation failed: {e}", exception=e)


def generate_documents(
    generator: CodeGenerator,
    payloads: Iterable[Tuple[str, Union[Dict[str, Any], str, bytes]]],
) -> List[Tuple[str, GenerationResult]]:
    """
    Generate every document of a run, in input order.

    All documents are decoded first so references between them can be
    checked. A document that fails to decode does not affect the others.

    Args:
        generator: Code generator instance
        payloads: (source name, payload) pairs

    Returns:
        (source name, GenerationResult) pairs in input order
    """
    decoded: List[Tuple[str, Union[SchemaDocument, GenerationResult]]] = []
    for source, payload in payloads:
        try:
            document = (
                payload
                if isinstance(payload, SchemaDocument)
                else decode_document(payload)
            )
            decoded.append((source, document))
        except StructuralDecodeError as e:
            logger.error(f"Cannot decode {source}: {e}")
            decoded.append(
                (
                    source,
                    GenerationResult.error(
                        f"Invalid lexicon document {source}: {e}", exception=e
                    ),
                )
            )

    index = ReferenceIndex.from_documents(
        item for _, item in decoded if isinstance(item, SchemaDocument)
    )

    results = []
    for source, item in decoded:
        if isinstance(item, GenerationResult):
            results.append((source, item))
            continue
        logger.info(f"Generating {generator.language_name} code for {item.id}")
        results.append((source, generate_code(generator, item, index)))

    return results
