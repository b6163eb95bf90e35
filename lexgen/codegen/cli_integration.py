"""
CLI integration for code generation functionality.

Provides the command-line interface for the codegen module.
"""

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Tuple

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from ..logging_config import get_logger
from ..utils import LexiconLoaderError, load_lexicon_source
from . import (
    ConfigError,
    GenerationResult,
    GeneratorConfig,
    GeneratorError,
    RegistryError,
    generate_documents,
    get_generator,
    list_all_language_info,
    list_supported_languages,
    load_config,
)
from .registry import get_registry, is_language_supported
from .core.config import VALID_FIELD_CASES, get_config_manager

logger = get_logger(__name__)


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


# Generated code goes to stdout, everything else to stderr
console = Console()
err_console = Console(stderr=True, soft_wrap=True)


def add_codegen_args(parser: argparse.ArgumentParser):
    """Add code generation arguments to an existing CLI parser."""

    parser.add_argument(
        "sources",
        nargs="*",
        metavar="SOURCE",
        help="Lexicon JSON files or URLs, processed in order",
    )
    parser.add_argument(
        "--stdin", action="store_true", help="Read one lexicon from standard input"
    )

    codegen_group = parser.add_argument_group("code generation")
    codegen_group.add_argument(
        "--language",
        "-l",
        default="rust",
        help="Target language (default: rust; see --list-languages)",
    )
    codegen_group.add_argument(
        "--output",
        "-o",
        metavar="FILE",
        help="Output file for generated code (default: stdout)",
    )
    codegen_group.add_argument(
        "--config",
        "--options-override",
        dest="config",
        metavar="FILE",
        help="JSON or YAML file overriding generator options",
    )

    common_group = parser.add_argument_group("generation options")
    common_group.add_argument(
        "--prelude",
        action="store_true",
        help="Start the output with a header comment and use declarations",
    )
    common_group.add_argument(
        "--no-comments",
        action="store_true",
        help="Don't turn descriptions into doc comments",
    )
    common_group.add_argument(
        "--field-case",
        choices=sorted(VALID_FIELD_CASES),
        help="Case style for field names (default: original)",
    )
    common_group.add_argument(
        "--expand-records",
        action="store_true",
        help="Generate structs for top-level record definitions",
    )
    common_group.add_argument(
        "--skip-none",
        action="store_true",
        help="Skip serializing optional fields that are None",
    )

    info_group = parser.add_argument_group("information")
    info_group.add_argument(
        "--list-languages",
        action="store_true",
        help="List supported target languages and exit",
    )
    info_group.add_argument(
        "--show-config",
        action="store_true",
        help="Show the effective generator configuration and exit",
    )
    info_group.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Increase log output (-v info, -vv debug)",
    )


def handle_codegen_command(args: argparse.Namespace) -> int:
    """
    Handle code generation from CLI arguments.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code (0 when every document generated, 1 otherwise)
    """
    try:
        if getattr(args, "list_languages", False):
            return _list_languages()

        if not _validate_language(args.language):
            return 1
        language = get_registry().resolve(args.language)

        config = _build_config(args, language)

        if getattr(args, "show_config", False):
            return _show_config(language, config)

        sources = list(args.sources or [])
        if getattr(args, "stdin", False):
            sources.append("-")
        if not sources:
            raise CLIError("Input source required (SOURCE or --stdin)")

        return _generate_and_output(sources, language, config, args)

    except CLIError as e:
        err_console.print(f"[red]✗ Error:[/red] {e}")
        return 1
    except (GeneratorError, RegistryError) as e:
        err_console.print(f"[red]✗[/red] {e}")
        return 1


def _list_languages() -> int:
    """List supported languages with details."""
    language_info = list_all_language_info()

    if not language_info:
        console.print("[yellow]⚠️ No code generators available[/yellow]")
        return 0

    table = Table(
        title="📋 Supported Languages", box=box.ROUNDED, title_style="bold cyan"
    )
    table.add_column("Language", style="bold green", no_wrap=True)
    table.add_column("Extension", style="cyan")
    table.add_column("Generator Class", style="dim")
    table.add_column("Aliases", style="blue")

    for lang_name, info in sorted(language_info.items()):
        aliases = ", ".join(info["aliases"]) if info["aliases"] else "[dim]none[/dim]"
        table.add_row(lang_name, info["file_extension"], info["class"], aliases)

    console.print(table)
    console.print(
        Panel(
            "[bold]Usage:[/bold] lexgen [dim]app.bsky.actor.profile.json[/dim] "
            "--language [cyan]LANGUAGE[/cyan]",
            title="💡 Quick Start",
            border_style="blue",
        )
    )
    return 0


def _show_config(language: str, config: GeneratorConfig) -> int:
    """Print the effective configuration as a table."""
    table = Table(
        title=f"⚙️  {language} configuration",
        box=box.SIMPLE,
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Setting", style="bold")
    table.add_column("Value", style="green")

    for key, value in config.to_dict().items():
        table.add_row(key, str(value))

    console.print(table)
    return 0


def _validate_language(language: str) -> bool:
    """Validate that a language is supported."""
    if is_language_supported(language):
        return True

    supported = list_supported_languages()
    err_console.print(f"[red]✗ Unsupported language '{language}'[/red]")
    err_console.print(f"[dim]Supported languages: {', '.join(supported)}[/dim]")
    return False


def _build_config(args: argparse.Namespace, language: str) -> GeneratorConfig:
    """Build configuration from an override file and CLI arguments."""
    config_dict: Dict[str, Any] = {}

    if getattr(args, "output", None):
        config_dict["output_file"] = args.output

    if getattr(args, "prelude", False):
        config_dict["emit_prelude"] = True

    if getattr(args, "no_comments", False):
        config_dict["add_comments"] = False

    if getattr(args, "field_case", None):
        config_dict["field_case"] = args.field_case

    if getattr(args, "expand_records", False):
        config_dict["expand_records"] = True

    if getattr(args, "skip_none", False):
        config_dict["skip_serializing_none"] = True

    try:
        config = load_config(
            language,
            custom_config=config_dict,
            config_file=getattr(args, "config", None),
        )
    except ConfigError as e:
        raise CLIError(f"Configuration error: {e}") from e

    for warning in get_config_manager().validate_config(config):
        err_console.print(f"[yellow]⚠️  {warning}[/yellow]")

    return config


def _load_sources(sources: List[str]) -> Tuple[List[Tuple[str, Any]], int]:
    """Read every source in order. Returns the payloads and the failure count."""
    payloads = []
    failures = 0

    for source in sources:
        logger.info(f"Reading {source}")
        try:
            payloads.append(load_lexicon_source(source))
        except (LexiconLoaderError, FileNotFoundError) as e:
            err_console.print(
                f"[red]✗ Failed to load {source}:[/red] {escape(str(e))}"
            )
            failures += 1

    return payloads, failures


def _generate_and_output(
    sources: List[str],
    language: str,
    config: GeneratorConfig,
    args: argparse.Namespace,
) -> int:
    """Generate code for every source and write it out."""
    payloads, failures = _load_sources(sources)

    generator = get_generator(language, config)
    results = generate_documents(generator, payloads)

    chunks = []
    for source, result in results:
        if not result.success:
            err_console.print(
                f"[red]✗ Code generation failed for {source}:[/red] "
                f"{escape(result.error_message)}"
            )
            failures += 1
            continue

        chunks.append(result.code)
        _print_diagnostics(source, result)

        if getattr(args, "verbose", 0) and result.metadata:
            _print_metadata(source, result)

    code = "\n".join(chunks)
    if code:
        _write_code(code, generator.language_name, config.output_file)

    return 1 if failures else 0


def _write_code(code: str, language: str, output_file: str = None):
    """Write code to a file, the terminal (highlighted) or plain stdout."""
    if output_file:
        output_path = Path(output_file)
        try:
            output_path.write_text(code, encoding="utf-8")
        except OSError as e:
            raise CLIError(f"Failed to write to {output_path}: {e}") from e
        err_console.print(
            f"[green]✓[/green] Generated {language} code saved to "
            f"[cyan]{output_path}[/cyan]"
        )
    elif console.is_terminal:
        console.print(Syntax(code, language, theme="monokai"))
    else:
        sys.stdout.write(code)
        sys.stdout.flush()


def _print_diagnostics(source: str, result: GenerationResult):
    if not result.diagnostics:
        return

    err_console.print(f"[yellow]⚠️  Diagnostics for {source}:[/yellow]")
    for warning in result.warnings:
        err_console.print(f"  [yellow]•[/yellow] {escape(warning)}", highlight=False)


def _print_metadata(source: str, result: GenerationResult):
    metadata_table = Table(
        title=f"📊 {source}",
        box=box.SIMPLE,
        show_header=True,
        header_style="bold cyan",
    )
    metadata_table.add_column("Property", style="bold")
    metadata_table.add_column("Value", style="green")

    for key, value in result.metadata.items():
        metadata_table.add_row(key.replace("_", " ").title(), str(value))

    err_console.print(metadata_table)
