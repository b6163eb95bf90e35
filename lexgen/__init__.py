"""lexgen: Rust declarations from lexicon schema documents."""

__version__ = "0.1.0"

from .codegen import generate_from_lexicon, quick_generate

__all__ = ["__version__", "generate_from_lexicon", "quick_generate"]
