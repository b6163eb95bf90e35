"""Tests for the Jinja2 template engine wrapper."""

import pytest

from lexgen.codegen.core.schema import QueryType
from lexgen.codegen.core.templates import TemplateEngine, TemplateError
from lexgen.codegen.languages.rust.generator import RustGenerator


@pytest.fixture
def engine():
    return TemplateEngine()


def test_render_in_memory_template(engine):
    engine.add_template("greeting.j2", "hello {{ name }}")
    assert engine.render_template("greeting.j2", {"name": "lexgen"}) == "hello lexgen"


def test_missing_variables_are_errors(engine):
    with pytest.raises(TemplateError):
        engine.render_string("{{ missing }}", {})


def test_template_exists(engine):
    engine.add_template("a.j2", "a")

    assert engine.template_exists("a.j2")
    assert not engine.template_exists("b.j2")


def test_doc_lines_filter(engine):
    rendered = engine.render_string(
        "{% for line in text | doc_lines %}/// {{ line }}\n{% endfor %}",
        {"text": "  first  \nsecond\n"},
    )
    assert rendered == "/// first\n/// second\n"


def test_doc_lines_of_nothing(engine):
    rendered = engine.render_string("{{ text | doc_lines | length }}", {"text": None})
    assert rendered == "0"


def test_block_comment_filter(engine):
    assert engine.render_string("{{ v | block_comment }}", {"v": "a*/b"}) == "a* /b"


def test_no_html_escaping(engine):
    assert engine.render_string("{{ v }}", {"v": "Option<Vec<String>>"}) == (
        "Option<Vec<String>>"
    )


def test_custom_filter(engine):
    engine.add_filter("shout", str.upper)
    assert engine.render_string("{{ v | shout }}", {"v": "rust"}) == "RUST"


def test_rust_templates_are_packaged():
    generator = RustGenerator()

    for name in ("struct.rs.j2", "enum.rs.j2", "placeholder.rs.j2", "prelude.rs.j2"):
        assert generator.template_exists(name)


def test_in_memory_template_shadows_file():
    generator = RustGenerator()
    generator.template_engine.add_template(
        "placeholder.rs.j2", "// {{ name }} skipped\n"
    )

    assert generator.generate_definition("q", QueryType()) == ["// q skipped\n"]
