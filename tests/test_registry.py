"""Tests for the generator registry."""

import pytest

from lexgen.codegen.core.config import GeneratorConfig
from lexgen.codegen.languages.rust import RustGenerator
from lexgen.codegen.registry import (
    GeneratorRegistry,
    RegistryError,
    get_generator,
    get_language_info,
    is_language_supported,
    list_all_language_info,
    list_supported_languages,
)


class OtherRustGenerator(RustGenerator):
    @property
    def language_name(self) -> str:
        return "other"


@pytest.fixture
def registry():
    registry = GeneratorRegistry()
    registry.register("rust", RustGenerator, aliases=["rs"])
    return registry


class TestRegistration:
    def test_resolve_name_and_alias(self, registry):
        assert registry.resolve("rust") == "rust"
        assert registry.resolve("RS") == "rust"

    def test_unknown_language(self, registry):
        with pytest.raises(RegistryError, match="Available: rust"):
            registry.resolve("go")

    def test_rejects_non_generators(self, registry):
        with pytest.raises(RegistryError):
            registry.register("text", str)

    def test_existing_registration_is_kept(self, registry):
        registry.register("rust", OtherRustGenerator)
        assert registry.get_generator_class("rust") is RustGenerator

    def test_replace(self, registry):
        registry.register("rust", OtherRustGenerator, replace=True)
        assert registry.get_generator_class("rs") is OtherRustGenerator

    def test_alias_conflicts(self, registry):
        with pytest.raises(RegistryError, match="conflicts"):
            registry.register("other", OtherRustGenerator, aliases=["rust"])

        with pytest.raises(RegistryError, match="already points"):
            registry.register("other2", OtherRustGenerator, aliases=["rs"])

    def test_unregister_drops_aliases(self, registry):
        registry.unregister("rust")

        assert not registry.is_supported("rust")
        assert not registry.is_supported("rs")
        assert registry.list_languages() == []


class TestCreateGenerator:
    def test_default_config(self, registry):
        generator = registry.create_generator("rs")

        assert isinstance(generator, RustGenerator)
        assert generator.config.derives == [
            "Debug",
            "Clone",
            "Serialize",
            "Deserialize",
        ]

    def test_config_object(self, registry):
        config = GeneratorConfig(union_tag="kind")
        assert registry.create_generator("rust", config).config is config

    def test_config_dict(self, registry):
        generator = registry.create_generator("rust", {"expand_records": True})
        assert generator.config.expand_records is True

    def test_config_path(self, registry, tmp_path):
        path = tmp_path / "options.yaml"
        path.write_text("emit_prelude: true\n")

        assert registry.create_generator("rust", path).config.emit_prelude is True

    def test_bad_config_type(self, registry):
        with pytest.raises(RegistryError, match="Invalid config type"):
            registry.create_generator("rust", 42)

    def test_config_errors_are_wrapped(self, registry, tmp_path):
        with pytest.raises(RegistryError, match="Failed to create"):
            registry.create_generator("rust", tmp_path / "missing.yaml")


class TestGlobalRegistry:
    def test_rust_is_registered(self):
        assert "rust" in list_supported_languages()
        assert is_language_supported("rs")
        assert not is_language_supported("cobol")

    def test_get_generator(self):
        assert isinstance(get_generator(), RustGenerator)

    def test_language_info(self):
        info = get_language_info("rust")

        assert info["name"] == "rust"
        assert info["file_extension"] == ".rs"
        assert info["class"] == "RustGenerator"
        assert info["aliases"] == ["rs"]
        assert list_all_language_info()["rust"] == info
