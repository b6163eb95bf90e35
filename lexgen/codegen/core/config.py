"""
Configuration management for code generation.

Handles loading and merging configuration from JSON or YAML override
files, providing defaults and validation for generator settings.
"""

import json
from dataclasses import dataclass, field, fields, asdict
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""

    pass


DEFAULT_DERIVES = ["Debug", "Clone", "Serialize", "Deserialize"]

VALID_FIELD_CASES = {"original", "snake", "camel", "pascal"}


@dataclass
class GeneratorConfig:
    """Base configuration for code generators."""

    # Output settings
    output_file: Optional[str] = None
    emit_prelude: bool = False

    # Code style settings
    indent_size: int = 4
    use_tabs: bool = False

    # Naming settings
    field_case: str = "original"  # original, snake, camel, pascal

    # Declaration settings
    derives: List[str] = field(default_factory=lambda: list(DEFAULT_DERIVES))
    union_tag: str = "type"
    skip_serializing_none: bool = False
    expand_records: bool = False

    # Additional metadata
    add_comments: bool = True

    # Custom settings (language-specific)
    custom: Dict[str, Any] = field(default_factory=dict)

    @property
    def indent(self) -> str:
        return "\t" if self.use_tabs else " " * self.indent_size

    def to_dict(self) -> Dict[str, Any]:
        """Flatten to the same shape a config file uses."""
        data = asdict(self)
        custom = data.pop("custom")
        data.update(custom)
        return data


class ConfigManager:
    """Manages configuration loading and merging."""

    def __init__(self):
        """Initialize configuration manager."""
        self._configs: Dict[str, Dict[str, Any]] = {}
        self._load_defaults()

    def _load_defaults(self):
        """Load default configurations for supported languages."""
        self._configs["rust"] = {
            "field_case": "original",
            "derives": list(DEFAULT_DERIVES),
            "union_tag": "type",
            "add_comments": True,
            "custom": {
                "int_type": "i64",
                "string_type": "String",
                "bool_type": "bool",
                "bytes_type": "Vec<u8>",
                "fallback_type": "String",
            },
        }

    def get_config(
        self,
        language: str = "rust",
        custom_config: Optional[Dict[str, Any]] = None,
        config_file: Optional[Union[str, Path]] = None,
    ) -> GeneratorConfig:
        """
        Get complete configuration for a language.

        Args:
            language: Target language name
            custom_config: Custom configuration overrides
            config_file: Path to a JSON or YAML configuration file

        Returns:
            Merged configuration for the language
        """
        base_config = json.loads(json.dumps(self._configs.get(language, {})))

        if config_file:
            base_config = _merge(base_config, self._load_config_file(config_file))

        if custom_config:
            base_config = _merge(base_config, custom_config)

        return self._dict_to_config(base_config)

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from a JSON or YAML file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Failed to read configuration file {path}: {e}") from e

        # JSON first, then YAML, whatever the extension says
        try:
            config = json.loads(text)
        except json.JSONDecodeError:
            try:
                config = yaml.safe_load(text)
            except yaml.YAMLError as e:
                raise ConfigError(
                    f"Configuration file {path} is neither JSON nor YAML: {e}"
                ) from e

        if config is None:
            return {}

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a mapping: {path}")

        return config

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> GeneratorConfig:
        """Convert dictionary to GeneratorConfig instance."""
        known_fields = {f.name for f in fields(GeneratorConfig)}

        config_args = {}
        custom_args = {}

        for key, value in config_dict.items():
            if key in known_fields:
                config_args[key] = value
            else:
                custom_args[key] = value

        if custom_args:
            existing_custom = dict(config_args.get("custom") or {})
            existing_custom.update(custom_args)
            config_args["custom"] = existing_custom

        return GeneratorConfig(**config_args)

    def save_config(self, config: GeneratorConfig, output_path: Union[str, Path]):
        """Save configuration to a JSON or YAML file (by extension)."""
        path = Path(output_path)
        config_dict = config.to_dict()

        try:
            with open(path, "w", encoding="utf-8") as f:
                if path.suffix.lower() in (".yaml", ".yml"):
                    yaml.safe_dump(config_dict, f, sort_keys=False)
                else:
                    json.dump(config_dict, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration to {path}: {e}") from e

    def list_languages(self) -> List[str]:
        """Get list of languages with default configurations."""
        return list(self._configs.keys())

    def validate_config(self, config: GeneratorConfig) -> List[str]:
        """
        Validate configuration.

        Returns:
            List of validation warnings
        """
        warnings = []

        if config.field_case not in VALID_FIELD_CASES:
            warnings.append(f"Invalid field_case: {config.field_case}")

        if not isinstance(config.indent_size, int) or config.indent_size < 0:
            warnings.append(f"Invalid indent_size: {config.indent_size}")

        if not isinstance(config.derives, list) or not all(
            isinstance(derive, str) and derive.isidentifier()
            for derive in config.derives
        ):
            warnings.append(f"Invalid derives: {config.derives}")

        if not config.union_tag:
            warnings.append("union_tag must not be empty")

        overrides = config.custom.get("type_overrides", {})
        if not isinstance(overrides, dict):
            warnings.append(f"Invalid type_overrides: {overrides}")

        return warnings


def _merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Merge overrides into base; the nested "custom" mapping is merged too."""
    merged = dict(base)
    for key, value in overrides.items():
        if key == "custom" and isinstance(value, dict):
            merged["custom"] = {**merged.get("custom", {}), **value}
        else:
            merged[key] = value
    return merged


# Global configuration manager instance
_config_manager = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(
    language: str = "rust",
    custom_config: Optional[Dict[str, Any]] = None,
    config_file: Optional[Union[str, Path]] = None,
) -> GeneratorConfig:
    """
    Convenience function to load configuration.

    Args:
        language: Target language name
        custom_config: Custom configuration overrides
        config_file: Path to a JSON or YAML configuration file

    Returns:
        Merged configuration for the language
    """
    manager = get_config_manager()
    return manager.get_config(language, custom_config, config_file)

