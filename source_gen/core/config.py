"""
Configuration management for code generation.

Handles loading and merging generation options from JSON files
(a ``package.json`` with a ``sourceGen`` section, or a plain JSON object)
and command-line overrides.
"""

import json
import re
from pathlib import Path
from typing import Dict, Any, List, Optional, Union
from dataclasses import dataclass, field, fields, replace

from ..logging_config import get_logger

logger = get_logger(__name__)

# Section of package.json holding generator options.
CONFIG_SECTION = "sourceGen"


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""

    pass


@dataclass
class PicklistsGenOptions:
    """Options for generating constant classes from value sets."""

    # Project settings
    project_dir: str = "."
    output_dir: Optional[str] = None  # default: <package dir>/main/default/classes
    source_api_version: Optional[str] = None  # default: from sfdx-project.json

    # Generation kinds
    ignore_picklists: bool = False
    ignore_standard_value_sets: bool = False
    ignore_global_value_sets: bool = False

    # Naming
    picklist_prefix: str = ""
    picklist_suffix: str = ""
    picklist_infix: str = "_"
    standard_value_set_prefix: str = ""
    standard_value_set_suffix: str = ""
    global_value_set_prefix: str = ""
    global_value_set_suffix: str = ""

    # Allow-list of object, Object.Field or value set names
    include: List[str] = field(default_factory=list)


@dataclass
class RecordTypesGenOptions:
    """Options for generating the record types class."""

    project_dir: str = "."
    output_dir: Optional[str] = None
    output_class_name: str = "RecordTypes"
    source_api_version: Optional[str] = None
    include_inactive: bool = False
    ignore_test_class: bool = False

    # Allow-list of object or Object.DeveloperName names
    include: List[str] = field(default_factory=list)


GenOptions = Union[PicklistsGenOptions, RecordTypesGenOptions]

# Option classes keyed by their section name inside ``sourceGen``.
OPTION_SECTIONS = {
    "picklists": PicklistsGenOptions,
    "recordTypes": RecordTypesGenOptions,
}


def _to_snake_case(name: str) -> str:
    """Convert camelCase option keys to snake_case."""
    return re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", name).lower()


class ConfigManager:
    """Manages option loading and merging."""

    def load_options(
        self,
        kind: str,
        config_file: Optional[Union[str, Path]] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> GenOptions:
        """
        Get complete options for a generation kind.

        Args:
            kind: ``picklists`` or ``recordTypes``
            config_file: Path to JSON configuration file
            overrides: Option overrides, ``None`` values are ignored

        Returns:
            Merged options
        """
        if kind not in OPTION_SECTIONS:
            raise ConfigError(
                f"Unknown generation kind: {kind}. "
                f"Available: {', '.join(OPTION_SECTIONS)}"
            )
        options_class = OPTION_SECTIONS[kind]
        merged: Dict[str, Any] = {}

        if config_file:
            file_config = self._load_config_file(config_file)
            merged.update(self._extract_section(file_config, kind))

        if overrides:
            merged.update({k: v for k, v in overrides.items() if v is not None})

        return self._dict_to_options(options_class, merged)

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == ".json":
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(
                f"Invalid JSON in configuration file {path}: {str(e)}"
            ) from e
        except OSError as e:
            raise ConfigError(
                f"Failed to load configuration file {path}: {str(e)}"
            ) from e

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        logger.debug("Loaded configuration file %s", path)
        return config

    def _extract_section(self, config: Dict[str, Any], kind: str) -> Dict[str, Any]:
        """Pick the options for ``kind`` out of a loaded file."""
        section = config.get(CONFIG_SECTION, config)
        if not isinstance(section, dict):
            raise ConfigError(f"'{CONFIG_SECTION}' must be a JSON object")
        options = section.get(kind, {})
        if not isinstance(options, dict):
            raise ConfigError(f"'{CONFIG_SECTION}.{kind}' must be a JSON object")
        return options

    def _dict_to_options(self, options_class: type, config_dict: Dict[str, Any]) -> GenOptions:
        """Convert dictionary with camelCase or snake_case keys to options."""
        known_fields = {f.name: f for f in fields(options_class)}

        options_args = {}
        unknown = []

        for key, value in config_dict.items():
            name = _to_snake_case(key)
            if name in known_fields:
                options_args[name] = value
            else:
                unknown.append(key)

        if unknown:
            raise ConfigError(
                f"Unknown {options_class.__name__} option(s): {', '.join(sorted(unknown))}"
            )

        # Flags default to a bool; "false" in a JSON file would be truthy.
        for name, value in options_args.items():
            if isinstance(known_fields[name].default, bool) and not isinstance(value, bool):
                raise ConfigError(
                    f"Option {name} must be true or false, got {value!r}"
                )

        include = options_args.get("include")
        if isinstance(include, str):
            options_args["include"] = [
                name.strip() for name in include.split(",") if name.strip()
            ]

        return options_class(**options_args)


def resolve_options(options: GenOptions, output_dir: str, source_api_version: str) -> GenOptions:
    """Fill project-derived defaults into ``options``."""
    return replace(
        options,
        output_dir=options.output_dir or output_dir,
        source_api_version=options.source_api_version or source_api_version,
    )


# Global configuration manager instance
_config_manager = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_options(
    kind: str,
    config_file: Optional[Union[str, Path]] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> GenOptions:
    """
    Convenience function to load options.

    Args:
        kind: ``picklists`` or ``recordTypes``
        config_file: Path to JSON configuration file
        overrides: Option overrides

    Returns:
        Merged options for the kind
    """
    manager = get_config_manager()
    return manager.load_options(kind, config_file, overrides)
