"""Salesforce DX project locator.

Reads ``sfdx-project.json`` to find the default package directory and the
configured source API version.
"""

import json
from pathlib import Path
from typing import Any

from .core.config import ConfigError, GenOptions, resolve_options
from .logging_config import get_logger

logger = get_logger(__name__)

PROJECT_CONFIG_FILE = "sfdx-project.json"


class Project:
    """A Salesforce project rooted at ``path``."""

    def __init__(self, path: str | Path = ".") -> None:
        self.path = Path(path)
        self._config: dict[str, Any] | None = None

    @property
    def config_path(self) -> Path:
        return self.path / PROJECT_CONFIG_FILE

    @property
    def is_dx(self) -> bool:
        """True when the directory holds an ``sfdx-project.json``."""
        return self.config_path.is_file()

    def join(self, *parts: str) -> Path:
        return self.path.joinpath(*parts)

    @property
    def config(self) -> dict[str, Any]:
        """Parsed ``sfdx-project.json``.

        Raises:
            ConfigError: If this isn't a DX project or the file isn't valid JSON.
        """
        if self._config is None:
            if not self.is_dx:
                raise ConfigError(f"Not a DX project: {self.path}")
            try:
                with self.config_path.open("r", encoding="utf-8") as f:
                    config = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.error("Failed to parse %s: %s", self.config_path, e)
                raise ConfigError(
                    f"Failed to parse project config: {self.config_path}"
                ) from e
            if not isinstance(config, dict):
                raise ConfigError(f"Failed to parse project config: {self.config_path}")
            self._config = config
        return self._config

    @property
    def source_api_version(self) -> str:
        version = self.config.get("sourceApiVersion")
        if not version:
            raise ConfigError(f"Source API version not found: {self.config_path}")
        return str(version)

    @property
    def default_package_directory(self) -> str:
        """Path of the only package directory, or of the one marked default."""
        directories = self.config.get("packageDirectories") or []
        if len(directories) == 1:
            candidates = directories
        else:
            candidates = [it for it in directories if it.get("default")]
        if not candidates or not candidates[0].get("path"):
            raise ConfigError(f"No default package directory found: {self.config_path}")
        return candidates[0]["path"]

    @property
    def default_output_dir(self) -> Path:
        """Classes directory of the default package."""
        return self.join(self.default_package_directory, "main", "default", "classes")


def load_project(project_dir: str | Path = ".") -> Project:
    """Load a project and make sure it uses the DX layout.

    Raises:
        ConfigError: If ``project_dir`` is not a DX project.
    """
    project = Project(project_dir)
    if not project.is_dx:
        raise ConfigError(f"Only DX projects are supported: {project.path}")
    logger.debug("Loaded DX project at %s", project.path)
    return project


def resolve_project_options(options: GenOptions) -> tuple[Project, GenOptions]:
    """Load the options' project and fill in its defaults.

    ``output_dir`` falls back to the default package's classes directory and
    ``source_api_version`` to the project's configured version.

    Raises:
        ConfigError: If the project isn't a DX project or lacks those settings.
    """
    project = load_project(options.project_dir)
    output_dir = options.output_dir or str(project.default_output_dir)
    api_version = options.source_api_version or project.source_api_version
    return project, resolve_options(options, output_dir, api_version)
