"""
Template engine wrapper for Apex code generation.

Provides a simple interface for Jinja2 template rendering
with the filters the Apex templates rely on.
"""

from typing import Dict, Any, Optional
from pathlib import Path

from jinja2 import (
    Environment,
    FileSystemLoader,
    StrictUndefined,
    select_autoescape,
)

from ..logging_config import get_logger

logger = get_logger(__name__)

# Provenance header placed at the top of every generated class.
APEX_NOTICE = """/*
 * This file is generated by sfdx-source-gen.
 * Do not modify it manually, changes will be overwritten on the next run.
 */"""


class TemplateError(Exception):
    """Exception raised for template-related errors."""

    pass


class TemplateEngine:
    """Wrapper for Jinja2 template engine with code generation utilities."""

    def __init__(self, template_dir: Optional[Path] = None):
        """
        Initialize template engine.

        Args:
            template_dir: Directory containing template files
        """
        self.template_dir = template_dir
        self._env = None
        self._setup_environment()

    def _setup_environment(self):
        """Setup Jinja2 environment with code generation utilities."""
        if not self.template_dir or not self.template_dir.is_dir():
            raise TemplateError(f"Template directory not found: {self.template_dir}")
        loader = FileSystemLoader(str(self.template_dir))

        self._env = Environment(
            loader=loader,
            autoescape=select_autoescape(["html"], default_for_string=False),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

        self._env.globals["notice"] = APEX_NOTICE
        self._env.filters["apex_string"] = apex_string_literal
        self._env.filters["comment"] = self._comment_filter

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a template with the given context.

        Args:
            template_name: Name of template file
            context: Variables to pass to template

        Returns:
            Rendered template content
        """
        try:
            template = self._env.get_template(template_name)
            return template.render(**context)
        except Exception as e:
            raise TemplateError(
                f"Failed to render template {template_name}: {str(e)}"
            ) from e

    def _comment_filter(self, value: str, style: str = " *") -> str:
        """Add comment markers to each line."""
        lines = str(value).split("\n")
        return "\n".join(f"{style} {line}" if line.strip() else style for line in lines)


def apex_string_literal(value: str) -> str:
    """Escape a value for use inside a single-quoted Apex string."""
    return str(value).replace("\\", "\\\\").replace("'", "\\'")


def create_template_engine(template_dir: Optional[Path] = None) -> TemplateEngine:
    """Create a template engine rooted at ``template_dir``."""
    logger.debug("Creating template engine (template_dir=%s)", template_dir)
    return TemplateEngine(template_dir)
