"""
Base generator interface for Apex class generation.

Defines the contract shared by the value set and record type generators,
the error types they raise and the result container they return.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol, Union

from ..logging_config import get_logger
from .records import GeneratedClass
from .templates import TemplateEngine, create_template_engine

logger = get_logger(__name__)

META_TEMPLATE = "class.cls-meta.xml.j2"


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


class UnparseableNameError(GeneratorError):
    """An object or value set name could not be derived from a metadata path."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        super().__init__(message)
        self.path = path


class MissingFieldError(GeneratorError):
    """A record lacks a field that generation cannot do without."""

    def __init__(
        self,
        message: str,
        name: Optional[str] = None,
        path: Optional[Union[str, Path]] = None,
    ):
        super().__init__(message)
        self.name = name
        self.path = path


class ClassWriter(Protocol):
    """Sink for generated files."""

    def write(self, path: Path, content: str) -> None: ...


class ApexClassGenerator(ABC):
    """Abstract base class for Apex class generators."""

    def __init__(self, api_version: str, template_dir: Optional[Path] = None):
        """
        Initialize generator.

        Args:
            api_version: API version stamped into every ``.cls-meta.xml``
            template_dir: Override for the template directory
        """
        self.api_version = api_version
        self._template_dir = template_dir
        self._template_engine: Optional[TemplateEngine] = None

    def get_template_directory(self) -> Optional[Path]:
        """
        Return the directory containing templates for this generator.

        Subclasses override this to point at their own templates.
        """
        return self._template_dir

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._template_engine = create_template_engine(
                self._template_dir or self.get_template_directory()
            )
        return self._template_engine

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """Render a template and apply formatting."""
        return self.format_code(
            self.template_engine.render_template(template_name, context)
        )

    def render_meta(self) -> str:
        """Render the ``.cls-meta.xml`` companion for a generated class."""
        return self.template_engine.render_template(
            META_TEMPLATE, {"api_version": self.api_version}
        )

    def build_class(
        self, class_name: str, body: str, source_name: Optional[str] = None
    ) -> GeneratedClass:
        return GeneratedClass(
            class_name=class_name,
            body=body,
            api_version_stamp=self.render_meta(),
            source_name=source_name,
        )

    @abstractmethod
    def generate(self, records: List[Any]) -> "GenerationResult":
        """
        Generate classes for all records.

        Args:
            records: Parsed metadata records, in source order

        Returns:
            GenerationResult holding the classes to write
        """
        pass

    def format_code(self, code: str) -> str:
        """
        Strip trailing whitespace and collapse runs of blank lines.

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
                if blank_count <= 2:  # Allow max 2 consecutive blank lines
                    formatted_lines.append("")
            else:
                blank_count = 0
                formatted_lines.append(stripped)

        return "\n".join(formatted_lines)


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self,
        classes: Optional[List[GeneratedClass]] = None,
        skipped: Optional[List[str]] = None,
        warnings: Optional[List[str]] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize generation result.

        Args:
            classes: Generated classes, in generation order
            skipped: Names of sources that produced no class
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
        """
        self.classes = classes or []
        self.skipped = skipped or []
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.written: List[Path] = []

    @property
    def class_names(self) -> List[str]:
        return [generated.class_name for generated in self.classes]

    def extend(self, other: "GenerationResult") -> "GenerationResult":
        """Append another result's classes, skips, warnings and writes."""
        self.classes.extend(other.classes)
        self.skipped.extend(other.skipped)
        self.warnings.extend(other.warnings)
        self.written.extend(other.written)
        return self


def write_generated_classes(
    result: GenerationResult, output_dir: Union[str, Path], writer: ClassWriter
) -> List[Path]:
    """
    Hand every generated class and its meta file to the writer.

    Args:
        result: Result holding the classes
        output_dir: Directory the classes are written to
        writer: File sink

    Returns:
        Paths written, class file before meta file
    """
    output_dir = Path(output_dir)
    for generated in result.classes:
        class_path = output_dir / generated.file_name
        meta_path = output_dir / generated.meta_file_name
        logger.debug("Writing %s", class_path)
        writer.write(class_path, generated.body)
        writer.write(meta_path, generated.api_version_stamp)
        result.written.extend([class_path, meta_path])
    return result.written
