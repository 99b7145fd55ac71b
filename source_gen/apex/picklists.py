"""
Apex constant classes from value sets.

Generates one class per picklist field, standard value set and global
value set, each exposing a ``public static final String`` per value.
"""

import asyncio
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..core.config import PicklistsGenOptions
from ..core.generator import (
    ApexClassGenerator,
    ClassWriter,
    GenerationResult,
    write_generated_classes,
)
from ..core.naming import (
    ApexNameSanitizer,
    build_class_name,
    custom_field_base_name,
    get_default_sanitizer,
    standard_value_set_base_name,
)
from ..core.records import ValueSetKind, ValueSetRecord
from ..logging_config import get_logger
from ..metadata import (
    FileWriter,
    MetadataReader,
    filter_included,
    find_metadata_files,
    load_custom_field_records,
    load_global_value_set_records,
    load_standard_value_set_records,
    read_metadata_xml,
)
from ..project import resolve_project_options

logger = get_logger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
VALUE_SET_TEMPLATE = "value_set.cls.j2"


class ValueSetClassGenerator(ApexClassGenerator):
    """Generates constant classes for one kind of value set."""

    def __init__(
        self,
        api_version: str,
        kind: ValueSetKind,
        prefix: str = "",
        suffix: str = "",
        infix: str = "_",
        sanitizer: Optional[ApexNameSanitizer] = None,
        template_dir: Optional[Path] = None,
    ):
        super().__init__(api_version, template_dir)
        self.kind = kind
        self.prefix = prefix
        self.suffix = suffix
        self.infix = infix
        self.sanitizer = sanitizer or get_default_sanitizer()

    def get_template_directory(self) -> Path:
        return TEMPLATE_DIR

    def class_name_for(self, record: ValueSetRecord) -> str:
        """Class name for ``record`` within the 40 character limit."""
        if self.kind == ValueSetKind.CUSTOM_FIELD:
            base = custom_field_base_name(
                record.owner_name, record.member_name or "", self.infix
            )
        elif self.kind == ValueSetKind.STANDARD_VALUE_SET:
            base = standard_value_set_base_name(record.owner_name)
        else:
            base = record.owner_name
        return build_class_name(base, self.prefix, self.suffix)

    def build_constants(
        self, values: List[Optional[str]], warnings: Optional[List[str]] = None
    ) -> List[Dict[str, Any]]:
        """
        Map raw values to constant declarations, in source order.

        Values without a label are dropped. When two values sanitize to the
        same constant name the first one is kept.

        Args:
            values: Raw value labels
            warnings: List collecting messages about dropped duplicates

        Returns:
            List of ``{"name", "value"}`` dicts
        """
        constants = []
        seen: Dict[str, str] = {}
        for value in values:
            if not value:
                continue
            name = self.sanitizer.constant_name(value)
            if name in seen:
                message = (
                    f"Value {value!r} maps to constant {name} already used by "
                    f"{seen[name]!r}; keeping the first"
                )
                logger.warning(message)
                if warnings is not None:
                    warnings.append(message)
                continue
            seen[name] = value
            constants.append({"name": name, "value": value})
        return constants

    def render(
        self,
        values: List[Optional[str]],
        header_comment: str,
        class_name: str,
        warnings: Optional[List[str]] = None,
    ) -> Optional[str]:
        """
        Render a value set class.

        Returns:
            Class source, or None when there is no value to declare
        """
        constants = self.build_constants(values, warnings)
        if not constants:
            return None
        return self.render_template(
            VALUE_SET_TEMPLATE,
            {
                "class_name": class_name,
                "description": header_comment,
                "constants": constants,
            },
        )

    def generate(self, records: List[ValueSetRecord]) -> GenerationResult:
        result = GenerationResult(metadata={"kind": self.kind.value})
        for record in records:
            class_name = self.class_name_for(record)
            content = self.render(
                record.values, record.header_comment, class_name, result.warnings
            )
            if content is None:
                logger.info("No values, skipping: %s", record.qualified_name)
                result.skipped.append(record.qualified_name)
                continue
            result.classes.append(
                self.build_class(class_name, content, record.qualified_name)
            )
        return result


def run_value_set_generation(
    records: List[ValueSetRecord],
    output_dir: Path,
    generator: ValueSetClassGenerator,
    writer: ClassWriter,
) -> GenerationResult:
    """Render ``records`` and write each resulting class pair."""
    result = generator.generate(records)
    write_generated_classes(result, output_dir, writer)
    return result


async def generate_custom_field_classes(
    project_dir: Path,
    output_dir: Path,
    options: PicklistsGenOptions,
    writer: ClassWriter,
    reader: MetadataReader = read_metadata_xml,
) -> GenerationResult:
    """Generate classes for the picklist fields of a project."""
    logger.info("Building constant classes from custom fields.")
    paths = find_metadata_files("CustomField", project_dir)
    records = filter_included(
        await load_custom_field_records(paths, reader),
        options.include,
        lambda r: r.owner_name,
        lambda r: r.qualified_name,
    )
    generator = ValueSetClassGenerator(
        options.source_api_version,
        ValueSetKind.CUSTOM_FIELD,
        prefix=options.picklist_prefix,
        suffix=options.picklist_suffix,
        infix=options.picklist_infix,
    )
    return run_value_set_generation(records, output_dir, generator, writer)


async def generate_standard_value_set_classes(
    project_dir: Path,
    output_dir: Path,
    options: PicklistsGenOptions,
    writer: ClassWriter,
    reader: MetadataReader = read_metadata_xml,
) -> GenerationResult:
    """Generate classes for the standard value sets of a project."""
    paths = find_metadata_files("StandardValueSet", project_dir)
    records = await load_standard_value_set_records(paths, reader)
    logger.info("Building constant classes from standard value sets.")
    records = filter_included(records, options.include, lambda r: r.owner_name)
    generator = ValueSetClassGenerator(
        options.source_api_version,
        ValueSetKind.STANDARD_VALUE_SET,
        prefix=options.standard_value_set_prefix,
        suffix=options.standard_value_set_suffix,
    )
    return run_value_set_generation(records, output_dir, generator, writer)


async def generate_global_value_set_classes(
    project_dir: Path,
    output_dir: Path,
    options: PicklistsGenOptions,
    writer: ClassWriter,
    reader: MetadataReader = read_metadata_xml,
) -> GenerationResult:
    """Generate classes for the global value sets of a project."""
    paths = find_metadata_files("GlobalValueSet", project_dir)
    records = await load_global_value_set_records(paths, reader)
    logger.info("Building constant classes from global value sets.")
    records = filter_included(records, options.include, lambda r: r.owner_name)
    generator = ValueSetClassGenerator(
        options.source_api_version,
        ValueSetKind.GLOBAL_VALUE_SET,
        prefix=options.global_value_set_prefix,
        suffix=options.global_value_set_suffix,
    )
    return run_value_set_generation(records, output_dir, generator, writer)


async def generate_picklist_classes_async(
    options: Optional[PicklistsGenOptions] = None,
    writer: Optional[ClassWriter] = None,
    reader: MetadataReader = read_metadata_xml,
) -> GenerationResult:
    """
    Generate constant classes for every enabled value set kind.

    The kinds run concurrently; they write disjoint file names unless the
    configured prefixes and suffixes make them coincide.

    Raises:
        ConfigError: If the project isn't a DX project
        UnparseableNameError: If an object or value set name can't be parsed
    """
    project, resolved = resolve_project_options(options or PicklistsGenOptions())
    output_dir = Path(resolved.output_dir)
    writer = writer or FileWriter()

    runs = []
    if not resolved.ignore_picklists:
        runs.append(generate_custom_field_classes)
    if not resolved.ignore_standard_value_sets:
        runs.append(generate_standard_value_set_classes)
    if not resolved.ignore_global_value_sets:
        runs.append(generate_global_value_set_classes)

    outcomes = await asyncio.gather(
        *(run(project.path, output_dir, resolved, writer, reader) for run in runs),
        return_exceptions=True,
    )
    errors = [outcome for outcome in outcomes if isinstance(outcome, BaseException)]
    for error in errors[1:]:
        logger.error("Value set generation also failed: %s", error)
    if errors:
        raise errors[0]
    results = list(outcomes)

    combined = GenerationResult(
        metadata={
            "output_dir": str(output_dir),
            "kinds": [result.metadata["kind"] for result in results],
        }
    )
    for result in results:
        combined.extend(result)
    logger.info(
        "Generated %d class(es), skipped %d value set(s)",
        len(combined.classes),
        len(combined.skipped),
    )
    return combined


def generate_picklist_classes(
    options: Optional[PicklistsGenOptions] = None,
    writer: Optional[ClassWriter] = None,
    reader: MetadataReader = read_metadata_xml,
) -> GenerationResult:
    """Synchronous entry point for :func:`generate_picklist_classes_async`."""
    return asyncio.run(generate_picklist_classes_async(options, writer, reader))
