"""
Apex record type constants.

Generates a single class exposing, per record type, a lazily cached
``RecordTypeInfo`` property and the matching ``Id`` property, plus an
optional test class asserting every ``Id`` resolves.
"""

import asyncio
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..core.config import RecordTypesGenOptions
from ..core.generator import (
    ApexClassGenerator,
    ClassWriter,
    GenerationResult,
    MissingFieldError,
    write_generated_classes,
)
from ..core.naming import (
    is_identifier,
    record_type_id_property_name,
    record_type_property_name,
)
from ..core.records import RecordTypeRecord
from ..logging_config import get_logger
from ..metadata import (
    FileWriter,
    MetadataReader,
    filter_included,
    find_metadata_files,
    load_record_type_records,
    read_metadata_xml,
)
from ..project import resolve_project_options

logger = get_logger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"
RECORD_TYPES_TEMPLATE = "record_types.cls.j2"
RECORD_TYPES_TEST_TEMPLATE = "record_types_test.cls.j2"


class RecordTypeClassGenerator(ApexClassGenerator):
    """Generates the aggregate record types class and its test class."""

    def __init__(
        self,
        api_version: str,
        class_name: str = "RecordTypes",
        active_only: bool = True,
        include_test_class: bool = True,
        template_dir: Optional[Path] = None,
    ):
        super().__init__(api_version, template_dir)
        self.class_name = class_name
        self.active_only = active_only
        self.include_test_class = include_test_class

    def get_template_directory(self) -> Path:
        return TEMPLATE_DIR

    @property
    def test_class_name(self) -> str:
        return f"{self.class_name}Test"

    def build_properties(
        self, records: List[RecordTypeRecord], active_only: bool
    ) -> List[Dict[str, Any]]:
        """
        Build the accessor pair of every included record.

        Raises:
            MissingFieldError: If an included record has no usable developer name
        """
        properties = []
        for record in records:
            if active_only and not record.active:
                logger.debug("Skipping inactive record type %s", record.qualified_name)
                continue
            if not record.developer_name:
                raise MissingFieldError(
                    f"Record type without full name: {record.source_path or record.object_name}",
                    name=record.object_name,
                    path=record.source_path,
                )
            if not is_identifier(record.developer_name):
                raise MissingFieldError(
                    f"Record type developer name {record.developer_name!r} is not "
                    f"a valid identifier: {record.source_path or record.object_name}",
                    name=record.qualified_name,
                    path=record.source_path,
                )
            properties.append(
                {
                    "name": record_type_property_name(
                        record.object_name, record.developer_name
                    ),
                    "id_name": record_type_id_property_name(
                        record.object_name, record.developer_name
                    ),
                    "object_name": record.object_name,
                    "developer_name": record.developer_name,
                }
            )
        return properties

    def render(
        self,
        records: List[RecordTypeRecord],
        active_only: Optional[bool] = None,
        class_name: Optional[str] = None,
    ) -> str:
        """Render the record types class."""
        active_only = self.active_only if active_only is None else active_only
        return self.render_template(
            RECORD_TYPES_TEMPLATE,
            {
                "class_name": class_name or self.class_name,
                "properties": self.build_properties(records, active_only),
            },
        )

    def render_test(
        self,
        records: List[RecordTypeRecord],
        active_only: Optional[bool] = None,
        class_name: Optional[str] = None,
    ) -> str:
        """Render the test class asserting each record type ``Id`` is not null."""
        active_only = self.active_only if active_only is None else active_only
        class_name = class_name or self.class_name
        return self.render_template(
            RECORD_TYPES_TEST_TEMPLATE,
            {
                "class_name": class_name,
                "test_class_name": f"{class_name}Test",
                "properties": self.build_properties(records, active_only),
            },
        )

    def generate(self, records: List[RecordTypeRecord]) -> GenerationResult:
        """Render the class and, if enabled, the test class.

        Both are rendered before anything is returned, so a bad record
        fails the run before a single file is written.
        """
        result = GenerationResult(metadata={"kind": "RecordType"})
        result.classes.append(self.build_class(self.class_name, self.render(records)))
        if self.include_test_class:
            result.classes.append(
                self.build_class(self.test_class_name, self.render_test(records))
            )
        return result


def run_record_type_generation(
    records: List[RecordTypeRecord],
    output_dir: Path,
    generator: RecordTypeClassGenerator,
    writer: ClassWriter,
) -> GenerationResult:
    """Render the record types classes and write them."""
    result = generator.generate(records)
    for generated in result.classes:
        logger.info(
            "Writing record types%s to %s",
            " test" if generated.class_name == generator.test_class_name else "",
            Path(output_dir) / generated.file_name,
        )
    write_generated_classes(result, output_dir, writer)
    return result


async def generate_record_types_class_async(
    options: Optional[RecordTypesGenOptions] = None,
    writer: Optional[ClassWriter] = None,
    reader: MetadataReader = read_metadata_xml,
) -> GenerationResult:
    """
    Generate the record types class of a project.

    Raises:
        ConfigError: If the project isn't a DX project
        UnparseableNameError: If an object name can't be parsed from a path
        MissingFieldError: If an included record type has no developer name
    """
    project, resolved = resolve_project_options(options or RecordTypesGenOptions())
    paths = find_metadata_files("RecordType", project.path)
    records = filter_included(
        await load_record_type_records(paths, reader),
        resolved.include,
        lambda r: r.object_name,
        lambda r: r.qualified_name,
    )
    generator = RecordTypeClassGenerator(
        resolved.source_api_version,
        class_name=resolved.output_class_name,
        active_only=not resolved.include_inactive,
        include_test_class=not resolved.ignore_test_class,
    )
    return run_record_type_generation(
        records, Path(resolved.output_dir), generator, writer or FileWriter()
    )


def generate_record_types_class(
    options: Optional[RecordTypesGenOptions] = None,
    writer: Optional[ClassWriter] = None,
    reader: MetadataReader = read_metadata_xml,
) -> GenerationResult:
    """Synchronous entry point for :func:`generate_record_types_class_async`."""
    return asyncio.run(generate_record_types_class_async(options, writer, reader))
