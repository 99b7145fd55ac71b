"""
Salesforce source generation.

Generates Apex constant classes from picklist fields, standard and global
value sets, and record types found in a DX project.
"""

from .apex import (
    RecordTypeClassGenerator,
    ValueSetClassGenerator,
    generate_picklist_classes,
    generate_picklist_classes_async,
    generate_record_types_class,
    generate_record_types_class_async,
)
from .core import (
    ConfigError,
    GeneratedClass,
    GenerationResult,
    GeneratorError,
    MissingFieldError,
    PicklistsGenOptions,
    RecordTypeRecord,
    RecordTypesGenOptions,
    UnparseableNameError,
    ValueSetKind,
    ValueSetRecord,
    build_class_name,
    load_options,
    sanitize,
)
from .metadata import FileWriter, MetadataReadError
from .project import Project, load_project

# Version info
__version__ = "0.1.0"


# Convenience functions
def generate_from_config(kind, config_file=None, **overrides):
    """
    Run a generator with options read from a JSON config file.

    Args:
        kind: ``picklists`` or ``recordTypes``
        config_file: ``package.json`` (``sourceGen`` section) or plain JSON file
        **overrides: Option overrides, snake_case or camelCase

    Returns:
        GenerationResult describing the written classes
    """
    options = load_options(kind, config_file, overrides)
    if kind == "picklists":
        return generate_picklist_classes(options)
    return generate_record_types_class(options)


# Export main interfaces
__all__ = [
    "ConfigError",
    "FileWriter",
    "GeneratedClass",
    "GenerationResult",
    "GeneratorError",
    "MetadataReadError",
    "MissingFieldError",
    "PicklistsGenOptions",
    "Project",
    "RecordTypeClassGenerator",
    "RecordTypeRecord",
    "RecordTypesGenOptions",
    "UnparseableNameError",
    "ValueSetClassGenerator",
    "ValueSetKind",
    "ValueSetRecord",
    "build_class_name",
    "generate_from_config",
    "generate_picklist_classes",
    "generate_picklist_classes_async",
    "generate_record_types_class",
    "generate_record_types_class_async",
    "load_options",
    "load_project",
    "sanitize",
]
