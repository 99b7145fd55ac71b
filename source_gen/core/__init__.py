"""
Core code generation components.

Provides records, naming rules, templates and the base generator
shared by the Apex generators.
"""

from .generator import (
    ApexClassGenerator,
    GeneratorError,
    GenerationResult,
    MissingFieldError,
    UnparseableNameError,
    write_generated_classes,
)
from .records import GeneratedClass, RecordTypeRecord, ValueSetKind, ValueSetRecord
from .naming import (
    APEX_CLASS_NAME_MAX_LEN,
    ApexNameSanitizer,
    build_class_name,
    normalize_name,
    sanitize,
)
from .config import (
    ConfigError,
    ConfigManager,
    PicklistsGenOptions,
    RecordTypesGenOptions,
    load_options,
)
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Base generator interface
    "ApexClassGenerator",
    "GeneratorError",
    "GenerationResult",
    "MissingFieldError",
    "UnparseableNameError",
    "write_generated_classes",
    # Records
    "GeneratedClass",
    "RecordTypeRecord",
    "ValueSetKind",
    "ValueSetRecord",
    # Naming
    "APEX_CLASS_NAME_MAX_LEN",
    "ApexNameSanitizer",
    "build_class_name",
    "normalize_name",
    "sanitize",
    # Configuration
    "ConfigError",
    "ConfigManager",
    "PicklistsGenOptions",
    "RecordTypesGenOptions",
    "load_options",
    # Templates
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
