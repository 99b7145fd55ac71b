"""
Apex code generators.

Constant classes from value sets and the record types class.
"""

from .picklists import (
    ValueSetClassGenerator,
    generate_picklist_classes,
    generate_picklist_classes_async,
)
from .record_types import (
    RecordTypeClassGenerator,
    generate_record_types_class,
    generate_record_types_class_async,
)

__all__ = [
    "ValueSetClassGenerator",
    "generate_picklist_classes",
    "generate_picklist_classes_async",
    "RecordTypeClassGenerator",
    "generate_record_types_class",
    "generate_record_types_class_async",
]
