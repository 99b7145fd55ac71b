"""
Core record representation for code generation.

Parsed metadata is normalized into these small records so the generators
never touch XML or file paths directly.
"""

from dataclasses import dataclass, field
from typing import List, Optional
from enum import Enum


class ValueSetKind(Enum):
    """Metadata sources that carry a value set."""

    CUSTOM_FIELD = "CustomField"
    STANDARD_VALUE_SET = "StandardValueSet"
    GLOBAL_VALUE_SET = "GlobalValueSet"

    @property
    def description(self) -> str:
        """Human readable label used in generated doc comments."""
        return {
            ValueSetKind.CUSTOM_FIELD: "custom field value set",
            ValueSetKind.STANDARD_VALUE_SET: "standard value set",
            ValueSetKind.GLOBAL_VALUE_SET: "global value set",
        }[self]


@dataclass
class ValueSetRecord:
    """One source value set: a picklist field, a standard or a global value set."""

    owner_name: str  # object name for custom fields, set name otherwise
    kind: ValueSetKind
    values: List[Optional[str]] = field(default_factory=list)
    member_name: Optional[str] = None  # field name, custom fields only
    source_path: Optional[str] = None

    @property
    def qualified_name(self) -> str:
        """``Object.Field`` for custom fields, the set name otherwise."""
        if self.member_name:
            return f"{self.owner_name}.{self.member_name}"
        return self.owner_name

    @property
    def header_comment(self) -> str:
        """Text of the doc comment placed above the generated class."""
        return f"{self.qualified_name} {self.kind.description}."


@dataclass
class RecordTypeRecord:
    """One record type definition of an object."""

    object_name: str
    developer_name: Optional[str]
    active: bool = False
    source_path: Optional[str] = None

    @property
    def qualified_name(self) -> str:
        return f"{self.object_name}.{self.developer_name or '?'}"


@dataclass
class GeneratedClass:
    """A rendered Apex class ready to be handed to the writer."""

    class_name: str
    body: str
    api_version_stamp: str
    source_name: Optional[str] = None

    @property
    def file_name(self) -> str:
        return f"{self.class_name}.cls"

    @property
    def meta_file_name(self) -> str:
        return f"{self.class_name}.cls-meta.xml"
