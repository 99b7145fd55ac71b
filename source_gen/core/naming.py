"""
Naming utilities for safe Apex code generation.

Handles identifier sanitization, reserved word conflicts and
length-constrained class names.
"""

import re
from typing import Dict, Iterable, Optional, Set

from ..logging_config import get_logger

logger = get_logger(__name__)

# Hard limit on Apex class names.
APEX_CLASS_NAME_MAX_LEN = 40

# Words that cannot be used as Apex property names.
APEX_RESERVED_WORDS = {
    "final",
    "static",
    "instanceof",
    "super",
    "this",
    "transient",
    "with",
    "without",
    "sharing",
    "inherited",
    "public",
    "private",
    "protected",
    "class",
    "new",
}

# Standard value sets whose names clash with a platform type of the same name.
CONFLICT_VALUE_SET_NAMES = {"LeadStatus"}

# Suffix markers of custom objects, fields and metadata types plus underscores.
_CUSTOM_MARKERS = re.compile(r"__c|__mdt|_")

_NON_WORD_RUN = re.compile(r"[^\w]+", re.ASCII)
_STARTS_WITH_LETTER = re.compile(r"^[a-zA-Z]")
_IDENTIFIER = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")


class ApexNameSanitizer:
    """Turns arbitrary metadata strings into valid Apex identifiers."""

    def __init__(self, reserved_words: Optional[Set[str]] = None, prefix: str = "a_"):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Lowercase words that need the prefix
            prefix: Prefix for names that are reserved or don't start with a letter
        """
        self.reserved_words = (
            APEX_RESERVED_WORDS if reserved_words is None else set(reserved_words)
        )
        self.prefix = prefix
        self._name_cache: Dict[str, str] = {}

    def sanitize(self, raw: str) -> str:
        """
        Sanitize a raw value for use as an Apex identifier.

        Every run of non-word characters becomes a single underscore and
        one trailing underscore is dropped. Results that don't start with
        a letter, or that collide with a reserved word, get the prefix.

        Args:
            raw: Original string, e.g. a picklist value

        Returns:
            Identifier safe for use in Apex
        """
        if raw in self._name_cache:
            return self._name_cache[raw]

        result = _NON_WORD_RUN.sub("_", raw)
        if result.endswith("_"):
            result = result[:-1]

        if not result:
            # Nothing usable left; a bare prefix would end with an underscore.
            result = self.prefix.rstrip("_")
        elif not _STARTS_WITH_LETTER.match(result) or self.is_reserved(result):
            result = f"{self.prefix}{result}"

        self._name_cache[raw] = result
        return result

    def constant_name(self, raw: str) -> str:
        """Sanitize and uppercase, as used for ``static final`` constants."""
        return self.sanitize(raw).upper()

    def is_reserved(self, name: str) -> bool:
        return name.lower() in self.reserved_words


_default_sanitizer: Optional[ApexNameSanitizer] = None


def get_default_sanitizer() -> ApexNameSanitizer:
    """Get the shared Apex sanitizer instance."""
    global _default_sanitizer
    if _default_sanitizer is None:
        _default_sanitizer = ApexNameSanitizer()
    return _default_sanitizer


def sanitize(raw: str) -> str:
    """Sanitize ``raw`` with the default Apex rules."""
    return get_default_sanitizer().sanitize(raw)


def is_identifier(name: Optional[str]) -> bool:
    """Check that ``name`` is a single identifier-safe token."""
    return bool(name) and bool(_IDENTIFIER.match(name))


def normalize_name(name: str) -> str:
    """Strip ``__c``/``__mdt`` markers and underscores from an API name."""
    return _CUSTOM_MARKERS.sub("", name)


def build_class_name(
    base: str, prefix: str = "", suffix: str = "", max_len: int = APEX_CLASS_NAME_MAX_LEN
) -> str:
    """
    Build a class name that fits within ``max_len`` characters.

    The base is cut to whatever room prefix and suffix leave. When they
    already exceed the limit the base collapses to an empty string.

    Args:
        base: Base name, truncated from the right if needed
        prefix: Prepended verbatim
        suffix: Appended verbatim
        max_len: Maximum class name length

    Returns:
        The class name
    """
    available = max_len - len(prefix) - len(suffix)
    if available < 0:
        logger.warning(
            "Prefix %r and suffix %r exceed the %d character class name limit; "
            "base name %r dropped",
            prefix,
            suffix,
            max_len,
            base,
        )
        available = 0
    return f"{prefix}{base[:available]}{suffix}"


def custom_field_base_name(object_name: str, field_name: str, infix: str = "_") -> str:
    """Base class name for a picklist field, e.g. ``Account__c`` + ``Status__c``."""
    return normalize_name(object_name) + normalize_name(infix) + normalize_name(field_name)


def standard_value_set_base_name(
    value_set_name: str, conflicts: Iterable[str] = CONFLICT_VALUE_SET_NAMES
) -> str:
    """Base class name for a standard value set, disambiguating known clashes."""
    if value_set_name in conflicts:
        return f"{value_set_name}_"
    return value_set_name


def record_type_property_name(object_name: str, developer_name: str) -> str:
    """Constant name of the ``RecordTypeInfo`` accessor, e.g. ``CASE_SUPPORT``."""
    return f"{normalize_name(object_name)}_{developer_name}".upper()


def record_type_id_property_name(object_name: str, developer_name: str) -> str:
    """Constant name of the record type ``Id`` accessor."""
    return f"{record_type_property_name(object_name, developer_name)}_ID"
