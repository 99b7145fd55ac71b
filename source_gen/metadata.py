"""Metadata discovery, reading and writing.

Finds source-format metadata files inside a project, parses them
asynchronously and turns them into the records the generators consume.
Generated files go out through :class:`FileWriter`.
"""

import asyncio
import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Awaitable, Callable, Iterable, Sequence

from .core.generator import UnparseableNameError
from .core.records import RecordTypeRecord, ValueSetKind, ValueSetRecord
from .logging_config import get_logger

logger = get_logger(__name__)

MetadataReader = Callable[[Path], Awaitable[ET.Element]]

# File suffix of each metadata type in source format.
METADATA_FILE_SUFFIXES = {
    "CustomField": ".field-meta.xml",
    "StandardValueSet": ".standardValueSet-meta.xml",
    "GlobalValueSet": ".globalValueSet-meta.xml",
    "RecordType": ".recordType-meta.xml",
}

# Field types that carry a value set.
VALUE_SET_FIELD_TYPES = {"Picklist", "MultiselectPicklist"}

_SKIPPED_DIRS = {"node_modules"}

_OBJECT_NAME_PATTERN = re.compile(r".*/objects/(.*?)/.*")


class MetadataReadError(Exception):
    """A metadata file could not be read or parsed."""

    def __init__(self, message: str, path: str | Path | None = None) -> None:
        super().__init__(message)
        self.path = path


def find_metadata_files(metadata_type: str, project_dir: str | Path) -> list[Path]:
    """Find all files of ``metadata_type`` under ``project_dir``.

    Args:
        metadata_type: One of :data:`METADATA_FILE_SUFFIXES`.
        project_dir: Project root to search.

    Returns:
        Sorted list of matching paths.
    """
    try:
        suffix = METADATA_FILE_SUFFIXES[metadata_type]
    except KeyError:
        raise ValueError(f"Unsupported metadata type: {metadata_type}") from None

    root = Path(project_dir)
    paths = sorted(
        path
        for path in root.rglob(f"*{suffix}")
        if path.is_file()
        and not any(
            part in _SKIPPED_DIRS or part.startswith(".")
            for part in path.relative_to(root).parts[:-1]
        )
    )
    logger.debug("Found %d %s file(s) under %s", len(paths), metadata_type, root)
    return paths


def _parse_xml(path: Path) -> ET.Element:
    try:
        return ET.parse(path).getroot()
    except ET.ParseError as e:
        raise MetadataReadError(f"Invalid metadata XML in {path}: {e}", path) from e
    except OSError as e:
        raise MetadataReadError(f"Error reading metadata file {path}: {e}", path) from e


async def read_metadata_xml(path: str | Path) -> ET.Element:
    """Parse a metadata file off the event loop and return its root element."""
    return await asyncio.to_thread(_parse_xml, Path(path))


async def read_all(paths: Sequence[Path], reader: MetadataReader) -> list[ET.Element]:
    """Read every path concurrently, keeping the input order."""
    return list(await asyncio.gather(*(reader(path) for path in paths)))


def path_to_object_name(path: str | Path) -> str | None:
    """Object name from ``.../objects/<Object>/...``."""
    match = _OBJECT_NAME_PATTERN.match(Path(path).as_posix())
    return match.group(1) if match else None


def path_to_metadata_name(path: str | Path, dir_name: str, suffix: str) -> str | None:
    """Metadata name from ``.../<dir_name>/<Name><suffix>``."""
    pattern = rf".*/{re.escape(dir_name)}/(.*?){re.escape(suffix)}$"
    match = re.match(pattern, Path(path).as_posix())
    return match.group(1) if match else None


def _text(element: ET.Element, tag: str) -> str | None:
    child = element.find(f"{{*}}{tag}")
    if child is None or child.text is None:
        return None
    return child.text.strip() or None


def _value_names(element: ET.Element, path: str) -> list[str | None]:
    return [_text(value, "fullName") for value in element.findall(path)]


def is_field_with_value_set(field: ET.Element) -> bool:
    return _text(field, "type") in VALUE_SET_FIELD_TYPES


async def load_custom_field_records(
    paths: Sequence[Path], reader: MetadataReader = read_metadata_xml
) -> list[ValueSetRecord]:
    """Build records for every picklist field among ``paths``.

    Raises:
        UnparseableNameError: If a field's object name can't be read from its path.
    """
    records = []
    for path, field in zip(paths, await read_all(paths, reader)):
        field_name = _text(field, "fullName")
        if not field_name or not is_field_with_value_set(field):
            continue
        object_name = path_to_object_name(path)
        if not object_name:
            raise UnparseableNameError(
                f"Couldn't parse object name from path {path}", path
            )
        records.append(
            ValueSetRecord(
                owner_name=object_name,
                member_name=field_name,
                kind=ValueSetKind.CUSTOM_FIELD,
                values=_value_names(
                    field, "{*}valueSet/{*}valueSetDefinition/{*}value"
                ),
                source_path=str(path),
            )
        )
    return records


async def _load_value_set_records(
    paths: Sequence[Path],
    reader: MetadataReader,
    kind: ValueSetKind,
    dir_name: str,
    value_path: str,
    label: str,
) -> list[ValueSetRecord]:
    records = []
    suffix = METADATA_FILE_SUFFIXES[kind.value]
    for path, value_set in zip(paths, await read_all(paths, reader)):
        name = path_to_metadata_name(path, dir_name, suffix)
        if not name:
            raise UnparseableNameError(
                f"Couldn't parse {label} name from path {path}", path
            )
        records.append(
            ValueSetRecord(
                owner_name=name,
                kind=kind,
                values=_value_names(value_set, value_path),
                source_path=str(path),
            )
        )
    return records


async def load_standard_value_set_records(
    paths: Sequence[Path], reader: MetadataReader = read_metadata_xml
) -> list[ValueSetRecord]:
    """Build a record per standard value set file."""
    return await _load_value_set_records(
        paths,
        reader,
        ValueSetKind.STANDARD_VALUE_SET,
        "standardValueSets",
        "{*}standardValue",
        "standard value set",
    )


async def load_global_value_set_records(
    paths: Sequence[Path], reader: MetadataReader = read_metadata_xml
) -> list[ValueSetRecord]:
    """Build a record per global value set file."""
    return await _load_value_set_records(
        paths,
        reader,
        ValueSetKind.GLOBAL_VALUE_SET,
        "globalValueSets",
        "{*}customValue",
        "global value set",
    )


async def load_record_type_records(
    paths: Sequence[Path], reader: MetadataReader = read_metadata_xml
) -> list[RecordTypeRecord]:
    """Build a record per record type file.

    The developer name is taken as-is; validating it is left to the
    generator so inactive record types can be filtered first.
    """
    records = []
    for path, record_type in zip(paths, await read_all(paths, reader)):
        object_name = path_to_object_name(path)
        if not object_name:
            raise UnparseableNameError(
                f"Couldn't parse object name from path {path}", path
            )
        records.append(
            RecordTypeRecord(
                object_name=object_name,
                developer_name=_text(record_type, "fullName"),
                active=(_text(record_type, "active") or "").lower() == "true",
                source_path=str(path),
            )
        )
    return records


def filter_included(records: Iterable, include: Sequence[str], *names) -> list:
    """Keep records matching the allow-list; everything passes when it's empty.

    ``names`` are attribute getters producing the names a record answers to.
    """
    records = list(records)
    if not include:
        return records
    allowed = set(include)
    return [
        record
        for record in records
        if any(name(record) in allowed for name in names)
    ]


class FileWriter:
    """Writes generated files, creating parent directories as needed."""

    def write(self, path: Path, content: str) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8", newline="\n") as f:
            f.write(content)
