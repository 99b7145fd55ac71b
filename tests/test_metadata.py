"""
Tests for metadata discovery, parsing and writing.
"""

import asyncio
import xml.etree.ElementTree as ET
from pathlib import Path

import pytest

from source_gen.core.generator import UnparseableNameError
from source_gen.core.records import ValueSetKind
from source_gen.metadata import (
    FileWriter,
    MetadataReadError,
    filter_included,
    find_metadata_files,
    load_custom_field_records,
    load_global_value_set_records,
    load_record_type_records,
    load_standard_value_set_records,
    path_to_metadata_name,
    path_to_object_name,
    read_metadata_xml,
)

from conftest import custom_field_xml, write_file


def test_find_metadata_files(dx_project):
    fields = find_metadata_files("CustomField", dx_project)
    assert [path.name for path in fields] == [
        "Notes__c.field-meta.xml",
        "Status__c.field-meta.xml",
    ]
    assert [p.name for p in find_metadata_files("RecordType", dx_project)] == [
        "Old.recordType-meta.xml",
        "Support.recordType-meta.xml",
    ]


def test_find_metadata_files_skips_node_modules_and_hidden_dirs(dx_project):
    xml = custom_field_xml("Hidden__c", values=["A"])
    write_file(dx_project / "node_modules" / "pkg" / "objects" / "A" / "fields" / "Hidden__c.field-meta.xml", xml)
    write_file(dx_project / ".sfdx" / "objects" / "A" / "fields" / "Hidden__c.field-meta.xml", xml)

    names = [path.name for path in find_metadata_files("CustomField", dx_project)]
    assert "Hidden__c.field-meta.xml" not in names


def test_find_metadata_files_unknown_type(tmp_path):
    with pytest.raises(ValueError, match="Unsupported metadata type"):
        find_metadata_files("ApexClass", tmp_path)


@pytest.mark.parametrize(
    "path, expected",
    [
        ("force-app/main/default/objects/Account/fields/Type.field-meta.xml", "Account"),
        ("/p/force-app/objects/My_Obj__c/recordTypes/A.recordType-meta.xml", "My_Obj__c"),
        ("force-app/main/default/fields/Type.field-meta.xml", None),
    ],
)
def test_path_to_object_name(path, expected):
    assert path_to_object_name(path) == expected


def test_path_to_metadata_name():
    suffix = ".standardValueSet-meta.xml"
    assert path_to_metadata_name(
        "/p/force-app/main/default/standardValueSets/LeadStatus" + suffix,
        "standardValueSets",
        suffix,
    ) == "LeadStatus"
    assert path_to_metadata_name("/p/LeadStatus" + suffix, "standardValueSets", suffix) is None


def test_read_metadata_xml_invalid(tmp_path):
    path = write_file(tmp_path / "Bad.field-meta.xml", "<CustomField><fullName>")
    with pytest.raises(MetadataReadError) as exc_info:
        asyncio.run(read_metadata_xml(path))
    assert exc_info.value.path == path


def test_read_metadata_xml_missing(tmp_path):
    with pytest.raises(MetadataReadError, match="Error reading"):
        asyncio.run(read_metadata_xml(tmp_path / "Missing.field-meta.xml"))


def test_load_custom_field_records(dx_project):
    paths = find_metadata_files("CustomField", dx_project)
    records = asyncio.run(load_custom_field_records(paths))

    assert len(records) == 1
    record = records[0]
    assert record.owner_name == "Account__c"
    assert record.member_name == "Status__c"
    assert record.kind == ValueSetKind.CUSTOM_FIELD
    assert record.values == ["New", "Won't Do"]
    assert record.qualified_name == "Account__c.Status__c"


def test_load_custom_field_records_multiselect(tmp_path):
    path = write_file(
        tmp_path / "objects" / "Lead" / "fields" / "Tags__c.field-meta.xml",
        custom_field_xml("Tags__c", field_type="MultiselectPicklist", values=["Hot"]),
    )
    records = asyncio.run(load_custom_field_records([path]))
    assert records[0].values == ["Hot"]


def test_load_custom_field_records_with_reader():
    """Loaders accept any coroutine returning the parsed root."""
    xml = custom_field_xml("Stage__c", values=["Open"])

    async def reader(path):
        return ET.fromstring(xml.split("\n", 1)[1])

    paths = [Path("/repo/force-app/objects/Deal__c/fields/Stage__c.field-meta.xml")]
    records = asyncio.run(load_custom_field_records(paths, reader))
    assert records[0].qualified_name == "Deal__c.Stage__c"

    bad_paths = [Path("/repo/force-app/fields/Stage__c.field-meta.xml")]
    with pytest.raises(UnparseableNameError) as exc_info:
        asyncio.run(load_custom_field_records(bad_paths, reader))
    assert exc_info.value.path == bad_paths[0]


def test_load_value_set_records(dx_project):
    standard = asyncio.run(
        load_standard_value_set_records(find_metadata_files("StandardValueSet", dx_project))
    )
    assert [(r.owner_name, r.values) for r in standard] == [
        ("CaseOrigin", []),
        ("LeadStatus", ["Open", "Closed"]),
    ]

    global_sets = asyncio.run(
        load_global_value_set_records(find_metadata_files("GlobalValueSet", dx_project))
    )
    assert global_sets[0].owner_name == "Regions"
    assert global_sets[0].kind == ValueSetKind.GLOBAL_VALUE_SET
    assert global_sets[0].values == ["North America", "EMEA"]


def test_load_record_type_records(dx_project):
    records = asyncio.run(
        load_record_type_records(find_metadata_files("RecordType", dx_project))
    )
    assert [(r.object_name, r.developer_name, r.active) for r in records] == [
        ("Case", "Old", False),
        ("Case", "Support", True),
    ]


def test_filter_included(dx_project):
    records = asyncio.run(
        load_record_type_records(find_metadata_files("RecordType", dx_project))
    )
    by_object = lambda r: r.object_name  # noqa: E731
    by_name = lambda r: r.qualified_name  # noqa: E731

    assert filter_included(records, [], by_object) == records
    assert filter_included(records, ["Case"], by_object, by_name) == records
    assert filter_included(records, ["Case.Old"], by_object, by_name) == [records[0]]
    assert filter_included(records, ["Lead"], by_object, by_name) == []


def test_file_writer_creates_directories(tmp_path):
    path = tmp_path / "a" / "b" / "X.cls"
    FileWriter().write(path, "line\n")
    assert path.read_bytes() == b"line\n"

    FileWriter().write(path, "other\n")
    assert path.read_text(encoding="utf-8") == "other\n"
