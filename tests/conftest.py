"""
Shared fixtures: an in-memory writer and a small DX project on disk.
"""

import json
from pathlib import Path
from typing import Dict

import pytest

NS = "http://soap.sforce.com/2006/04/metadata"


class RecordingWriter:
    """Writer that keeps files in memory, in write order."""

    def __init__(self):
        self.files: Dict[Path, str] = {}

    def write(self, path: Path, content: str) -> None:
        self.files[Path(path)] = content

    def names(self):
        return [path.name for path in self.files]


def custom_field_xml(full_name, field_type="Picklist", values=()):
    value_xml = "".join(
        f"<value><fullName>{value}</fullName><default>false</default>"
        f"<label>{value}</label></value>"
        for value in values
    )
    value_set = (
        f"<valueSet><valueSetDefinition><sorted>false</sorted>{value_xml}"
        f"</valueSetDefinition></valueSet>"
        if field_type in ("Picklist", "MultiselectPicklist")
        else ""
    )
    return (
        f'<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<CustomField xmlns="{NS}"><fullName>{full_name}</fullName>'
        f"<label>{full_name}</label><type>{field_type}</type>{value_set}</CustomField>"
    )


def standard_value_set_xml(values=()):
    value_xml = "".join(
        f"<standardValue><fullName>{value}</fullName><default>false</default>"
        f"<label>{value}</label></standardValue>"
        for value in values
    )
    return (
        f'<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<StandardValueSet xmlns="{NS}"><sorted>false</sorted>{value_xml}</StandardValueSet>'
    )


def global_value_set_xml(values=()):
    value_xml = "".join(
        f"<customValue><fullName>{value}</fullName><default>false</default>"
        f"<label>{value}</label></customValue>"
        for value in values
    )
    return (
        f'<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<GlobalValueSet xmlns="{NS}">{value_xml}<masterLabel>x</masterLabel>'
        f"<sorted>false</sorted></GlobalValueSet>"
    )


def record_type_xml(full_name, active=True):
    name_xml = f"<fullName>{full_name}</fullName>" if full_name else ""
    return (
        f'<?xml version="1.0" encoding="UTF-8"?>\n'
        f'<RecordType xmlns="{NS}">{name_xml}<active>{str(active).lower()}</active>'
        f"<label>{full_name}</label></RecordType>"
    )


def write_file(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def writer():
    return RecordingWriter()


@pytest.fixture
def dx_project(tmp_path):
    """A DX project with picklists, value sets and record types."""
    write_file(
        tmp_path / "sfdx-project.json",
        json.dumps(
            {
                "packageDirectories": [{"path": "force-app", "default": True}],
                "sourceApiVersion": "58.0",
            }
        ),
    )
    source = tmp_path / "force-app" / "main" / "default"
    objects = source / "objects"

    write_file(
        objects / "Account__c" / "fields" / "Status__c.field-meta.xml",
        custom_field_xml("Status__c", values=["New", "Won't Do"]),
    )
    write_file(
        objects / "Account__c" / "fields" / "Notes__c.field-meta.xml",
        custom_field_xml("Notes__c", field_type="LongTextArea"),
    )
    write_file(
        objects / "Case" / "recordTypes" / "Support.recordType-meta.xml",
        record_type_xml("Support", active=True),
    )
    write_file(
        objects / "Case" / "recordTypes" / "Old.recordType-meta.xml",
        record_type_xml("Old", active=False),
    )
    write_file(
        source / "standardValueSets" / "LeadStatus.standardValueSet-meta.xml",
        standard_value_set_xml(["Open", "Closed"]),
    )
    write_file(
        source / "standardValueSets" / "CaseOrigin.standardValueSet-meta.xml",
        standard_value_set_xml([]),
    )
    write_file(
        source / "globalValueSets" / "Regions.globalValueSet-meta.xml",
        global_value_set_xml(["North America", "EMEA"]),
    )
    return tmp_path
