"""
Tests for identifier sanitization and class name building.
"""

import re

import pytest

from source_gen.core.naming import (
    APEX_CLASS_NAME_MAX_LEN,
    APEX_RESERVED_WORDS,
    ApexNameSanitizer,
    build_class_name,
    custom_field_base_name,
    is_identifier,
    normalize_name,
    record_type_id_property_name,
    record_type_property_name,
    sanitize,
    standard_value_set_base_name,
)

IDENTIFIER = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Won't Do", "Won_t_Do"),
        ("In Progress", "In_Progress"),
        ("a -- b", "a_b"),
        ("Closed!", "Closed"),
        ("Closed!!", "Closed"),
        ("Plain", "Plain"),
        ("snake_case", "snake_case"),
    ],
)
def test_sanitize_replaces_non_word_runs(raw, expected):
    assert sanitize(raw) == expected


def test_sanitize_strips_only_one_trailing_underscore():
    assert sanitize("value__") == "value_"


@pytest.mark.parametrize("raw", ["1st Choice", "_hidden", "$100", "42"])
def test_sanitize_prefixes_names_not_starting_with_letter(raw):
    result = sanitize(raw)
    assert result.startswith("a_")
    assert IDENTIFIER.match(result)


@pytest.mark.parametrize("word", sorted(APEX_RESERVED_WORDS))
def test_sanitize_prefixes_reserved_words(word):
    assert sanitize(word) == f"a_{word}"
    assert sanitize(word.upper()) == f"a_{word.upper()}"
    assert sanitize(word.capitalize()) == f"a_{word.capitalize()}"


@pytest.mark.parametrize(
    "raw",
    ["Won't Do", "N/A", "Éclair", "hello world!", "50% off", "x.y.z", "(none)", "---"],
)
def test_sanitize_always_yields_identifier(raw):
    result = sanitize(raw)
    assert IDENTIFIER.match(result), result
    assert not result.endswith("_")


def test_sanitize_non_ascii_letters_become_underscores():
    assert sanitize("Café") == "Caf"
    assert sanitize("Éclair") == "a__clair"


def test_constant_name_is_uppercased():
    sanitizer = ApexNameSanitizer()
    assert sanitizer.constant_name("Won't Do") == "WON_T_DO"
    assert sanitizer.constant_name("new") == "A_NEW"


def test_custom_reserved_words():
    sanitizer = ApexNameSanitizer(reserved_words={"select"})
    assert sanitizer.sanitize("Select") == "a_Select"
    assert sanitizer.sanitize("class") == "class"


def test_normalize_name_strips_markers_and_underscores():
    assert normalize_name("Account__c") == "Account"
    assert normalize_name("My_Object__c") == "MyObject"
    assert normalize_name("Setting__mdt") == "Setting"
    assert normalize_name("Case") == "Case"


def test_build_class_name_fits_budget():
    assert build_class_name("LeadStatus") == "LeadStatus"
    assert build_class_name("LeadStatus", "Pre", "Suf") == "PreLeadStatusSuf"
    name = build_class_name("A" * 60, "Pre", "Suf")
    assert len(name) == APEX_CLASS_NAME_MAX_LEN
    assert name == "Pre" + "A" * 34 + "Suf"


@pytest.mark.parametrize("prefix", ["", "P", "Prefix_", "X" * 20])
@pytest.mark.parametrize("suffix", ["", "S", "_Values", "Y" * 20])
@pytest.mark.parametrize("base", ["", "Short", "B" * 39, "C" * 80])
def test_build_class_name_never_exceeds_limit(prefix, suffix, base):
    assert len(build_class_name(base, prefix, suffix)) <= APEX_CLASS_NAME_MAX_LEN


def test_build_class_name_negative_budget_drops_base(caplog):
    prefix = "P" * 30
    suffix = "S" * 15
    with caplog.at_level("WARNING", logger="source_gen"):
        assert build_class_name("Account", prefix, suffix) == prefix + suffix
    assert "exceed" in caplog.text


def test_build_class_name_custom_max_len():
    assert build_class_name("Abcdef", max_len=3) == "Abc"


def test_custom_field_base_name():
    assert custom_field_base_name("Account__c", "Status__c", "_") == "AccountStatus"
    assert custom_field_base_name("Account", "Type", "By") == "AccountByType"
    assert custom_field_base_name("Setting__mdt", "Level__c", "") == "SettingLevel"


def test_standard_value_set_base_name_disambiguates_conflicts():
    assert standard_value_set_base_name("LeadStatus") == "LeadStatus_"
    assert standard_value_set_base_name("CaseOrigin") == "CaseOrigin"


def test_record_type_property_names():
    assert record_type_property_name("Case", "Support") == "CASE_SUPPORT"
    assert record_type_id_property_name("Case", "Support") == "CASE_SUPPORT_ID"
    assert record_type_property_name("Invoice__c", "Credit_Note") == "INVOICE_CREDIT_NOTE"


@pytest.mark.parametrize(
    "name, expected",
    [("Support", True), ("Credit_Note", True), ("", False), (None, False),
     ("1st", False), ("Two Words", False)],
)
def test_is_identifier(name, expected):
    assert is_identifier(name) is expected


@pytest.mark.parametrize(
    "raw, expected",
    [("value__!", "value__"), (" Open", "a__Open"), ("Éclair", "a__clair")],
)
def test_sanitize_keeps_inner_underscores(raw, expected):
    # Only one trailing underscore is dropped and the prefix is prepended as-is.
    assert sanitize(raw) == expected
    assert IDENTIFIER.match(sanitize(raw))
