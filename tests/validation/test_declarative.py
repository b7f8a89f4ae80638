"""Tests for declarative declarations loaded from dictionaries and JSON files."""

import json

import pytest

from validated_attributes.core.exceptions import MalformedOptions
from validated_attributes.core.rules import RuleKind
from validated_attributes.validation.declarative import (
    get_declaration_schema,
    load_declarations,
    parse_declarations,
)
from validated_attributes.validation.exceptions import DeclarationSchemaError


@pytest.fixture
def config() -> dict:
    return {
        "record_types": {
            "Customer": {
                "email": {"format": "email"},
                "balance": {"format": "dollar", "precision_length": 4},
            },
            "Supplier": {
                "taxid": {"format": "taxid"},
            },
        }
    }


class TestLoadDeclarations:
    def test_dict_is_returned_unchanged(self, config):
        assert load_declarations(config) is config

    def test_json_file(self, tmp_path, config):
        path = tmp_path / "declarations.json"
        path.write_text(json.dumps(config))

        assert load_declarations(path) == config
        assert load_declarations(str(path)) == config

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_declarations(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "declarations.json"
        path.write_text("{not json")

        with pytest.raises(DeclarationSchemaError) as exc_info:
            load_declarations(path)

        assert exc_info.value.context["reason"] == "Invalid JSON"

    def test_json_must_hold_a_mapping(self, tmp_path):
        path = tmp_path / "declarations.json"
        path.write_text("[1, 2]")

        with pytest.raises(DeclarationSchemaError):
            load_declarations(path)


class TestSchemaValidation:
    @pytest.mark.parametrize(
        ("config", "reason"),
        [
            ({}, "Required key missing"),
            ({"record_types": {}}, "Invalid field type"),
            ({"record_types": []}, "Invalid field type"),
            ({"record_types": {"Customer": {}}}, "Invalid record type section"),
            ({"record_types": {"Customer": {"email": "email"}}}, "Invalid declaration type"),
            ({"record_types": {"Customer": {"email": {"maximum_length": 3}}}}, "Required key missing"),
            ({"record_types": {"Customer": {"email": {"format": 3}}}}, "Invalid field type"),
            ({"record_types": {"Customer": {1: {"format": "email"}}}}, "Invalid field name"),
            ({"record_types": {"Customer": {"": {"format": "email"}}}}, "Invalid field name"),
        ],
    )
    def test_structural_errors(self, config, reason):
        with pytest.raises(DeclarationSchemaError) as exc_info:
            load_declarations(config)

        assert exc_info.value.context["reason"] == reason

    def test_field_is_named_in_context(self):
        with pytest.raises(DeclarationSchemaError) as exc_info:
            load_declarations({"record_types": {"Customer": {"email": {}}}})

        assert exc_info.value.context["record_type"] == "Customer"
        assert exc_info.value.context["field"] == "email"


class TestParseDeclarations:
    def test_compiles_every_record_type(self, config):
        compiled = parse_declarations(config)

        assert list(compiled) == ["Customer", "Supplier"]
        assert [spec.kind for spec in compiled["Customer"]] == [RuleKind.EMAIL, RuleKind.DOLLAR]
        assert compiled["Customer"][1].pattern.search("1.2345")

    def test_compile_errors_are_wrapped(self):
        config = {"record_types": {"Customer": {"email": {"format": "email", "precision_length": 2}}}}

        with pytest.raises(DeclarationSchemaError) as exc_info:
            parse_declarations(config)

        assert isinstance(exc_info.value.__cause__, MalformedOptions)
        assert exc_info.value.context["record_type"] == "Customer"
        assert exc_info.value.context["field"] == "email"
        assert exc_info.value.context["reason"] == "MalformedOptions"

    def test_unknown_kind_is_wrapped(self):
        with pytest.raises(DeclarationSchemaError) as exc_info:
            parse_declarations({"record_types": {"Customer": {"phone": {"format": "telephone"}}}})

        assert exc_info.value.context["reason"] == "UnknownRuleKind"


class TestDeclarationSchema:
    def test_format_enum_lists_every_kind(self):
        schema = get_declaration_schema()
        field_schema = schema["properties"]["record_types"]["additionalProperties"]["additionalProperties"]

        assert schema["required"] == ["record_types"]
        assert set(field_schema["properties"]["format"]["enum"]) == {kind.value for kind in RuleKind}
        assert "precision_length" in field_schema["options"]
