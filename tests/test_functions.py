"""Tests for function definitions built from pydantic models."""

import pytest
from pydantic import BaseModel, ConfigDict, Field

from llm_parse.exceptions import DescriptorError
from llm_parse.functions import (
    FunctionTool,
    function_definition,
    function_definitions,
    is_valid_identifier,
    model_to_parameters,
)


class Address(BaseModel):
    street: str
    number: int


class Person(BaseModel):
    name: str = Field(description="Full name")
    address: Address


class Strict(BaseModel):
    model_config = ConfigDict(extra="forbid")

    query: str


class TestModelToParameters:
    def test_refs_inlined(self):
        params = model_to_parameters(Person)
        assert "$defs" not in params
        assert params["properties"]["address"]["properties"]["number"]["type"] == "integer"
        assert params["required"] == ["name", "address"]

    def test_root_title_removed(self):
        assert "title" not in model_to_parameters(Person)

    def test_additional_properties_false_removed(self):
        params = model_to_parameters(Strict)
        assert "additionalProperties" not in params
        assert params["properties"]["query"]["type"] == "string"


class TestFunctionDefinition:
    def test_definition(self):
        definition = function_definition("lookup_person", Person, "Find a person")
        assert definition["name"] == "lookup_person"
        assert definition["description"] == "Find a person"
        assert definition["parameters"]["type"] == "object"

    def test_description_defaults_to_name(self):
        assert function_definition("search", Strict)["description"] == "search"

    @pytest.mark.parametrize("name", ["", "1abc", "has space", "dash-name", "a" * 65])
    def test_invalid_name(self, name):
        assert not is_valid_identifier(name)
        with pytest.raises(DescriptorError):
            function_definition(name, Strict)

    def test_many(self):
        definitions = function_definitions(
            [FunctionTool("search", Strict, "Search"), ("lookup", Person, "Lookup")]
        )
        assert [d["name"] for d in definitions] == ["search", "lookup"]
