"""Tests for the meta-schema."""

import datetime

import pytest

from validata import validate, validate_schema
from validata.adapters import date, time
from validata.errors import InvalidSchemaError
from validata.helpers import (
    any_key,
    function,
    integer,
    lazy,
    list_,
    literal,
    map_,
    maybe,
    number,
    select,
    string,
    structure,
    tuple_,
    union,
    value,
)
from validata.rule import rule
from validata.schema_validator import _spec_schema, schema_schema
from validata.spec import ListSpec, Selector, Spec, Thunk, ValueSpec


def paths(errors):
    return [e.path for e in errors]


class TestSelfValidation:
    def test_meta_schema_validates_itself(self):
        assert validate_schema(schema_schema()) == []

    def test_spec_schema_is_a_valid_schema(self):
        assert validate_schema(_spec_schema()) == []

    def test_meta_schema_against_itself_with_check(self):
        assert validate(schema_schema(), schema_schema()) == []


class TestValidSchemas:
    @pytest.mark.parametrize(
        "schema",
        [
            value(),
            string(min_length=1, format=r"^\w+$"),
            number(min=0, cast_from="string"),
            integer(cast_from=("string", lambda v: int(v))),
            list_(string(), no_duplicate=True),
            tuple_((number(), string())),
            map_({"a": number(), maybe("b"): string(), any_key(): value()}),
            literal(3),
            union([string(), number()]),
            lazy(lambda: string()),
            select(lambda v: string()),
            function(arity=2),
            structure(datetime.date),
            date(after=datetime.date(2020, 1, 1), cast_from=["string", "integer"]),
            time(between=[datetime.time(22), datetime.time(6)]),
            [],
            [string()],
            (number(), number()),
            {"a": [{"b": "c"}]},
            "constant",
            b"bytes",
            1.5,
            True,
            None,
        ],
    )
    def test_valid(self, schema):
        assert validate_schema(schema) == []


class TestInvalidSchemas:
    def test_list_with_several_items(self):
        errors = validate_schema([string(), number()])
        assert errors[0].message == "Maximum length of 1 required (current: 2)."

    def test_unsupported_element(self):
        assert validate_schema({"a": object()})[0].path == ("a",)

    def test_unknown_type_tag(self):
        assert paths(validate_schema(Spec(type="date"))) == [("type",)]

    def test_unknown_cast_source(self):
        assert paths(validate_schema(number(cast_from="text"))) == [("cast_from", 0)]

    def test_check_with_wrong_arity(self):
        errors = validate_schema(number(check=lambda a, b: True))
        assert errors[0].path == ("checks", 0)
        assert errors[0].message == "Expected arity of 1, found: 2."

    def test_rule_with_wrong_arity(self):
        errors = validate_schema(number(check=rule(lambda: True, "x")))
        assert paths(errors) == [("checks", 0, "predicate")]

    def test_non_callable_check(self):
        assert paths(validate_schema(number(check="positive"))) == [("checks", 0)]

    def test_nullable_must_be_boolean(self):
        assert paths(validate_schema(Spec(nullable="yes"))) == [("nullable",)]

    def test_thunk_with_arguments(self):
        assert paths(validate_schema(Thunk(lambda x: x))) == [("func",)]

    def test_selector_without_arguments(self):
        assert paths(validate_schema(Selector(lambda: None))) == [("func",)]

    def test_nested_invalid_item_type(self):
        schema = Spec(type="list", variant=ListSpec(item_type=object()))
        assert paths(validate_schema(schema)) == [("variant", "item_type")]

    def test_map_schema_must_be_a_dict(self):
        schema = Spec(type="map", variant=ValueSpec(schema=["a"]))
        assert paths(validate_schema(schema)) == [("variant", "schema")]

    def test_validate_raises_with_errors(self):
        with pytest.raises(InvalidSchemaError) as exc_info:
            validate({}, {"a": number(cast_from="text")})
        assert paths(exc_info.value.errors) == [("a", "cast_from", 0)]
