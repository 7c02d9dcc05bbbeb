"""Tests for the declarative Shape validator."""

import pytest

from postman_mcp.validators.schema_validator import (
    AnyShape,
    ArrayShape,
    EnumShape,
    ObjectShape,
    PrimitiveShape,
    ValidationFailure,
    compile_schema,
    is_valid,
    validate,
)


ENVIRONMENT_SCHEMA = {
    "type": "object",
    "properties": {
        "environment": {
            "type": "object",
            "properties": {
                "name": {"type": "string"},
                "values": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "key": {"type": "string"},
                            "value": {"type": "string"},
                            "type": {"type": "string", "enum": ["default", "secret"]},
                            "enabled": {"type": "boolean"}
                        },
                        "required": ["key", "value"]
                    }
                }
            },
            "required": ["name", "values"]
        },
        "workspace": {"type": "string"}
    },
    "required": ["environment"]
}


class TestCompileSchema:
    """Compilation of JSON-Schema nodes into Shape trees."""

    def test_primitive_kinds(self):
        for kind in ("string", "number", "integer", "boolean"):
            assert compile_schema({"type": kind}) == PrimitiveShape(kind)

    def test_enum_takes_precedence_over_type(self):
        shape = compile_schema({"type": "string", "enum": ["asc", "desc"]})
        assert shape == EnumShape(("asc", "desc"))

    def test_object_fields_and_required(self):
        shape = compile_schema(ENVIRONMENT_SCHEMA)
        assert isinstance(shape, ObjectShape)
        assert shape.required_fields == ["environment"]
        assert shape.field("workspace").required is False

    def test_required_name_without_property_is_any(self):
        shape = compile_schema({"type": "object", "properties": {}, "required": ["id"]})
        spec = shape.field("id")
        assert spec.required
        assert spec.shape == AnyShape()

    def test_array_bounds(self):
        shape = compile_schema({"type": "array", "items": {"type": "string"}, "maxItems": 50})
        assert shape == ArrayShape(PrimitiveShape("string"), None, 50)

    def test_untyped_nodes_are_any(self):
        assert compile_schema({}) == AnyShape()
        assert compile_schema(None) == AnyShape()
        assert compile_schema({"description": "free form"}) == AnyShape()

    def test_nullable_type_list(self):
        assert compile_schema({"type": ["string", "null"]}) == PrimitiveShape("string")

    def test_properties_without_type_is_object(self):
        shape = compile_schema({"properties": {"a": {"type": "string"}}})
        assert isinstance(shape, ObjectShape)


class TestValidate:
    """Structural validation and narrowing."""

    @pytest.fixture
    def environment_shape(self):
        return compile_schema(ENVIRONMENT_SCHEMA)

    def test_accepts_minimal_environment(self, environment_shape):
        args = {"environment": {"name": "e", "values": [{"key": "k", "value": "v"}]}}
        assert validate(args, environment_shape) == args

    def test_missing_required_field_named(self, environment_shape):
        with pytest.raises(ValidationFailure) as exc:
            validate({}, environment_shape)
        assert exc.value.path == "environment"
        assert "Missing required field 'environment'" in exc.value.message

    def test_nested_path_in_message(self, environment_shape):
        args = {"environment": {"name": "e", "values": [{"key": "k", "value": "v", "type": "x"}]}}
        with pytest.raises(ValidationFailure) as exc:
            validate(args, environment_shape)
        assert exc.value.path == "environment.values[0].type"
        assert "must be one of ['default', 'secret']" in exc.value.message

    def test_wrong_primitive_type(self, environment_shape):
        args = {"environment": {"name": 7, "values": []}}
        with pytest.raises(ValidationFailure, match="Field 'environment.name' must be string, got integer"):
            validate(args, environment_shape)

    def test_root_must_be_object(self, environment_shape):
        with pytest.raises(ValidationFailure, match="Arguments must be object, got array"):
            validate([], environment_shape)

    def test_optional_null_is_dropped(self, environment_shape):
        args = {"environment": {"name": "e", "values": []}, "workspace": None}
        assert "workspace" not in validate(args, environment_shape)

    def test_required_null_is_missing(self, environment_shape):
        with pytest.raises(ValidationFailure, match="Missing required field 'environment'"):
            validate({"environment": None}, environment_shape)

    def test_no_defaults_applied(self, environment_shape):
        args = {"environment": {"name": "e", "values": [{"key": "k", "value": "v"}]}}
        item = validate(args, environment_shape)["environment"]["values"][0]
        assert "type" not in item
        assert "enabled" not in item

    def test_extra_fields_pass_through(self, environment_shape):
        args = {"environment": {"name": "e", "values": [], "color": "blue"}, "trace": True}
        narrowed = validate(args, environment_shape)
        assert narrowed["trace"] is True
        assert narrowed["environment"]["color"] == "blue"

    def test_extra_field_does_not_change_outcome(self, environment_shape):
        valid = {"environment": {"name": "e", "values": []}}
        invalid = {"environment": {"name": "e"}}
        for value in (valid, invalid):
            with_extra = {**value, "unexpected": [1, 2, 3]}
            assert is_valid(value, environment_shape) == is_valid(with_extra, environment_shape)

    def test_validate_does_not_mutate_input(self, environment_shape):
        args = {"environment": {"name": "e", "values": []}, "workspace": None}
        validate(args, environment_shape)
        assert args["workspace"] is None


class TestPrimitives:
    """Edge cases of primitive and enum matching."""

    def test_boolean_is_not_a_number(self):
        assert not is_valid(True, PrimitiveShape("number"))
        assert not is_valid(False, PrimitiveShape("integer"))

    def test_integer_accepts_integral_float(self):
        assert validate(5.0, PrimitiveShape("integer")) == 5
        assert not is_valid(5.5, PrimitiveShape("integer"))

    def test_number_accepts_int_and_float(self):
        assert is_valid(3, PrimitiveShape("number"))
        assert is_valid(3.25, PrimitiveShape("number"))

    def test_enum_checks_json_type(self):
        shape = EnumShape((1, "a"))
        assert is_valid(1, shape)
        assert is_valid(1.0, shape)
        assert not is_valid(True, shape)
        assert not is_valid("1", shape)

    def test_array_max_items(self):
        shape = ArrayShape(PrimitiveShape("string"), max_items=2)
        with pytest.raises(ValidationFailure, match="at most 2 item"):
            validate(["a", "b", "c"], shape)

    def test_array_min_items(self):
        shape = ArrayShape(PrimitiveShape("string"), min_items=1)
        assert not is_valid([], shape)

    def test_any_accepts_everything(self):
        for value in (None, 1, "x", [], {}):
            assert is_valid(value, AnyShape())
