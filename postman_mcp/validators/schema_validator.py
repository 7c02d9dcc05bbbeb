"""
Schema Validator - Structural validation of untyped tool arguments.

Tool input schemas are JSON-Schema dictionaries (that is what the MCP catalog
advertises). At registration time each schema is compiled once into a tree of
immutable Shape nodes; at call time a single recursive walker checks the
caller's arguments against that tree.

Shape vocabulary:
- PrimitiveShape: string / number / integer / boolean
- ObjectShape: named fields, each required or optional
- ArrayShape: element shape plus optional min/max length
- EnumShape: fixed set of literal values
- AnyShape: schema node with no type constraint

Rules:
- Optional fields that are absent (or null) are left out of the result.
  No defaults are applied here; defaulting belongs to the handlers.
- Unknown extra fields are passed through untouched.
- The first mismatch found is reported, naming the field path and the
  expected shape.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple, Union

JSONSchema = Dict[str, Any]

PRIMITIVE_KINDS = ("string", "number", "integer", "boolean")


# ============================================================================
# Shapes
# ============================================================================

@dataclass(frozen=True)
class PrimitiveShape:
    kind: str

    def describe(self) -> str:
        return self.kind


@dataclass(frozen=True)
class EnumShape:
    values: Tuple[Any, ...]

    def describe(self) -> str:
        return f"one of {list(self.values)!r}"


@dataclass(frozen=True)
class ArrayShape:
    items: "Shape"
    min_items: Optional[int] = None
    max_items: Optional[int] = None

    def describe(self) -> str:
        return f"array of {self.items.describe()}"


@dataclass(frozen=True)
class FieldSpec:
    name: str
    shape: "Shape"
    required: bool = False


@dataclass(frozen=True)
class ObjectShape:
    fields: Tuple[FieldSpec, ...] = ()

    def describe(self) -> str:
        return "object"

    def field(self, name: str) -> Optional[FieldSpec]:
        for spec in self.fields:
            if spec.name == name:
                return spec
        return None

    @property
    def required_fields(self) -> List[str]:
        return [spec.name for spec in self.fields if spec.required]


@dataclass(frozen=True)
class AnyShape:

    def describe(self) -> str:
        return "any value"


Shape = Union[PrimitiveShape, EnumShape, ArrayShape, ObjectShape, AnyShape]


class ValidationFailure(ValueError):
    """Raised when a value does not match its shape.

    Attributes:
        path: Dotted/indexed path of the offending field ("" for the root)
        message: Human-readable description naming the path and expectation
    """

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.message = message
        self.path = path


# ============================================================================
# Compilation
# ============================================================================

def compile_schema(schema: Optional[JSONSchema]) -> Shape:
    """Compile a JSON-Schema node into a Shape tree.

    ``enum`` takes precedence over ``type``. A node without a recognized type
    compiles to AnyShape, except that a node carrying ``properties`` is
    treated as an object.

    Args:
        schema: JSON-Schema dictionary (may be None or empty)

    Returns:
        Compiled Shape
    """
    if not schema:
        return AnyShape()

    if "enum" in schema:
        return EnumShape(values=tuple(schema["enum"]))

    schema_type = schema.get("type")
    if isinstance(schema_type, list):
        # Nullable unions like ["string", "null"] collapse to their first
        # non-null member; null itself is treated as absent.
        non_null = [t for t in schema_type if t != "null"]
        schema_type = non_null[0] if len(non_null) == 1 else None

    if schema_type == "object" or (schema_type is None and "properties" in schema):
        properties = schema.get("properties", {})
        required = set(schema.get("required", []))
        fields = [
            FieldSpec(name=name, shape=compile_schema(sub), required=name in required)
            for name, sub in properties.items()
        ]
        for name in schema.get("required", []):
            if name not in properties:
                fields.append(FieldSpec(name=name, shape=AnyShape(), required=True))
        return ObjectShape(fields=tuple(fields))

    if schema_type == "array":
        return ArrayShape(
            items=compile_schema(schema.get("items")),
            min_items=schema.get("minItems"),
            max_items=schema.get("maxItems"),
        )

    if schema_type in PRIMITIVE_KINDS:
        return PrimitiveShape(kind=schema_type)

    return AnyShape()


# ============================================================================
# Validation
# ============================================================================

def validate(value: Any, shape: Shape) -> Any:
    """Validate ``value`` against ``shape`` and return the narrowed value.

    Raises:
        ValidationFailure: on the first structural mismatch
    """
    return _validate(value, shape, "")


def is_valid(value: Any, shape: Shape) -> bool:
    """Predicate form of :func:`validate`."""
    try:
        _validate(value, shape, "")
    except ValidationFailure:
        return False
    return True


def _validate(value: Any, shape: Shape, path: str) -> Any:
    if isinstance(shape, AnyShape):
        return value
    if isinstance(shape, EnumShape):
        return _validate_enum(value, shape, path)
    if isinstance(shape, PrimitiveShape):
        return _validate_primitive(value, shape, path)
    if isinstance(shape, ArrayShape):
        return _validate_array(value, shape, path)
    if isinstance(shape, ObjectShape):
        return _validate_object(value, shape, path)
    raise TypeError(f"Unsupported shape: {shape!r}")


def _validate_enum(value: Any, shape: EnumShape, path: str) -> Any:
    for allowed in shape.values:
        # JSON types must agree: True is not 1 and 1 is not "1"
        if type(allowed) is type(value) and allowed == value:
            return value
        if _is_number(allowed) and _is_number(value) and allowed == value:
            return value
    raise _mismatch(path, shape, value)


def _validate_primitive(value: Any, shape: PrimitiveShape, path: str) -> Any:
    kind = shape.kind
    if kind == "string" and isinstance(value, str):
        return value
    if kind == "boolean" and isinstance(value, bool):
        return value
    if kind == "number" and _is_number(value):
        return value
    if kind == "integer" and _is_number(value):
        if isinstance(value, int):
            return value
        if value.is_integer():
            return int(value)
    raise _mismatch(path, shape, value)


def _validate_array(value: Any, shape: ArrayShape, path: str) -> List[Any]:
    if not isinstance(value, (list, tuple)):
        raise _mismatch(path, shape, value)

    if shape.min_items is not None and len(value) < shape.min_items:
        raise ValidationFailure(
            f"{_label(path)} must contain at least {shape.min_items} item(s), got {len(value)}",
            path,
        )
    if shape.max_items is not None and len(value) > shape.max_items:
        raise ValidationFailure(
            f"{_label(path)} must contain at most {shape.max_items} item(s), got {len(value)}",
            path,
        )

    return [
        _validate(item, shape.items, f"{path}[{index}]")
        for index, item in enumerate(value)
    ]


def _validate_object(value: Any, shape: ObjectShape, path: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise _mismatch(path, shape, value)

    # Start from a copy so undeclared fields survive
    narrowed = dict(value)
    for spec in shape.fields:
        child_path = f"{path}.{spec.name}" if path else spec.name
        present = spec.name in value and value[spec.name] is not None

        if not present:
            if spec.required:
                raise ValidationFailure(f"Missing required field '{child_path}'", child_path)
            narrowed.pop(spec.name, None)
            continue

        narrowed[spec.name] = _validate(value[spec.name], spec.shape, child_path)

    return narrowed


# ============================================================================
# Helpers
# ============================================================================

def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _label(path: str) -> str:
    return f"Field '{path}'" if path else "Arguments"


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _mismatch(path: str, shape: Shape, value: Any) -> ValidationFailure:
    if isinstance(shape, EnumShape):
        got = repr(value)
    else:
        got = _json_type(value)
    return ValidationFailure(f"{_label(path)} must be {shape.describe()}, got {got}", path)
