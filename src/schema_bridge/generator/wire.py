"""Schema converter: TypeNode trees to OpenAPI 3.0 schema objects.

Conversion never fails. A node without a ``kind`` becomes an unconstrained
object and an unrecognized kind becomes a plain string, so one unusual node
cannot stop a whole document from being generated.
"""

import copy
import logging
from typing import Any

from schema_bridge.parser.base import OPTIONAL_KINDS, DefaultNode, TypeNode

logger = logging.getLogger(__name__)

WireSchema = dict[str, Any]

MISSING = object()

STRING_FORMATS = {
    "email": "email",
    "url": "uri",
    "uuid": "uuid",
    "cuid": "cuid",
    "cuid2": "cuid",
    "ulid": "ulid",
    "datetime": "date-time",
    "date": "date",
    "time": "time",
}

IP_FORMATS = {"v4": "ipv4", "v6": "ipv6"}

# bool must be looked up before int
LITERAL_TYPES = (
    (bool, "boolean"),
    (int, "number"),
    (float, "number"),
    (str, "string"),
)


def convert(node: TypeNode | None) -> WireSchema:
    """Convert a schema description node into an OpenAPI schema dict."""
    kind = getattr(node, "kind", None)
    if kind is None:
        return {"type": "object"}

    if kind == "string":
        schema = _convert_string(node)
    elif kind in ("number", "integer"):
        schema = _convert_number(node)
    elif kind == "boolean":
        schema = {"type": "boolean"}
    elif kind == "date":
        schema = {"type": "string", "format": "date-time"}
    elif kind == "enum":
        schema = {"type": "string", "enum": list(node.values)}
    elif kind == "native_enum":
        schema = {"type": "string", "enum": list(node.values.values())}
    elif kind == "literal":
        schema = {"type": _literal_type(node.value), "enum": [copy.deepcopy(node.value)]}
    elif kind == "object":
        schema = _convert_object(node)
    elif kind == "array":
        schema = {"type": "array", "items": convert(node.element)}
        if node.min_items is not None:
            schema["minItems"] = node.min_items
        if node.max_items is not None:
            schema["maxItems"] = node.max_items
    elif kind == "record":
        schema = {"type": "object", "additionalProperties": convert(node.value_type)}
    elif kind == "optional":
        schema = convert(node.inner)
    elif kind == "nullable":
        schema = convert(node.inner)
        schema["nullable"] = True
    elif kind == "default":
        schema = convert(node.inner)
        value = resolve_default(node)
        if value is not MISSING:
            schema["default"] = copy.deepcopy(value)
    elif kind == "union":
        schema = {"oneOf": [convert(option) for option in node.options]}
    elif kind == "intersection":
        schema = {"allOf": [convert(node.left), convert(node.right)]}
    elif kind == "effects":
        schema = convert(node.inner)
    elif kind in ("any", "unknown"):
        schema = {}
    elif kind in ("void", "undefined"):
        schema = {"type": "null"}
    else:
        logger.debug("Unrecognized schema kind %r, documenting as string", kind)
        schema = {"type": "string"}

    if getattr(node, "description", None):
        schema["description"] = node.description

    return schema


def resolve_default(node: DefaultNode) -> Any:
    """Evaluate a default producer. Returns MISSING if the producer raises."""
    try:
        return node.default_value()
    except Exception as e:
        logger.debug("Default value producer failed (%s), omitting default", e)
        return MISSING


def is_optional(node: TypeNode | None) -> bool:
    """Whether an object property may be left out. Only the outer wrapper counts."""
    return getattr(node, "kind", None) in OPTIONAL_KINDS


def _convert_string(node: TypeNode) -> WireSchema:
    schema: WireSchema = {"type": "string"}
    for check in node.checks:
        if check.kind == "min":
            schema["minLength"] = check.value
        elif check.kind == "max":
            schema["maxLength"] = check.value
        elif check.kind == "length":
            schema["minLength"] = check.value
            schema["maxLength"] = check.value
        elif check.kind in STRING_FORMATS:
            schema["format"] = STRING_FORMATS[check.kind]
        elif check.kind == "regex" and check.regex is not None:
            schema["pattern"] = check.regex.pattern
        elif check.kind == "ip":
            schema["format"] = IP_FORMATS.get(check.version, "ip")
    return schema


def _convert_number(node: TypeNode) -> WireSchema:
    schema: WireSchema = {"type": "integer" if node.kind == "integer" else "number"}
    for check in node.checks:
        if check.kind == "min":
            key = "minimum" if check.inclusive else "exclusiveMinimum"
            schema[key] = check.value
        elif check.kind == "max":
            key = "maximum" if check.inclusive else "exclusiveMaximum"
            schema[key] = check.value
        elif check.kind == "int":
            schema["type"] = "integer"
        elif check.kind == "multipleOf":
            schema["multipleOf"] = check.value
    return schema


def _convert_object(node: TypeNode) -> WireSchema:
    properties = {}
    required = []
    for name, prop in node.shape.items():
        properties[name] = convert(prop)
        if not is_optional(prop):
            required.append(name)

    schema: WireSchema = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required

    if node.unknown_keys == "passthrough":
        schema["additionalProperties"] = True
    elif node.unknown_keys == "strict":
        schema["additionalProperties"] = False

    return schema


def _literal_type(value: Any) -> str:
    for py_type, name in LITERAL_TYPES:
        if isinstance(value, py_type):
            return name
    return "object"
