"""Route table parser.

Reads route tables written as YAML or JSON into RouteDeclaration models:

    schemas:
      userParams:
        kind: object
        shape:
          id: {kind: string, checks: [{kind: uuid}]}
    routes:
      - method: GET
        path: /users/{id}
        params: {ref: userParams}
"""

import copy
import logging
from pathlib import Path
from typing import Any

import yaml

from .base import (
    AnyNode,
    ArrayNode,
    BooleanNode,
    DateNode,
    DefaultNode,
    EffectsNode,
    EnumNode,
    IntegerNode,
    IntersectionNode,
    LiteralNode,
    NativeEnumNode,
    NullableNode,
    NumberNode,
    ObjectNode,
    OptionalNode,
    RecordNode,
    RouteDeclaration,
    StringNode,
    TypeNode,
    UndefinedNode,
    UnionNode,
    UnknownNode,
    VoidNode,
)

logger = logging.getLogger(__name__)

NODE_MODELS: dict[str, type[TypeNode]] = {
    "string": StringNode,
    "number": NumberNode,
    "integer": IntegerNode,
    "boolean": BooleanNode,
    "date": DateNode,
    "enum": EnumNode,
    "native_enum": NativeEnumNode,
    "literal": LiteralNode,
    "object": ObjectNode,
    "array": ArrayNode,
    "record": RecordNode,
    "union": UnionNode,
    "intersection": IntersectionNode,
    "optional": OptionalNode,
    "nullable": NullableNode,
    "default": DefaultNode,
    "effects": EffectsNode,
    "any": AnyNode,
    "unknown": UnknownNode,
    "void": VoidNode,
    "undefined": UndefinedNode,
}

# Fields holding a single child node
CHILD_FIELDS = ("inner", "element", "value_type", "left", "right")

SCHEMA_FIELDS = ("body", "query", "params")


class LoaderError(ValueError):
    """A route table file is structurally invalid."""


def load_type_node(data: Any, named: dict[str, TypeNode] | None = None) -> TypeNode:
    """Build a TypeNode tree from its mapping form.

    ``{ref: name}`` resolves to a node from ``named``. Kinds without a model
    become a bare TypeNode, which is documented as a plain string.
    """
    named = named or {}
    if not isinstance(data, dict):
        raise LoaderError(f"Schema node must be a mapping, got {type(data).__name__}")

    if "ref" in data:
        name = data["ref"]
        if name not in named:
            raise LoaderError(f"Unknown schema reference '{name}'")
        extra = sorted(set(data) - {"ref", "description"})
        if extra:
            raise LoaderError(f"Schema reference '{name}' only takes a description, got: {', '.join(extra)}")
        if data.get("description"):
            return named[name].model_copy(update={"description": data["description"]})
        return named[name]

    kind = data.get("kind")
    if not kind:
        raise LoaderError(f"Schema node is missing 'kind': {data!r}")

    model = NODE_MODELS.get(kind)
    if model is None:
        logger.debug("No model for schema kind %r", kind)
        return TypeNode(kind=kind, description=data.get("description"))

    fields = {k: v for k, v in data.items() if k != "kind"}
    for key in CHILD_FIELDS:
        if key in fields:
            fields[key] = load_type_node(fields[key], named)
    if "options" in fields:
        options = fields["options"] or []
        if not isinstance(options, list):
            raise LoaderError(f"'options' must be a list, got {type(options).__name__}")
        fields["options"] = [load_type_node(opt, named) for opt in options]
    if "shape" in fields:
        shape = fields["shape"] or {}
        if not isinstance(shape, dict):
            raise LoaderError(f"'shape' must be a mapping, got {type(shape).__name__}")
        fields["shape"] = {name: load_type_node(prop, named) for name, prop in shape.items()}
    if kind == "default":
        fields["default_value"] = _constant(fields.pop("value", None))

    return model(**fields)


def load_route_table(file_path: Path) -> list[RouteDeclaration]:
    """Parse a YAML/JSON route table file into a list of RouteDeclaration."""
    text = file_path.read_text(encoding="utf-8")
    doc = yaml.safe_load(text)

    if not isinstance(doc, dict) or not isinstance(doc.get("routes"), list):
        raise LoaderError(f"{file_path}: expected a mapping with a 'routes' list")

    named: dict[str, TypeNode] = {}
    for name, schema in (doc.get("schemas") or {}).items():
        named[name] = load_type_node(schema, named)

    routes = [_parse_route(entry, named) for entry in doc["routes"]]
    logger.debug("Loaded %d routes and %d named schemas from %s", len(routes), len(named), file_path)
    return routes


def _parse_route(entry: dict, named: dict[str, TypeNode]) -> RouteDeclaration:
    if not isinstance(entry, dict):
        raise LoaderError(f"Route entry must be a mapping, got {type(entry).__name__}")

    fields = dict(entry)
    for key in SCHEMA_FIELDS:
        if fields.get(key) is not None:
            fields[key] = load_type_node(fields[key], named)

    # A response hint is a schema only when it looks like one
    response = fields.get("response")
    if isinstance(response, dict) and ("kind" in response or "ref" in response):
        fields["response"] = load_type_node(response, named)

    return RouteDeclaration(**fields)


def _constant(value: Any):
    return lambda: copy.deepcopy(value)
