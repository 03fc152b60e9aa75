"""Data models for schema descriptions and route declarations.

Schema descriptions form a tree of TypeNode models, one model per kind.
Route declarations carry those trees alongside the endpoint metadata the
generators turn into OpenAPI operations.
"""

import enum
import re
from typing import Any, Callable, Literal

from pydantic import BaseModel, ConfigDict, field_validator

HTTP_METHODS = ("get", "post", "put", "patch", "delete")

# Wrapper kinds that make an object property non-required
OPTIONAL_KINDS = ("optional", "nullable", "default")


class TypeNode(BaseModel):
    """A single node in a schema description tree.

    Subclasses pin ``kind`` to a literal. A bare TypeNode with any other
    ``kind`` stands for a variant the generators do not know about.
    """

    model_config = ConfigDict(frozen=True)

    kind: str
    description: str | None = None


class StringCheck(BaseModel):
    """One refinement on a string (min, max, email, regex, ip, ...)."""

    model_config = ConfigDict(frozen=True)

    kind: str
    value: Any = None
    regex: re.Pattern | None = None
    version: str | None = None  # v4 / v6 for ip checks


class NumberCheck(BaseModel):
    """One refinement on a number (min, max, int, multipleOf)."""

    model_config = ConfigDict(frozen=True)

    kind: str
    value: float | int | None = None
    inclusive: bool = True


class StringNode(TypeNode):
    kind: Literal["string"] = "string"
    checks: list[StringCheck] = []


class NumberNode(TypeNode):
    kind: Literal["number"] = "number"
    checks: list[NumberCheck] = []


class IntegerNode(TypeNode):
    kind: Literal["integer"] = "integer"
    checks: list[NumberCheck] = []


class BooleanNode(TypeNode):
    kind: Literal["boolean"] = "boolean"


class DateNode(TypeNode):
    kind: Literal["date"] = "date"


class EnumNode(TypeNode):
    kind: Literal["enum"] = "enum"
    values: list[str]


class NativeEnumNode(TypeNode):
    kind: Literal["native_enum"] = "native_enum"
    values: dict[str, Any]

    @classmethod
    def from_enum(cls, enum_cls: type[enum.Enum], description: str | None = None) -> "NativeEnumNode":
        """Build a node from a Python Enum, keeping member definition order."""
        return cls(
            values={member.name: member.value for member in enum_cls},
            description=description,
        )


class LiteralNode(TypeNode):
    kind: Literal["literal"] = "literal"
    value: Any


class ObjectNode(TypeNode):
    kind: Literal["object"] = "object"
    shape: dict[str, TypeNode] = {}
    unknown_keys: str = "strip"  # passthrough / strict / strip


class ArrayNode(TypeNode):
    kind: Literal["array"] = "array"
    element: TypeNode
    min_items: int | None = None
    max_items: int | None = None


class RecordNode(TypeNode):
    kind: Literal["record"] = "record"
    value_type: TypeNode


class UnionNode(TypeNode):
    kind: Literal["union"] = "union"
    options: list[TypeNode]


class IntersectionNode(TypeNode):
    kind: Literal["intersection"] = "intersection"
    left: TypeNode
    right: TypeNode


class OptionalNode(TypeNode):
    kind: Literal["optional"] = "optional"
    inner: TypeNode


class NullableNode(TypeNode):
    kind: Literal["nullable"] = "nullable"
    inner: TypeNode


class DefaultNode(TypeNode):
    kind: Literal["default"] = "default"
    inner: TypeNode
    default_value: Callable[[], Any]


class EffectsNode(TypeNode):
    """A transform or refinement; documented with the shape of ``inner``."""

    kind: Literal["effects"] = "effects"
    inner: TypeNode


class AnyNode(TypeNode):
    kind: Literal["any"] = "any"


class UnknownNode(TypeNode):
    kind: Literal["unknown"] = "unknown"


class VoidNode(TypeNode):
    kind: Literal["void"] = "void"


class UndefinedNode(TypeNode):
    kind: Literal["undefined"] = "undefined"


class RouteDeclaration(BaseModel):
    """Static documentation metadata for one API endpoint."""

    model_config = ConfigDict(frozen=True)

    method: str  # stored lowercase: get / post / put / patch / delete
    path: str  # /users/{id}
    summary: str | None = None
    description: str | None = None
    tags: list[str] = []
    auth: bool = False
    body: TypeNode | None = None
    query: TypeNode | None = None
    params: TypeNode | None = None
    response: Any = None  # TypeNode, or any placeholder for docs only
    responses: dict[str, dict] = {}  # {status_code: response object}

    @field_validator("method", mode="before")
    @classmethod
    def normalize_method(cls, v: str) -> str:
        method = str(v).lower()
        if method not in HTTP_METHODS:
            raise ValueError(f"Unsupported HTTP method '{v}'. Must be one of: {', '.join(HTTP_METHODS)}")
        return method

    @field_validator("responses", mode="before")
    @classmethod
    def normalize_status_codes(cls, v: dict | None) -> dict:
        return {str(code): resp for code, resp in (v or {}).items()}
