"""Operation builder: route declarations to OpenAPI path items.

Each RouteDeclaration becomes one operation object (summary, operationId,
security, parameters, requestBody, responses). Schemas are converted with
the wire converter; error responses point at the reusable responses of the
document shell.
"""

import copy
import logging
from typing import Any

from schema_bridge.generator.wire import WireSchema, convert
from schema_bridge.parser.base import RouteDeclaration, TypeNode

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"

BODY_METHODS = ("post", "put", "patch")

DEFAULT_TAG = "Default"

SECURITY_SCHEME = "BearerAuth"

SUCCESS_REF = "#/components/schemas/Success"

UNAUTHORIZED_REF = "#/components/responses/UnauthorizedError"
FORBIDDEN_REF = "#/components/responses/ForbiddenError"
VALIDATION_REF = "#/components/responses/ValidationError"
NOT_FOUND_REF = "#/components/responses/NotFoundError"
SERVER_ERROR_REF = "#/components/responses/ServerError"


def operation_id(method: str, path: str) -> str:
    """Build an operationId such as ``getUsersByIdRole`` for GET /users/{id}/role."""
    name = ""
    for segment in path.split("/"):
        if not segment:
            continue
        if segment.startswith("{"):
            param = segment[1:-1]
            name += "By" + param[:1].upper() + param[1:]
        else:
            name += segment[:1].upper() + segment[1:]
    return method.lower() + name


def build_parameters(schema: TypeNode | None, location: str) -> list[dict]:
    """Turn each property of an object schema into a path or query parameter.

    Path parameters are always required. Query parameters are required when
    the converted object lists them as required.
    """
    converted = convert(schema)
    required = converted.get("required", [])

    parameters = []
    for name, prop in converted.get("properties", {}).items():
        param = {
            "name": name,
            "in": location,
            "required": location == "path" or name in required,
            "schema": prop,
        }
        if prop.get("description"):
            param["description"] = prop["description"]
        parameters.append(param)
    return parameters


def success_status(method: str) -> str:
    if method == "post":
        return "201"
    if method == "delete":
        return "204"
    return "200"


def envelope(data: WireSchema) -> WireSchema:
    """Wrap a payload schema in the ``{success, data}`` response envelope."""
    return {
        "type": "object",
        "properties": {
            "success": {"type": "boolean", "example": True},
            "data": data,
        },
    }


def response_schema(hint: Any) -> WireSchema:
    """Schema for a success payload. Placeholders that are not TypeNodes document ``data`` as a free object."""
    if isinstance(hint, TypeNode):
        return envelope(convert(hint))
    return envelope({"type": "object"})


def build_responses(route: RouteDeclaration) -> dict[str, dict]:
    responses: dict[str, dict] = {}

    status = success_status(route.method)
    if route.method == "delete" and route.response is None:
        responses[status] = {"description": "Successfully deleted"}
    else:
        if route.response is not None:
            schema = response_schema(route.response)
        else:
            schema = {"$ref": SUCCESS_REF}
        responses[status] = {
            "description": "Successful operation",
            "content": {JSON_MEDIA_TYPE: {"schema": schema}},
        }

    if route.auth:
        responses["401"] = {"$ref": UNAUTHORIZED_REF}
        responses["403"] = {"$ref": FORBIDDEN_REF}

    if route.body is not None:
        responses["422"] = {"$ref": VALIDATION_REF}

    if route.params is not None:
        responses["404"] = {"$ref": NOT_FOUND_REF}

    responses["500"] = {"$ref": SERVER_ERROR_REF}

    # Caller overrides win over everything computed above
    responses.update(copy.deepcopy(route.responses))

    return responses


def build_operation(route: RouteDeclaration) -> dict:
    """Build the OpenAPI operation object for one route."""
    summary = route.summary or f"{route.method.upper()} {route.path}"
    operation = {
        "summary": summary,
        "description": route.description or summary,
        "tags": list(route.tags) or [DEFAULT_TAG],
        "operationId": operation_id(route.method, route.path),
    }

    if route.auth:
        operation["security"] = [{SECURITY_SCHEME: []}]

    parameters = []
    if route.params is not None:
        parameters.extend(build_parameters(route.params, "path"))
    if route.query is not None:
        parameters.extend(build_parameters(route.query, "query"))
    if parameters:
        operation["parameters"] = parameters

    if route.body is not None and route.method in BODY_METHODS:
        operation["requestBody"] = {
            "required": True,
            "content": {JSON_MEDIA_TYPE: {"schema": convert(route.body)}},
        }

    operation["responses"] = build_responses(route)

    return operation


def build_paths(routes: list[RouteDeclaration]) -> dict[str, dict]:
    """Group operations by path, then by lowercase method."""
    paths: dict[str, dict] = {}
    for route in routes:
        methods = paths.setdefault(route.path, {})
        if route.method in methods:
            logger.warning("Duplicate route %s %s, keeping the last declaration", route.method.upper(), route.path)
        methods[route.method] = build_operation(route)
    logger.debug("Built %d operations across %d paths", sum(len(m) for m in paths.values()), len(paths))
    return paths
