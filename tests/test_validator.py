from schema_bridge.generator.document import build_document
from schema_bridge.generator.validator import (
    validate_document,
    validate_operation_ids,
    validate_paths,
    validate_refs,
)
from schema_bridge.parser.base import ObjectNode, StringNode
from schema_bridge.routes import get, post

ID_PARAMS = ObjectNode(shape={"id": StringNode()})


def _doc(*routes, components=None):
    return build_document(list(routes), {"components": components or {}})


class TestValidatePaths:
    def test_matching_params(self):
        assert validate_paths(_doc(get("/users/{id}", params=ID_PARAMS))) == {}

    def test_missing_path_param(self):
        errors = validate_paths(_doc(get("/users/{id}")))
        assert errors == {"GET /users/{id}": "no path parameter for id"}

    def test_param_not_in_template(self):
        errors = validate_paths(_doc(get("/users", params=ID_PARAMS)))
        assert "path parameter not in template: id" in errors["GET /users"]

    def test_path_item_keys_are_not_operations(self):
        doc = build_document([get("/health")], {"paths": {"/health": {"summary": "Liveness", "parameters": []}}})
        assert validate_paths(doc) == {}
        assert validate_operation_ids(doc) == {}

    def test_path_level_parameter_counts(self):
        shared = {"parameters": [{"name": "id", "in": "path", "required": True, "schema": {"type": "string"}}]}
        doc = build_document([get("/users/{id}")], {"paths": {"/users/{id}": shared}})
        assert validate_paths(doc) == {}


class TestValidateOperationIds:
    def test_unique(self):
        assert validate_operation_ids(_doc(get("/users"), post("/users"))) == {}

    def test_duplicate(self):
        # segments are only capitalized, so these collide
        doc = _doc(get("/a-b/c"), get("/a-b/C"))
        errors = validate_operation_ids(doc)
        assert errors == {"GET /a-b/C": "operationId 'getA-bC' already used by GET /a-b/c"}


class TestValidateRefs:
    def test_unresolved_response_refs(self):
        errors = validate_refs(_doc(get("/health")))
        assert set(errors) == {"#/components/schemas/Success", "#/components/responses/ServerError"}

    def test_resolved_refs(self):
        components = {
            "schemas": {"Success": {"type": "object"}},
            "responses": {"ServerError": {"description": "boom"}},
        }
        assert validate_refs(_doc(get("/health"), components=components)) == {}

    def test_escaped_pointer(self):
        doc = {"paths": {"/a/b": {}}, "x": {"$ref": "#/paths/~1a~1b"}}
        assert validate_refs(doc) == {}


class TestValidateDocument:
    def test_combines_checks(self):
        errors = validate_document(_doc(get("/users/{id}")))
        assert "GET /users/{id}" in errors
        assert "#/components/responses/ServerError" in errors

    def test_clean_document(self, packaged_shell):
        doc = build_document([get("/users/{id}", params=ID_PARAMS, auth=True)], packaged_shell)
        assert validate_document(doc) == {}
