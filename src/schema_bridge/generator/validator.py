"""Validates generated OpenAPI documents for structural consistency."""

import re

from schema_bridge.parser.base import HTTP_METHODS

PLACEHOLDER_RE = re.compile(r"\{([^}/]+)\}")


def _operations(document: dict):
    for path, methods in (document.get("paths") or {}).items():
        if not isinstance(methods, dict):
            continue
        for method, operation in methods.items():
            # path items may also carry parameters, summary, servers
            if method in HTTP_METHODS:
                yield path, method, operation


def validate_paths(document: dict) -> dict[str, str]:
    """Check that path placeholders and path parameters match up.

    Returns dict of {"METHOD path": error_message} for mismatched operations.
    """
    errors = {}
    for path, method, operation in _operations(document):
        placeholders = set(PLACEHOLDER_RE.findall(path))
        # path-level parameters apply to every operation under the path
        shared = document["paths"][path].get("parameters") or []
        declared = {
            p["name"]
            for p in list(shared) + list(operation.get("parameters") or [])
            if p.get("in") == "path"
        }

        problems = []
        missing = sorted(placeholders - declared)
        if missing:
            problems.append(f"no path parameter for {', '.join(missing)}")
        extra = sorted(declared - placeholders)
        if extra:
            problems.append(f"path parameter not in template: {', '.join(extra)}")
        if problems:
            errors[f"{method.upper()} {path}"] = "; ".join(problems)
    return errors


def validate_operation_ids(document: dict) -> dict[str, str]:
    """Check that every operationId is unique.

    Returns dict of {"METHOD path": error_message} for each repeated id after the first.
    """
    errors = {}
    seen: dict[str, str] = {}
    for path, method, operation in _operations(document):
        op_id = operation.get("operationId")
        if op_id is None:
            continue
        key = f"{method.upper()} {path}"
        if op_id in seen:
            errors[key] = f"operationId '{op_id}' already used by {seen[op_id]}"
        else:
            seen[op_id] = key
    return errors


def validate_refs(document: dict) -> dict[str, str]:
    """Check that every local $ref points at something in the document.

    Returns dict of {ref: error_message} for unresolved references.
    """
    errors = {}
    for ref in sorted(set(_collect_refs(document))):
        if not ref.startswith("#/"):
            continue
        if not _resolve_pointer(document, ref[2:]):
            errors[ref] = "unresolved reference"
    return errors


def validate_document(document: dict) -> dict[str, str]:
    """Run all checks on a generated document.

    Returns dict of {location: error_message}; empty when the document is clean.
    """
    errors = {}
    errors.update(validate_paths(document))
    for key, msg in validate_operation_ids(document).items():
        errors[key] = f"{errors[key]}; {msg}" if key in errors else msg
    errors.update(validate_refs(document))
    return errors


def _collect_refs(node):
    if isinstance(node, dict):
        for key, value in node.items():
            if key == "$ref" and isinstance(value, str):
                yield value
            else:
                yield from _collect_refs(value)
    elif isinstance(node, list):
        for item in node:
            yield from _collect_refs(item)


def _resolve_pointer(document: dict, pointer: str) -> bool:
    node = document
    for token in pointer.split("/"):
        # JSON Pointer escaping per RFC 6901
        token = token.replace("~1", "/").replace("~0", "~")
        if not isinstance(node, dict) or token not in node:
            return False
        node = node[token]
    return True
