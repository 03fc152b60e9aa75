"""Document assembly: merge generated paths into an OpenAPI document shell."""

import copy
import json
import logging
from pathlib import Path

import yaml

from schema_bridge.config import Settings, get_settings
from schema_bridge.generator.operation import build_paths
from schema_bridge.parser.base import RouteDeclaration
from schema_bridge.parser.loader import LoaderError

logger = logging.getLogger(__name__)

SHELL_PATH = Path(__file__).parent / "shell.yaml"


class _NoAliasDumper(yaml.SafeDumper):
    """Write repeated objects out in full instead of as YAML anchors."""

    def ignore_aliases(self, data):
        return True


def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge ``override`` into a copy of ``base``.

    Nested mappings are merged key by key; any other value from ``override``
    replaces the one in ``base``. Neither input is modified.
    """
    result = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = copy.deepcopy(value)
    return result


def load_shell(file_path: Path | None = None, settings: Settings | None = None) -> dict:
    """Load a document shell (info, servers, components, tags).

    Defaults to the packaged shell. ``info.title``, ``info.version`` and
    ``servers`` are filled from settings when the shell does not set them.
    """
    settings = settings or get_settings()
    file_path = file_path or SHELL_PATH
    shell = yaml.safe_load(file_path.read_text(encoding="utf-8")) or {}
    if not isinstance(shell, dict):
        raise LoaderError(f"{file_path}: document shell must be a mapping")
    logger.debug("Loaded document shell from %s", file_path)

    info = shell.get("info") or {}
    if not isinstance(info, dict):
        raise LoaderError(f"{file_path}: 'info' must be a mapping")
    shell["info"] = info
    info.setdefault("title", settings.app_name)
    info.setdefault("version", settings.api_version)
    if shell.get("servers") is None:
        shell["servers"] = [
            {"url": f"/api/{settings.api_version}", "description": "Current environment"},
            {"url": f"http://localhost:{settings.port}/api/{settings.api_version}", "description": "Local development"},
        ]
    return shell


def build_document(routes: list[RouteDeclaration], shell: dict) -> dict:
    """Build the complete OpenAPI document for a route table."""
    document = deep_merge(shell, {"paths": build_paths(routes)})
    logger.info("Generated document with %d paths", len(document["paths"]))
    return document


def dump_document(document: dict, fmt: str = "yaml") -> str:
    """Serialize a document as YAML or JSON, keeping key order."""
    if fmt == "json":
        return json.dumps(document, indent=2, ensure_ascii=False) + "\n"
    return yaml.dump(document, Dumper=_NoAliasDumper, sort_keys=False, allow_unicode=True)
