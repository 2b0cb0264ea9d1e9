"""
Structural checks for the plugin manifest.
"""

import re
from typing import Any, Dict, List

REQUIRED_FIELDS = ["openapi", "info", "servers", "x-mb", "paths"]
REQUIRED_PATHS = ["/api/tools/create-channel", "/api/tools/mint-treat"]
VALID_METHODS = ["get", "post", "put", "delete", "patch", "head", "options", "trace"]
SEMVER_PATTERN = re.compile(r'^\d+\.\d+\.\d+(-[a-zA-Z0-9.-]+)?(\+[a-zA-Z0-9.-]+)?$')


def validate_manifest(manifest: Dict[str, Any]) -> List[str]:
    """Return a list of problems; an empty list means the manifest is usable."""
    problems: List[str] = []

    for field in REQUIRED_FIELDS:
        if field not in manifest:
            problems.append(f"Missing required field '{field}'")
    if problems:
        return problems

    if not str(manifest["openapi"]).startswith("3."):
        problems.append(f"Invalid OpenAPI version '{manifest['openapi']}'. Must be 3.x")

    info = manifest["info"]
    for field in ("title", "version"):
        if field not in info:
            problems.append(f"Missing info.{field}")
    if not SEMVER_PATTERN.match(str(info.get("version", ""))):
        problems.append(f"Version '{info.get('version')}' is not semantic versioning format")

    servers = manifest["servers"]
    if not servers or not all(str(server.get("url", "")).startswith(("http://", "https://")) for server in servers):
        problems.append("servers must list at least one http(s) url")

    problems.extend(_validate_extension(manifest["x-mb"]))
    problems.extend(_validate_paths(manifest["paths"]))
    return problems


def _validate_extension(extension: Dict[str, Any]) -> List[str]:
    problems = []
    if not extension.get("account-id"):
        problems.append("x-mb.account-id is empty")

    assistant = extension.get("assistant") or {}
    for field in ("name", "description", "instructions"):
        if not assistant.get(field):
            problems.append(f"Missing x-mb.assistant.{field}")
    return problems


def _validate_paths(paths: Dict[str, Any]) -> List[str]:
    problems = []
    for required in REQUIRED_PATHS:
        if required not in paths:
            problems.append(f"Missing path '{required}'")

    for path, path_item in paths.items():
        if not path.startswith("/"):
            problems.append(f"Path '{path}' must start with '/'")
            continue

        for method, operation in path_item.items():
            if method.lower() not in VALID_METHODS:
                continue
            label = f"{method.upper()} {path}"
            if not operation.get("operationId"):
                problems.append(f"{label} missing 'operationId'")
            responses = operation.get("responses") or {}
            if not any(code.startswith("2") for code in responses):
                problems.append(f"{label} has no 2xx responses")
            if method.lower() in ("post", "put", "patch") and "requestBody" not in operation:
                problems.append(f"{label} missing 'requestBody'")

    return problems
