"""
Structural validation of resource IDL documents.

Each record kind of the IDL is described by a table of fields. Validation
walks a raw document against the table for a record kind and collects every
violation instead of stopping at the first one. Required fields must be
present (not merely defaulted).

Sub-resources are only checked to be objects here; each one is validated on
its own when the tree walker reaches it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# Field kinds:
#   "string", "boolean", "any"
#   "type"          a type reference: string or inline object
#   "object"        any JSON object (not descended into)
#   "<record>"      a nested record of the given kind
#   "[<kind>]"      an array of the given kind
STRUCTURAL_SCHEMAS: dict[str, dict[str, tuple[str, bool]]] = {
    "resource": {
        "name": ("string", True),
        "namespace": ("string", False),
        "path": ("string", True),
        "schema": ("type", False),
        "doc": ("string", False),
        "collection": ("collection", False),
        "association": ("association", False),
        "actionsSet": ("actionsSet", False),
    },
    "collection": {
        "identifier": ("identifier", True),
        "supports": ("[string]", True),
        "methods": ("[method]", False),
        "finders": ("[finder]", False),
        "actions": ("[action]", False),
        "entity": ("entity", True),
    },
    "association": {
        "identifier": ("string", False),
        "assocKeys": ("[assocKey]", True),
        "supports": ("[string]", True),
        "methods": ("[method]", False),
        "finders": ("[finder]", False),
        "actions": ("[action]", False),
        "entity": ("entity", True),
    },
    "actionsSet": {
        "actions": ("[action]", True),
    },
    "identifier": {
        "name": ("string", True),
        "type": ("type", True),
        "params": ("type", False),
    },
    "assocKey": {
        "name": ("string", True),
        "type": ("type", True),
    },
    "entity": {
        "path": ("string", True),
        "actions": ("[action]", False),
        "subresources": ("[object]", False),
    },
    "method": {
        "method": ("string", True),
        "doc": ("string", False),
        "parameters": ("[parameter]", False),
    },
    "finder": {
        "name": ("string", True),
        "doc": ("string", False),
        "parameters": ("[parameter]", False),
        "assocKey": ("string", False),
        "assocKeys": ("[string]", False),
        "metadata": ("metadata", False),
    },
    "metadata": {
        "type": ("type", True),
    },
    "action": {
        "name": ("string", True),
        "doc": ("string", False),
        "parameters": ("[parameter]", False),
        "returns": ("type", False),
    },
    "parameter": {
        "name": ("string", True),
        "type": ("type", True),
        "items": ("type", False),
        "optional": ("boolean", False),
        "default": ("any", False),
        "doc": ("string", False),
    },
}


@dataclass
class ValidationResult:
    """Outcome of validating one record."""

    violations: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.violations

    def __str__(self) -> str:
        return "; ".join(self.violations) if self.violations else "ok"


def validate(data: Any, record: str = "resource") -> ValidationResult:
    """Validate ``data`` against the structural schema of ``record``."""
    result = ValidationResult()
    _validate_value(data, record, "", result)
    return result


def _validate_record(data: Any, record: str, path: str, result: ValidationResult) -> None:
    if not isinstance(data, dict):
        result.violations.append(f"{path or '/'}: expected object for '{record}', got {type(data).__name__}")
        return

    for name, (kind, required) in STRUCTURAL_SCHEMAS[record].items():
        field_path = f"{path}/{name}"
        if name not in data or data[name] is None:
            if required:
                result.violations.append(f"{field_path}: required field is missing")
            continue
        _validate_value(data[name], kind, field_path, result)

    if record == "parameter" and data.get("type") == "array" and "items" not in data:
        result.violations.append(f"{path}/items: required for array parameters")


def _validate_value(value: Any, kind: str, path: str, result: ValidationResult) -> None:
    if kind.startswith("["):
        if not isinstance(value, list):
            result.violations.append(f"{path}: expected array, got {type(value).__name__}")
            return
        item_kind = kind[1:-1]
        for i, item in enumerate(value):
            _validate_value(item, item_kind, f"{path}/{i}", result)
        return

    if kind in STRUCTURAL_SCHEMAS:
        _validate_record(value, kind, path, result)
    elif kind == "string":
        if not isinstance(value, str):
            result.violations.append(f"{path}: expected string, got {type(value).__name__}")
    elif kind == "boolean":
        if not isinstance(value, bool):
            result.violations.append(f"{path}: expected boolean, got {type(value).__name__}")
    elif kind == "type":
        if not isinstance(value, (str, dict)) or (isinstance(value, str) and not value.strip()):
            result.violations.append(f"{path}: expected a type reference")
    elif kind == "object":
        if not isinstance(value, dict):
            result.violations.append(f"{path}: expected object, got {type(value).__name__}")
