"""
Data schema type system.

Resolves parsed type references (primitive names, named schemas, inline
definitions) to structural types. Named schemas are registered directly or
loaded from schema search paths, where ``com.example.Widget`` lives at
``<dir>/com/example/Widget.pdsc``.

Typerefs resolve to an :class:`AliasType` wrapping the referenced type and
the optional native class override declared under the override key.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

PRIMITIVE_TYPES = {"int", "long", "float", "double", "boolean", "string", "bytes", "null"}

NAMED_TYPES = {"record", "enum", "fixed", "typeref"}


class SchemaLookupError(ValueError):
    """A type reference names nothing the type system knows about."""


@dataclass(frozen=True)
class StructuralType:
    """A resolved, non-alias type."""

    kind: str  # "primitive", "record", "enum", "fixed", "array", "map", "union"
    name: str = ""  # Primitive name or full schema name
    items: StructuralType | AliasType | None = None  # Array items / map values
    members: tuple[StructuralType | AliasType, ...] = ()  # Union members


@dataclass(frozen=True)
class AliasType:
    """A typeref: a named alias of another type."""

    name: str
    target: StructuralType | AliasType
    native_override: str | None = None


class DataSchemaResolver:
    """Registry and resolver for named data schemas."""

    def __init__(
        self,
        schema_paths: list[str] | None = None,
        schema_file_extension: str = ".pdsc",
        native_override_key: str = "python",
    ):
        """
        Initialize the resolver.

        Args:
            schema_paths: Directories searched for named schema files
            schema_file_extension: Extension of named schema files
            native_override_key: Typeref property holding the native class
        """
        self.schema_paths = [Path(p) for p in schema_paths or []]
        self.schema_file_extension = schema_file_extension
        self.native_override_key = native_override_key
        self._named: dict[str, dict[str, Any]] = {}  # full name -> raw schema
        self._namespaces: dict[str, str] = {}  # full name -> namespace
        self._loaded_files: dict[str, Path] = {}  # full name -> file it came from

    @property
    def source_files(self) -> list[Path]:
        """Schema files loaded from the search path, in load order."""
        return list(dict.fromkeys(self._loaded_files.values()))

    def register(self, schema: dict[str, Any], namespace: str = "") -> str:
        """Register a named schema and return its full name."""
        name = schema["name"]
        namespace = schema.get("namespace", namespace)
        full_name = name if "." in name or not namespace else f"{namespace}.{name}"
        if full_name not in self._named:
            self._named[full_name] = schema
            self._namespaces[full_name] = full_name.rsplit(".", 1)[0] if "." in full_name else ""
        return full_name

    def resolve(self, schema: Any, namespace: str = "") -> StructuralType | AliasType:
        """
        Resolve a parsed type reference.

        Args:
            schema: A name string, inline definition dict or union list
            namespace: Namespace used to qualify relative names

        Raises:
            SchemaLookupError: If the reference cannot be resolved
        """
        return self._resolve(schema, namespace, frozenset())

    def _resolve(self, schema: Any, namespace: str, seen: frozenset[str]) -> StructuralType | AliasType:
        if isinstance(schema, str):
            if schema in PRIMITIVE_TYPES:
                return StructuralType(kind="primitive", name=schema)
            return self._resolve_named(schema, namespace, seen)

        if isinstance(schema, list):
            members = tuple(self._resolve(member, namespace, seen) for member in schema)
            return StructuralType(kind="union", name="union", members=members)

        if isinstance(schema, dict):
            kind = schema.get("type")
            if kind == "array":
                if "items" not in schema:
                    raise SchemaLookupError("array schema without 'items'")
                return StructuralType(kind="array", name="array", items=self._resolve(schema["items"], namespace, seen))
            if kind == "map":
                if "values" not in schema:
                    raise SchemaLookupError("map schema without 'values'")
                return StructuralType(kind="map", name="map", items=self._resolve(schema["values"], namespace, seen))
            if kind in NAMED_TYPES:
                if "name" not in schema:
                    raise SchemaLookupError(f"inline {kind} schema without 'name'")
                full_name = self.register(schema, namespace)
                return self._resolve_named(full_name, namespace, seen)
            if isinstance(kind, (str, list, dict)):
                return self._resolve(kind, namespace, seen)

        raise SchemaLookupError(f"unsupported schema: {schema!r}")

    def _resolve_named(self, name: str, namespace: str, seen: frozenset[str]) -> StructuralType | AliasType:
        full_name = self._lookup(name, namespace)
        if full_name in seen:
            raise SchemaLookupError(f"typeref cycle through '{full_name}'")

        schema = self._named[full_name]
        kind = schema.get("type")
        if kind == "typeref":
            if "ref" not in schema:
                raise SchemaLookupError(f"typeref '{full_name}' has no 'ref'")
            target = self._resolve(schema["ref"], self._namespaces[full_name], seen | {full_name})
            override = schema.get(self.native_override_key)
            native = override.get("class") if isinstance(override, dict) else None
            return AliasType(name=full_name, target=target, native_override=native)
        if kind in ("record", "enum", "fixed"):
            return StructuralType(kind=kind, name=full_name)
        raise SchemaLookupError(f"'{full_name}' has unsupported type '{kind}'")

    def _lookup(self, name: str, namespace: str) -> str:
        """Find the full name of a named schema, loading it if necessary."""
        candidates = [name]
        if "." not in name and namespace:
            candidates.insert(0, f"{namespace}.{name}")

        for candidate in candidates:
            if candidate in self._named:
                return candidate
        for candidate in candidates:
            if self._load(candidate):
                return candidate
        raise SchemaLookupError(f"unknown type '{name}'")

    def _load(self, full_name: str) -> bool:
        """Load a named schema from the search path."""
        relative = Path(*full_name.split(".")).with_suffix(self.schema_file_extension)
        for base in self.schema_paths:
            path = base / relative
            if not path.exists():
                continue
            with open(path, encoding="utf-8") as f:
                try:
                    schema = json.load(f)
                except json.JSONDecodeError as e:
                    raise SchemaLookupError(f"cannot parse schema file {path}: {e}") from e
            if not isinstance(schema, dict) or "name" not in schema:
                raise SchemaLookupError(f"schema file {path} does not define a named schema")
            namespace = full_name.rsplit(".", 1)[0] if "." in full_name else ""
            registered = self.register(schema, namespace)
            if registered != full_name:
                raise SchemaLookupError(f"schema file {path} defines '{registered}', expected '{full_name}'")
            self._loaded_files[full_name] = path
            logger.debug("Loaded schema %s from %s", full_name, path)
            return True
        return False
