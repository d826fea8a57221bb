"""
Types shared by the compiler and the emitted request builders.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ResourceMethod(str, Enum):
    """Resource methods a resource can declare in ``supports``.

    Declaration order is the order builders are generated in.
    """

    GET = "get"
    CREATE = "create"
    UPDATE = "update"
    PARTIAL_UPDATE = "partial_update"
    DELETE = "delete"
    BATCH_GET = "batch_get"
    BATCH_CREATE = "batch_create"
    BATCH_UPDATE = "batch_update"
    BATCH_PARTIAL_UPDATE = "batch_partial_update"
    BATCH_DELETE = "batch_delete"
    FINDER = "finder"
    ACTION = "action"

    @classmethod
    def from_string(cls, value: str) -> ResourceMethod:
        """Look up a method by its IDL name (case-insensitive)."""
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(f"unknown resource method '{value}'") from None

    @classmethod
    def crud_methods(cls) -> list[ResourceMethod]:
        """Methods that map onto a shared generic builder base."""
        return [m for m in cls if m not in (cls.FINDER, cls.ACTION)]


class CompoundKey:
    """Key of an association resource: named, independently typed parts."""

    def __init__(self):
        self._parts: dict[str, Any] = {}

    def append(self, name: str, value: Any) -> CompoundKey:
        self._parts[name] = value
        return self

    def get_part(self, name: str) -> Any:
        return self._parts.get(name)

    @property
    def part_keys(self) -> list[str]:
        return list(self._parts)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, CompoundKey) and self._parts == other._parts

    def __hash__(self) -> int:
        return hash(tuple(sorted((k, repr(v)) for k, v in self._parts.items())))

    def __repr__(self) -> str:
        parts = "&".join(f"{k}={v}" for k, v in self._parts.items())
        return f"{type(self).__name__}({parts})"


@dataclass(frozen=True)
class ComplexResourceKey:
    """Key of a collection with an identifier type plus a params type."""

    key: Any
    params: Any = None


@dataclass(frozen=True)
class FieldDef:
    """Name and declared type of an action parameter."""

    name: str
    type: Any = None


@dataclass(frozen=True)
class ResourceSpec:
    """Runtime description of a resource, emitted once per facade."""

    supported_methods: frozenset[ResourceMethod] = frozenset()
    key_class: Any = None
    key_key_class: Any = None
    key_params_class: Any = None
    value_class: Any = None
    key_parts: dict[str, Any] = field(default_factory=dict)


@dataclass
class Request:
    """An assembled, not yet executed, request."""

    method: ResourceMethod
    base_uri_template: str
    resource_spec: ResourceSpec
    path_keys: dict[str, Any] = field(default_factory=dict)
    query_params: dict[str, Any] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    name: str | None = None
    id: Any = None
    ids: list[Any] = field(default_factory=list)
    input: Any = None
    action_params: dict[str, Any] = field(default_factory=dict)
    assoc_keys: dict[str, Any] = field(default_factory=dict)
    value_class: Any = None

    def uri(self) -> str:
        """Expand the base URI template with the bound path keys."""
        uri = self.base_uri_template
        for name, value in self.path_keys.items():
            uri = uri.replace("{" + name + "}", str(value))
        return uri
